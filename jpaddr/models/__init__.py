from .region import Region, REGIONS
from .prefecture import Prefecture
from .city import City
from .postal_code import PostalCode

__all__ = ["Region", "REGIONS", "Prefecture", "City", "PostalCode"]
