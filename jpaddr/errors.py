"""jpaddr固有の例外クラス"""


class JpAddrError(Exception):
    """jpaddr固有のエラー基底クラス"""
    pass


class DataLoadError(JpAddrError):
    """同梱データの読み込みエラー（ファイルは存在するが解析できない）"""
    pass


class DatabaseError(JpAddrError):
    """データベース関連のエラー"""
    pass


class DatabaseConnectionError(DatabaseError):
    """データベース接続エラー"""
    pass


class ConfigurationError(JpAddrError):
    """設定の誤用（セットアップ時に即座に発生させる）"""
    pass
