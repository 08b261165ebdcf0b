"""検索・検証・データ読み込みのサービス層"""
