from typing import List, Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DB_URL: str
    DB_ECHO: bool = False
    DB_CREATE_ALL: bool = False

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    DEFAULT_UNIT: str = "UN"

    SYNC_ORPHAN_HOURS: int = 24
    SYNC_UPDATE_HISTORY_LIMIT: int = 10
    IMPORT_HISTORY_LIMIT: int = 100
    IMPORT_REPORT_TOP_PRODUCTS: int = 10

    API_TOKEN_BYTES: int = 32
    API_TOKEN_DEFAULT_DAYS: Optional[int] = None

    class Config:
        env_file = ".env"

settings = Settings()
