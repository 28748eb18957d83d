"""
Configuration settings for the database admin service
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env")


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "dbadmin"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Data engine
    DB_DRIVER: str = Field(default="sqlite", validation_alias="DB_DRIVER")
    DEFAULT_CONNECTION: Optional[str] = Field(default=None, validation_alias="DEFAULT_CONNECTION")
    STATEMENT_TIMEOUT_SECONDS: float = Field(default=0.0, ge=0, validation_alias="STATEMENT_TIMEOUT_SECONDS")
    FETCH_BATCH_SIZE: int = Field(default=500, gt=0, validation_alias="FETCH_BATCH_SIZE")
    STRICT_IDENTIFIERS: bool = Field(default=True, validation_alias="STRICT_IDENTIFIERS")

    # API Server
    API_HOST: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    API_PORT: int = Field(default=8000, validation_alias="API_PORT")
    SERVER_RELOAD: bool = Field(default=False, validation_alias="SERVER_RELOAD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def statement_timeout(self) -> Optional[float]:
        return self.STATEMENT_TIMEOUT_SECONDS or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
