from pydantic_settings import BaseSettings
from typing import List, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_V1_STR: str = "/v1"
    PROJECT_NAME: str = "Job Board API"

    # Database Settings
    # Required. Either a SQLAlchemy URL or a bare path to a SQLite file.
    DATABASE_URL: str
    DB_BUSY_TIMEOUT: int = 30

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        url = self.DATABASE_URL.strip()
        if "://" not in url:
            return f"sqlite:///{url}"
        return url

    # Pagination
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # API key gate, disabled while API_KEY is empty
    API_KEY: str = ""
    API_KEY_HEADER: str = "X-API-Key"
    API_KEY_LOG_ONLY: bool = False

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8080"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("DEFAULT_PAGE_LIMIT", "MAX_PAGE_LIMIT")
    @classmethod
    def positive_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("page limits must be at least 1")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
