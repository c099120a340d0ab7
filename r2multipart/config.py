# config.py
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=Path(__file__).parents[1] / ".env",
        extra="ignore",
    )

    R2_ACCOUNT_ID: str = ""
    R2_ACCESS_KEY: str = ""
    R2_SECRET_KEY: str = ""
    R2_ENDPOINT: Optional[str] = None
    R2_BUCKET: Optional[str] = None

    # botocore transport tuning
    R2_MAX_POOL_CONNECTIONS: int = 10
    R2_CONNECT_TIMEOUT: float = 60.0
    R2_READ_TIMEOUT: float = 60.0
    R2_MAX_ATTEMPTS: int = 3

    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


@dataclass(frozen=True)
class R2Config:
    """Immutable connection configuration"""
    account_id: str
    access_key: str
    secret_key: str
    endpoint: Optional[str] = None
    max_pool_connections: int = 10
    connect_timeout: float = 60.0
    read_timeout: float = 60.0
    max_attempts: int = 3

    @property
    def endpoint_url(self) -> str:
        if self.endpoint:
            return self.endpoint
        if not self.account_id:
            raise ValueError("Either an endpoint or an account id is required to reach R2")
        return f"https://{self.account_id}.r2.cloudflarestorage.com"

    @classmethod
    def from_settings(cls, settings: Settings) -> "R2Config":
        return cls(
            account_id=settings.R2_ACCOUNT_ID,
            access_key=settings.R2_ACCESS_KEY,
            secret_key=settings.R2_SECRET_KEY,
            endpoint=settings.R2_ENDPOINT,
            max_pool_connections=settings.R2_MAX_POOL_CONNECTIONS,
            connect_timeout=settings.R2_CONNECT_TIMEOUT,
            read_timeout=settings.R2_READ_TIMEOUT,
            max_attempts=settings.R2_MAX_ATTEMPTS,
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply LOG_LEVEL to the package logger hierarchy."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    logging.getLogger("r2multipart").setLevel(settings.LOG_LEVEL.upper())
