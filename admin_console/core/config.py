"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "marketplace_user"
    postgres_password: str = "password"
    postgres_db: str = "marketplace_db"

    # Full SQLAlchemy URL, wins over the postgres_* fields when set
    database_url: str = ""

    # MongoDB (admin activity documents)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "marketplace_admin"
    activity_log_enabled: bool = True

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 720

    # Admin login rate limit
    login_rate_limit_max: int = 100
    login_rate_limit_window_seconds: int = 15 * 60
    login_block_seconds: int = 30 * 60

    # Panel list cache
    list_cache_ttl_seconds: int = 60

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.postgres_url

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
