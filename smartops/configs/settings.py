"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the SmartOps access-control backend. Settings are built once at
startup and handed to every component that needs them.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Constants ---
MAX_USERNAME_LENGTH = 50
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8
MAX_ROLE_NAME_LENGTH = 50
MAX_ENTITY_NAME_LENGTH = 100
MAX_STORE_NAME_LENGTH = 200


type SecurityLevel = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class Argon2Config:
    """Argon2id cost parameters for one security level."""

    memory_cost: int
    time_cost: int
    parallelism: int


CONFIG_MAP: dict[str, Argon2Config] = {
    "low": Argon2Config(memory_cost=19_456, time_cost=2, parallelism=1),
    "medium": Argon2Config(memory_cost=65_536, time_cost=3, parallelism=4),
    "high": Argon2Config(memory_cost=524_288, time_cost=2, parallelism=2),
}


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "SmartOps Access Backend"
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE: str = "logs/smartops.log"

    # Database
    DATABASE_URL: str | None = None
    DATABASE_DRIVER: str = "postgresql+asyncpg"
    DATABASE_USERNAME: str = "postgres"
    DATABASE_PASSWORD: SecretStr = SecretStr("")
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_NAME: str = "smartops"
    DATABASE_MAX_CONNECTIONS: int = 10
    DATABASE_MAX_OVERFLOW: int = 5
    DATABASE_IDLE_TIMEOUT: int = 300  # seconds
    DATABASE_POOL_TIMEOUT: int = 30  # seconds
    DATABASE_ECHO: bool = False

    # Server
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8000

    # Access control
    DEFAULT_ROLE_NAME: str | None = "employee"
    PERMISSION_CACHE_ENABLED: bool = True
    PASSWORD_SECURITY_LEVEL: SecurityLevel = "medium"

    @property
    def database_url(self) -> str:
        """Connection URL, either the explicit override or one built from parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.DATABASE_PASSWORD.get_secret_value()
        return (
            f"{self.DATABASE_DRIVER}://{self.DATABASE_USERNAME}:{password}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @property
    def server_address(self) -> str:
        return f"{self.SERVER_HOST}:{self.SERVER_PORT}"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


def get_settings() -> Settings:
    """Build settings from the environment and the optional .env file."""
    return Settings()
