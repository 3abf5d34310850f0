import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, model_validator
from typing import Optional
from pydantic_settings import BaseSettings
from sqlalchemy.engine.url import make_url, URL

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./chat_auth_store.db"
DEFAULT_TEST_DATABASE_URL = "sqlite+aiosqlite:///./chat_auth_store_test.db"

# Project root (parent of chat_auth_store/) - used so .env is found regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Explicitly load .env into os.environ so it works in tests and subprocesses
load_dotenv(_PROJECT_ROOT / ".env")


class Settings(BaseSettings):
    app_name: str = "chat-auth-store"
    database_url: Optional[str] = None  # Will be set dynamically
    database_pool_size: int = Field(
        default=10, json_schema_extra={"env": "DATABASE_POOL_SIZE"}
    )
    database_max_overflow: int = Field(
        default=20, json_schema_extra={"env": "DATABASE_MAX_OVERFLOW"}
    )
    database_echo: bool = Field(
        default=False, json_schema_extra={"env": "DATABASE_ECHO"}
    )
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENV", "ENVIRONMENT"),
    )
    log_level: str = Field(default="INFO", json_schema_extra={"env": "LOG_LEVEL"})

    # PKCE verifiers live for a fixed window between authorize and callback
    code_verifier_ttl_minutes: int = Field(
        default=10,
        gt=0,
        json_schema_extra={"env": "CODE_VERIFIER_TTL_MINUTES"},
    )
    # Fernet key; access tokens are stored in plaintext when unset
    token_encryption_key: Optional[str] = Field(
        default=None, json_schema_extra={"env": "TOKEN_ENCRYPTION_KEY"}
    )

    @model_validator(mode="before")
    def set_database_url(cls, values):
        """Set the database_url dynamically based on the environment field."""
        environment = (
            values.get("environment")
            or values.get("ENV")
            or values.get("ENVIRONMENT")
            or os.getenv("ENV", os.getenv("ENVIRONMENT", "development"))
        )
        if environment.lower() == "test":
            values["database_url"] = (
                os.getenv("TEST_DATABASE_URL")
                or values.get("database_url")
                or DEFAULT_TEST_DATABASE_URL
            )
        elif not values.get("database_url"):
            values["database_url"] = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

        return values

    @property
    def is_production(self) -> bool:
        """Check if the current environment is production."""
        return self.environment.lower() == "production"

    @property
    def is_test(self) -> bool:
        """Check if the current environment is test."""
        return self.environment.lower() == "test"

    @property
    def database_url_obj(self) -> URL:
        """Return the database URL as a URL object using sqlalchemy's make_url."""
        if not self.database_url:
            raise ValueError("Database URL is not set.")
        return make_url(self.database_url)

    class ConfigDict:
        env_file = str(_PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        extra = "allow"  # Allow extra environment variables


def get_settings() -> Settings:
    """Get application settings with required environment variables."""
    return Settings()
