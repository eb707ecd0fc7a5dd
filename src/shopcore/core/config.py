"""ShopCore settings.

Every option can be set through a ``SHOPCORE_``-prefixed environment
variable or a ``.env`` file in the working directory. Values are validated
once, when :func:`get_settings` first runs, and the resulting object is
shared by the whole process.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production-use-openssl-rand-hex-32"

Environment = Literal["development", "production", "testing"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Runtime configuration for the API, the credential store and Shopify."""

    model_config = SettingsConfigDict(
        env_prefix="SHOPCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "ShopCore"
    app_version: str = "0.1.0"
    environment: Environment = "development"
    debug: bool = Field(
        default=False,
        description="Return internal error detail to callers (never in production)",
    )

    # uvicorn
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = Field(default=1, ge=1)

    # Credential store
    database_url: str = "sqlite+aiosqlite:///./data/shopcore.db"
    db_echo: bool = False

    # Access tokens
    secret_key: str = Field(default=DEFAULT_SECRET_KEY, description="HS256 signing secret")
    access_token_expire_minutes: int = Field(default=60, ge=1)

    # Argon2id parameters shared by passwords and API keys
    hasher_time_cost: int = Field(default=12, ge=1)
    hasher_memory_cost: int = Field(default=65536, ge=8, description="KiB")
    hasher_parallelism: int = Field(default=4, ge=1)

    api_key_header: str = "x-api-key"

    login_cooldown_seconds: float = Field(default=5.0, ge=0)
    login_throttle_max_entries: int = Field(default=10000, ge=1)

    # Shopify Admin API; mock mode while domain or token is unset
    shopify_store_domain: str | None = None
    shopify_admin_api_token: str | None = None
    shopify_api_version: str = "2025-10"
    shopify_webhook_secret: str | None = None
    shopify_timeout_seconds: float = Field(default=10.0, gt=0)

    cors_origins: Annotated[list[str], NoDecode] = Field(default=["*"])
    cors_allow_credentials: bool = True

    log_level: LogLevel = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[str]) -> list[str]:
        """Accept ``https://a.example,https://b.example`` as well as a list."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @model_validator(mode="after")
    def validate_production_secret(self) -> "Settings":
        """Refuse to sign production tokens with the placeholder secret."""
        if self.is_production and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("SHOPCORE_SECRET_KEY must be set to a unique value in production")
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """SQLite cannot be shared between worker processes."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                f"{self.workers} workers requested, but the SQLite credential store "
                "only supports one. Use --workers 1 or a server database."
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    @property
    def expose_error_details(self) -> bool:
        """Whether diagnostic details may be returned to API callers."""
        return self.debug and not self.is_production

    @property
    def shopify_configured(self) -> bool:
        """Both the store domain and the admin token are present."""
        return bool(self.shopify_store_domain and self.shopify_admin_api_token)


@lru_cache
def get_settings() -> Settings:
    """Load and cache the process-wide settings."""
    return Settings()
