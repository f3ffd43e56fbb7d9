"""
Application configuration loaded from environment variables via pydantic-settings.
Everything is validated at construction, so a bad PORT or TTL stops the process before it binds.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_UPSTREAM_URL = "https://api.airtable.com/v0/appiV3xCQ0KsaZS0g/books"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── Upstream ───────────────────────────────────────────────────────────
    api_key: SecretStr = Field(default=SecretStr(""), alias="API_KEY")
    upstream_url: str = Field(default=DEFAULT_UPSTREAM_URL, alias="UPSTREAM_URL")
    upstream_timeout_seconds: float = Field(default=10.0, alias="UPSTREAM_TIMEOUT_SECONDS")

    # ── Cache ──────────────────────────────────────────────────────────────
    cache_ttl_seconds: int = Field(default=600, alias="CACHE_TTL_SECONDS")

    # ── Server ─────────────────────────────────────────────────────────────
    port: int = Field(default=3000, alias="PORT")
    allowed_origin: str = Field(default="https://yourdomain.com", alias="ALLOWED_ORIGIN")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}")
        return upper

    @field_validator("cache_ttl_seconds", "upstream_timeout_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    def credential_configured(self) -> bool:
        """True when API_KEY holds something other than a blank or a placeholder."""
        key = self.api_key.get_secret_value().strip()
        return bool(key and not key.startswith("your-"))


@lru_cache
def get_settings() -> Settings:
    return Settings()
