"""Runtime settings loaded from ``TOON_INTENT_*`` environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schema import InputFormat

__all__ = ["Settings", "get_settings"]


class Settings(BaseSettings):
    """Environment-driven configuration.

    Variables:
        TOON_INTENT_LOG_LEVEL: Package log level (default WARNING).
        TOON_INTENT_CHARS_PER_TOKEN: Characters per estimated token (default 4).
        TOON_INTENT_DEFAULT_FORMAT: Format used when none is requested (default auto).
    """

    model_config = SettingsConfigDict(
        env_prefix="TOON_INTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING")
    chars_per_token: float = Field(default=4.0, gt=0)
    default_format: InputFormat = Field(default=InputFormat.AUTO)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("default_format", mode="before")
    @classmethod
    def _parse_format(cls, value: object) -> InputFormat:
        return InputFormat.parse(value)  # type: ignore[arg-type]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
