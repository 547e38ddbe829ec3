from __future__ import annotations

from functools import cache
from typing import Literal

from loguru import logger
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    path_style: Literal["basename", "full"] = Field(default="basename")
    ensure_ascii: bool = Field(default=False)
    log_level: Literal[
        "TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"
    ] = Field(default="WARNING")

    @field_validator("ensure_ascii", mode="before")
    @classmethod
    def _parse_ensure_ascii(cls, v: bool | str) -> bool | str:
        if v == "":
            return False
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    model_config = SettingsConfigDict(
        env_prefix="ERRTRAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@cache
def get_settings() -> Settings:
    """Load settings once; broken configuration degrades to defaults."""
    try:
        return Settings()
    except ValidationError as exc:
        logger.warning("Invalid errtrail settings, using defaults: {}", exc)
        return Settings.model_construct()
