"""Formatter configuration from environment variables via pydantic-settings."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """JSON:API formatter settings."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_JSONAPI_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Links
    base_url_prefix: str | None = None
    exclude_port_from_links: bool = False
    type_paths: dict[str, str] = {}

    # Observability
    log_level: str = "INFO"

    @field_validator("base_url_prefix", mode="before")
    @classmethod
    def blank_prefix_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip("/ "):
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


def setup_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the package logger."""
    logger = logging.getLogger("catalog_jsonapi")
    if not any(isinstance(handler, logging.StreamHandler) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
