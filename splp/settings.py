from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


@dataclass
class Settings:
    """Validator settings (env/.env driven)."""

    log_level: str = "INFO"
    history_limit: int = 64
    transcript_encoding: str = "ascii"


SETTINGS = Settings()


def load_settings(env_path: str = ".env") -> Settings:
    """Load settings from env/.env."""
    if Path(env_path).exists():
        load_dotenv(env_path)
    SETTINGS.log_level = os.getenv("SPLP_LOG_LEVEL", SETTINGS.log_level).upper()
    try:
        SETTINGS.history_limit = int(os.getenv("SPLP_HISTORY_LIMIT", SETTINGS.history_limit))
    except ValueError as exc:
        raise ConfigError(f"SPLP_HISTORY_LIMIT must be an integer: {exc}") from exc
    SETTINGS.transcript_encoding = os.getenv("SPLP_TRANSCRIPT_ENCODING", SETTINGS.transcript_encoding)
    _validate_settings()
    logging.getLogger().setLevel(SETTINGS.log_level)
    return SETTINGS


def _validate_settings() -> None:
    if SETTINGS.log_level not in LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
    if SETTINGS.history_limit < 0:
        raise ConfigError("history_limit must not be negative")
    try:
        codecs.lookup(SETTINGS.transcript_encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown transcript encoding {SETTINGS.transcript_encoding!r}") from exc


__all__ = ["ConfigError", "Settings", "SETTINGS", "load_settings"]
