"""Application settings loaded from environment (and .env).

This module provides a small Settings holder backed by environment variables.
Keep this file simple and import `settings` from other modules.
"""
from __future__ import annotations

from dataclasses import dataclass
import os


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


@dataclass
class Settings:
    # Remote page fetch
    FETCH_TIMEOUT: float = float(_get("FETCH_TIMEOUT", "10"))
    USER_AGENT: str = _get(
        "USER_AGENT", "Mozilla/5.0 (compatible; RecipeBox/1.0; +http://example.com)"
    )

    # Upper bound for files handed to the OCR import (10 MiB)
    MAX_UPLOAD_BYTES: int = int(_get("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _get("LOG_FILE", None)


settings = Settings()


def validate_settings(cfg: Settings | None = None) -> None:
    """Validate settings and raise a helpful RuntimeError if any are unusable."""
    cfg = cfg or settings
    problems = []
    if cfg.FETCH_TIMEOUT <= 0:
        problems.append(f"FETCH_TIMEOUT must be positive (got {cfg.FETCH_TIMEOUT})")
    if cfg.MAX_UPLOAD_BYTES <= 0:
        problems.append(f"MAX_UPLOAD_BYTES must be positive (got {cfg.MAX_UPLOAD_BYTES})")
    if problems:
        msg = (
            "Invalid configuration: "
            + "; ".join(problems)
            + "\nPlease fix them in your .env or environment and try again."
        )
        raise RuntimeError(msg)
