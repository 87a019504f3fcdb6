"""Centralised configuration helper.

Exposes a single process-wide :class:`Settings` instance retrieved via
:func:`get_settings`.  Values come from the environment; a ``.env`` file in
the current working directory is loaded first with *python-dotenv* but never
overrides variables that are already set.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _truthy(value: str | None) -> bool:  # noqa: D401 – small helper
    """Return *True* when *value* looks like an affirmative string."""

    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("%s must be a number, got %r; using %s", name, raw, default)
        return default


@dataclass
class Settings:  # noqa: D401 – simple data container
    """Lightweight settings container populated from environment variables."""

    # Logging -----------------------------------------------------------
    log_level: str

    # Operation behaviour ----------------------------------------------
    discard_stale_results: bool

    # Event publishing --------------------------------------------------
    event_shutdown_timeout_s: float

    # Helper for tests to override values at runtime -------------------
    def override(self, **kwargs: Any) -> None:
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no attribute '{key}'")
            setattr(self, key, value)


def _load_settings() -> Settings:  # noqa: D401 – helper
    """Populate :class:`Settings` from environment variables."""

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)

    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        discard_stale_results=_truthy(os.getenv("OPERATION_DISCARD_STALE")),
        event_shutdown_timeout_s=_float_env("EVENT_SHUTDOWN_TIMEOUT_S", 10.0),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # noqa: D401 – public accessor
    """Return the cached :class:`Settings` instance.

    Call ``get_settings.cache_clear()`` after changing the environment to
    force a reload.
    """

    return _load_settings()


__all__ = [
    "Settings",
    "get_settings",
]
