"""Tunable getters."""

import logging
import os
from pathlib import Path
from typing import Any

from ksaow_monitor.modules.auth import DEFAULT_APPLICATION_NAME
from ksaow_monitor.modules.report import DEFAULT_METHOD, DEFAULT_TIMEOUT

from .env_loader import load_tunables

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 300.0


def get_config(key: str, home: Path | None = None, default: Any = None) -> Any:
    """
    Get a tunable with priority:
    1. Environment variable
    2. config.yml in the monitor home
    3. Default value
    """
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    tunables = load_tunables(home)
    if key in tunables and tunables[key] is not None:
        return tunables[key]

    return default


def _get_float(key: str, home: Path | None, default: float) -> float:
    raw = get_config(key, home, default)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s=%r, using %s", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %s", key, raw, default)
        return default
    return value


def get_interval_seconds(home: Path | None = None) -> float:
    """Seconds between probe cycles (default: 300)."""
    return _get_float("KSAOW_INTERVAL_SECONDS", home, DEFAULT_INTERVAL_SECONDS)


def get_webhook_timeout(home: Path | None = None) -> float:
    """Upper bound for one webhook delivery (default: 30)."""
    return _get_float("KSAOW_WEBHOOK_TIMEOUT", home, DEFAULT_TIMEOUT)


def get_webhook_method(home: Path | None = None) -> str:
    return str(get_config("KSAOW_WEBHOOK_METHOD", home, DEFAULT_METHOD)).upper()


def get_log_level(home: Path | None = None) -> str:
    return str(get_config("KSAOW_LOG_LEVEL", home, "INFO")).upper()


def get_program_name(home: Path | None = None) -> str:
    """Program name reported to Oracle; the trust trigger matches on it."""
    return str(get_config("KSAOW_PROGRAM_NAME", home, DEFAULT_APPLICATION_NAME))
