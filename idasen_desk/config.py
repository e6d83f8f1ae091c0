"""
Runtime settings.

Values come from the environment; a ``.env`` file in the working directory
is loaded first so local overrides do not need exporting.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from idasen_desk.const import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_SCAN_TIMEOUT,
    DESK_NAME_PREFIX,
    MOVE_POLL_INTERVAL,
    MOVE_TIMEOUT,
)


@dataclass(frozen=True)
class DeskSettings:
    """Tunables for discovery and motion."""

    name_prefix: str = DESK_NAME_PREFIX
    scan_timeout: float = DEFAULT_SCAN_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    move_timeout: float = MOVE_TIMEOUT
    poll_interval: float = MOVE_POLL_INTERVAL
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return parsed


def _log_level_env(name: str, default: str) -> str:
    value = (os.getenv(name) or default).upper()
    if value not in logging.getLevelNamesMapping():
        raise ValueError(f"{name} must be a logging level name, got {value!r}")
    return value


def load_settings(dotenv: bool = True) -> DeskSettings:
    """Build settings from ``DESK_*`` environment variables."""
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    return DeskSettings(
        name_prefix=os.getenv("DESK_NAME_PREFIX") or DESK_NAME_PREFIX,
        scan_timeout=_float_env("DESK_SCAN_TIMEOUT", DEFAULT_SCAN_TIMEOUT),
        connect_timeout=_float_env("DESK_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
        move_timeout=_float_env("DESK_MOVE_TIMEOUT", MOVE_TIMEOUT),
        poll_interval=_float_env("DESK_POLL_INTERVAL", MOVE_POLL_INTERVAL),
        log_level=_log_level_env("DESK_LOG_LEVEL", "INFO"),
    )
