"""
Observability hooks for front ends.

The core reports log lines, live heights and connection changes to a
``Notifier``. Front ends subclass it and override what they care about.
"""

import logging
from datetime import datetime
from enum import Enum


class LogLevel(str, Enum):
    """Severity of a notifier log entry."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class ConnectionStatus(str, Enum):
    """Desk connection state as shown to the user."""

    CONNECTED = "CONNECTED"
    NOT_CONNECTED = "NOT_CONNECTED"
    UNKNOWN = "UNKNOWN"  # display only


def timestamp_now() -> str:
    return datetime.now().strftime("%H:%M:%S")


class Notifier:
    """Receives events from the desk core. The default implementation ignores them."""

    def on_log(self, level: LogLevel, message: str, timestamp: str) -> None:
        pass

    def on_height(self, height_mm: float) -> None:
        pass

    def on_connection_status(self, status: ConnectionStatus) -> None:
        pass

    def log(self, level: LogLevel, message: str) -> None:
        """Stamp and forward a log entry."""
        self.on_log(level, message, timestamp_now())


_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class LoggingNotifier(Notifier):
    """Mirrors notifier events onto the ``logging`` module."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("idasen_desk")

    def on_log(self, level: LogLevel, message: str, timestamp: str) -> None:
        self.logger.log(_LEVELS[level], message)

    def on_height(self, height_mm: float) -> None:
        self.logger.debug("Height: %.1f mm", height_mm)

    def on_connection_status(self, status: ConnectionStatus) -> None:
        self.logger.debug("Connection status: %s", status.value)
