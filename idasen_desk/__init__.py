"""
Idåsen Desk - Bluetooth Low Energy standing desk control.

This package discovers an IKEA Idåsen / Linak standing desk, reads its
height and drives it to a target height with a bounded wait.
"""

from idasen_desk.config import DeskSettings, load_settings
from idasen_desk.const import MAX_HEIGHT_MM, MIN_HEIGHT_MM
from idasen_desk.controller import DeskController
from idasen_desk.errors import (
    AlreadyMovingError,
    ConnectFailedError,
    ConnectionLostError,
    DeskCommunicationError,
    DeskConnectionError,
    DeskError,
    DeskMotionError,
    DeskNotFoundError,
    EndpointNotFoundError,
    MoveTimeoutError,
    OutOfRangeError,
    ScanFailedError,
    ServiceDiscoveryError,
    ShortPayloadError,
    TelemetryReadError,
)
from idasen_desk.notifier import ConnectionStatus, LoggingNotifier, LogLevel, Notifier
from idasen_desk.units import HeightSample

__all__ = [
    # Controller
    "DeskController",
    "DeskSettings",
    "load_settings",
    "HeightSample",
    "MIN_HEIGHT_MM",
    "MAX_HEIGHT_MM",
    # Notifier
    "Notifier",
    "LoggingNotifier",
    "LogLevel",
    "ConnectionStatus",
    # Errors
    "DeskError",
    "DeskConnectionError",
    "ScanFailedError",
    "DeskNotFoundError",
    "ConnectFailedError",
    "ConnectionLostError",
    "DeskCommunicationError",
    "ServiceDiscoveryError",
    "EndpointNotFoundError",
    "ShortPayloadError",
    "TelemetryReadError",
    "DeskMotionError",
    "OutOfRangeError",
    "MoveTimeoutError",
    "AlreadyMovingError",
]
