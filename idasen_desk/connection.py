"""Lazily established, cached connection to the desk."""

import asyncio
import logging
from contextlib import suppress
from typing import Any

from bleak.exc import BleakError

from idasen_desk.const import DESK_NAME_PREFIX
from idasen_desk.errors import ConnectFailedError, DeskNotFoundError, ScanFailedError
from idasen_desk.notifier import ConnectionStatus, LogLevel, Notifier
from idasen_desk.transport import DeskTransport, device_name

_LOGGER = logging.getLogger(__name__)


class ConnectionManager:
    """
    Owns the single cached desk handle.

    The handle is created by the first successful ``get_or_connect`` and kept
    until the transport reports the link gone. ``lock`` guards the handle; it
    is never held across a transport call, so two callers racing before the
    first connect completes may both scan and connect. The later write wins.
    """

    def __init__(
        self,
        transport: DeskTransport,
        notifier: Notifier | None = None,
        name_prefix: str = DESK_NAME_PREFIX,
        lock: asyncio.Lock | None = None,
    ):
        self.transport = transport
        self.notifier = notifier or Notifier()
        self.name_prefix = name_prefix
        self.lock = lock or asyncio.Lock()
        self._handle: Any | None = None

    @property
    def handle(self) -> Any | None:
        return self._handle

    def status(self) -> ConnectionStatus:
        if self._handle is not None:
            return ConnectionStatus.CONNECTED
        return ConnectionStatus.NOT_CONNECTED

    def _matches(self, name: str) -> bool:
        return name.startswith(self.name_prefix)

    def _fail(self, level: LogLevel, message: str) -> None:
        self.notifier.log(level, message)
        self.notifier.on_connection_status(ConnectionStatus.NOT_CONNECTED)

    async def get_or_connect(self) -> Any:
        """
        Return the cached handle, scanning and connecting first if needed.

        Raises:
            ScanFailedError: If the BLE scan errors
            DeskNotFoundError: If no advertisement matches the name prefix
            ConnectFailedError: If connecting to the matched desk fails
        """
        async with self.lock:
            if self._handle is not None:
                return self._handle

        self.notifier.log(LogLevel.INFO, "Scanning for desk...")

        try:
            device = await self.transport.scan(self._matches)
        except (BleakError, OSError) as e:
            self._fail(LogLevel.ERROR, f"Bluetooth scan failed: {e}")
            raise ScanFailedError(f"scan failed: {e}") from e

        if device is None:
            self._fail(LogLevel.WARN, "No desk found")
            raise DeskNotFoundError(f"No desk advertising as '{self.name_prefix}*'. Is it powered on?")

        name = device_name(device)
        self.notifier.log(LogLevel.INFO, f"Desk found: {name}")

        try:
            handle = await self.transport.connect(device, self._on_disconnect)
        except (BleakError, OSError, asyncio.TimeoutError) as e:
            self._fail(LogLevel.ERROR, f"Connection failed: {e}")
            raise ConnectFailedError(f"connect failed: {e}") from e

        async with self.lock:
            self._handle = handle

        _LOGGER.debug("Cached handle for %s", name)
        self.notifier.log(LogLevel.INFO, f"Connected to: {name}")
        self.notifier.on_connection_status(ConnectionStatus.CONNECTED)
        return handle

    def _on_disconnect(self, handle: Any) -> None:
        """Transport callback for a dropped link; runs on the event loop."""
        if self._handle is handle:
            self._handle = None
            self._fail(LogLevel.WARN, "Desk disconnected")

    async def invalidate_if_stale(self, handle: Any) -> bool:
        """
        Forget ``handle`` if the transport says it is no longer connected.

        Returns True if the cached handle was dropped. A handle that is not
        the cached one is left alone.
        """
        if self.transport.is_connected(handle):
            return False

        async with self.lock:
            if self._handle is not handle:
                return False
            self._handle = None

        self._fail(LogLevel.WARN, "Lost connection to desk")
        return True

    async def disconnect(self) -> None:
        """Disconnect and forget the cached handle."""
        async with self.lock:
            handle, self._handle = self._handle, None

        if handle is None:
            return

        with suppress(BleakError):
            await self.transport.disconnect(handle)
        self.notifier.log(LogLevel.INFO, "Disconnected")
        self.notifier.on_connection_status(ConnectionStatus.NOT_CONNECTED)
