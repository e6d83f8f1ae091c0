"""
IKEA Idåsen / Linak Standing Desk Controller

Drives the desk to an absolute height through the reference-input
characteristic, which only keeps the motor running while it is rewritten.
"""

import asyncio
import logging
from typing import Any

from bleak.exc import BleakError

from idasen_desk.config import DeskSettings
from idasen_desk.connection import ConnectionManager
from idasen_desk.const import (
    ALREADY_AT_TARGET_M,
    ARRIVAL_TOLERANCE_M,
    CMD_STOP,
    CMD_WAKEUP,
    DESK_NAME_PREFIX,
    HEIGHT_STEP_MM,
    MAX_HEIGHT_M,
    MAX_HEIGHT_MM,
    MIN_HEIGHT_M,
    MIN_HEIGHT_MM,
    MOVE_POLL_INTERVAL,
    MOVE_TIMEOUT,
)
from idasen_desk.endpoints import EndpointResolver
from idasen_desk.errors import (
    AlreadyMovingError,
    ConnectionLostError,
    DeskCommunicationError,
    DeskConnectionError,
    DeskError,
    MoveTimeoutError,
    OutOfRangeError,
)
from idasen_desk.notifier import ConnectionStatus, LoggingNotifier, LogLevel, Notifier
from idasen_desk.telemetry import TelemetryReader
from idasen_desk.transport import BleakTransport, DeskTransport
from idasen_desk.units import encode_target

_LOGGER = logging.getLogger(__name__)


class DeskController:
    """Controller for IKEA Idåsen / Linak standing desk."""

    def __init__(
        self,
        transport: DeskTransport | None = None,
        notifier: Notifier | None = None,
        name_prefix: str = DESK_NAME_PREFIX,
        move_timeout: float = MOVE_TIMEOUT,
        poll_interval: float = MOVE_POLL_INTERVAL,
    ):
        self.transport = transport or BleakTransport()
        self.notifier = notifier or LoggingNotifier()
        self.move_timeout = move_timeout
        self.poll_interval = poll_interval

        # One lock for the handle, the move claim and the moving flag
        self._lock = asyncio.Lock()
        self.connection = ConnectionManager(self.transport, self.notifier, name_prefix, lock=self._lock)
        self.resolver = EndpointResolver(self.transport)
        self.telemetry = TelemetryReader(self.connection, self.resolver)

        self._move_claimed = False
        self._moving = False

    @classmethod
    def from_settings(cls, settings: DeskSettings, notifier: Notifier | None = None) -> "DeskController":
        transport = BleakTransport(
            scan_timeout=settings.scan_timeout,
            connect_timeout=settings.connect_timeout,
        )
        return cls(
            transport,
            notifier,
            name_prefix=settings.name_prefix,
            move_timeout=settings.move_timeout,
            poll_interval=settings.poll_interval,
        )

    def _log(self, level: LogLevel, msg: str):
        self.notifier.log(level, msg)

    def check_connection(self) -> ConnectionStatus:
        """Return whether a desk handle is currently cached."""
        return self.connection.status()

    def is_moving(self) -> bool:
        """Return True while a move is commanding the desk."""
        return self._moving

    async def auto_connect(self) -> bool:
        """
        Connect and publish the initial height.

        Meant for application startup: failures are logged, not raised.
        """
        self._log(LogLevel.INFO, "Connecting to desk...")

        try:
            await self.connection.get_or_connect()
        except DeskError as e:
            self._log(LogLevel.WARN, f"Auto-connect failed: {e}")
            return False

        try:
            height = await self.telemetry.read_height()
        except DeskError as e:
            self._log(LogLevel.WARN, f"Failed to read height: {e}")
            return False

        self.notifier.on_height(height)
        self._log(LogLevel.INFO, f"Current height: {height / 10:.1f} cm")
        return True

    async def close(self):
        """Disconnect from the desk."""
        await self.connection.disconnect()

    async def get_height(self) -> float:
        """Get current desk height in mm."""
        try:
            return await self.telemetry.read_height()
        except DeskError as e:
            self._log(LogLevel.ERROR, f"Failed to read height: {e}")
            raise

    async def move_by_step(self, up: bool):
        """
        Nudge the desk one step (1 cm) up or down, clamped to the travel range.

        Raises:
            DeskError: If the current height cannot be read or the move fails
        """
        try:
            current_mm = await self.telemetry.read_height()
        except DeskError as e:
            self._log(LogLevel.ERROR, f"Failed to read height: {e}")
            raise

        target_mm = current_mm + HEIGHT_STEP_MM if up else current_mm - HEIGHT_STEP_MM
        target_mm = max(MIN_HEIGHT_MM, min(MAX_HEIGHT_MM, target_mm))

        direction = "up" if up else "down"
        self._log(LogLevel.INFO, f"Moving {direction} to {target_mm / 10:.1f} cm")

        await self.move_to_height(target_mm)

    async def move_to_height(self, target_mm: float):
        """
        Move desk to target height in mm and wait until it settles there.

        Only one move runs at a time; a second caller is rejected rather than
        queued.

        Raises:
            AlreadyMovingError: If another move is in flight
            OutOfRangeError: If the target is outside 620-1270mm
            DeskConnectionError: If the desk cannot be reached
            DeskCommunicationError: If the desk's characteristics are missing
            MoveTimeoutError: If the desk does not arrive within the move timeout
            ConnectionLostError: If the link drops while the desk is moving
        """
        async with self._lock:
            claimed = not self._move_claimed
            self._move_claimed = True

        if not claimed:
            self._log(LogLevel.WARN, "Desk is already moving")
            raise AlreadyMovingError("desk is already moving")

        try:
            await self._move(target_mm)
        finally:
            self._move_claimed = False
            self._moving = False

    async def _move(self, target_mm: float):
        target_m = target_mm / 1000.0

        if not MIN_HEIGHT_M <= target_m <= MAX_HEIGHT_M:
            err = OutOfRangeError(target_mm, MIN_HEIGHT_MM, MAX_HEIGHT_MM)
            self._log(LogLevel.ERROR, str(err))
            raise err

        try:
            handle = await self.connection.get_or_connect()
        except DeskConnectionError as e:
            self._log(LogLevel.ERROR, f"Connection failed: {e}")
            raise

        try:
            move_char, ref_char = self.resolver.resolve_motion(handle)
        except DeskCommunicationError as e:
            await self.connection.invalidate_if_stale(handle)
            self._log(LogLevel.ERROR, f"Characteristics not found: {e}")
            raise

        try:
            current = await self.telemetry.read_sample(handle)
        except DeskError as e:
            _LOGGER.debug("Pre-move height check failed, moving anyway: %s", e)
        else:
            if abs(current.position_m - target_m) < ALREADY_AT_TARGET_M:
                self._log(LogLevel.INFO, "Already at target height")
                return

        async with self._lock:
            self._moving = True

        # Wake up and prepare
        await self._best_effort_write(handle, move_char, CMD_WAKEUP, "wakeup")
        await self._best_effort_write(handle, move_char, CMD_STOP, "stop")

        payload = encode_target(target_m)
        _LOGGER.debug("Moving to %.1fmm (payload %s)", target_mm, payload.hex())

        try:
            await asyncio.wait_for(
                self._poll_until_arrived(handle, ref_char, payload, target_m),
                timeout=self.move_timeout,
            )
        except ConnectionLostError:
            self._log(LogLevel.ERROR, "Lost connection during movement")
            raise
        except asyncio.TimeoutError:
            await self._best_effort_write(handle, move_char, CMD_STOP, "stop")
            self._log(LogLevel.ERROR, "Timeout: target height not reached")
            raise MoveTimeoutError(
                f"Target height {target_mm / 10:.1f} cm not reached within {self.move_timeout:g}s"
            ) from None

        self._log(LogLevel.INFO, f"Target height {target_mm / 10:.1f} cm reached")

    async def _best_effort_write(self, handle: Any, char: Any, cmd: bytes, label: str) -> bool:
        """Write a move command; failure is logged and does not abort the move."""
        try:
            await self.transport.write_without_response(handle, char, cmd)
            return True
        except (BleakError, OSError) as e:
            self._log(LogLevel.WARN, f"Failed to send {label} command: {e}")
            return False

    async def _poll_until_arrived(self, handle: Any, ref_char: Any, payload: bytes, target_m: float):
        """Keep rewriting the reference input until the desk stops at the target."""
        while True:
            await asyncio.sleep(self.poll_interval)

            if self.connection.handle is not handle:
                raise ConnectionLostError("desk disconnected during movement")

            try:
                await self.transport.write_without_response(handle, ref_char, payload)
            except (BleakError, OSError) as e:
                _LOGGER.debug("Reference write failed: %s", e)

            try:
                sample = await self.telemetry.read_sample(handle)
            except DeskError as e:
                _LOGGER.debug("Skipping sample: %s", e)
                continue

            self.notifier.on_height(sample.height_mm)

            if sample.speed_mps == 0 and abs(sample.position_m - target_m) < ARRIVAL_TOLERANCE_M:
                return
