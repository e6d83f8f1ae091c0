"""Height and speed readings from the desk."""

import logging
from typing import Any

from bleak.exc import BleakError

from idasen_desk.connection import ConnectionManager
from idasen_desk.endpoints import EndpointResolver
from idasen_desk.errors import ServiceDiscoveryError, TelemetryReadError
from idasen_desk.units import HeightSample, decode_height, decode_sample

_LOGGER = logging.getLogger(__name__)


class TelemetryReader:
    """Reads the height characteristic through the shared connection."""

    def __init__(self, connection: ConnectionManager, resolver: EndpointResolver):
        self.connection = connection
        self.resolver = resolver

    async def _read_raw(self, handle: Any | None = None) -> bytes:
        if handle is None:
            handle = await self.connection.get_or_connect()
        try:
            char = self.resolver.resolve_telemetry(handle)
            return await self.connection.transport.read(handle, char)
        except ServiceDiscoveryError:
            await self.connection.invalidate_if_stale(handle)
            raise
        except (BleakError, OSError) as e:
            await self.connection.invalidate_if_stale(handle)
            raise TelemetryReadError(f"read height: {e}") from e

    async def read_height(self) -> float:
        """Read the current height in mm."""
        data = await self._read_raw()
        return decode_height(data) * 1000.0

    async def read_height_and_speed(self) -> HeightSample:
        """Read the current height (m) and speed (m/s)."""
        data = await self._read_raw()
        sample = decode_sample(data)
        _LOGGER.debug("Sample: %.4f m @ %.4f m/s", sample.position_m, sample.speed_mps)
        return sample

    async def read_sample(self, handle: Any) -> HeightSample:
        """Read height and speed through an already held handle, never reconnecting."""
        return decode_sample(await self._read_raw(handle))
