"""Locate the desk's move, height and reference-input characteristics."""

import uuid
from typing import Any

from bleak.exc import BleakError

from idasen_desk.const import UUID_HEIGHT, UUID_MOVE, UUID_REFERENCE_INPUT
from idasen_desk.errors import EndpointNotFoundError, ServiceDiscoveryError
from idasen_desk.transport import DeskTransport


def _parse_uuid(value: str) -> str:
    return str(uuid.UUID(value))


class EndpointResolver:
    """
    Walks the desk's GATT tree to find characteristics by UUID.

    Identifiers are parsed once, here; an invalid UUID fails construction.
    Resolution itself is not cached and re-walks every service on each call.
    """

    def __init__(
        self,
        transport: DeskTransport,
        move_uuid: str = UUID_MOVE,
        height_uuid: str = UUID_HEIGHT,
        reference_uuid: str = UUID_REFERENCE_INPUT,
    ):
        self.transport = transport
        self.move_uuid = _parse_uuid(move_uuid)
        self.height_uuid = _parse_uuid(height_uuid)
        self.reference_uuid = _parse_uuid(reference_uuid)

    def _characteristics(self, handle: Any) -> dict[str, Any]:
        try:
            services = self.transport.services(handle)
        except BleakError as e:
            raise ServiceDiscoveryError(f"discover services: {e}") from e

        found = {}
        for service in services:
            for char in service.characteristics:
                found.setdefault(str(char.uuid).lower(), char)
        return found

    def resolve_telemetry(self, handle: Any) -> Any:
        """Return the height/speed characteristic."""
        chars = self._characteristics(handle)
        if self.height_uuid not in chars:
            raise EndpointNotFoundError("height")
        return chars[self.height_uuid]

    def resolve_motion(self, handle: Any) -> tuple[Any, Any]:
        """Return the (move, reference-input) characteristic pair."""
        chars = self._characteristics(handle)
        if self.move_uuid not in chars:
            raise EndpointNotFoundError("move")
        if self.reference_uuid not in chars:
            raise EndpointNotFoundError("reference")
        return chars[self.move_uuid], chars[self.reference_uuid]
