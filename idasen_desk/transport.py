"""
BLE transport used by the desk core.

The core only talks to the desk through a ``DeskTransport``. ``BleakTransport``
is the production implementation; tests substitute a scripted fake.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from bleak import BleakClient, BleakScanner
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.backends.service import BleakGATTService

from idasen_desk.const import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SCAN_TIMEOUT

_LOGGER = logging.getLogger(__name__)

# Called with the advertised local name; True stops the scan
NamePredicate = Callable[[str], bool]


class DeskTransport(Protocol):
    """Operations the core needs from the platform BLE stack."""

    async def scan(self, predicate: NamePredicate) -> Any | None: ...

    async def connect(self, device: Any, on_disconnect: Callable[[Any], None]) -> Any: ...

    def services(self, handle: Any) -> Iterable[Any]: ...

    async def read(self, handle: Any, characteristic: Any) -> bytes: ...

    async def write_without_response(self, handle: Any, characteristic: Any, data: bytes) -> None: ...

    def is_connected(self, handle: Any) -> bool: ...

    async def disconnect(self, handle: Any) -> None: ...


def device_name(device: Any) -> str:
    """Best-effort display name for a scanned device."""
    return getattr(device, "name", None) or str(device)


class BleakTransport:
    """``DeskTransport`` backed by bleak."""

    def __init__(
        self,
        scan_timeout: float = DEFAULT_SCAN_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ):
        self.scan_timeout = scan_timeout
        self.connect_timeout = connect_timeout

    async def scan(self, predicate: NamePredicate) -> BLEDevice | None:
        """Scan until an advertisement matches; bleak stops the scanner on first match."""

        def _match(device: BLEDevice, adv: AdvertisementData) -> bool:
            name = adv.local_name or device.name
            return bool(name) and predicate(name)

        return await BleakScanner.find_device_by_filter(_match, timeout=self.scan_timeout)

    async def connect(self, device: BLEDevice, on_disconnect: Callable[[BleakClient], None]) -> BleakClient:
        client = BleakClient(
            device,
            timeout=self.connect_timeout,
            disconnected_callback=on_disconnect,
        )
        await client.connect()
        return client

    def services(self, handle: BleakClient) -> Iterable[BleakGATTService]:
        # Raises BleakError when service discovery has not completed
        return list(handle.services)

    async def read(self, handle: BleakClient, characteristic: BleakGATTCharacteristic) -> bytes:
        return bytes(await handle.read_gatt_char(characteristic))

    async def write_without_response(
        self, handle: BleakClient, characteristic: BleakGATTCharacteristic, data: bytes
    ) -> None:
        await handle.write_gatt_char(characteristic, data, response=False)

    def is_connected(self, handle: BleakClient) -> bool:
        return handle.is_connected

    async def disconnect(self, handle: BleakClient) -> None:
        _LOGGER.debug("Disconnecting from %s", handle.address)
        await handle.disconnect()
