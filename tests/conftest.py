"""Shared fixtures: a scripted BLE transport and a simulated desk."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

import pytest
from bleak.exc import BleakError

from idasen_desk import const
from idasen_desk.controller import DeskController
from idasen_desk.notifier import Notifier
from idasen_desk.units import meters_to_raw

FAST_POLL = 0.01
FAST_TIMEOUT = 0.3


@dataclass
class FakeCharacteristic:
    uuid: str


@dataclass
class FakeService:
    characteristics: list[FakeCharacteristic]


@dataclass
class FakeDevice:
    name: str
    address: str = "AA:BB:CC:DD:EE:FF"


@dataclass
class FakeClient:
    address: str
    is_connected: bool = True


def desk_services() -> list[FakeService]:
    """GATT layout of a Linak desk, plus an unrelated service."""
    return [
        FakeService([FakeCharacteristic("00002a00-0000-1000-8000-00805f9b34fb")]),
        FakeService(
            [
                FakeCharacteristic(const.UUID_MOVE),
                FakeCharacteristic(const.UUID_HEIGHT),
            ]
        ),
        FakeService([FakeCharacteristic(const.UUID_REFERENCE_INPUT)]),
    ]


class SimulatedDesk:
    """
    Desk motor model driven by reference-input writes.

    Each height read after a target has been written advances the desk up to
    ``step_mm`` toward it and reports a non-zero speed. A stuck desk never
    reports zero speed.
    """

    def __init__(self, height_mm: float = 800.0, step_mm: float = 50.0, stuck: bool = False):
        self.raw = meters_to_raw(height_mm / 1000.0)
        self.step_raw = int(step_mm * 10)
        self.stuck = stuck
        self.target_raw: int | None = None
        self.payload_length = 4

    @property
    def height_mm(self) -> float:
        return self.raw / 10.0 + const.MIN_HEIGHT_MM

    def set_target(self, payload: bytes):
        self.target_raw = struct.unpack("<H", payload)[0]

    def payload(self) -> bytes:
        speed = 0
        if self.stuck:
            speed = 120
        elif self.target_raw is not None and self.raw != self.target_raw:
            delta = self.target_raw - self.raw
            move = max(-self.step_raw, min(self.step_raw, delta))
            self.raw += move
            speed = 300 if move > 0 else -300
        return struct.pack("<Hh", self.raw, speed)[: self.payload_length]


class FakeTransport:
    """Records every call; failures are injected through attributes."""

    def __init__(self, desk: SimulatedDesk | None = None, device: FakeDevice | None = None):
        self.desk = desk or SimulatedDesk()
        self.device = device if device is not None else FakeDevice("Desk 4721")
        self.services_layout = desk_services()
        self.calls: list[str] = []
        self.writes: list[tuple[str, bytes]] = []
        self.scan_error: Exception | None = None
        self.connect_error: Exception | None = None
        self.services_error: Exception | None = None
        self.write_error: Exception | None = None
        self.read_failures = 0
        self.client: FakeClient | None = None
        self.on_disconnect = None

    async def scan(self, predicate):
        self.calls.append("scan")
        if self.scan_error:
            raise self.scan_error
        if self.device is not None and predicate(self.device.name):
            return self.device
        return None

    async def connect(self, device, on_disconnect):
        self.calls.append("connect")
        if self.connect_error:
            raise self.connect_error
        self.on_disconnect = on_disconnect
        self.client = FakeClient(device.address)
        return self.client

    def services(self, handle):
        self.calls.append("services")
        if self.services_error:
            raise self.services_error
        return self.services_layout

    async def read(self, handle, characteristic):
        self.calls.append("read")
        if self.read_failures > 0:
            self.read_failures -= 1
            raise BleakError("read failed")
        return self.desk.payload()

    async def write_without_response(self, handle, characteristic, data):
        self.calls.append("write")
        if self.write_error:
            raise self.write_error
        self.writes.append((characteristic.uuid, bytes(data)))
        if characteristic.uuid == const.UUID_REFERENCE_INPUT:
            self.desk.set_target(bytes(data))

    def is_connected(self, handle):
        return handle.is_connected

    async def disconnect(self, handle):
        self.calls.append("disconnect")
        handle.is_connected = False

    def writes_to(self, uuid: str) -> list[bytes]:
        return [data for char_uuid, data in self.writes if char_uuid == uuid]


@dataclass
class RecordingNotifier(Notifier):
    logs: list[tuple] = field(default_factory=list)
    heights: list[float] = field(default_factory=list)
    statuses: list = field(default_factory=list)

    def on_log(self, level, message, timestamp):
        self.logs.append((level, message))

    def on_height(self, height_mm):
        self.heights.append(height_mm)

    def on_connection_status(self, status):
        self.statuses.append(status)

    def messages(self, level=None) -> list[str]:
        return [msg for lvl, msg in self.logs if level is None or lvl == level]


@pytest.fixture
def sim_desk():
    return SimulatedDesk()


@pytest.fixture
def transport(sim_desk):
    return FakeTransport(sim_desk)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def controller(transport, notifier):
    return DeskController(
        transport,
        notifier,
        move_timeout=FAST_TIMEOUT,
        poll_interval=FAST_POLL,
    )
