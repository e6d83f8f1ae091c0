"""Conversion between raw Linak units and physical height/speed."""

import struct
from dataclasses import dataclass

from idasen_desk.const import MIN_HEIGHT_M, RAW_UNITS_PER_METER
from idasen_desk.errors import ShortPayloadError


@dataclass(frozen=True)
class HeightSample:
    """One decoded reading of the height characteristic."""

    position_m: float
    speed_mps: float

    @property
    def height_mm(self) -> float:
        return self.position_m * 1000.0


def raw_to_meters(raw: int) -> float:
    """Convert raw position units to meters (includes base offset)."""
    return raw / float(RAW_UNITS_PER_METER) + MIN_HEIGHT_M


def meters_to_raw(meters: float) -> int:
    """Convert meters to raw position units."""
    return round((meters - MIN_HEIGHT_M) * RAW_UNITS_PER_METER)


def decode_height(data: bytes) -> float:
    """Decode the position field of a height payload. Returns meters."""
    if len(data) < 2:
        raise ShortPayloadError(len(data), 2)
    raw_height = struct.unpack("<H", data[0:2])[0]
    return raw_to_meters(raw_height)


def decode_sample(data: bytes) -> HeightSample:
    """Decode position and speed from a height payload."""
    if len(data) < 4:
        raise ShortPayloadError(len(data), 4)
    raw_height, raw_speed = struct.unpack("<Hh", data[0:4])
    return HeightSample(
        position_m=raw_to_meters(raw_height),
        speed_mps=raw_speed / float(RAW_UNITS_PER_METER),
    )


def encode_target(meters: float) -> bytes:
    """Encode a target height as a reference-input payload."""
    return struct.pack("<H", meters_to_raw(meters))
