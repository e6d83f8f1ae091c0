"""Tests for raw unit conversion and payload decoding."""

import struct

import pytest

from idasen_desk.errors import ShortPayloadError
from idasen_desk.units import (
    HeightSample,
    decode_height,
    decode_sample,
    encode_target,
    meters_to_raw,
    raw_to_meters,
)


def test_raw_round_trip_covers_full_travel():
    for raw in range(0, 6501):
        assert meters_to_raw(raw_to_meters(raw)) == raw


def test_raw_zero_is_minimum_height():
    assert raw_to_meters(0) == pytest.approx(0.62)
    assert raw_to_meters(6500) == pytest.approx(1.27)


def test_meters_to_raw_rounds():
    assert meters_to_raw(0.80004) == 1800
    assert meters_to_raw(0.80006) == 1801
    assert meters_to_raw(0.62) == 0


def test_decode_sample_little_endian():
    # 0x0BB8 = 3000 raw -> 0.92m, speed -0x0064 = -100 raw
    sample = decode_sample(bytes([0xB8, 0x0B, 0x9C, 0xFF]))
    assert sample.position_m == pytest.approx(0.92)
    assert sample.speed_mps == pytest.approx(-0.01)
    assert sample.height_mm == pytest.approx(920.0)


def test_decode_sample_ignores_trailing_bytes():
    data = struct.pack("<Hh", 1000, 0) + b"\x01\x02"
    sample = decode_sample(data)
    assert isinstance(sample, HeightSample)
    assert sample.position_m == pytest.approx(0.72)
    assert sample.speed_mps == 0.0


def test_decode_height_needs_two_bytes():
    assert decode_height(struct.pack("<H", 500)) == pytest.approx(0.67)
    with pytest.raises(ShortPayloadError) as exc:
        decode_height(b"\x01")
    assert exc.value.got == 1


@pytest.mark.parametrize("data", [b"", b"\x01", b"\x01\x02", b"\x01\x02\x03"])
def test_decode_sample_short_payload(data):
    with pytest.raises(ShortPayloadError) as exc:
        decode_sample(data)
    assert exc.value.got == len(data)
    assert exc.value.needed == 4


def test_encode_target():
    assert encode_target(1.0) == struct.pack("<H", 3800)
    assert encode_target(1.27) == bytes([0x64, 0x19])
