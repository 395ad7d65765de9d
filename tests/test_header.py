"""Tests for the 44-byte WAVE header layout."""

from __future__ import annotations

import struct

import pytest

from wavbuilder import (
    ContainerTooLargeError,
    InvalidHeaderError,
    WAV_HEADER_SIZE,
    build_wav_header,
    parse_wav_header,
)


def test_header_layout_stereo_16bit(stereo_16bit):
    header = build_wav_header(stereo_16bit, 8)

    assert len(header) == WAV_HEADER_SIZE == 44
    assert header[0:4] == b"RIFF"
    assert struct.unpack_from("<I", header, 4)[0] == 4 + 24 + 8 + 8
    assert header[8:12] == b"WAVE"
    assert header[12:16] == b"fmt "
    assert struct.unpack_from("<I", header, 16)[0] == 16
    assert struct.unpack_from("<H", header, 20)[0] == 1
    assert struct.unpack_from("<H", header, 22)[0] == 2
    assert struct.unpack_from("<I", header, 24)[0] == 44_100
    assert struct.unpack_from("<I", header, 28)[0] == 176_400
    assert struct.unpack_from("<H", header, 32)[0] == 4
    assert struct.unpack_from("<H", header, 34)[0] == 16
    assert header[36:40] == b"data"
    assert struct.unpack_from("<I", header, 40)[0] == 8


def test_header_exact_bytes(mono_8bit):
    expected = (
        b"RIFF" + (46).to_bytes(4, "little") + b"WAVE"
        + b"fmt " + (16).to_bytes(4, "little")
        + (1).to_bytes(2, "little") + (1).to_bytes(2, "little")
        + (8000).to_bytes(4, "little") + (8000).to_bytes(4, "little")
        + (1).to_bytes(2, "little") + (8).to_bytes(2, "little")
        + b"data" + (10).to_bytes(4, "little")
    )
    assert build_wav_header(mono_8bit, 10) == expected


def test_empty_container_sizes(stereo_16bit):
    header = parse_wav_header(build_wav_header(stereo_16bit, 0))
    assert header.data_size == 0
    assert header.chunk_size == 36


def test_serialization_is_deterministic(stereo_16bit):
    assert build_wav_header(stereo_16bit, 1024) == build_wav_header(stereo_16bit, 1024)


def test_large_values_are_little_endian(stereo_16bit):
    header = build_wav_header(stereo_16bit, 0x01020304)
    assert header[40:44] == b"\x04\x03\x02\x01"


def test_parse_round_trip(stereo_16bit):
    header = parse_wav_header(build_wav_header(stereo_16bit, 4096))
    assert header.descriptor() == stereo_16bit
    assert header.data_size == 4096
    assert header.byte_rate == stereo_16bit.byte_rate
    assert header.block_align == stereo_16bit.block_align


def test_too_large_container(stereo_16bit):
    with pytest.raises(ContainerTooLargeError):
        build_wav_header(stereo_16bit, 0xFFFF_FFFF)
    # Largest data size whose chunk size still fits 32 bits
    header = parse_wav_header(build_wav_header(stereo_16bit, 0xFFFF_FFFF - 36))
    assert header.chunk_size == 0xFFFF_FFFF


def test_negative_data_size(stereo_16bit):
    with pytest.raises(ValueError):
        build_wav_header(stereo_16bit, -4)


def test_parse_rejects_short_input():
    with pytest.raises(InvalidHeaderError):
        parse_wav_header(b"RIFF")


@pytest.mark.parametrize(
    ("offset", "replacement"),
    [(0, b"RIFX"), (8, b"AVI "), (12, b"junk"), (36, b"LIST")],
)
def test_parse_rejects_wrong_tags(stereo_16bit, offset, replacement):
    header = bytearray(build_wav_header(stereo_16bit, 0))
    header[offset : offset + 4] = replacement
    with pytest.raises(InvalidHeaderError):
        parse_wav_header(bytes(header))


def test_parse_rejects_extended_fmt(stereo_16bit):
    header = bytearray(build_wav_header(stereo_16bit, 0))
    header[16:20] = (18).to_bytes(4, "little")
    with pytest.raises(InvalidHeaderError):
        parse_wav_header(bytes(header))
