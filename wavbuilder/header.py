"""Canonical 44-byte PCM WAVE header."""

from __future__ import annotations

import struct
from typing import Final, NamedTuple

from .errors import ContainerTooLargeError, InvalidHeaderError
from .format import FormatDescriptor

# Little-endian: RIFF descriptor (12) + fmt subchunk (24) + data subchunk header (8)
WAV_HEADER_FORMAT: Final[str] = "<4sI4s4sIHHIIHH4sI"
WAV_HEADER_SIZE: Final[int] = struct.calcsize(WAV_HEADER_FORMAT)

RIFF_TAG: Final[bytes] = b"RIFF"
WAVE_TAG: Final[bytes] = b"WAVE"
FMT_TAG: Final[bytes] = b"fmt "
DATA_TAG: Final[bytes] = b"data"

FMT_SUBCHUNK_SIZE: Final[int] = 16
"""Size of the plain PCM fmt subchunk body; extended variants are not written."""

_UINT32_MAX: Final[int] = 0xFFFF_FFFF


class WavHeader(NamedTuple):
    """Fields of a canonical PCM WAVE header, in file order."""

    riff_tag: bytes
    chunk_size: int  # 4 + (8 + subchunk1_size) + (8 + data_size)
    wave_tag: bytes
    fmt_tag: bytes
    subchunk1_size: int
    format_tag: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_tag: bytes
    data_size: int

    def descriptor(self) -> FormatDescriptor:
        """Rebuild the format descriptor this header was written for."""
        return FormatDescriptor(
            format_tag=self.format_tag,
            channels=self.channels,
            sample_rate=self.sample_rate,
            bits_per_sample=self.bits_per_sample,
        )


def riff_chunk_size(data_size: int) -> int:
    """Return the RIFF chunk size field for ``data_size`` bytes of audio."""
    return 4 + (8 + FMT_SUBCHUNK_SIZE) + (8 + data_size)


def build_wav_header(descriptor: FormatDescriptor, data_size: int) -> bytes:
    """
    Serialize the header for a container holding ``data_size`` bytes of audio.

    Args:
        descriptor: Format of the audio data.
        data_size: Total length of the sample bytes following the header.

    Returns:
        44-byte header.

    Raises:
        ContainerTooLargeError: If the sizes do not fit the 32-bit fields.
    """
    if data_size < 0:
        raise ValueError(f"data_size must not be negative, got {data_size}")
    chunk_size = riff_chunk_size(data_size)
    if chunk_size > _UINT32_MAX:
        raise ContainerTooLargeError(
            f"{data_size} bytes of audio exceed the 4 GiB limit of a RIFF container"
        )
    return struct.pack(
        WAV_HEADER_FORMAT,
        RIFF_TAG,
        chunk_size,
        WAVE_TAG,
        FMT_TAG,
        FMT_SUBCHUNK_SIZE,
        descriptor.format_tag,
        descriptor.channels,
        descriptor.sample_rate,
        descriptor.byte_rate,
        descriptor.block_align,
        descriptor.bits_per_sample,
        DATA_TAG,
        data_size,
    )


def parse_wav_header(data: bytes) -> WavHeader:
    """
    Unpack a canonical header from the start of ``data``.

    Args:
        data: At least the first 44 bytes of a WAVE file.

    Returns:
        WavHeader with typed fields.

    Raises:
        InvalidHeaderError: If data is too short, a tag is wrong, or the fmt
            subchunk is not the plain 16-byte PCM variant.
    """
    if len(data) < WAV_HEADER_SIZE:
        raise InvalidHeaderError(f"Expected at least {WAV_HEADER_SIZE} bytes, got {len(data)}")

    header = WavHeader._make(struct.unpack(WAV_HEADER_FORMAT, data[:WAV_HEADER_SIZE]))
    for name, expected in (
        ("riff_tag", RIFF_TAG),
        ("wave_tag", WAVE_TAG),
        ("fmt_tag", FMT_TAG),
        ("data_tag", DATA_TAG),
    ):
        actual = getattr(header, name)
        if actual != expected:
            raise InvalidHeaderError(f"Expected {name} {expected!r}, got {actual!r}")
    if header.subchunk1_size != FMT_SUBCHUNK_SIZE:
        raise InvalidHeaderError(
            f"Unsupported fmt subchunk size {header.subchunk1_size} (only {FMT_SUBCHUNK_SIZE})"
        )
    return header
