"""Audio format description for PCM WAVE containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from mashumaro.mixins.orjson import DataClassORJSONMixin

from .errors import InvalidFormatError

AUDIO_FORMAT_PCM: Final[int] = 1
"""Format tag for linear PCM."""
CHANNELS_MONO: Final[int] = 1
CHANNELS_STEREO: Final[int] = 2

_UINT16_MAX: Final[int] = 0xFFFF
_UINT32_MAX: Final[int] = 0xFFFF_FFFF


@dataclass(frozen=True)
class FormatDescriptor(DataClassORJSONMixin):
    """
    Immutable format parameters of a PCM WAVE container.

    The derived fields ``byte_rate`` and ``block_align`` are computed once on
    construction; every later alignment check uses ``block_align``.
    """

    format_tag: int
    """Audio encoding tag written to the fmt subchunk (1 = linear PCM)."""
    channels: int
    """Number of interleaved channels (1=mono, 2=stereo)."""
    sample_rate: int
    """Sample rate in Hz (e.g., 8000, 44100, 48000)."""
    bits_per_sample: int
    """Bits per sample per channel, a multiple of 8."""
    byte_rate: int = field(init=False)
    """Bytes of audio per second."""
    block_align: int = field(init=False)
    """Bytes per sample frame across all channels."""

    def __post_init__(self) -> None:
        """Validate the parameters and compute the derived fields."""
        if self.channels < 1:
            raise InvalidFormatError(f"channels must be at least 1, got {self.channels}")
        if self.sample_rate <= 0:
            raise InvalidFormatError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.bits_per_sample <= 0 or self.bits_per_sample % 8 != 0:
            raise InvalidFormatError(
                f"bits_per_sample must be a positive multiple of 8, got {self.bits_per_sample}"
            )
        if not 0 <= self.format_tag <= _UINT16_MAX:
            raise InvalidFormatError(f"format_tag {self.format_tag} does not fit 16 bits")

        block_align = self.channels * (self.bits_per_sample // 8)
        byte_rate = self.sample_rate * block_align
        # Header fields are 16 bits (channels, block align, bits) or 32 bits (rates)
        if self.channels > _UINT16_MAX or block_align > _UINT16_MAX:
            raise InvalidFormatError(
                f"{self.channels} channels of {self.bits_per_sample} bits exceed the fmt subchunk"
            )
        if byte_rate > _UINT32_MAX:
            raise InvalidFormatError(f"byte rate {byte_rate} does not fit 32 bits")

        object.__setattr__(self, "block_align", block_align)
        object.__setattr__(self, "byte_rate", byte_rate)

    @property
    def bytes_per_sample(self) -> int:
        """Return bytes per sample of a single channel."""
        return self.bits_per_sample // 8

    def frame_count(self, data_size: int) -> int:
        """Return how many whole frames ``data_size`` bytes hold."""
        return data_size // self.block_align

    def duration_seconds(self, data_size: int) -> float:
        """Return the playback duration of ``data_size`` bytes of audio."""
        return self.frame_count(data_size) / self.sample_rate
