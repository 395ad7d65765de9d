"""Shared fixtures for the wavbuilder test suite."""

from __future__ import annotations

import struct
from collections.abc import Callable
from pathlib import Path

import pytest

from wavbuilder import AUDIO_FORMAT_PCM, FormatDescriptor, WaveFileBuilder


def ramp_pcm16(frames: int, channels: int) -> bytes:
    """Return signed 16-bit little-endian samples with a distinct value per sample."""
    samples = [((i * 37) % 65536) - 32768 for i in range(frames * channels)]
    return struct.pack(f"<{len(samples)}h", *samples)


@pytest.fixture
def mono_8bit() -> FormatDescriptor:
    """Mono, 8 bits per sample, 8000 Hz."""
    return FormatDescriptor(AUDIO_FORMAT_PCM, 1, 8000, 8)


@pytest.fixture
def stereo_16bit() -> FormatDescriptor:
    """Stereo, 16 bits per sample, 44100 Hz."""
    return FormatDescriptor(AUDIO_FORMAT_PCM, 2, 44_100, 16)


@pytest.fixture
def make_wav(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a 16-bit WAVE file with ramp samples and returning its path."""
    counter = 0

    def _make(
        frames: int = 1000, channels: int = 2, sample_rate: int = 44_100
    ) -> Path:
        nonlocal counter
        counter += 1
        path = tmp_path / f"input_{counter}.wav"
        builder = WaveFileBuilder(AUDIO_FORMAT_PCM, channels, sample_rate, 16)
        builder.add_chunk(ramp_pcm16(frames, channels))
        builder.write(path)
        return path

    return _make
