"""wavbuilder: streaming builder for canonical PCM WAVE files."""

from __future__ import annotations

from wavbuilder.builder import WaveFileBuilder
from wavbuilder.chunks import ChunkAccumulator
from wavbuilder.errors import (
    ContainerTooLargeError,
    DestinationExistsError,
    FormatMismatchError,
    IngestionError,
    InvalidFormatError,
    InvalidHeaderError,
    MisalignedChunkError,
    WavBuilderError,
)
from wavbuilder.format import (
    AUDIO_FORMAT_PCM,
    CHANNELS_MONO,
    CHANNELS_STEREO,
    FormatDescriptor,
)
from wavbuilder.header import WAV_HEADER_SIZE, WavHeader, build_wav_header, parse_wav_header
from wavbuilder.ingest import DecodedAudio, open_decoded_audio, read_pcm_data
from wavbuilder.progress import (
    BuildEvent,
    ChunkWrittenEvent,
    HeaderWrittenEvent,
    WriteCompletedEvent,
    WriteFailedEvent,
    WriteStartedEvent,
)
from wavbuilder.writer import write_container

__all__ = [
    "AUDIO_FORMAT_PCM",
    "CHANNELS_MONO",
    "CHANNELS_STEREO",
    "WAV_HEADER_SIZE",
    "BuildEvent",
    "ChunkAccumulator",
    "ChunkWrittenEvent",
    "ContainerTooLargeError",
    "DecodedAudio",
    "DestinationExistsError",
    "FormatDescriptor",
    "FormatMismatchError",
    "HeaderWrittenEvent",
    "IngestionError",
    "InvalidFormatError",
    "InvalidHeaderError",
    "MisalignedChunkError",
    "WavBuilderError",
    "WavHeader",
    "WaveFileBuilder",
    "WriteCompletedEvent",
    "WriteFailedEvent",
    "WriteStartedEvent",
    "build_wav_header",
    "open_decoded_audio",
    "parse_wav_header",
    "read_pcm_data",
    "write_container",
]
