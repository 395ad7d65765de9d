"""Builder for PCM WAVE files assembled from many audio sources."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from . import ingest
from .chunks import ChunkAccumulator
from .format import FormatDescriptor
from .progress import ProgressCallback
from .writer import Destination, write_container

logger = logging.getLogger(__name__)


class WaveFileBuilder:
    """
    Collect raw PCM audio and write it as a single WAVE file.

    Audio is added as raw bytes with ``add_chunk`` or decoded from files with
    ``add_from_file``; every piece must already be in the builder's format.
    ``write`` then computes the header from what was added and streams the
    header and the audio, in the order it was added, to the destination.

    After ``clear`` the same builder can assemble another file with the same
    format.

    The builder is not thread-safe: a single owner adds audio and writes. The
    order chunks are added in is the order they are written in.
    """

    _descriptor: FormatDescriptor
    _chunks: ChunkAccumulator
    _listeners: list[ProgressCallback]

    def __init__(
        self,
        format_tag: int,
        channels: int,
        sample_rate: int,
        bits_per_sample: int,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """
        Initialize a builder for the given format.

        Args:
            format_tag: Audio format tag of the fmt subchunk (1 = PCM).
            channels: Number of channels (1=mono, 2=stereo).
            sample_rate: Sample rate in Hz (e.g., 22050, 44100).
            bits_per_sample: Bits per sample of one channel (e.g., 8, 16). Raw
                chunks must hold ``channels * bits_per_sample / 8`` bytes per frame.
            on_progress: Optional listener for progress events during ``write``.

        Raises:
            InvalidFormatError: If the parameters do not form a valid format.
        """
        descriptor = FormatDescriptor(format_tag, channels, sample_rate, bits_per_sample)
        self._descriptor = descriptor
        self._chunks = ChunkAccumulator(descriptor)
        self._listeners = [on_progress] if on_progress is not None else []
        logger.debug(
            "WaveFileBuilder initialized: format_tag=%d, channels=%d, rate=%d, bits=%d",
            format_tag,
            channels,
            sample_rate,
            bits_per_sample,
        )

    @classmethod
    def from_descriptor(
        cls,
        descriptor: FormatDescriptor,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> WaveFileBuilder:
        """Create a builder for an existing format descriptor."""
        return cls(
            descriptor.format_tag,
            descriptor.channels,
            descriptor.sample_rate,
            descriptor.bits_per_sample,
            on_progress=on_progress,
        )

    @property
    def descriptor(self) -> FormatDescriptor:
        """Format of the file being built."""
        return self._descriptor

    @property
    def block_align(self) -> int:
        """Bytes per sample frame; every chunk length must be a multiple of it."""
        return self._descriptor.block_align

    @property
    def total_length(self) -> int:
        """Bytes of audio added so far."""
        return self._chunks.total_length

    @property
    def chunk_count(self) -> int:
        """Number of chunks added so far."""
        return len(self._chunks)

    def add_chunk(self, data: bytes | bytearray | memoryview) -> None:
        """
        Add raw interleaved sample bytes.

        Raises:
            MisalignedChunkError: If ``len(data)`` is not a multiple of
                ``block_align``. Nothing is added.
        """
        self._chunks.add_chunk(data)

    def add_from_file(self, path: str | os.PathLike[str]) -> int:
        """
        Add the audio of a file that already has this builder's format.

        Returns:
            Number of bytes added.

        Raises:
            FormatMismatchError: If the file's frame layout differs.
            IngestionError: If the file cannot be decoded.
        """
        return ingest.add_from_file(self._descriptor, self._chunks, path)

    def add_from_decoded(self, decoded: ingest.DecodedAudio) -> int:
        """Add all audio of an already opened decoded source."""
        return ingest.add_from_decoded(self._descriptor, self._chunks, decoded)

    def clear(self) -> None:
        """Remove all added audio so the builder can be reused."""
        self._chunks.clear()

    def add_progress_listener(self, callback: ProgressCallback) -> Callable[[], None]:
        """
        Register a callback for progress events during ``write``.

        Returns a function to remove the listener.
        """
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def write(self, destination: Destination) -> int:
        """
        Write the WAVE file to ``destination``.

        Returns:
            Number of bytes written.

        Raises:
            DestinationExistsError: If ``destination`` is a path that exists.
            OSError: If writing fails.
        """
        return write_container(
            destination, self._descriptor, self._chunks, listeners=tuple(self._listeners)
        )
