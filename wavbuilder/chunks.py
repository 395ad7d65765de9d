"""Ordered accumulation of block-aligned PCM chunks."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .errors import MisalignedChunkError
from .format import FormatDescriptor

logger = logging.getLogger(__name__)


class ChunkAccumulator:
    """
    Append-only sequence of raw PCM chunks.

    Every chunk holds a whole number of sample frames of ``descriptor``.
    Chunks are kept exactly as added and iterate in insertion order; they are
    never merged. The running byte total is kept alongside so
    ``total_length`` is O(1).
    """

    def __init__(self, descriptor: FormatDescriptor) -> None:
        """Initialize an empty accumulator for ``descriptor``."""
        self._descriptor = descriptor
        self._chunks: list[bytes] = []
        self._total_length = 0

    @property
    def descriptor(self) -> FormatDescriptor:
        """Format every chunk is aligned to."""
        return self._descriptor

    @property
    def total_length(self) -> int:
        """Sum of the lengths of all chunks."""
        return self._total_length

    def add_chunk(self, data: bytes | bytearray | memoryview) -> None:
        """
        Append a chunk of raw sample bytes.

        Mutable buffers are copied so later changes by the caller cannot alter
        queued audio.

        Raises:
            MisalignedChunkError: If the length is not a multiple of the block
                alignment. The accumulator is left unchanged.
        """
        chunk = bytes(data)
        block_align = self._descriptor.block_align
        if len(chunk) % block_align != 0:
            raise MisalignedChunkError(len(chunk), block_align)
        self._chunks.append(chunk)
        self._total_length += len(chunk)
        logger.debug(
            "Added chunk #%d of %d bytes (total %d bytes)",
            len(self._chunks),
            len(chunk),
            self._total_length,
        )

    def clear(self) -> None:
        """Drop all chunks, keeping the format."""
        self._chunks.clear()
        self._total_length = 0

    def __len__(self) -> int:
        """Return the number of chunks."""
        return len(self._chunks)

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over the chunks in insertion order."""
        return iter(self._chunks)
