"""Exceptions raised by wavbuilder."""

from __future__ import annotations

from pathlib import Path


class WavBuilderError(Exception):
    """Base class for all wavbuilder errors."""


class InvalidFormatError(WavBuilderError, ValueError):
    """Format parameters cannot describe a PCM WAVE stream."""


class MisalignedChunkError(WavBuilderError, ValueError):
    """A chunk does not contain a whole number of sample frames."""

    def __init__(self, length: int, block_align: int) -> None:
        """Initialize with the offending chunk length and the required alignment."""
        super().__init__(
            f"Chunk of {length} bytes is not a multiple of the block alignment ({block_align})"
        )
        self.length = length
        self.block_align = block_align


class FormatMismatchError(WavBuilderError):
    """Decoded audio does not match the layout of the container being built."""

    def __init__(self, field: str, expected: int, actual: int) -> None:
        """Initialize with the mismatching field and both values."""
        super().__init__(f"Decoded {field} is {actual}, expected {expected}")
        self.field = field
        self.expected = expected
        self.actual = actual


class IngestionError(WavBuilderError):
    """An audio source could not be decoded."""


class DestinationExistsError(WavBuilderError, FileExistsError):
    """The write destination already exists and will not be overwritten."""

    def __init__(self, path: str | Path) -> None:
        """Initialize with the destination path."""
        super().__init__(f"Destination already exists: {path}")
        self.path = Path(path)


class ContainerTooLargeError(WavBuilderError, OverflowError):
    """The accumulated audio does not fit the 32-bit RIFF size fields."""


class InvalidHeaderError(WavBuilderError, ValueError):
    """Bytes do not start with a canonical 44-byte PCM WAVE header."""
