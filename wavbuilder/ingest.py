"""Bridge from decoded audio sources to PCM chunks."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from types import TracebackType
from typing import Final, Protocol, Self

import av
from av.error import FFmpegError
from av.logging import Capture

from .chunks import ChunkAccumulator
from .errors import FormatMismatchError, IngestionError
from .format import FormatDescriptor

logger = logging.getLogger(__name__)

READ_SIZE: Final[int] = 64 * 1024
"""Bytes requested per read while draining a decoded source."""


class DecodedAudio(Protocol):
    """
    A decoded audio source producing interleaved PCM bytes.

    Any of ``frame_size``, ``sample_rate`` and ``channels`` may be ``None``
    when the decoder cannot tell; unknown values are not checked.
    """

    frame_size: int | None
    """Bytes per sample frame across all channels."""
    sample_rate: int | None
    channels: int | None

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` bytes (all remaining if negative), ``b""`` at end of stream."""
        ...

    def close(self) -> None:
        """Release the underlying source."""
        ...


class AvDecodedAudio:
    """
    First audio stream of a media file, decoded with PyAV.

    Samples are returned exactly as decoded: no resampling and no sample width
    or channel conversion. Planar decoder output is only re-interleaved into
    the matching packed format, which leaves every sample value untouched.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """
        Open ``path`` and prepare its first audio stream for decoding.

        Raises:
            IngestionError: If the file cannot be opened or has no audio stream.
        """
        self._path = os.fspath(path)
        try:
            with Capture() as logs:
                self._container = av.open(self._path)
        except (FFmpegError, OSError) as err:
            raise IngestionError(f"Cannot open audio file {self._path}: {err}") from err
        for log in logs:
            logger.debug("Opening %s log from av: %s", self._path, log)

        if not self._container.streams.audio:
            self._container.close()
            raise IngestionError(f"No audio stream in {self._path}")
        self._stream = self._container.streams.audio[0]

        codec_context = self._stream.codec_context
        sample_format = codec_context.format
        self.sample_rate: int | None = codec_context.sample_rate or None
        self.channels: int | None = codec_context.channels or None
        self.frame_size: int | None = None
        self._resampler: av.AudioResampler | None = None
        if sample_format is not None and self.channels is not None:
            self.frame_size = sample_format.bytes * self.channels
            if sample_format.is_planar:
                self._resampler = av.AudioResampler(
                    format=sample_format.packed.name,
                    layout=codec_context.layout.name,
                    rate=codec_context.sample_rate,
                )
        logger.debug(
            "Opened %s: codec=%s, format=%s, rate=%s, channels=%s, frame_size=%s",
            self._path,
            codec_context.name,
            sample_format.name if sample_format is not None else None,
            self.sample_rate,
            self.channels,
            self.frame_size,
        )

        self._frames: Iterator[bytes] = self._iter_frame_bytes()
        self._pending = bytearray()
        self._eof = False

    def _iter_frame_bytes(self) -> Iterator[bytes]:
        for frame in self._container.decode(self._stream):
            if self._resampler is None:
                yield self._frame_bytes(frame)
            else:
                for out_frame in self._resampler.resample(frame):
                    yield self._frame_bytes(out_frame)
        if self._resampler is not None:
            for out_frame in self._resampler.resample(None):
                yield self._frame_bytes(out_frame)

    @staticmethod
    def _frame_bytes(frame: av.AudioFrame) -> bytes:
        # Planes can be padded past the last sample
        stride = frame.format.bytes * len(frame.layout.channels)
        return bytes(frame.planes[0])[: stride * frame.samples]

    def _next_frame(self) -> bytes | None:
        try:
            return next(self._frames)
        except StopIteration:
            return None
        except FFmpegError as err:
            raise IngestionError(f"Failed to decode {self._path}: {err}") from err

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` decoded bytes (all remaining if negative), ``b""`` at the end."""
        while not self._eof and (size < 0 or len(self._pending) < size):
            data = self._next_frame()
            if data is None:
                self._eof = True
            else:
                self._pending.extend(data)

        if size < 0 or size >= len(self._pending):
            result = bytes(self._pending)
            self._pending.clear()
        else:
            result = bytes(self._pending[:size])
            del self._pending[:size]
        return result

    def close(self) -> None:
        """Close the underlying container."""
        self._container.close()

    def __enter__(self) -> Self:
        """Enter the runtime context."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the container on context exit."""
        self.close()


def open_decoded_audio(path: str | os.PathLike[str]) -> AvDecodedAudio:
    """Open ``path`` for decoding with PyAV."""
    return AvDecodedAudio(path)


def _check_layout(descriptor: FormatDescriptor, decoded: DecodedAudio) -> None:
    if decoded.frame_size is not None and decoded.frame_size != descriptor.block_align:
        raise FormatMismatchError("frame_size", descriptor.block_align, decoded.frame_size)
    # TODO: Offer an explicit opt-in conversion step for rate/channel mismatches.
    if decoded.channels is not None and decoded.channels != descriptor.channels:
        raise FormatMismatchError("channels", descriptor.channels, decoded.channels)
    if decoded.sample_rate is not None and decoded.sample_rate != descriptor.sample_rate:
        raise FormatMismatchError("sample_rate", descriptor.sample_rate, decoded.sample_rate)


def drain(decoded: DecodedAudio) -> bytes:
    """
    Read ``decoded`` until end of stream.

    A single read may return less than what remains, so reads are repeated
    until an empty result.

    Raises:
        IngestionError: If reading from the source fails.
    """
    buffer = bytearray()
    try:
        while data := decoded.read(READ_SIZE):
            buffer.extend(data)
    except OSError as err:
        raise IngestionError(f"Failed to read decoded audio: {err}") from err
    return bytes(buffer)


def add_from_decoded(
    descriptor: FormatDescriptor, accumulator: ChunkAccumulator, decoded: DecodedAudio
) -> int:
    """
    Append all samples of ``decoded`` to ``accumulator`` as one chunk.

    Returns:
        Number of bytes added.

    Raises:
        FormatMismatchError: If the source layout differs from ``descriptor``.
            Nothing is read or added.
        IngestionError: If decoding fails. Nothing is added.
        MisalignedChunkError: If the source ends with a partial frame.
    """
    _check_layout(descriptor, decoded)
    data = drain(decoded)
    accumulator.add_chunk(data)
    return len(data)


def add_from_file(
    descriptor: FormatDescriptor, accumulator: ChunkAccumulator, path: str | os.PathLike[str]
) -> int:
    """Decode ``path`` and append its samples to ``accumulator`` as one chunk."""
    with open_decoded_audio(path) as decoded:
        added = add_from_decoded(descriptor, accumulator, decoded)
    logger.debug("Added %d bytes from %s", added, path)
    return added


def read_pcm_data(path: str | os.PathLike[str]) -> bytes:
    """Return the decoded sample bytes of ``path`` without any format check."""
    with open_decoded_audio(path) as decoded:
        return drain(decoded)
