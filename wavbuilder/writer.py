"""Streaming output of WAVE containers."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable, Sequence
from contextlib import suppress
from pathlib import Path
from typing import BinaryIO

from .errors import DestinationExistsError, MisalignedChunkError
from .format import FormatDescriptor
from .header import build_wav_header
from .progress import (
    ChunkWrittenEvent,
    HeaderWrittenEvent,
    ProgressCallback,
    WriteCompletedEvent,
    WriteFailedEvent,
    WriteStartedEvent,
    notify,
)

logger = logging.getLogger(__name__)

Destination = str | os.PathLike[str] | BinaryIO


def write_container(
    destination: Destination,
    descriptor: FormatDescriptor,
    chunks: Iterable[bytes],
    *,
    listeners: Sequence[ProgressCallback] = (),
) -> int:
    """
    Write the header followed by ``chunks`` to ``destination``.

    Chunks are written one at a time in order, so peak memory is bounded by the
    largest chunk rather than by the whole container.

    A path destination is never overwritten. The container is first streamed
    to a temporary file in the same directory and only published under the
    destination name once every byte has been written, so a failed write never
    leaves a truncated container behind.

    An open binary stream is written to directly and left open; the caller is
    responsible for what happens to it on failure.

    Args:
        destination: File path or writable binary stream.
        descriptor: Format of the audio in ``chunks``.
        chunks: Raw sample bytes, each a whole number of frames.
        listeners: Progress callbacks, called at each checkpoint.

    Returns:
        Number of bytes written, header included.

    Raises:
        DestinationExistsError: If the destination path already exists.
        MisalignedChunkError: If the chunks do not add up to whole frames.
        OSError: If writing fails.
    """
    chunk_list = list(chunks)
    data_size = sum(len(chunk) for chunk in chunk_list)
    if data_size % descriptor.block_align != 0:
        raise MisalignedChunkError(data_size, descriptor.block_align)
    header = build_wav_header(descriptor, data_size)

    if isinstance(destination, (str, os.PathLike)):
        return _write_to_path(Path(destination), header, chunk_list, data_size, listeners)

    name = str(getattr(destination, "name", "<stream>"))
    notify(listeners, WriteStartedEvent(name, data_size, len(chunk_list)))
    try:
        written = _stream_out(destination, header, chunk_list, listeners)
    except Exception as err:
        notify(listeners, WriteFailedEvent(name, err))
        raise
    notify(listeners, WriteCompletedEvent(name, written))
    return written


def _write_to_path(
    path: Path,
    header: bytes,
    chunks: list[bytes],
    data_size: int,
    listeners: Sequence[ProgressCallback],
) -> int:
    """Stream to a temporary sibling of ``path`` and publish it without clobbering."""
    if os.path.lexists(path):
        logger.warning("Refusing to overwrite existing file %s", path)
        raise DestinationExistsError(path)

    notify(listeners, WriteStartedEvent(str(path), data_size, len(chunks)))
    try:
        tmp_fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as err:
        notify(listeners, WriteFailedEvent(str(path), err))
        raise
    try:
        with os.fdopen(tmp_fd, "wb") as tmp_file:
            written = _stream_out(tmp_file, header, chunks, listeners)
            # mkstemp creates 0600; publish with the mode a plain create would give
            os.fchmod(tmp_file.fileno(), _default_file_mode())
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        _publish(Path(tmp_name), path)
    except Exception as err:
        notify(listeners, WriteFailedEvent(str(path), err))
        raise
    finally:
        with suppress(FileNotFoundError):
            os.unlink(tmp_name)

    logger.info("File created: %s (%d bytes)", path, written)
    notify(listeners, WriteCompletedEvent(str(path), written))
    return written


def _default_file_mode() -> int:
    """Return the mode of a newly created regular file under the current umask."""
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


def _publish(tmp_path: Path, path: Path) -> None:
    """Make ``tmp_path`` visible as ``path``, failing if ``path`` appeared meanwhile."""
    try:
        # A hard link never replaces an existing entry, unlike rename/replace
        os.link(tmp_path, path)
    except FileExistsError as err:
        logger.warning("Destination %s was created while writing", path)
        raise DestinationExistsError(path) from err


def _stream_out(
    sink: BinaryIO,
    header: bytes,
    chunks: list[bytes],
    listeners: Sequence[ProgressCallback],
) -> int:
    total_bytes = len(header) + sum(len(chunk) for chunk in chunks)
    sink.write(header)
    written = len(header)
    notify(listeners, HeaderWrittenEvent(len(header)))

    for index, chunk in enumerate(chunks):
        sink.write(chunk)
        written += len(chunk)
        notify(
            listeners,
            ChunkWrittenEvent(
                index=index,
                chunk_count=len(chunks),
                bytes_written=written,
                total_bytes=total_bytes,
            ),
        )
    logger.debug("Streamed %d chunks, %d bytes", len(chunks), written)
    return written
