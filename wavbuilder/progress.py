"""Progress events emitted while a container is written."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class BuildEvent:
    """Base event type passed to progress listeners."""


@dataclass
class WriteStartedEvent(BuildEvent):
    """The header was computed and nothing has been written yet."""

    destination: str
    data_size: int
    chunk_count: int


@dataclass
class HeaderWrittenEvent(BuildEvent):
    """The header was written to the destination."""

    header_size: int


@dataclass
class ChunkWrittenEvent(BuildEvent):
    """A chunk was written to the destination."""

    index: int
    """Zero-based position of the chunk in insertion order."""
    chunk_count: int
    bytes_written: int
    """Bytes written so far, header included."""
    total_bytes: int
    """Final size of the container."""


@dataclass
class WriteCompletedEvent(BuildEvent):
    """The container was fully written and published."""

    destination: str
    bytes_written: int


@dataclass
class WriteFailedEvent(BuildEvent):
    """Writing the container failed; ``error`` is re-raised to the caller."""

    destination: str
    error: BaseException


ProgressCallback = Callable[[BuildEvent], None]


def notify(listeners: Iterable[ProgressCallback], event: BuildEvent) -> None:
    """Call each listener with ``event``; listener errors are logged and dropped."""
    for cb in listeners:
        try:
            cb(event)
        except Exception:
            logger.exception("Error in progress listener for %s", type(event).__name__)
