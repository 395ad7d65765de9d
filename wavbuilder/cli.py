"""Command-line interface for building and inspecting WAVE files."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Final

import orjson

from wavbuilder.builder import WaveFileBuilder
from wavbuilder.errors import WavBuilderError
from wavbuilder.format import AUDIO_FORMAT_PCM, CHANNELS_STEREO
from wavbuilder.header import WAV_HEADER_SIZE, parse_wav_header
from wavbuilder.progress import BuildEvent, ChunkWrittenEvent, WriteCompletedEvent

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE: Final[int] = 44_100
DEFAULT_BITS_PER_SAMPLE: Final[int] = 16


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for wavbuilder."""
    parser = argparse.ArgumentParser(
        prog="wavbuilder", description="Build and inspect PCM WAVE files"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level to use",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Concatenate audio into a new WAVE file")
    build.add_argument("output", type=Path, help="File to create; must not exist yet")
    build.add_argument("inputs", type=Path, nargs="+", help="Audio files, added in order")
    build.add_argument(
        "--channels", type=int, default=CHANNELS_STEREO, help="Number of channels"
    )
    build.add_argument(
        "--sample-rate", type=int, default=DEFAULT_SAMPLE_RATE, help="Sample rate in Hz"
    )
    build.add_argument(
        "--bits-per-sample",
        type=int,
        default=DEFAULT_BITS_PER_SAMPLE,
        help="Bits per sample of one channel",
    )
    build.add_argument(
        "--format-tag", type=int, default=AUDIO_FORMAT_PCM, help="Audio format tag (1 = PCM)"
    )
    build.add_argument(
        "--raw",
        action="store_true",
        help="Treat inputs as headerless PCM bytes instead of decoding them",
    )
    build.add_argument(
        "--progress", action="store_true", help="Print progress while writing"
    )

    info = subparsers.add_parser("info", help="Show the header of a WAVE file")
    info.add_argument("file", type=Path, help="WAVE file to inspect")
    info.add_argument("--json", action="store_true", help="Print the header as JSON")
    return parser.parse_args(argv)


def _print_event(message: str) -> None:
    print(message, flush=True)  # noqa: T201


def _print_progress(event: BuildEvent) -> None:
    if isinstance(event, ChunkWrittenEvent):
        percent = 100 * event.bytes_written // max(event.total_bytes, 1)
        _print_event(f"Chunk {event.index + 1}/{event.chunk_count} written ({percent}%)")
    elif isinstance(event, WriteCompletedEvent):
        _print_event(f"File created: {event.destination}")


def run_build(args: argparse.Namespace) -> int:
    """Build a WAVE file from the inputs given on the command line."""
    builder = WaveFileBuilder(
        args.format_tag,
        args.channels,
        args.sample_rate,
        args.bits_per_sample,
        on_progress=_print_progress if args.progress else None,
    )
    for path in args.inputs:
        if args.raw:
            builder.add_chunk(path.read_bytes())
        else:
            builder.add_from_file(path)
        logger.info("Added %s (%d bytes total)", path, builder.total_length)

    written = builder.write(args.output)
    logger.info(
        "Wrote %d bytes (%.2f s of audio) to %s",
        written,
        builder.descriptor.duration_seconds(builder.total_length),
        args.output,
    )
    return 0


def run_info(args: argparse.Namespace) -> int:
    """Print the header fields of a WAVE file."""
    with args.file.open("rb") as f:
        header = parse_wav_header(f.read(WAV_HEADER_SIZE))
    descriptor = header.descriptor()

    if args.json:
        payload = {
            "format": descriptor.to_dict(),
            "chunk_size": header.chunk_size,
            "data_size": header.data_size,
            "duration_seconds": descriptor.duration_seconds(header.data_size),
        }
        _print_event(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        return 0

    lines = [
        f"File: {args.file}",
        f"Format tag: {header.format_tag}",
        f"Channels: {header.channels}",
        f"Sample rate: {header.sample_rate} Hz",
        f"Bits per sample: {header.bits_per_sample}",
        f"Byte rate: {header.byte_rate}",
        f"Block align: {header.block_align}",
        f"Data size: {header.data_size} bytes",
        f"Duration: {descriptor.duration_seconds(header.data_size):.3f} s",
    ]
    _print_event("\n".join(lines))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI."""
    args = parse_args(list(argv) if argv is not None else sys.argv[1:])
    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        if args.command == "build":
            return run_build(args)
        return run_info(args)
    except (WavBuilderError, OSError) as err:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {err}", file=sys.stderr)  # noqa: T201
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
