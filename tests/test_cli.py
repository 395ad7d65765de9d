"""Tests for the wavbuilder command line."""

from __future__ import annotations

import json
from pathlib import Path

from wavbuilder import parse_wav_header
from wavbuilder.cli import main

from .conftest import ramp_pcm16


def test_build_from_raw_inputs(tmp_path: Path, capsys):
    first = tmp_path / "a.pcm"
    second = tmp_path / "b.pcm"
    first.write_bytes(b"\x01\x02")
    second.write_bytes(b"\x03\x04\x05")
    output = tmp_path / "out.wav"

    exit_code = main(
        [
            "build",
            str(output),
            str(first),
            str(second),
            "--raw",
            "--channels",
            "1",
            "--sample-rate",
            "8000",
            "--bits-per-sample",
            "8",
            "--progress",
        ]
    )

    assert exit_code == 0
    data = output.read_bytes()
    header = parse_wav_header(data)
    assert header.channels == 1
    assert header.data_size == 5
    assert data[44:] == b"\x01\x02\x03\x04\x05"
    assert "File created" in capsys.readouterr().out


def test_build_from_wav_inputs(tmp_path: Path, make_wav):
    inputs = [make_wav(frames=20), make_wav(frames=30)]
    output = tmp_path / "joined.wav"

    assert main(["build", str(output), *map(str, inputs)]) == 0

    assert output.read_bytes()[44:] == ramp_pcm16(20, 2) + ramp_pcm16(30, 2)


def test_build_refuses_existing_output(tmp_path: Path, make_wav, capsys):
    output = tmp_path / "exists.wav"
    output.write_bytes(b"old")

    assert main(["build", str(output), str(make_wav())]) == 1

    assert output.read_bytes() == b"old"
    assert "already exists" in capsys.readouterr().err


def test_build_rejects_misaligned_raw_input(tmp_path: Path, capsys):
    raw = tmp_path / "odd.pcm"
    raw.write_bytes(b"\x00" * 3)

    assert main(["build", str(tmp_path / "out.wav"), str(raw), "--raw"]) == 1

    assert not (tmp_path / "out.wav").exists()
    assert "block alignment" in capsys.readouterr().err


def test_info(make_wav, capsys):
    path = make_wav(frames=441, channels=2)

    assert main(["info", str(path)]) == 0

    out = capsys.readouterr().out
    assert "Channels: 2" in out
    assert "Sample rate: 44100 Hz" in out
    assert "Data size: 1764 bytes" in out


def test_info_json(make_wav, capsys):
    path = make_wav(frames=441, channels=2)

    assert main(["info", str(path), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["format"]["channels"] == 2
    assert payload["format"]["sample_rate"] == 44_100
    assert payload["data_size"] == 1764
    assert payload["chunk_size"] == 1764 + 36
    assert payload["duration_seconds"] == 0.01


def test_info_on_non_wave_file(tmp_path: Path, capsys):
    path = tmp_path / "notes.txt"
    path.write_text("hello")

    assert main(["info", str(path)]) == 1
    assert "Error" in capsys.readouterr().err
