"""Tests for CLI tool."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from bitschema.cli.main import main

EXAMPLE_FILE = Path(__file__).resolve().parents[2] / "examples" / "lsdj_instruments.py"

SCHEMA_SOURCE = '''
from bitschema import BYTE, NIBBLE, array, byteslice, sequence

PACKET = sequence(
    ("count", BYTE),
    ("items", array("count", NIBBLE)),
    ("size", BYTE),
    ("payload", byteslice("size")),
)
'''


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    """Python file defining a single dynamic schema."""
    path = tmp_path / "schemas.py"
    path.write_text(SCHEMA_SOURCE, encoding="utf-8")
    return path


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = subprocess.run(
        [sys.executable, "-m", "bitschema.cli.main", "--help"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "bitschema: Declarative Binary Layouts" in result.stdout
    assert "analyze" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = subprocess.run(
        [sys.executable, "-m", "bitschema.cli.main", "--version"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "bitschema 0.1.0" in result.stdout


def test_cli_analyze_example_file() -> None:
    """Test CLI analyze with a real example file."""
    if not EXAMPLE_FILE.exists():
        pytest.skip("Example file not found")

    result = subprocess.run(
        [sys.executable, "-m", "bitschema.cli.main", "analyze", str(EXAMPLE_FILE)],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "bitschema: Declarative Binary Layouts" in result.stdout
    assert "schemas loaded" in result.stdout
    assert "INSTRUMENT_TABLE" in result.stdout
    assert "Encoded size: 1024 bytes / 8192 bits" in result.stdout


def test_cli_analyze_missing_file() -> None:
    """Test CLI analyze with missing file."""
    result = subprocess.run(
        [sys.executable, "-m", "bitschema.cli.main", "analyze", "nonexistent.py"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 1
    assert "Error" in result.stderr or "not found" in result.stderr.lower()


def test_cli_no_args() -> None:
    """Test CLI with no arguments (should show help)."""
    result = subprocess.run(
        [sys.executable, "-m", "bitschema.cli.main"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "bitschema: Declarative Binary Layouts" in result.stdout


def test_cli_analyze_dynamic(schema_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test sizes that depend on decoded data are reported as dynamic."""
    assert main(["analyze", str(schema_file)]) == 0

    out = capsys.readouterr().out
    assert "1 schema loaded." in out
    assert "Size depends on decoded data" in out
    assert "dynamic" in out


def test_cli_decode_encode(
    schema_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test decoding to JSON and encoding back to the same bytes."""
    data = bytes([2, 0x12, 2, 0xAB, 0xCD])
    binary = tmp_path / "packet.bin"
    binary.write_bytes(data)
    document = tmp_path / "packet.json"
    output = tmp_path / "out.bin"

    assert main(["decode", f"{schema_file}:PACKET", str(binary), "-o", str(document)]) == 0
    assert json.loads(document.read_text(encoding="utf-8")) == {
        "count": 2,
        "items": [1, 2],
        "size": 2,
        "payload": {"__bytes__": "abcd"},
    }

    assert main(["encode", f"{schema_file}:PACKET", str(document), "-o", str(output)]) == 0
    assert output.read_bytes() == data


def test_cli_decode_stdout(
    schema_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test decode prints JSON when no output file is given."""
    binary = tmp_path / "packet.bin"
    binary.write_bytes(bytes([2, 0x70, 0]))

    assert main(["decode", f"{schema_file}:PACKET", str(binary)]) == 0
    assert json.loads(capsys.readouterr().out) == {
        "count": 2,
        "items": [7, 0],
        "size": 0,
        "payload": {"__bytes__": ""},
    }


def test_cli_decode_strict(
    schema_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test --strict rejects trailing bytes."""
    binary = tmp_path / "packet.bin"
    binary.write_bytes(bytes([2, 0x70, 0, 0xFF]))

    assert main(["decode", f"{schema_file}:PACKET", str(binary), "--strict"]) == 1
    assert "trailing" in capsys.readouterr().err


def test_cli_decode_truncated(
    schema_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test decode errors are reported with the failing field."""
    binary = tmp_path / "packet.bin"
    binary.write_bytes(bytes([4, 0x12]))

    assert main(["decode", f"{schema_file}:PACKET", str(binary)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: items[2]")


def test_cli_bad_schema_reference(schema_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test schema references must name a schema node."""
    assert main(["decode", f"{schema_file}:MISSING", "in.bin"]) == 1
    assert "not a schema node" in capsys.readouterr().err

    assert main(["decode", "no-colon", "in.bin"]) == 1
    assert "FILE:NAME" in capsys.readouterr().err


def test_cli_broken_schema_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test errors raised while importing a schema file are reported."""
    broken = tmp_path / "broken.py"
    broken.write_text("PACKET = undefined_name\n", encoding="utf-8")

    assert main(["analyze", str(broken)]) == 1
    assert "Error: name 'undefined_name' is not defined" in capsys.readouterr().err

    assert main(["decode", f"{broken}:PACKET", "in.bin"]) == 1
    assert "undefined_name" in capsys.readouterr().err
