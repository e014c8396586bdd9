"""End-to-end integration tests."""

from __future__ import annotations

import copy
from typing import ClassVar, List

import pytest

from bitschema import (
    BIT,
    BYTE,
    EMBED,
    BaseRecord,
    CodecError,
    Node,
    SchemaError,
    TruncatedInputError,
    TypeMismatchError,
    UInt,
    array,
    bitfield,
    branch,
    byteslice,
    decode,
    encode,
    encoded_bits,
    encoded_size,
    field_sizes,
    padding,
    sequence,
    text,
)

VIBRATO = sequence(("type", bitfield(2)), ("direction", BIT))

PULSE = sequence(
    ("envelope", BYTE),
    padding(5),
    ("vibrato", VIBRATO),
    ("pan", bitfield(2)),
    padding(6),
)

WAVE = sequence(
    padding(1),
    ("volume", bitfield(2)),
    padding(5),
    ("synth", bitfield(4)),
    ("repeat", bitfield(4)),
    ("vibrato", VIBRATO),
    padding(5),
)

INSTRUMENT = sequence(
    ("type", BYTE),
    (EMBED, branch("type", {0: PULSE, 1: WAVE}, else_case=sequence(("raw", byteslice(3))))),
)

SONG = sequence(
    ("name_length", BYTE),
    ("name", text("name_length")),
    ("count", BYTE),
    ("instruments", array("count", INSTRUMENT)),
    ("checksum", BYTE),
)

SONG_BYTES = bytes(
    [4, *b"LSDJ", 3]
    + [0x00, 0xA8, 0x05, 0xC0]  # pulse
    + [0x01, 0x60, 0x5A, 0x40]  # wave
    + [0x07, 0xDE, 0xAD, 0xBE]  # unknown type, kept raw
    + [0x99]
)

SONG_VALUE = {
    "name_length": 4,
    "name": "LSDJ",
    "count": 3,
    "instruments": [
        {"type": 0, "envelope": 0xA8, "vibrato": {"type": 2, "direction": 1}, "pan": 3},
        {
            "type": 1,
            "volume": 3,
            "synth": 5,
            "repeat": 10,
            "vibrato": {"type": 1, "direction": 0},
        },
        {"type": 7, "raw": b"\xde\xad\xbe"},
    ],
    "checksum": 0x99,
}


class TestEndToEndWorkflow:
    """Test complete end-to-end workflows."""

    def test_song_workflow(self) -> None:
        """Test decoding, editing and re-encoding an instrument table."""
        # 1. Decode
        song = decode(SONG, SONG_BYTES, strict=True)
        assert song == SONG_VALUE

        # 2. Re-encode unchanged
        assert encode(SONG, song) == SONG_BYTES

        # 3. Edit one field and re-encode
        edited = copy.deepcopy(song)
        edited["instruments"][1]["synth"] = 0xF
        data = encode(SONG, edited)

        assert data[:12] == SONG_BYTES[:12]
        assert data[12] == 0xFA
        assert data[13:] == SONG_BYTES[13:]
        assert decode(SONG, data) == edited

    def test_switch_instrument_type(self) -> None:
        """Test a changed type byte selects a different layout on encode."""
        song = copy.deepcopy(SONG_VALUE)
        song["instruments"][2] = {
            "type": 0,
            "envelope": 1,
            "vibrato": {"type": 0, "direction": 0},
            "pan": 0,
        }

        data = encode(SONG, song)

        assert data[-5:] == bytes([0x00, 0x01, 0x00, 0x00, 0x99])
        assert decode(SONG, data) == song

    def test_switch_without_fields(self) -> None:
        """Test errors name the instrument and field at fault."""
        song = copy.deepcopy(SONG_VALUE)
        song["instruments"][0]["type"] = 1

        with pytest.raises(TypeMismatchError) as exc_info:
            encode(SONG, song)

        assert exc_info.value.path == ("instruments", 0, "volume")
        assert str(exc_info.value).startswith("instruments[0].volume: missing value")

    def test_truncated_song(self) -> None:
        """Test truncation inside an embedded branch reports the slice path."""
        with pytest.raises(TruncatedInputError) as exc_info:
            decode(SONG, SONG_BYTES[:-3])

        assert exc_info.value.path == ("instruments", 2, "raw")

    def test_sizing(self) -> None:
        """Test static size calculation across the song layout."""
        assert encoded_bits(INSTRUMENT) == 32
        assert encoded_size(array(64, INSTRUMENT)) == 256
        assert field_sizes(INSTRUMENT) == {"type": 8, "(branch)": 24}
        assert field_sizes(SONG) == {
            "name_length": 8,
            "name": None,
            "count": 8,
            "instruments": None,
            "checksum": 8,
        }

        with pytest.raises(SchemaError):
            encoded_size(SONG)

    def test_all_errors_are_codec_errors(self) -> None:
        """Test codec failures share a common base class."""
        with pytest.raises(CodecError):
            decode(SONG, b"")

        with pytest.raises(CodecError):
            encode(SONG, {"name_length": 1, "name": "x"})


class Voice(BaseRecord):
    """A single voice of a sound chip."""

    volume: int = UInt(bits=4)
    muted: int = UInt(bits=1)


class Chip(BaseRecord):
    """Voices preceded by their count."""

    count: int = UInt(bits=8)
    voices: List[Voice]

    bitschema_layout: ClassVar[Node] = sequence(
        ("count", BYTE),
        (
            "voices",
            array("count", sequence(("volume", bitfield(4)), ("muted", BIT), padding(3))),
        ),
    )


class TestRecordWorkflow:
    """Test record models on top of the codec."""

    def test_chip_roundtrip(self) -> None:
        """Test a list of nested records survives encode and decode."""
        chip = Chip(count=2, voices=[Voice(volume=15, muted=0), Voice(volume=3, muted=1)])
        data = chip.to_bytes()

        assert data == bytes([2, 0xF0, 0x38])
        assert Chip.from_bytes(data) == chip

    def test_chip_count_mismatch(self) -> None:
        """Test the count must match the number of voices."""
        chip = Chip(count=3, voices=[Voice(volume=1, muted=0)])

        with pytest.raises(CodecError, match="expected array with length 3, got 1"):
            chip.to_bytes()
