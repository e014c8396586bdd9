#!/usr/bin/env python3
"""Instrument table of a LSDj (Little Sound DJ) save file.

This example demonstrates:
1. Describing a bit-packed record with nested sequences and padding
2. Selecting the record body with an embedded branch on a type byte
3. Decoding a table of 64 instruments and re-encoding it byte for byte

Run it with a raw instrument table dump to decode real data:

    python examples/lsdj_instruments.py instruments.bin

The schemas can also be inspected with the CLI:

    bitschema analyze examples/lsdj_instruments.py
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

from bitschema import (
    BIT,
    BYTE,
    EMBED,
    array,
    bitfield,
    branch,
    decode,
    encode,
    encoded_size,
    padding,
    sequence,
)

VIBRATO = sequence(
    ("type", bitfield(2)),
    ("direction", BIT),
)

TABLE_ASSIGNMENT = sequence(
    ("enabled", BIT),
    ("id", bitfield(5)),
)

PULSE = sequence(
    ("envelope", BYTE),
    ("phase_transpose", BYTE),
    padding(1),
    ("has_sound_length", BIT),
    ("sound_length", bitfield(6)),
    ("sweep", BYTE),
    padding(3),
    ("automate", BIT),
    ("automate_2", BIT),
    ("vibrato", VIBRATO),
    padding(2),
    ("table", TABLE_ASSIGNMENT),
    ("wave", bitfield(2)),
    ("phase_finetune", bitfield(4)),
    ("pan", bitfield(2)),
    padding(64),
)

WAVE = sequence(
    padding(1),
    ("volume", bitfield(2)),
    padding(5),
    ("synth", bitfield(4)),
    ("repeat", bitfield(4)),
    padding(19),
    ("automate", BIT),
    ("automate_2", BIT),
    ("vibrato", VIBRATO),
    padding(2),
    ("table", TABLE_ASSIGNMENT),
    padding(6),
    ("pan", bitfield(2)),
    padding(14),
    ("play_type", bitfield(2)),
    padding(32),
    ("steps", bitfield(4)),
    ("speed", bitfield(4)),
    padding(8),
)

KIT = sequence(
    ("volume", BYTE),
    ("keep_attack_1", BIT),
    ("half_speed", BIT),
    ("kit_1", bitfield(6)),
    ("length_1", BYTE),
    padding(9),
    ("loop_1", BIT),
    ("loop_2", BIT),
    ("automate", BIT),
    ("automate_2", BIT),
    ("vibrato", VIBRATO),
    padding(2),
    ("table", TABLE_ASSIGNMENT),
    padding(6),
    ("pan", bitfield(2)),
    ("pitch", BYTE),
    ("keep_attack_2", BIT),
    padding(7),
    ("dist_type", BYTE),
    ("length_2", BYTE),
    ("offset_1", BYTE),
    ("offset_2", BYTE),
    padding(16),
)

NOISE = sequence(
    ("envelope", BYTE),
    ("s_command_type", BYTE),
    padding(1),
    ("has_sound_length", BIT),
    ("sound_length", bitfield(6)),
    ("sweep", BYTE),
    padding(3),
    ("automate", BIT),
    ("automate_2", BIT),
    padding(5),
    ("table", TABLE_ASSIGNMENT),
    padding(6),
    ("pan", bitfield(2)),
    padding(64),
)

INSTRUMENT = sequence(
    ("type", BYTE),
    (EMBED, branch("type", {0: PULSE, 1: WAVE, 2: KIT, 3: NOISE})),
)

INSTRUMENT_TABLE = array(64, INSTRUMENT)


def _blank_table() -> bytes:
    """Build a table that cycles through the four instrument types."""
    data = bytearray()
    for index in range(64):
        kind = index % 4
        body = bytearray(15)
        # wave instruments start with padding
        if kind != 1:
            body[0] = index
        data.append(kind)
        data.extend(body)
    return bytes(data)


def main() -> None:
    """Run the instrument table example."""
    print(f"Instrument size: {encoded_size(INSTRUMENT)} bytes")
    print(f"Table size: {encoded_size(INSTRUMENT_TABLE)} bytes")
    print()

    if len(sys.argv) > 1:
        data = Path(sys.argv[1]).read_bytes()
    else:
        data = _blank_table()

    instruments = decode(INSTRUMENT_TABLE, data)
    print(json.dumps(instruments[:4], indent=2))

    reencoded = encode(INSTRUMENT_TABLE, instruments)
    print()
    print(f"Re-encoded {len(reencoded)} bytes, identical: {reencoded == data[: len(reencoded)]}")


if __name__ == "__main__":
    main()
