"""Declarative bit-level binary codec.

This module provides the schema builders and the decode/encode interpreters
that share them.
"""

from __future__ import annotations

from .decoder import decode
from .encoder import encode
from .schema import (
    BIT,
    BYTE,
    EMBED,
    NIBBLE,
    Array,
    BitField,
    Branch,
    ByteSlice,
    EmbeddedSlot,
    NamedSlot,
    Node,
    Padding,
    PaddingSlot,
    Sequence,
    Text,
    WideField,
    array,
    bitfield,
    branch,
    byteslice,
    padding,
    sequence,
    text,
    widefield,
)

__all__ = [
    "encode",
    "decode",
    # Builders
    "sequence",
    "array",
    "branch",
    "bitfield",
    "widefield",
    "byteslice",
    "text",
    "padding",
    "EMBED",
    "BIT",
    "NIBBLE",
    "BYTE",
    # Node types
    "Node",
    "Sequence",
    "Array",
    "Branch",
    "BitField",
    "WideField",
    "ByteSlice",
    "Text",
    "Padding",
    "NamedSlot",
    "EmbeddedSlot",
    "PaddingSlot",
]
