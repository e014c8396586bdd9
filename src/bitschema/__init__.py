"""bitschema: Declarative Binary Layouts

A Python library for describing the bit-level layout of a binary record once
and using that description both to decode bytes into structured values and
to encode structured values back into bytes. Fields may span byte
boundaries; array lengths and branches can depend on earlier fields.

Key Features:
- Bit fields of any width, including arbitrary-precision wide fields
- Dynamic array lengths and value-dependent branches
- Embedded records merged into their parent
- Optional Pydantic record models bound to a layout

Quick Start:
    >>> from bitschema import BYTE, EMBED, bitfield, branch, decode, encode, padding, sequence
    >>>
    >>> instrument = sequence(
    ...     ("type", BYTE),
    ...     (EMBED, branch("type", {
    ...         0: sequence(("envelope", BYTE), ("pan", bitfield(2)), padding(6)),
    ...         1: sequence(("volume", bitfield(2)), padding(6)),
    ...     })),
    ... )
    >>> record = decode(instrument, bytes([0, 0xA8, 0xC0]))
    >>> record
    {'type': 0, 'envelope': 168, 'pan': 3}
    >>> encode(instrument, record)
    b'\\x00\\xa8\\xc0'
"""

from __future__ import annotations

__version__ = "0.1.0"

from .codec import (
    BIT,
    BYTE,
    EMBED,
    NIBBLE,
    Node,
    array,
    bitfield,
    branch,
    byteslice,
    decode,
    encode,
    padding,
    sequence,
    text,
    widefield,
)
from .exceptions import (
    BitSchemaError,
    CodecError,
    DecodeError,
    EncodeError,
    LengthMismatchError,
    MisalignedAccessError,
    NoMatchingBranchError,
    SchemaError,
    ScopeError,
    TruncatedInputError,
    TypeMismatchError,
    UnresolvedReferenceError,
)
from .models import BaseRecord, FixedBytes, UInt
from .utils import encoded_bits, encoded_size, field_sizes

__all__ = [
    # Core API
    "encode",
    "decode",
    # Schema builders
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
    "Node",
    # Record models
    "BaseRecord",
    "UInt",
    "FixedBytes",
    # Exceptions
    "BitSchemaError",
    "SchemaError",
    "CodecError",
    "DecodeError",
    "EncodeError",
    "TruncatedInputError",
    "TypeMismatchError",
    "LengthMismatchError",
    "UnresolvedReferenceError",
    "NoMatchingBranchError",
    "MisalignedAccessError",
    "ScopeError",
    # Sizing
    "encoded_size",
    "encoded_bits",
    "field_sizes",
    # Version
    "__version__",
]
