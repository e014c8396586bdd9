"""Schema-driven binary encoder.

This module provides the encode() function that walks a schema tree against
a structured value and packs it into bytes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..exceptions import (
    EncodeError,
    LengthMismatchError,
    MisalignedAccessError,
    NoMatchingBranchError,
    SchemaError,
    ScopeError,
    TypeMismatchError,
)
from .bitpack import BitPacker
from .context import Path, resolve_length, resolve_reference
from .schema import (
    Array,
    BitField,
    Branch,
    ByteSlice,
    EmbeddedSlot,
    Length,
    NamedSlot,
    Node,
    Padding,
    PaddingSlot,
    Sequence,
    Text,
    WideField,
)

logger = logging.getLogger(__name__)


def encode(schema: Node, value: Any) -> bytes:
    """Encode a value according to a schema.

    Sequences read their fields from a mapping. Unlike decoding, the whole
    record is available up front, so array lengths and branch discriminants
    are looked up in the caller's record by field name.

    Integer fields are clipped to their width: a 4-bit field given 0b10111
    is written as 0b0111. Array length mismatches are errors.

    Args:
        schema: Schema node built with the bitschema builders
        value: Value to encode (mapping for sequences, list for arrays, ...)

    Returns:
        Packed bytes; a final partial byte is zero-filled

    Raises:
        SchemaError: If schema is not a schema node
        EncodeError: If the value does not fit the schema

    Examples:
        ```python
        from bitschema import bitfield, encode, sequence

        layout = sequence(("a", bitfield(4)), ("b", bitfield(2)), ("c", bitfield(2)))
        encode(layout, {"a": 0b1101, "b": 0b10, "c": 0b01})
        # b'\\xd9'
        ```
    """
    if not isinstance(schema, Node):
        raise SchemaError(f"Expected a schema node, got {type(schema).__name__}")

    packer = BitPacker()
    logger.debug("Encoding %s from %s", schema.kind, type(value).__name__)

    _encode_node(schema, value, packer, None, ())

    encoded = packer.to_bytes()
    logger.debug("Encoded %s into %d bits", schema.kind, packer.bit_length())
    return encoded


def _encode_node(
    node: Node,
    value: Any,
    packer: BitPacker,
    siblings: Optional[Mapping[str, Any]],
    path: Path,
) -> None:
    """Encode a single node at the end of the packer.

    Args:
        node: Node to encode
        value: Value supplied for this node
        packer: BitPacker to write to
        siblings: Record of the enclosing sequence, if any
        path: Field path of this node
    """
    if isinstance(node, Sequence):
        _encode_sequence(node, value, packer, path)
        return

    if isinstance(node, Array):
        if not isinstance(value, (list, tuple)):
            raise TypeMismatchError(
                f"array expects a list, got {type(value).__name__}", path
            )
        length = resolve_length(node.length, siblings, path)
        if length != len(value):
            raise LengthMismatchError(
                f"expected array with length {length}, got {len(value)}", path
            )
        for index, element in enumerate(value):
            _encode_node(node.element, element, packer, None, path + (index,))
        return

    if isinstance(node, Branch):
        if siblings is None:
            raise ScopeError("branch can only be used inside a sequence", path)
        discriminant = resolve_reference(siblings, node.discriminant, path)
        selected = node.select(discriminant)
        if selected is None:
            raise NoMatchingBranchError(
                f"no case matches {node.discriminant}={discriminant} and no else case", path
            )
        _encode_node(selected, value, packer, siblings, path)
        return

    if isinstance(node, (BitField, WideField)):
        if value is None:
            raise TypeMismatchError(f"missing value for required {node.kind}", path)
        if not isinstance(value, int):
            raise TypeMismatchError(
                f"{node.kind} expects an integer, got {type(value).__name__}", path
            )
        packer.write_uint(value, node.width)
        return

    if isinstance(node, ByteSlice):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeMismatchError(
                f"byteslice expects bytes, got {type(value).__name__}", path
            )
        _write_slice(node, node.length, bytes(value), packer, siblings, path)
        return

    if isinstance(node, Text):
        if not isinstance(value, str):
            raise TypeMismatchError(f"text expects a str, got {type(value).__name__}", path)
        try:
            raw = value.encode(node.encoding)
        except UnicodeEncodeError as e:
            raise EncodeError(f"cannot encode text as {node.encoding}: {e}", path) from e
        _write_slice(node, node.length, raw, packer, siblings, path)
        return

    if isinstance(node, Padding):
        packer.write_zeros(node.width)
        return

    raise SchemaError(f"Unsupported schema node {type(node).__name__}")


def _encode_sequence(node: Sequence, value: Any, packer: BitPacker, path: Path) -> None:
    """Encode the slots of a sequence from a record.

    The record is the sibling context for every slot. An embedded slot is
    handed the whole record so it can pick out its own fields.
    """
    if not isinstance(value, Mapping):
        raise TypeMismatchError(
            f"sequence expects a mapping, got {type(value).__name__}", path
        )

    for slot in node.slots:
        if isinstance(slot, NamedSlot):
            _encode_node(slot.node, value.get(slot.name), packer, value, path + (slot.name,))
        elif isinstance(slot, EmbeddedSlot):
            _encode_node(slot.node, value, packer, value, path)
        elif isinstance(slot, PaddingSlot):
            packer.write_zeros(slot.node.width)
        else:
            raise SchemaError(f"Unsupported sequence slot {type(slot).__name__}")


def _write_slice(
    node: Node,
    length: Length,
    raw: bytes,
    packer: BitPacker,
    siblings: Optional[Mapping[str, Any]],
    path: Path,
) -> None:
    if packer.bit_offset:
        raise MisalignedAccessError(
            f"{node.kind} must start on a byte boundary, bit offset is {packer.bit_offset}",
            path,
        )
    # The resolved length is checked for availability only; the caller's
    # bytes are written as given.
    resolve_length(length, siblings, path)
    packer.write_bytes(raw)
