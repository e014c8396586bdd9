"""Schema-driven binary decoder.

This module provides the decode() function that walks a schema tree against
a byte buffer and produces the structured value it describes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..exceptions import (
    DecodeError,
    MisalignedAccessError,
    NoMatchingBranchError,
    SchemaError,
    ScopeError,
    TruncatedInputError,
    TypeMismatchError,
)
from .bitpack import BitUnpacker
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


def decode(schema: Node, data: bytes, strict: bool = False) -> Any:
    """Decode binary data according to a schema.

    Decoding starts at the first bit of ``data`` with no sibling context and
    reads each node in layout order. Nothing is rewound or re-read.

    Args:
        schema: Schema node built with the bitschema builders
        data: Buffer to decode (bytes, bytearray, memoryview or list of ints)
        strict: If True, reject whole bytes left over after the schema

    Returns:
        Decoded value: dict for sequences, list for arrays, int for bit and
        wide fields, bytes for slices, str for text

    Raises:
        SchemaError: If schema is not a schema node
        DecodeError: If data is truncated or does not match the schema

    Examples:
        ```python
        from bitschema import BYTE, array, bitfield, decode, sequence

        layout = sequence(("count", BYTE), ("items", array("count", bitfield(4))))
        decode(layout, bytes([3, 0b00010000, 0b00010000]))
        # {'count': 3, 'items': [1, 0, 1]}
        ```
    """
    if not isinstance(schema, Node):
        raise SchemaError(f"Expected a schema node, got {type(schema).__name__}")

    unpacker = BitUnpacker(data)
    logger.debug("Decoding %s from %d bits", schema.kind, unpacker.bits_remaining())

    value = _decode_node(schema, unpacker, None, ())

    byte_index, bit_offset = unpacker.position()
    if strict:
        # Bits left in a partially read final byte are not trailing data
        trailing = (unpacker.bits_remaining() - (8 - bit_offset) % 8) // 8
        if trailing:
            raise DecodeError(f"{trailing} trailing bytes after decoding {schema.kind}")

    logger.debug("Decoded %s, cursor at byte %d bit %d", schema.kind, byte_index, bit_offset)
    return value


def _decode_node(
    node: Node, unpacker: BitUnpacker, siblings: Optional[Dict[str, Any]], path: Path
) -> Any:
    """Decode a single node at the current cursor.

    Args:
        node: Node to decode
        unpacker: BitUnpacker to read from
        siblings: Record of the enclosing sequence decoded so far, if any
        path: Field path of this node

    Returns:
        Decoded value
    """
    if isinstance(node, Sequence):
        return _decode_sequence(node, unpacker, path)

    if isinstance(node, Array):
        length = resolve_length(node.length, siblings, path)
        # Elements do not see the array's enclosing record
        items: List[Any] = []
        for index in range(length):
            items.append(_decode_node(node.element, unpacker, None, path + (index,)))
        return items

    if isinstance(node, Branch):
        if siblings is None:
            raise ScopeError("branch can only be used inside a sequence", path)
        value = resolve_reference(siblings, node.discriminant, path)
        selected = node.select(value)
        if selected is None:
            raise NoMatchingBranchError(
                f"no case matches {node.discriminant}={value} and no else case", path
            )
        return _decode_node(selected, unpacker, siblings, path)

    if isinstance(node, (BitField, WideField)):
        try:
            return unpacker.read_uint(node.width)
        except IndexError as e:
            raise TruncatedInputError(f"truncated {node.kind}: {e}", path) from e

    if isinstance(node, ByteSlice):
        return _read_slice(node, node.length, unpacker, siblings, path)

    if isinstance(node, Text):
        raw = _read_slice(node, node.length, unpacker, siblings, path)
        try:
            return raw.decode(node.encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid {node.encoding} text: {e}", path) from e

    if isinstance(node, Padding):
        try:
            unpacker.skip(node.width)
        except IndexError as e:
            raise TruncatedInputError(f"truncated padding: {e}", path) from e
        return None

    raise SchemaError(f"Unsupported schema node {type(node).__name__}")


def _decode_sequence(node: Sequence, unpacker: BitUnpacker, path: Path) -> Dict[str, Any]:
    """Decode the slots of a sequence into a record.

    The record doubles as the sibling context for every later slot.
    """
    record: Dict[str, Any] = {}

    for slot in node.slots:
        if isinstance(slot, NamedSlot):
            record[slot.name] = _decode_node(slot.node, unpacker, record, path + (slot.name,))
        elif isinstance(slot, EmbeddedSlot):
            embedded = _decode_node(slot.node, unpacker, record, path)
            if not isinstance(embedded, dict):
                raise TypeMismatchError(
                    f"embedded {slot.node.kind} must decode to a record, "
                    f"got {type(embedded).__name__}",
                    path,
                )
            # Later writes win on name collisions
            record.update(embedded)
        elif isinstance(slot, PaddingSlot):
            label = (slot.label,) if slot.label else ()
            _decode_node(slot.node, unpacker, record, path + label)
        else:
            raise SchemaError(f"Unsupported sequence slot {type(slot).__name__}")

    return record


def _read_slice(
    node: Node,
    length: Length,
    unpacker: BitUnpacker,
    siblings: Optional[Dict[str, Any]],
    path: Path,
) -> bytes:
    if unpacker.bit_offset:
        raise MisalignedAccessError(
            f"{node.kind} must start on a byte boundary, bit offset is {unpacker.bit_offset}",
            path,
        )
    num_bytes = resolve_length(length, siblings, path)
    try:
        return unpacker.read_bytes(num_bytes)
    except IndexError as e:
        raise TruncatedInputError(f"truncated {node.kind}: {e}", path) from e
