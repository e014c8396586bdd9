"""Schema size calculation utilities.

This module provides functions to calculate the encoded size of a schema
without encoding anything. Only layouts whose size does not depend on the
data have a static size.
"""

from __future__ import annotations

from typing import Dict, Optional

from ..codec.schema import (
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
)
from ..exceptions import SchemaError


def encoded_bits(schema: Node) -> int:
    """Calculate the encoded size of a schema in bits.

    Args:
        schema: Schema node to measure

    Returns:
        Size in bits

    Raises:
        SchemaError: If the size depends on decoded data (length references,
            branches whose cases differ in size)

    Example:
        >>> encoded_bits(sequence(("a", bitfield(4)), ("b", BYTE)))
        12
    """
    if isinstance(schema, Sequence):
        return sum(encoded_bits(slot.node) for slot in schema.slots)

    if isinstance(schema, Array):
        if isinstance(schema.length, str):
            raise SchemaError(f"Array length depends on field {schema.length!r}")
        return schema.length * encoded_bits(schema.element)

    if isinstance(schema, Branch):
        candidates = [node for _, node in schema.cases]
        if schema.else_case is not None:
            candidates.append(schema.else_case)
        sizes = {encoded_bits(node) for node in candidates}
        if len(sizes) != 1:
            raise SchemaError(
                f"Branch on {schema.discriminant!r} has cases of different sizes"
            )
        return sizes.pop()

    if isinstance(schema, (BitField, WideField, Padding)):
        return schema.width

    if isinstance(schema, (ByteSlice, Text)):
        if isinstance(schema.length, str):
            raise SchemaError(f"{schema.kind} length depends on field {schema.length!r}")
        return schema.length * 8

    raise SchemaError(f"Unsupported schema node {type(schema).__name__}")


def encoded_size(schema: Node) -> int:
    """Calculate the encoded size of a schema in bytes.

    Args:
        schema: Schema node to measure

    Returns:
        Size in bytes (rounded up to nearest byte)

    Raises:
        SchemaError: If the size depends on decoded data
    """
    return (encoded_bits(schema) + 7) // 8


def field_sizes(schema: Sequence) -> Dict[str, Optional[int]]:
    """Get the size in bits of each field of a sequence.

    Fields of embedded sequences are listed as top-level fields, the way they
    appear in the decoded record. Padding is not a field and is left out.

    Args:
        schema: Sequence to analyze

    Returns:
        Dictionary mapping field names to their size in bits, or None where
        the size depends on decoded data

    Raises:
        SchemaError: If schema is not a sequence

    Example:
        >>> field_sizes(sequence(("count", BYTE), ("items", array("count", BIT))))
        {'count': 8, 'items': None}
    """
    if not isinstance(schema, Sequence):
        raise SchemaError(f"field_sizes() needs a sequence, got {type(schema).__name__}")

    sizes: Dict[str, Optional[int]] = {}
    for slot in schema.slots:
        if isinstance(slot, PaddingSlot):
            continue
        if isinstance(slot, EmbeddedSlot) and isinstance(slot.node, Sequence):
            sizes.update(field_sizes(slot.node))
            continue

        name = slot.name if isinstance(slot, NamedSlot) else f"({slot.node.kind})"
        try:
            sizes[name] = encoded_bits(slot.node)
        except SchemaError:
            sizes[name] = None
    return sizes
