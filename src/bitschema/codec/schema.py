"""Schema nodes and the builder functions that construct them.

A schema is a tree of immutable nodes describing the bit-level layout of a
binary record. Nodes are built once through the builders below, which
validate their shape, and can then be shared by any number of decode and
encode calls.

Example:
    >>> from bitschema import BYTE, EMBED, array, bitfield, branch, padding, sequence
    >>> header = sequence(
    ...     ("count", BYTE),
    ...     ("items", array("count", bitfield(4))),
    ...     padding(4),
    ... )
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Tuple, Union

from ..exceptions import SchemaError

# Literal count or the name of an earlier sibling field
Length = Union[int, str]

MAX_BITFIELD_WIDTH = 31


class Node:
    """Base class for all schema nodes."""

    kind: ClassVar[str] = "node"


@dataclass(frozen=True)
class NamedSlot:
    """Sequence slot whose value is stored under ``name``."""

    name: str
    node: Node


@dataclass(frozen=True)
class EmbeddedSlot:
    """Sequence slot whose record is merged into the parent record."""

    node: Node


@dataclass(frozen=True)
class PaddingSlot:
    """Sequence slot that only occupies bits. ``label`` is informational."""

    node: Padding
    label: Optional[str] = None


Slot = Union[NamedSlot, EmbeddedSlot, PaddingSlot]


@dataclass(frozen=True)
class Sequence(Node):
    """Ordered fields; decodes to a dict."""

    kind: ClassVar[str] = "sequence"
    slots: Tuple[Slot, ...]


@dataclass(frozen=True)
class Array(Node):
    """Homogeneous repetition of ``element``."""

    kind: ClassVar[str] = "array"
    length: Length
    element: Node


@dataclass(frozen=True)
class Branch(Node):
    """Node selected by the integer value of an earlier sibling field."""

    kind: ClassVar[str] = "branch"
    discriminant: str
    cases: Tuple[Tuple[int, Node], ...]
    else_case: Optional[Node] = None

    def select(self, value: int) -> Optional[Node]:
        """Return the node for ``value``, falling back to the else case."""
        for case_value, node in self.cases:
            if case_value == value:
                return node
        return self.else_case


@dataclass(frozen=True)
class BitField(Node):
    """Unsigned integer of 1 to 31 bits."""

    kind: ClassVar[str] = "bitfield"
    width: int


@dataclass(frozen=True)
class WideField(Node):
    """Unsigned integer of any width, held as an arbitrary-precision int."""

    kind: ClassVar[str] = "widefield"
    width: int


@dataclass(frozen=True)
class ByteSlice(Node):
    """Raw bytes starting on a byte boundary."""

    kind: ClassVar[str] = "byteslice"
    length: Length


@dataclass(frozen=True)
class Text(Node):
    """Byte slice converted to text with a named character encoding."""

    kind: ClassVar[str] = "text"
    length: Length
    encoding: str = "utf-8"


@dataclass(frozen=True)
class Padding(Node):
    """Bits skipped on decode and written as zeros on encode."""

    kind: ClassVar[str] = "padding"
    width: int


class _EmbedMarker:
    """Slot name requesting that a child record be merged into its parent."""

    def __repr__(self) -> str:
        return "EMBED"


EMBED = _EmbedMarker()


def _check_width(width: Any, what: str) -> int:
    if isinstance(width, bool) or not isinstance(width, int):
        raise SchemaError(f"{what} width must be an integer, got {width!r}")
    if width < 1:
        raise SchemaError(f"{what} width must be at least 1 bit, got {width}")
    return width


def _check_length(length: Any, what: str) -> Length:
    if isinstance(length, str):
        if not length:
            raise SchemaError(f"{what} length reference must be a non-empty field name")
        return length
    if isinstance(length, bool) or not isinstance(length, int):
        raise SchemaError(
            f"{what} length must be an integer or a sibling field name, got {length!r}"
        )
    if length < 0:
        raise SchemaError(f"{what} length must not be negative, got {length}")
    return length


def _check_node(node: Any, what: str) -> Node:
    if not isinstance(node, Node):
        raise SchemaError(f"{what} must be a schema node, got {type(node).__name__}")
    return node


def _make_slot(index: int, slot: Any) -> Slot:
    if isinstance(slot, Padding):
        return PaddingSlot(slot)

    if isinstance(slot, Node):
        raise SchemaError(
            f"Sequence slot {index}: {slot.kind} node has no name; "
            f"only padding may be used without a name"
        )

    if not isinstance(slot, (tuple, list)):
        raise SchemaError(
            f"Sequence slot {index}: expected a (name, node) pair or padding, "
            f"got {type(slot).__name__}"
        )
    if len(slot) != 2:
        raise SchemaError(
            f"Sequence slot {index}: expected a (name, node) pair, got {len(slot)} items"
        )

    name, node = slot
    _check_node(node, f"Sequence slot {index} child")

    if isinstance(node, Padding):
        label = name if isinstance(name, str) else None
        return PaddingSlot(node, label)
    if name is EMBED:
        return EmbeddedSlot(node)
    if isinstance(name, str) and name:
        return NamedSlot(name, node)

    raise SchemaError(
        f"Sequence slot {index}: name must be a non-empty string or EMBED, got {name!r}"
    )


def sequence(*slots: Any) -> Sequence:
    """Build an ordered record of fields.

    Each slot is a ``(name, node)`` pair, an ``(EMBED, node)`` pair, or a bare
    padding node.

    Args:
        *slots: Slots in layout order

    Returns:
        Sequence node

    Raises:
        SchemaError: If a slot is not a named pair, an embed pair or padding
    """
    return Sequence(tuple(_make_slot(index, slot) for index, slot in enumerate(slots)))


def array(length: Length, element: Node) -> Array:
    """Build an array of ``length`` elements.

    Args:
        length: Element count, or the name of an earlier sibling holding it
        element: Node describing each element

    Returns:
        Array node
    """
    return Array(_check_length(length, "Array"), _check_node(element, "Array element"))


def branch(
    discriminant: str, cases: Mapping[int, Node], else_case: Optional[Node] = None
) -> Branch:
    """Build a node selected by an earlier sibling's value.

    Args:
        discriminant: Name of the earlier sibling field to switch on
        cases: Mapping from discriminant value to node
        else_case: Node used when no case matches (optional)

    Returns:
        Branch node

    Raises:
        SchemaError: If the discriminant, a case key or a case node is invalid
    """
    if not isinstance(discriminant, str) or not discriminant:
        raise SchemaError(f"Branch discriminant must be a field name, got {discriminant!r}")
    if not isinstance(cases, Mapping):
        raise SchemaError(f"Branch cases must be a mapping, got {type(cases).__name__}")

    checked = []
    for value, node in cases.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise SchemaError(f"Branch case key must be an integer, got {value!r}")
        checked.append((value, _check_node(node, f"Branch case {value}")))

    if else_case is not None:
        _check_node(else_case, "Branch else case")

    return Branch(discriminant, tuple(checked), else_case)


def bitfield(width: int = 1) -> BitField:
    """Build an unsigned integer field of 1 to 31 bits.

    Raises:
        SchemaError: If width is outside 1..31; use widefield() for wider fields
    """
    _check_width(width, "Bit field")
    if width > MAX_BITFIELD_WIDTH:
        raise SchemaError(
            f"Bit field width must be at most {MAX_BITFIELD_WIDTH} bits, got {width}. "
            f"Use widefield() for wider values."
        )
    return BitField(width)


def widefield(width: int) -> WideField:
    """Build an unsigned integer field of any width."""
    return WideField(_check_width(width, "Wide field"))


def byteslice(length: Length) -> ByteSlice:
    """Build a raw byte slice of ``length`` bytes."""
    return ByteSlice(_check_length(length, "Byte slice"))


def text(length: Length, encoding: str = "utf-8") -> Text:
    """Build a text field stored as ``length`` encoded bytes.

    Raises:
        SchemaError: If the encoding is not known to the codecs registry or
            is not a str/bytes codec (hex, base64, rot13, ...)
    """
    try:
        codecs.lookup(encoding)
    except (LookupError, TypeError) as err:
        raise SchemaError(f"Unknown text encoding {encoding!r}") from err
    try:
        "".encode(encoding).decode(encoding)
    except LookupError as err:
        raise SchemaError(f"{encoding!r} is not a text encoding") from err
    return Text(_check_length(length, "Text"), encoding)


def padding(width: int) -> Padding:
    """Build ``width`` bits of padding."""
    return Padding(_check_width(width, "Padding"))


BIT = bitfield(1)
NIBBLE = bitfield(4)
BYTE = bitfield(8)
