"""Base record class binding a Pydantic model to a schema.

This module provides the BaseRecord class for callers who want validated,
typed objects instead of the plain dicts that decode() returns.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..codec import decode, encode
from ..codec.schema import Node, Sequence
from ..exceptions import DecodeError, SchemaError

R = TypeVar("R", bound="BaseRecord")


class BaseRecord(BaseModel):
    """Base class for records described by a bitschema layout.

    Subclasses declare their fields with Pydantic and attach the layout as a
    ClassVar. Nested sequences map onto nested BaseRecord (or plain dict)
    fields; embedded fields appear at the top level.

    Example:
        >>> from typing import ClassVar, List
        >>> class Header(BaseRecord):
        ...     count: int = UInt(bits=8)
        ...     items: List[int]
        ...
        ...     bitschema_layout: ClassVar[Node] = sequence(
        ...         ("count", BYTE), ("items", array("count", NIBBLE))
        ...     )
        >>> header = Header.from_bytes(bytes([2, 0x12]))
        >>> header.to_bytes()
        b'\\x02\\x12'

    Attributes:
        bitschema_layout: Sequence node describing the binary layout
    """

    model_config = ConfigDict(
        # Strict validation by default
        strict=False,
        # Allow arbitrary types (for future extensibility)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    bitschema_layout: ClassVar[Optional[Node]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Check the layout as soon as a subclass is created."""
        super().__init_subclass__(**kwargs)

        layout = getattr(cls, "bitschema_layout", None)
        if layout is not None and not isinstance(layout, Sequence):
            raise SchemaError(
                f"{cls.__name__}.bitschema_layout must be a sequence, "
                f"got {type(layout).__name__}"
            )

    @classmethod
    def layout(cls) -> Node:
        """Return the layout, failing if the class never declared one."""
        if cls.bitschema_layout is None:
            raise SchemaError(f"{cls.__name__} has no bitschema_layout")
        return cls.bitschema_layout

    @classmethod
    def from_bytes(cls: Type[R], data: bytes, strict: bool = False) -> R:
        """Decode ``data`` with the class layout and validate it into a record.

        Raises:
            DecodeError: If decoding fails or the decoded values do not validate
        """
        values = decode(cls.layout(), data, strict=strict)
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise DecodeError(f"Failed to construct {cls.__name__}: {e}") from e

    def to_bytes(self) -> bytes:
        """Encode this record with the class layout.

        Raises:
            EncodeError: If the record does not fit the layout
        """
        return encode(type(self).layout(), self.model_dump())
