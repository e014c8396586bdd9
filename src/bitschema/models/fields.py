"""Field type helpers for record models.

This module provides convenience functions that bound Pydantic fields to
what a layout can hold. Encoding clips integers silently; these helpers let
a record model reject out-of-range values before they reach the encoder.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo


def UInt(*, bits: int, **kwargs: Any) -> FieldInfo:
    """Create an unsigned integer field that fits in ``bits`` bits.

    Args:
        bits: Width of the matching bitfield()/widefield() node
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo with ge=0 and le=2**bits - 1

    Example:
        >>> class Instrument(BaseRecord):
        ...     volume: int = UInt(bits=2)
        ...     checksum: int = UInt(bits=128)
    """
    if bits < 1:
        raise ValueError(f"bits must be positive, got {bits}")
    return cast(FieldInfo, Field(ge=0, le=(1 << bits) - 1, **kwargs))


def FixedBytes(*, length: int, **kwargs: Any) -> FieldInfo:
    """Create a fixed-length bytes field.

    Args:
        length: Exact length in bytes
        **kwargs: Additional Field() arguments

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Message(BaseRecord):
        ...     payload: bytes = FixedBytes(length=16)
    """
    return cast(FieldInfo, Field(min_length=length, max_length=length, **kwargs))
