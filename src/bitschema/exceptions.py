"""Exception hierarchy for bitschema.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BitSchemaError for easy catching of any bitschema-specific error.
"""

from __future__ import annotations

from typing import Sequence, Union

PathElement = Union[str, int]


def format_path(path: Sequence[PathElement]) -> str:
    """Render a field path as ``header.items[2].kind``.

    Args:
        path: Field names and array indices from the root node

    Returns:
        Dotted path string (empty for the root)
    """
    rendered = ""
    for element in path:
        if isinstance(element, int):
            rendered += f"[{element}]"
        elif rendered:
            rendered += f".{element}"
        else:
            rendered = element
    return rendered


class BitSchemaError(Exception):
    """Base exception for all bitschema errors."""

    pass


class SchemaError(BitSchemaError):
    """Raised when a schema is malformed.

    Examples:
        - A sequence slot that is neither a (name, node) pair nor padding
        - A bit field wider than 31 bits
        - A negative or non-integer length
        - An unknown text encoding
    """

    pass


class CodecError(BitSchemaError):
    """Base class for failures while decoding or encoding a value.

    Attributes:
        path: Field names and array indices leading to the failing node
    """

    def __init__(self, message: str, path: Sequence[PathElement] = ()) -> None:
        self.path = tuple(path)
        self.detail = message
        location = format_path(self.path)
        super().__init__(f"{location}: {message}" if location else message)


class DecodeError(CodecError):
    """Raised when binary data cannot be decoded.

    Examples:
        - Invalid bytes for a text encoding
        - Trailing data in strict mode
    """

    pass


class TruncatedInputError(DecodeError):
    """Raised when a read extends past the end of the buffer."""

    pass


class EncodeError(CodecError):
    """Raised when a value cannot be encoded.

    Examples:
        - Characters that the text encoding cannot represent
    """

    pass


class TypeMismatchError(CodecError):
    """Raised when a value's shape does not fit its node.

    Examples:
        - A non-mapping given to a sequence
        - A non-list given to an array
        - None for a required field
        - An embedded slot that does not yield a record (decode)
    """

    pass


class LengthMismatchError(EncodeError):
    """Raised when an array's element count differs from its resolved length."""

    pass


class UnresolvedReferenceError(CodecError):
    """Raised when a sibling reference is missing or not an integer."""

    pass


class NoMatchingBranchError(CodecError):
    """Raised when a discriminant has no matching case and no else case."""

    pass


class MisalignedAccessError(CodecError):
    """Raised when a byte slice or text field starts mid-byte."""

    pass


class ScopeError(CodecError):
    """Raised when a branch is evaluated outside any sequence."""

    pass
