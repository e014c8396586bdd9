"""Sibling context lookups shared by the decoder and encoder.

The sibling context is the record of the nearest enclosing sequence. On
decode it holds the fields decoded so far; on encode it is the complete
record supplied by the caller. Both directions resolve a reference the same
way: by field name, to an integer.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from ..exceptions import PathElement, UnresolvedReferenceError
from .schema import Length

Path = Tuple[PathElement, ...]


def resolve_reference(siblings: Optional[Mapping[str, Any]], name: str, path: Path) -> int:
    """Look up the integer value of sibling field ``name``.

    Args:
        siblings: Record of the enclosing sequence, or None outside any sequence
        name: Field name to look up
        path: Path of the node doing the lookup (for error messages)

    Returns:
        Integer value of the field

    Raises:
        UnresolvedReferenceError: If there is no enclosing record, the field is
            absent, or its value is not an integer
    """
    if siblings is None:
        raise UnresolvedReferenceError(
            f"reference to {name!r} used outside of any sequence", path
        )
    if name not in siblings or siblings[name] is None:
        raise UnresolvedReferenceError(
            f"no field named {name!r} in the enclosing sequence", path
        )

    value = siblings[name]
    if not isinstance(value, int):
        raise UnresolvedReferenceError(
            f"field {name!r} must hold an integer, got {type(value).__name__} {value!r}",
            path,
        )
    return value


def resolve_length(length: Length, siblings: Optional[Mapping[str, Any]], path: Path) -> int:
    """Resolve a literal length or a sibling reference to a count."""
    if isinstance(length, str):
        return resolve_reference(siblings, length, path)
    return length
