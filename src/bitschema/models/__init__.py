"""Pydantic record modeling for bitschema.

This module provides the BaseRecord class and field utilities for binding
validated record models to binary layouts.
"""

from __future__ import annotations

from .base import BaseRecord
from .fields import FixedBytes, UInt

__all__ = [
    "BaseRecord",
    "UInt",
    "FixedBytes",
]
