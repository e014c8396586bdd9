"""JSON conversion for decoded values.

Decoded values are JSON-compatible except for byte slices, which are written
as ``{"__bytes__": "<hex>"}`` objects and turned back into bytes on read.

A record whose only field is named ``__bytes__`` or ``__record__`` would read
back as one of these wrappers, so it is written as
``{"__record__": {...}}`` instead.
"""

from __future__ import annotations

from typing import Any

BYTES_KEY = "__bytes__"
RECORD_KEY = "__record__"


def to_json_value(value: Any) -> Any:
    """Convert a decoded value into something json.dumps() accepts."""
    if isinstance(value, dict):
        converted = {key: to_json_value(item) for key, item in value.items()}
        if set(value) in ({BYTES_KEY}, {RECORD_KEY}):
            return {RECORD_KEY: converted}
        return converted
    if isinstance(value, list):
        return [to_json_value(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return {BYTES_KEY: bytes(value).hex()}
    return value


def from_json_value(value: Any) -> Any:
    """Convert a json.loads() result back into an encodable value."""
    if isinstance(value, dict):
        if set(value) == {BYTES_KEY}:
            return bytes.fromhex(value[BYTES_KEY])
        if set(value) == {RECORD_KEY}:
            return {key: from_json_value(item) for key, item in value[RECORD_KEY].items()}
        return {key: from_json_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [from_json_value(item) for item in value]
    return value
