"""Unit tests for JSON conversion of decoded values."""

from __future__ import annotations

import json
from typing import Any

import pytest

from bitschema.cli.jsonio import from_json_value, to_json_value


def _through_json(value: Any) -> Any:
    return from_json_value(json.loads(json.dumps(to_json_value(value))))


class TestJsonValues:
    """Test to_json_value() and from_json_value()."""

    def test_bytes_as_hex(self) -> None:
        """Test byte slices are written as hex objects."""
        assert to_json_value({"payload": b"\xab\xcd"}) == {"payload": {"__bytes__": "abcd"}}
        assert from_json_value({"payload": {"__bytes__": "abcd"}}) == {"payload": b"\xab\xcd"}

    def test_nested_values(self) -> None:
        """Test lists and records are converted recursively."""
        value = {"items": [{"raw": b"\x01"}, {"raw": b""}], "count": 2}

        assert _through_json(value) == value

    @pytest.mark.parametrize(
        "record",
        [
            {"__bytes__": 5},
            {"__bytes__": b"\x00"},
            {"__record__": 1},
            {"__record__": {"__bytes__": 7}},
        ],
    )
    def test_reserved_field_names(self, record: dict) -> None:
        """Test records named like the wrappers survive a round trip."""
        assert _through_json(record) == record
        assert _through_json([record]) == [record]
