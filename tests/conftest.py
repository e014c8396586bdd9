"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from bitschema import BYTE, EMBED, Node, bitfield, branch, sequence


@pytest.fixture
def tagged_record() -> Node:
    """Record whose body layout is selected by a leading type byte."""
    return sequence(
        ("type", BYTE),
        (
            EMBED,
            branch(
                "type",
                {
                    0: sequence(("a", BYTE), ("b", BYTE), ("c", BYTE)),
                    1: sequence(("big", bitfield(24))),
                },
            ),
        ),
    )


@pytest.fixture
def sample_payload() -> bytes:
    """Sample binary payload for testing."""
    return bytes([0x00, 0xC0, 0xFF, 0xEE])
