"""Snowflake-style identifier decoding."""

from __future__ import annotations

import re

# Custom epoch (2010-11-04T01:42:54.657Z) in milliseconds since the Unix epoch.
EPOCH_OFFSET_MS = 1288834974657
TIMESTAMP_SHIFT = 22
MAX_ID = 2**64 - 1

_ID_PATTERN = re.compile(r"\+?[0-9]+")


def parse_id_str(value: str) -> int:
    """Parse a decimal string as an unsigned 64-bit identifier.

    Only ASCII digits with an optional leading ``+`` are accepted. Raises
    ``ValueError`` for anything else, including values above ``2**64 - 1``.
    """
    if not _ID_PATTERN.fullmatch(value):
        raise ValueError(f"invalid identifier {value!r}")
    parsed = int(value)
    if parsed > MAX_ID:
        raise ValueError(f"identifier {value!r} exceeds 64 bits")
    return parsed


def id_to_timestamp_ms(snowflake_id: int) -> int:
    """Creation time in milliseconds since the Unix epoch."""
    return (snowflake_id >> TIMESTAMP_SHIFT) + EPOCH_OFFSET_MS


def id_to_timestamp(snowflake_id: int) -> int:
    """Creation time in whole seconds since the Unix epoch (truncated)."""
    return id_to_timestamp_ms(snowflake_id) // 1000
