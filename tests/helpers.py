"""Builders for guest account test data."""

import json

from guestlog.store.snowflake import EPOCH_OFFSET_MS, TIMESTAMP_SHIFT

SECRET = "test-secret"


def make_id(created_at: int) -> int:
    """Build an identifier that decodes to ``created_at`` seconds."""
    return (created_at * 1000 - EPOCH_OFFSET_MS) << TIMESTAMP_SHIFT


def account_line(created_at: int, **extra) -> str:
    """Compact JSON line for a guest account created at ``created_at``."""
    record = {"user": {"id_str": str(make_id(created_at))}, **extra}
    return json.dumps(record, separators=(",", ":"))
