from __future__ import annotations

import os
import time
import uuid


def generate_uuid7() -> str:
    """
    Return a time-ordered UUIDv7 string.

    The first 48 bits carry the Unix time in milliseconds, so ids sort in
    creation order; the remaining bits are random and ids are never reused.
    """
    value = (int(time.time() * 1000) & ((1 << 48) - 1)) << 80
    value |= int.from_bytes(os.urandom(10), "big")
    value &= ~(0xF << 76)
    value |= 0x7 << 76
    value &= ~(0x3 << 62)
    value |= 0x2 << 62
    return str(uuid.UUID(int=value))


def uuid7_timestamp_ms(value: str) -> int:
    """Millisecond timestamp embedded in a UUIDv7 string."""
    return uuid.UUID(value).int >> 80
