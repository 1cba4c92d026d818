"""Globally unique identifiers for traces and spans."""

import secrets
import time
import uuid


def new_id() -> str:
    """
    Generate a time-ordered random identifier.

    The leading 48 bits are the Unix time in milliseconds, the rest is random,
    with RFC 4122 version (7) and variant bits set. Processes generate ids
    independently, so uniqueness rests on the random part, not on a counter.
    """
    millis = time.time_ns() // 1_000_000
    value = (millis & 0xFFFF_FFFF_FFFF) << 80 | secrets.randbits(80)
    value &= ~(0xF << 76)
    value |= 0x7 << 76
    value &= ~(0x3 << 62)
    value |= 0x2 << 62
    return str(uuid.UUID(int=value))
