"""
Roster Kernel: Identifier Generation

Opaque, process-unique string ids for new entities.
"""

from __future__ import annotations

import random
import time
import uuid

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def make_id() -> str:
    """
    Return a new opaque id.

    Uses the OS cryptographic random source (uuid4). If the platform has
    no such source, falls back to a base-36 millisecond timestamp plus a
    random suffix.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        millis = int(time.time() * 1000)
        suffix = "".join(random.choice(_ALPHABET) for _ in range(6))
        return f"{_base36(millis)}-{suffix}"
