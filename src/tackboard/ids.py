"""Time-ordered card identifiers.

Identifiers are 26 characters of Crockford base32: a 48-bit millisecond
timestamp followed by 80 random bits. Sorting identifiers as strings
sorts cards by creation time.
"""

from __future__ import annotations

import os
import threading
import time

CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ID_LENGTH = 26

_RANDOM_BITS = 80
_lock = threading.Lock()
_last_timestamp = -1
_last_random = 0


def _encode(value: int, length: int) -> str:
    chars = []
    for _ in range(length):
        value, index = divmod(value, 32)
        chars.append(CROCKFORD_ALPHABET[index])
    return "".join(reversed(chars))


def new_id() -> str:
    """Return a fresh identifier.

    Identifiers created within the same millisecond increment the random
    part, so ids from one process are strictly increasing.
    """
    global _last_timestamp, _last_random

    with _lock:
        timestamp = int(time.time() * 1000)
        if timestamp <= _last_timestamp:
            timestamp = _last_timestamp
            random_part = (_last_random + 1) % (1 << _RANDOM_BITS)
        else:
            random_part = int.from_bytes(os.urandom(10), "big")
        _last_timestamp = timestamp
        _last_random = random_part

    value = (timestamp << _RANDOM_BITS) | random_part
    return _encode(value, ID_LENGTH)
