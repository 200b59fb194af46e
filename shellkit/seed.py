"""Deterministic seeds for pseudorandom generators."""

from __future__ import annotations

import hashlib
import time


def random_seed_from_string(base: str | None = None) -> int:
    """Derive an integer seed from a string (default: current unix time).

    Uses the first 7 hex digits of the MD5 digest, so the result is always
    below 16**7 and identical across runs and platforms for the same base.
    """
    if base is None:
        base = str(int(time.time()))
    if not isinstance(base, str):
        raise TypeError(f"seed base must be str, not {type(base).__name__}")
    return int(hashlib.md5(base.encode()).hexdigest()[:7], 16)
