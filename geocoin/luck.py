"""Deterministic pseudo-random oracle keyed by strings.

``luck(key)`` always returns the same float in ``[0, 1)`` for the same key,
in every process and on every platform. The key is hashed with SHA-256 and
the digest seeds a numpy generator, whose first draw is the result.
"""

import hashlib
from functools import lru_cache

import numpy as np

__all__ = ["luck"]


@lru_cache(maxsize=4096)
def luck(key: str) -> float:
    """Return a reproducible pseudo-random number in ``[0, 1)`` for key."""
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    seed = np.frombuffer(digest, dtype=np.uint32)
    rng = np.random.default_rng(seed)
    return float(rng.random())
