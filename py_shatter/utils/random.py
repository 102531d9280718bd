"""
Random number generation utilities.

Every shatterer draws jitter from a NumPy ``Generator``. This module keeps
one process-wide default generator, spawns independent generators from it
and turns user-facing seeds (ints or strings) into reproducible generators.
"""

import hashlib
from typing import Optional, Union

import numpy as np

Seed = Union[int, str, None]

# Global generator instance
_rng: Optional[np.random.Generator] = None


def seed_to_int(seed: Union[int, str]) -> int:
    """Map a string seed to a stable 64-bit integer; ints pass through."""
    if isinstance(seed, int):
        return seed
    digest = hashlib.sha256(str(seed).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "little")


def make_rng(seed: Seed = None) -> np.random.Generator:
    """
    Create a new generator.

    Args:
        seed: None for OS entropy, or an int/str for reproducible output

    Returns:
        numpy Generator
    """
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(seed_to_int(seed))


def set_random_seed(seed: Seed) -> None:
    """
    Reset the default generator with a new seed.

    Args:
        seed: Seed to use
    """
    global _rng
    _rng = make_rng(seed)


def get_rng() -> np.random.Generator:
    """
    Get the default generator, creating it on first use.

    Returns:
        numpy Generator
    """
    global _rng
    if _rng is None:
        from ..config import settings
        _rng = make_rng(settings.seed)
    return _rng


def spawn_rng() -> np.random.Generator:
    """
    Create an independent generator seeded from the default one.

    Returns:
        numpy Generator that shares no state with the default generator
    """
    return np.random.default_rng(get_rng().integers(2**63))
