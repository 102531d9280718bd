"""Helpers for arrays handed out in immutable records."""

import numpy as np


def freeze(*arrays: np.ndarray) -> None:
    """Mark arrays read-only in place."""
    for arr in arrays:
        arr.setflags(write=False)
