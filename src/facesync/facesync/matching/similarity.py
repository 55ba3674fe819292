from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.constants import DEGENERATE_EPSILON
from ..core.exceptions import DegenerateInputError, DimensionMismatchError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``, in [-1, 1]."""

    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.size != vb.size:
        raise DimensionMismatchError(f"Vector dimensions differ: {va.size} != {vb.size}")

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a <= DEGENERATE_EPSILON or norm_b <= DEGENERATE_EPSILON:
        raise DegenerateInputError("Cosine similarity is undefined for a zero vector")

    score = float(np.dot(va, vb)) / (norm_a * norm_b)
    return min(1.0, max(-1.0, score))
