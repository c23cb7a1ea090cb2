"""Sparse vector helpers over plain mappings (key -> value).

Vectors are ordinary dicts keyed by item IDs, user IDs or tags. Keys missing from
a vector are treated as zero, so all operations only touch the stored entries.
"""
from __future__ import annotations

import math
from typing import Hashable, Iterable, Literal, Mapping, TypeVar

import numpy as np

from .data import Rating
from .errors import EmptyVectorError


K = TypeVar("K", bound=Hashable)


def _values(a: Mapping[K, float]) -> np.ndarray:
    return np.fromiter(a.values(), dtype=np.float64, count=len(a))


def dot(a: Mapping[K, float], b: Mapping[K, float]) -> float:
    """Sum of products over the keys present in both vectors."""
    if len(b) < len(a):
        a, b = b, a
    return float(sum(v * b[k] for k, v in a.items() if k in b))


def norm(a: Mapping[K, float]) -> float:
    """Euclidean norm; 0.0 for an empty vector."""
    if not a:
        return 0.0
    return float(np.linalg.norm(_values(a)))


def mean(a: Mapping[K, float]) -> float:
    if not a:
        raise EmptyVectorError("mean of an empty vector is undefined")
    return float(np.mean(_values(a)))


def cosine(a: Mapping[K, float], b: Mapping[K, float]) -> float:
    """Cosine similarity of two sparse vectors.

    Returns NaN when either vector has zero norm (empty, or all entries zero after
    centering). Callers decide how to treat that case, usually via `nan_to_zero`.
    """
    denom = norm(a) * norm(b)
    if denom == 0.0:
        return math.nan
    return clamp_unit(dot(a, b) / denom)


def clamp_unit(x: float) -> float:
    """Clip a similarity into [-1, 1]; rounding can land a hair outside."""
    return max(-1.0, min(1.0, x))


def nan_to_zero(x: float) -> float:
    return 0.0 if math.isnan(x) else x


def center(a: Mapping[K, float], reference: float | None = None) -> dict[K, float]:
    """Subtract `reference` (default: the vector's own mean) from every entry."""
    ref = mean(a) if reference is None else float(reference)
    return {k: v - ref for k, v in a.items()}


def rating_vector(
    ratings: Iterable[Rating],
    *,
    key: Literal["item", "user"] = "item",
) -> dict[int, float]:
    """Build a rating vector from observations.

    key="item" gives item_id -> value (a user's vector); key="user" gives
    user_id -> value (an item's vector). Repeated keys keep the last value seen.
    """
    if key == "item":
        return {r.item_id: r.value for r in ratings}
    if key == "user":
        return {r.user_id: r.value for r in ratings}
    raise ValueError(f"key must be 'item' or 'user', got {key!r}")
