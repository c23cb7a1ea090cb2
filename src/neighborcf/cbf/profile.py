from __future__ import annotations

from typing import Mapping, Protocol, Sequence

from .. import vectors
from ..data import Rating


class ItemVectorProvider(Protocol):
    def get_item_vector(self, item_id: int) -> Mapping[str, float]:
        ...


def build_weighted_profile(ratings: Sequence[Rating], model: ItemVectorProvider) -> dict[str, float]:
    """Accumulate tag weights scaled by how far each rating sits from the user's mean.

    Items rated above the user's mean push their tags up, items rated below push
    them down. Raises `EmptyVectorError` for an empty history.
    """
    user_mean = vectors.mean({i: r.value for i, r in enumerate(ratings)})

    profile: dict[str, float] = {}
    for r in ratings:
        deviation = r.value - user_mean
        for tag, weight in model.get_item_vector(r.item_id).items():
            profile[tag] = profile.get(tag, 0.0) + deviation * weight
    return profile


def build_threshold_profile(
    ratings: Sequence[Rating],
    model: ItemVectorProvider,
    *,
    threshold: float = 3.5,
) -> dict[str, float]:
    """Sum the tag vectors of every item rated at or above `threshold`."""
    profile: dict[str, float] = {}
    for r in ratings:
        if r.value < threshold:
            continue
        for tag, weight in model.get_item_vector(r.item_id).items():
            profile[tag] = profile.get(tag, 0.0) + weight
    return profile
