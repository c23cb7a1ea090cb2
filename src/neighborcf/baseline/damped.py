from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from ..errors import NoRatingsError, UnknownItemError
from ..store import RatingStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemMeanModel:
    """Damped mean rating per item, plus the global mean it was damped toward."""

    means: Mapping[int, float]
    global_mean: float
    damping: float

    def __contains__(self, item_id: object) -> bool:
        return item_id in self.means

    def __len__(self) -> int:
        return len(self.means)

    def mean(self, item_id: int) -> float:
        try:
            return self.means[int(item_id)]
        except KeyError:
            raise UnknownItemError(int(item_id)) from None


def build_damped_item_means(store: RatingStore, *, damping: float = 0.0) -> ItemMeanModel:
    """Compute damped item means in one pass over the store.

    mean(i) = (sum_i + damping * global_mean) / (count_i + damping)

    `damping` is the number of imaginary global-mean ratings blended into every
    item; 0 gives the raw per-item mean.
    """
    damping = float(damping)
    if damping < 0.0:
        raise ValueError(f"damping must be >= 0, got {damping}")

    item_sums: dict[int, float] = {}
    item_counts: dict[int, int] = {}
    global_sum = 0.0
    global_count = 0

    with store.query_all() as ratings:
        for r in ratings:
            item_sums[r.item_id] = item_sums.get(r.item_id, 0.0) + r.value
            item_counts[r.item_id] = item_counts.get(r.item_id, 0) + 1
            global_sum += r.value
            global_count += 1

    if global_count == 0:
        raise NoRatingsError("cannot compute item means from an empty rating store")

    global_mean = global_sum / global_count
    means = {
        item_id: (total + damping * global_mean) / (item_counts[item_id] + damping)
        for item_id, total in item_sums.items()
        if item_counts[item_id] > 0
    }

    logger.info(
        "Damped item means: items=%d ratings=%d global_mean=%.4f damping=%.2f",
        len(means),
        global_count,
        global_mean,
        damping,
    )
    return ItemMeanModel(means=MappingProxyType(means), global_mean=global_mean, damping=damping)


class ItemMeanScorer:
    """Scores every candidate with its damped mean, regardless of the user."""

    def __init__(self, model: ItemMeanModel) -> None:
        self.model = model

    @classmethod
    def from_store(cls, store: RatingStore, *, damping: float = 0.0) -> "ItemMeanScorer":
        return cls(build_damped_item_means(store, damping=damping))

    def score(self, user_id: int, items: Iterable[int]) -> dict[int, float]:
        return {int(item): self.model.mean(item) for item in items}
