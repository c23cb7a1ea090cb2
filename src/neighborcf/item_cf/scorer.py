from __future__ import annotations

import logging
import math
from typing import Iterable

from .. import vectors
from ..errors import UnknownUserError
from ..store import RatingStore
from .model import ItemItemModel, build_item_item_model


logger = logging.getLogger(__name__)


class ItemItemScorer:
    """Item-item scorer over a prebuilt `ItemItemModel`.

    The user's ratings are re-read from the store on every call and offset by each
    item's mean (not the user's mean).

    `min_neighbors` is the smallest number of contributing neighbors an item needs
    to be scored. With the default of 0 every candidate is emitted; a candidate
    with no rated neighbors gets NaN (0 / 0).
    """

    def __init__(
        self,
        model: ItemItemModel,
        store: RatingStore,
        *,
        neighborhood_size: int = 20,
        min_neighbors: int = 0,
    ) -> None:
        if int(neighborhood_size) <= 0:
            raise ValueError(f"neighborhood_size must be > 0, got {neighborhood_size}")
        if int(min_neighbors) < 0:
            raise ValueError(f"min_neighbors must be >= 0, got {min_neighbors}")
        self.model = model
        self.store = store
        self.neighborhood_size = int(neighborhood_size)
        self.min_neighbors = int(min_neighbors)

    @classmethod
    def from_store(cls, store: RatingStore, **kwargs: int) -> "ItemItemScorer":
        return cls(build_item_item_model(store), store, **kwargs)

    def _normalized_user_ratings(self, user_id: int) -> dict[int, float]:
        history = self.store.query_by_user(user_id)
        if not history:
            raise UnknownUserError(int(user_id))
        ratings = vectors.rating_vector(history, key="item")
        # Items the model has never seen (a newer store snapshot) cannot be neighbors.
        means = self.model.item_means
        return {item: value - means[item] for item, value in ratings.items() if item in means}

    def score(self, user_id: int, items: Iterable[int]) -> dict[int, float]:
        normalized = self._normalized_user_ratings(user_id)

        out: dict[int, float] = {}
        for item in items:
            item = int(item)
            item_mean = self.model.mean(item)
            rated = [(j, s) for j, s in self.model.get_neighbors(item).items() if j in normalized]
            rated.sort(key=lambda e: e[1], reverse=True)
            rated = rated[: self.neighborhood_size]

            if len(rated) < self.min_neighbors:
                continue

            weighted = sum(s * normalized[j] for j, s in rated)
            sim_sum = sum(s for _, s in rated)
            # 0 / 0 is NaN when nothing contributed.
            offset = weighted / sim_sum if sim_sum != 0.0 else math.nan
            out[item] = item_mean + offset

        logger.debug("ItemItem scored user=%d items=%d", int(user_id), len(out))
        return out
