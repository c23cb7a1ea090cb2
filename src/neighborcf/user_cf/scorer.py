from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .. import vectors
from ..errors import UnknownItemError, UnknownUserError
from ..store import RatingStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarUser:
    userId: int
    similarity: float
    common_rated: int


class UserUserScorer:
    """User-user CF scorer computed directly from the rating store.

    Nothing is cached between calls: each request rebuilds every user's centered
    rating vector with one scan of the store.
    """

    def __init__(
        self,
        store: RatingStore,
        *,
        neighborhood_size: int = 30,
        min_neighbors: int = 2,
    ) -> None:
        if int(neighborhood_size) <= 0:
            raise ValueError(f"neighborhood_size must be > 0, got {neighborhood_size}")
        if int(min_neighbors) < 0:
            raise ValueError(f"min_neighbors must be >= 0, got {min_neighbors}")
        self.store = store
        self.neighborhood_size = int(neighborhood_size)
        self.min_neighbors = int(min_neighbors)

    def _user_vectors(self) -> dict[int, dict[int, float]]:
        """Raw item->rating vector for every user, in store id order."""
        by_user: dict[int, dict[int, float]] = {uid: {} for uid in self.store.distinct_user_ids()}
        with self.store.query_all() as ratings:
            for r in ratings:
                by_user.setdefault(r.user_id, {})[r.item_id] = r.value
        return by_user

    def _ranked_neighbors(
        self,
        user_id: int,
        centered: dict[int, dict[int, float]],
    ) -> list[tuple[int, float]]:
        target = centered[user_id]
        sims = [
            (other, vectors.nan_to_zero(vectors.cosine(target, vec)))
            for other, vec in centered.items()
            if other != user_id
        ]
        # Stable: equal similarities keep store order.
        sims.sort(key=lambda e: e[1], reverse=True)
        return sims

    def _prepare(self, user_id: int) -> tuple[float, dict[int, dict[int, float]], list[tuple[int, float]]]:
        uid = int(user_id)
        raw = self._user_vectors()
        if not raw.get(uid):
            raise UnknownUserError(uid)

        target_mean = vectors.mean(raw[uid])
        centered = {u: vectors.center(vec) for u, vec in raw.items() if vec}
        return target_mean, centered, self._ranked_neighbors(uid, centered)

    def similar_users(self, user_id: int, *, top_n: int = 10) -> list[SimilarUser]:
        """Most similar other users by centered-cosine similarity."""
        _, centered, ranked = self._prepare(user_id)
        target_items = set(centered[int(user_id)])
        return [
            SimilarUser(userId=int(other), similarity=float(sim), common_rated=len(target_items & set(centered[other])))
            for other, sim in ranked[: int(top_n)]
        ]

    def score(self, user_id: int, items: Iterable[int]) -> dict[int, float]:
        """Predict ratings for `items`; items with too few contributing neighbors are left out."""
        items = [int(i) for i in items]
        for item in items:
            if not self.store.has_item(item):
                raise UnknownItemError(item)

        target_mean, centered, ranked = self._prepare(user_id)

        out: dict[int, float] = {}
        for item in items:
            weighted = 0.0
            sim_sum = 0.0
            contributions = 0
            for neighbor, sim in ranked:
                if contributions >= self.neighborhood_size or sim <= 0.0:
                    break
                neighbor_ratings = centered[neighbor]
                if item in neighbor_ratings:
                    weighted += sim * neighbor_ratings[item]
                    sim_sum += sim
                    contributions += 1

            if contributions < self.min_neighbors or contributions == 0:
                continue
            out[item] = target_mean + weighted / sim_sum

        logger.debug("UserUser scored user=%d requested=%d scored=%d", int(user_id), len(items), len(out))
        return out
