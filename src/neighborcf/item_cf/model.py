from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from types import MappingProxyType
from typing import Mapping

from .. import vectors
from ..errors import NoRatingsError, UnknownItemError
from ..store import RatingStore


logger = logging.getLogger(__name__)

_EMPTY: Mapping[int, float] = MappingProxyType({})


@dataclass(frozen=True)
class SimilarItem:
    itemId: int
    similarity: float


@dataclass(frozen=True)
class ItemItemModel:
    """Item means and the symmetric, positive-only item similarity graph."""

    item_means: Mapping[int, float]
    neighbors: Mapping[int, Mapping[int, float]]

    def has_item(self, item_id: int) -> bool:
        return int(item_id) in self.item_means

    def mean(self, item_id: int) -> float:
        try:
            return self.item_means[int(item_id)]
        except KeyError:
            raise UnknownItemError(int(item_id)) from None

    def get_neighbors(self, item_id: int) -> Mapping[int, float]:
        """Neighbor item -> similarity for `item_id` (empty if it has none)."""
        if int(item_id) not in self.item_means:
            raise UnknownItemError(int(item_id))
        return self.neighbors.get(int(item_id), _EMPTY)

    def similar_items(self, item_id: int, *, top_n: int = 10) -> list[SimilarItem]:
        ranked = sorted(self.get_neighbors(item_id).items(), key=lambda e: e[1], reverse=True)
        return [SimilarItem(itemId=int(j), similarity=float(s)) for j, s in ranked[: int(top_n)]]


def _centered_item_vectors(store: RatingStore) -> tuple[dict[int, float], dict[int, dict[int, float]]]:
    """Group the store by item; return item means and mean-centered user->rating vectors."""
    by_item: dict[int, dict[int, float]] = {}
    with store.query_all() as ratings:
        for r in ratings:
            by_item.setdefault(r.item_id, {})[r.user_id] = r.value

    means: dict[int, float] = {}
    centered: dict[int, dict[int, float]] = {}
    for item_id, ratings_vec in by_item.items():
        item_mean = vectors.mean(ratings_vec)
        means[item_id] = item_mean
        centered[item_id] = vectors.center(ratings_vec, item_mean)
    return means, centered


def build_item_item_model(store: RatingStore) -> ItemItemModel:
    """Build the item-item model from every rating in the store.

    Each unordered pair is compared once. Only strictly positive similarities are
    kept, and they are written under both items so the graph stays symmetric.
    Pairs whose similarity is undefined (a zero-norm centered vector) are dropped.
    """
    means, centered = _centered_item_vectors(store)
    if not means:
        raise NoRatingsError("cannot build an item-item model from an empty rating store")

    norms = {item_id: vectors.norm(vec) for item_id, vec in centered.items()}
    neighbors: dict[int, dict[int, float]] = {item_id: {} for item_id in centered}

    n_pairs = 0
    for i, j in combinations(sorted(centered), 2):
        n_pairs += 1
        denom = norms[i] * norms[j]
        if denom == 0.0:
            continue
        sim = vectors.clamp_unit(vectors.dot(centered[i], centered[j]) / denom)
        if sim > 0.0:
            neighbors[i][j] = sim
            neighbors[j][i] = sim

    n_edges = sum(len(v) for v in neighbors.values()) // 2
    logger.info("ItemItem model: items=%d pairs=%d positive_edges=%d", len(means), n_pairs, n_edges)

    return ItemItemModel(
        item_means=MappingProxyType(means),
        neighbors=MappingProxyType({k: MappingProxyType(v) for k, v in neighbors.items()}),
    )
