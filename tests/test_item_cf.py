from __future__ import annotations

import math

import numpy as np
import pytest

from neighborcf.errors import NoRatingsError, UnknownItemError, UnknownUserError
from neighborcf.item_cf import ItemItemScorer, build_item_item_model
from neighborcf.store import FrameRatingStore


def test_item_means_are_raw_means(neighborhood_store: FrameRatingStore) -> None:
    model = build_item_item_model(neighborhood_store)
    assert dict(model.item_means) == pytest.approx({1: 3.75, 2: 3.25, 3: 2.75, 4: 10.0 / 3.0})


def test_similarity_graph_is_symmetric_and_positive(neighborhood_store: FrameRatingStore) -> None:
    model = build_item_item_model(neighborhood_store)
    assert set(model.neighbors) == {1, 2, 3, 4}
    n_edges = 0
    for i, nbrs in model.neighbors.items():
        assert i not in nbrs
        for j, sim in nbrs.items():
            n_edges += 1
            assert 0.0 < sim <= 1.0
            assert model.neighbors[j][i] == pytest.approx(sim)
    assert n_edges > 0

    # i1/i3 and i3/i4 are negatively correlated and must not be stored.
    assert 3 not in model.get_neighbors(1)
    assert 4 not in model.get_neighbors(3)


def test_model_is_read_only(neighborhood_store: FrameRatingStore) -> None:
    model = build_item_item_model(neighborhood_store)
    with pytest.raises(TypeError):
        model.neighbors[1][2] = 0.5  # type: ignore[index]
    with pytest.raises(TypeError):
        model.item_means[1] = 0.0  # type: ignore[index]


def test_similar_items_ranked_descending(neighborhood_store: FrameRatingStore) -> None:
    model = build_item_item_model(neighborhood_store)
    sims = model.similar_items(4)
    assert [s.itemId for s in sims] == [1, 2]
    assert sims[0].similarity > sims[1].similarity
    with pytest.raises(UnknownItemError):
        model.similar_items(99)


def test_score_uses_item_mean_offsets(neighborhood_store: FrameRatingStore) -> None:
    model = build_item_item_model(neighborhood_store)
    s1 = model.neighbors[4][1]
    s2 = model.neighbors[4][2]
    # User 1 rated i1=5 (mean 3.75) and i2=3 (mean 3.25).
    expected = 10.0 / 3.0 + (s1 * 1.25 + s2 * -0.25) / (s1 + s2)

    scorer = ItemItemScorer(model, neighborhood_store)
    assert scorer.score(1, [4]) == pytest.approx({4: expected})

    top1 = ItemItemScorer(model, neighborhood_store, neighborhood_size=1)
    assert top1.score(1, [4]) == pytest.approx({4: 10.0 / 3.0 + 1.25})


def test_single_qualifying_neighbor_still_scores(single_neighbor_store: FrameRatingStore) -> None:
    scorer = ItemItemScorer.from_store(single_neighbor_store)
    assert scorer.model.get_neighbors(3).keys() == {1}
    scores = scorer.score(1, [3])
    assert scores == pytest.approx({3: 3.5 + 5.0 / 3.0})


def test_no_rated_neighbors_yields_nan_by_default(single_neighbor_store: FrameRatingStore) -> None:
    scorer = ItemItemScorer.from_store(single_neighbor_store)
    scores = scorer.score(1, [2])
    assert set(scores) == {2}
    assert math.isnan(scores[2])


def test_min_neighbors_policy_omits_thin_items(single_neighbor_store: FrameRatingStore) -> None:
    model = build_item_item_model(single_neighbor_store)
    assert ItemItemScorer(model, single_neighbor_store, min_neighbors=1).score(1, [2, 3]).keys() == {3}
    assert ItemItemScorer(model, single_neighbor_store, min_neighbors=2).score(1, [2, 3]) == {}


def test_unknown_user_and_item_raise(neighborhood_store: FrameRatingStore) -> None:
    scorer = ItemItemScorer.from_store(neighborhood_store)
    with pytest.raises(UnknownUserError):
        scorer.score(99, [1])
    with pytest.raises(UnknownItemError):
        scorer.score(1, [99])


def test_empty_store_raises_no_ratings() -> None:
    with pytest.raises(NoRatingsError):
        build_item_item_model(FrameRatingStore.from_ratings([]))


def test_tied_neighbors_keep_lower_item_id() -> None:
    # Items 1 and 2 are equally similar to item 10; u1 rated i1 above its mean and i2 at it.
    store = FrameRatingStore.from_ratings(
        [
            (1, 1, 5.0), (1, 2, 3.0), (1, 10, 5.0),
            (2, 1, 3.0), (2, 2, 5.0), (2, 10, 5.0),
            (3, 1, 1.0), (3, 2, 3.0), (3, 10, 1.0),
            (4, 1, 3.0), (4, 2, 1.0), (4, 10, 1.0),
        ]
    )
    model = build_item_item_model(store)
    nbrs = model.get_neighbors(10)
    assert list(nbrs) == [1, 2]
    assert nbrs[1] == nbrs[2]

    top1 = ItemItemScorer(model, store, neighborhood_size=1)
    assert top1.score(1, [10]) == pytest.approx({10: 3.0 + 2.0})


def test_similarities_stay_within_unit_interval() -> None:
    rng = np.random.default_rng(7)
    rows = [
        (u, i, float(rng.choice([0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0, 4.5, 5.0])))
        for u in range(1, 30)
        for i in range(1, 15)
        if rng.random() < 0.6
    ]
    model = build_item_item_model(FrameRatingStore.from_ratings(rows))
    for nbrs in model.neighbors.values():
        for sim in nbrs.values():
            assert 0.0 < sim <= 1.0


def test_rated_items_missing_from_model_are_ignored(neighborhood_store: FrameRatingStore) -> None:
    model = build_item_item_model(neighborhood_store)
    newer = FrameRatingStore.from_ratings(
        [(r.user_id, r.item_id, r.value) for u in neighborhood_store.distinct_user_ids() for r in neighborhood_store.query_by_user(u)]
        + [(1, 99, 4.0)]
    )
    expected = ItemItemScorer(model, neighborhood_store).score(1, [4])
    assert ItemItemScorer(model, newer).score(1, [4]) == pytest.approx(expected)
