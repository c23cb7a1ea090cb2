from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from neighborcf.data import Rating
from neighborcf.store import CsvRatingStore, FrameRatingStore


RATINGS = [(3, 10, 4.0), (1, 10, 5.0), (1, 11, 2.5), (2, 12, 1.0), (3, 11, 3.0)]


def _write_csv(path: Path) -> Path:
    df = pd.DataFrame(RATINGS, columns=["userId", "movieId", "rating"])
    df["timestamp"] = 0
    df.to_csv(path, index=False)
    return path


def test_frame_store_queries() -> None:
    store = FrameRatingStore.from_ratings(RATINGS)
    assert len(store) == 5
    assert store.distinct_user_ids() == [1, 2, 3]
    assert store.distinct_item_ids() == [10, 11, 12]
    assert store.query_by_user(1) == [Rating(1, 10, 5.0), Rating(1, 11, 2.5)]
    assert store.query_by_item(11) == [Rating(1, 11, 2.5), Rating(3, 11, 3.0)]
    assert store.query_by_user(99) == []
    assert store.has_user(3) and not store.has_user(4)
    assert store.has_item(12) and not store.has_item(13)


def test_frame_store_full_scan_keeps_row_order() -> None:
    store = FrameRatingStore.from_ratings([Rating(*r) for r in RATINGS])
    with store.query_all() as ratings:
        scanned = [(r.user_id, r.item_id, r.value) for r in ratings]
    assert scanned == RATINGS


def test_frame_store_requires_columns() -> None:
    with pytest.raises(ValueError):
        FrameRatingStore(pd.DataFrame({"userId": [1], "rating": [3.0]}))


def test_csv_store_matches_frame_store(tmp_path: Path) -> None:
    csv_store = CsvRatingStore(_write_csv(tmp_path / "ratings.csv"), chunksize=2)
    frame_store = FrameRatingStore.from_ratings(RATINGS)

    with csv_store.query_all() as ratings:
        assert list(ratings) == [Rating(*r) for r in RATINGS]
    assert csv_store.distinct_user_ids() == frame_store.distinct_user_ids()
    assert csv_store.distinct_item_ids() == frame_store.distinct_item_ids()
    assert csv_store.query_by_user(3) == frame_store.query_by_user(3)
    assert csv_store.query_by_item(10) == frame_store.query_by_item(10)
    assert csv_store.has_item(12) and not csv_store.has_user(7)


def test_csv_store_releases_reader_on_error(tmp_path: Path) -> None:
    store = CsvRatingStore(_write_csv(tmp_path / "ratings.csv"), chunksize=1)
    with pytest.raises(RuntimeError, match="stop"):
        with store.query_all() as ratings:
            next(ratings)
            raise RuntimeError("stop")

    # A fresh scan starts from the top.
    with store.query_all() as ratings:
        assert next(ratings) == Rating(3, 10, 4.0)


def test_csv_store_validates_arguments(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        CsvRatingStore(tmp_path / "missing.csv")
    with pytest.raises(ValueError):
        CsvRatingStore(_write_csv(tmp_path / "ratings.csv"), chunksize=0)
