"""Read-only rating stores.

Two backends share the `RatingStore` contract:
- `FrameRatingStore`: an in-memory pandas frame with per-user/per-item row indexes
- `CsvRatingStore`: streams a ratings CSV from disk in chunks on every scan

`query_all()` is a context manager: the stream it yields is only valid inside the
`with` block, and the underlying reader is closed on every exit path.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import ContextManager, Iterable, Iterator

import numpy as np
import pandas as pd

from .data import RATING_COLUMNS, Rating


logger = logging.getLogger(__name__)


def _rows_to_ratings(df: pd.DataFrame) -> Iterator[Rating]:
    for user_id, item_id, value in df[list(RATING_COLUMNS)].itertuples(index=False, name=None):
        yield Rating(user_id=int(user_id), item_id=int(item_id), value=float(value))


class RatingStore(ABC):
    """Queryable collection of rating observations.

    Subclasses only have to provide `query_all`; the attribute queries fall back to
    a full scan.
    """

    @abstractmethod
    def query_all(self) -> ContextManager[Iterator[Rating]]:
        """Scoped full scan over every observation."""

    def query_by_user(self, user_id: int) -> list[Rating]:
        uid = int(user_id)
        with self.query_all() as ratings:
            return [r for r in ratings if r.user_id == uid]

    def query_by_item(self, item_id: int) -> list[Rating]:
        iid = int(item_id)
        with self.query_all() as ratings:
            return [r for r in ratings if r.item_id == iid]

    def distinct_user_ids(self) -> list[int]:
        with self.query_all() as ratings:
            return sorted({r.user_id for r in ratings})

    def distinct_item_ids(self) -> list[int]:
        with self.query_all() as ratings:
            return sorted({r.item_id for r in ratings})

    def has_user(self, user_id: int) -> bool:
        return int(user_id) in set(self.distinct_user_ids())

    def has_item(self, item_id: int) -> bool:
        return int(item_id) in set(self.distinct_item_ids())


class FrameRatingStore(RatingStore):
    """Rating store over an in-memory (userId, itemId, rating) DataFrame."""

    def __init__(self, ratings: pd.DataFrame) -> None:
        missing = [c for c in RATING_COLUMNS if c not in ratings.columns]
        if missing:
            raise ValueError(f"ratings missing required columns: {missing}")

        df = ratings[list(RATING_COLUMNS)].dropna().reset_index(drop=True)
        self._df = df.astype({"userId": "int64", "itemId": "int64", "rating": "float64"})

        # Row positions per id; keeps original row order within each group.
        self._user_rows: dict[int, np.ndarray] = {
            int(k): v for k, v in sorted(self._df.groupby("userId").indices.items())
        }
        self._item_rows: dict[int, np.ndarray] = {
            int(k): v for k, v in sorted(self._df.groupby("itemId").indices.items())
        }
        logger.debug(
            "FrameRatingStore: ratings=%d users=%d items=%d",
            len(self._df),
            len(self._user_rows),
            len(self._item_rows),
        )

    @classmethod
    def from_ratings(cls, ratings: Iterable[Rating | tuple[int, int, float]]) -> "FrameRatingStore":
        rows = [
            (r.user_id, r.item_id, r.value) if isinstance(r, Rating) else (int(r[0]), int(r[1]), float(r[2]))
            for r in ratings
        ]
        df = pd.DataFrame(rows, columns=list(RATING_COLUMNS))
        return cls(df)

    def __len__(self) -> int:
        return int(len(self._df))

    @contextmanager
    def query_all(self) -> Iterator[Iterator[Rating]]:
        stream = _rows_to_ratings(self._df)
        try:
            yield stream
        finally:
            stream.close()

    def query_by_user(self, user_id: int) -> list[Rating]:
        rows = self._user_rows.get(int(user_id))
        if rows is None:
            return []
        return list(_rows_to_ratings(self._df.iloc[rows]))

    def query_by_item(self, item_id: int) -> list[Rating]:
        rows = self._item_rows.get(int(item_id))
        if rows is None:
            return []
        return list(_rows_to_ratings(self._df.iloc[rows]))

    def distinct_user_ids(self) -> list[int]:
        return list(self._user_rows)

    def distinct_item_ids(self) -> list[int]:
        return list(self._item_rows)

    def has_user(self, user_id: int) -> bool:
        return int(user_id) in self._user_rows

    def has_item(self, item_id: int) -> bool:
        return int(item_id) in self._item_rows


class CsvRatingStore(RatingStore):
    """Rating store that re-reads a ratings CSV in chunks for every scan.

    Nothing but the distinct-id sets is kept in memory; those are computed on the
    first request and cached.
    """

    def __init__(self, path: Path, *, item_column: str = "movieId", chunksize: int = 100_000) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"ratings file not found: {self.path}")
        if chunksize <= 0:
            raise ValueError(f"chunksize must be > 0, got {chunksize}")
        self.item_column = str(item_column)
        self.chunksize = int(chunksize)
        self._user_ids: list[int] | None = None
        self._item_ids: list[int] | None = None

    @contextmanager
    def query_all(self) -> Iterator[Iterator[Rating]]:
        reader = pd.read_csv(
            self.path,
            usecols=["userId", self.item_column, "rating"],
            dtype={"userId": "int64", self.item_column: "int64", "rating": "float64"},
            chunksize=self.chunksize,
        )
        with reader:
            logger.debug("Opened chunked scan over %s (chunksize=%d)", self.path, self.chunksize)
            yield self._stream(reader)

    def _stream(self, reader: Iterable[pd.DataFrame]) -> Iterator[Rating]:
        for chunk in reader:
            chunk = chunk.rename(columns={self.item_column: "itemId"})
            yield from _rows_to_ratings(chunk)

    def _load_ids(self) -> None:
        users: set[int] = set()
        items: set[int] = set()
        with self.query_all() as ratings:
            for r in ratings:
                users.add(r.user_id)
                items.add(r.item_id)
        self._user_ids = sorted(users)
        self._item_ids = sorted(items)

    def distinct_user_ids(self) -> list[int]:
        if self._user_ids is None:
            self._load_ids()
        return list(self._user_ids or [])

    def distinct_item_ids(self) -> list[int]:
        if self._item_ids is None:
            self._load_ids()
        return list(self._item_ids or [])
