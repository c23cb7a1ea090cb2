from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rating:
    user_id: int
    item_id: int
    value: float


@dataclass(frozen=True)
class RawRatingsData:
    ratings: pd.DataFrame
    tags: pd.DataFrame


RATING_COLUMNS: Tuple[str, ...] = ("userId", "itemId", "rating")

REQUIRED_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "ratings": RATING_COLUMNS,
    "tags": ("itemId", "tag"),
}


def _with_item_column(df: pd.DataFrame) -> pd.DataFrame:
    # MovieLens files name the item column movieId.
    if "itemId" not in df.columns and "movieId" in df.columns:
        df = df.rename(columns={"movieId": "itemId"})
    return df


def load_ratings_csv(path: Path) -> pd.DataFrame:
    """Read a ratings CSV into a (userId, itemId, rating) frame."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"ratings file not found: {path}")
    df = _with_item_column(pd.read_csv(path))
    missing = [c for c in RATING_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} missing columns: {missing}")
    if df[list(RATING_COLUMNS)].isna().any().any():
        raise ValueError(f"{path.name} contains empty userId/itemId/rating values")
    return df[list(RATING_COLUMNS)].astype({"userId": "int64", "itemId": "int64", "rating": "float64"})


def load_tags_csv(path: Path) -> pd.DataFrame:
    """Read a tag-application CSV into an (itemId, tag) frame; empty if the file is absent."""
    path = Path(path)
    if not path.exists():
        logger.info("No tags file at %s; tag vectors will be empty", path)
        return pd.DataFrame({"itemId": pd.Series(dtype="int64"), "tag": pd.Series(dtype="string")})
    df = _with_item_column(pd.read_csv(path, dtype={"tag": "string"}))
    missing = [c for c in REQUIRED_COLUMNS["tags"] if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} missing columns: {missing}")
    df = df.dropna(subset=["itemId", "tag"])
    return df[["itemId", "tag"]].astype({"itemId": "int64"})


def load_raw_data(
    raw_dir: Path,
    *,
    ratings_csv: Path | None = None,
    tags_csv: Path | None = None,
) -> RawRatingsData:
    """Load `ratings.csv` (required) and `tags.csv` (optional) from a directory.

    `ratings_csv` / `tags_csv` override the file locations, e.g. with the paths
    resolved by `ProjectPaths`.
    """
    raw_dir = Path(raw_dir)
    data = RawRatingsData(
        ratings=load_ratings_csv(Path(ratings_csv) if ratings_csv is not None else raw_dir / "ratings.csv"),
        tags=load_tags_csv(Path(tags_csv) if tags_csv is not None else raw_dir / "tags.csv"),
    )
    validate_schema(data)
    return data


def validate_schema(data: RawRatingsData) -> None:
    """Validate that required columns exist and basic constraints hold."""
    for name, cols in REQUIRED_COLUMNS.items():
        df = getattr(data, name)
        missing = [c for c in cols if c not in df.columns]
        if missing:
            raise ValueError(f"{name} missing columns: {missing}")

    ratings = data.ratings
    if ratings.empty:
        raise ValueError("ratings contains no rows")

    if not np.isfinite(ratings["rating"].to_numpy(dtype="float64")).all():
        raise ValueError("ratings contains non-finite rating values")

    # Not an error: vectors keep the last value seen for a pair.
    dupes = int(ratings.duplicated(subset=["userId", "itemId"]).sum())
    if dupes:
        logger.warning("ratings has %d duplicate (userId, itemId) rows; last value wins", dupes)
