from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import TfidfVectorizer


logger = logging.getLogger(__name__)

_MULTISPACE_RE = re.compile(r"\s+")
_EMPTY: Mapping[str, float] = MappingProxyType({})


def normalize_tag(tag: str) -> str:
    """Normalize a free-text tag: lowercase, strip, collapse spaces."""
    if tag is None or pd.isna(tag):
        return ""
    tag = str(tag).lower().strip()
    return _MULTISPACE_RE.sub(" ", tag)


def _identity(tags: list[str]) -> list[str]:
    return tags


@dataclass(frozen=True)
class TFIDFModel:
    """Unit-length TF-IDF tag vectors per item.

    Every tag application counts once toward the tag frequency, so a tag applied
    three times to a movie weighs more than one applied once.
    """

    item_vectors: Mapping[int, Mapping[str, float]]

    @classmethod
    def from_tags(cls, tags_df: pd.DataFrame) -> "TFIDFModel":
        """Build from an (itemId, tag) frame of tag applications."""
        missing = [c for c in ("itemId", "tag") if c not in tags_df.columns]
        if missing:
            raise ValueError(f"tags missing required columns: {missing}")

        tags = tags_df[["itemId", "tag"]].copy()
        tags["tag_norm"] = tags["tag"].apply(normalize_tag)
        tags = tags[tags["tag_norm"] != ""]
        if tags.empty:
            logger.info("TFIDF model: no tags; all item vectors are empty")
            return cls(item_vectors=MappingProxyType({}))

        docs = tags.groupby("itemId", sort=True)["tag_norm"].apply(list)
        item_ids = docs.index.astype("int64").tolist()

        vectorizer = TfidfVectorizer(
            analyzer=_identity, token_pattern=None, lowercase=False, norm="l2", smooth_idf=False
        )
        matrix = vectorizer.fit_transform(docs.tolist()).tocsr()
        vocab = np.asarray(vectorizer.get_feature_names_out())

        item_vectors: dict[int, Mapping[str, float]] = {}
        for row, item_id in enumerate(item_ids):
            start, end = matrix.indptr[row], matrix.indptr[row + 1]
            cols = matrix.indices[start:end]
            vals = matrix.data[start:end]
            item_vectors[int(item_id)] = MappingProxyType(
                {str(vocab[c]): float(v) for c, v in zip(cols, vals)}
            )

        logger.info("TFIDF model: items=%d tags=%d", len(item_vectors), len(vocab))
        return cls(item_vectors=MappingProxyType(item_vectors))

    def get_item_vector(self, item_id: int) -> Mapping[str, float]:
        """Tag -> weight for `item_id`; empty for items without tags."""
        return self.item_vectors.get(int(item_id), _EMPTY)
