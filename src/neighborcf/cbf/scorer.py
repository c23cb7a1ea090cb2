from __future__ import annotations

import logging
from typing import Iterable, Literal

from .. import vectors
from ..errors import UnknownUserError
from ..store import RatingStore
from .profile import build_threshold_profile, build_weighted_profile
from .tfidf import TFIDFModel


logger = logging.getLogger(__name__)


class TFIDFItemScorer:
    """Scores items by cosine similarity between a user's tag profile and each item's tag vector.

    Items without tags (or a profile with no signal) score 0.0.
    """

    def __init__(
        self,
        model: TFIDFModel,
        store: RatingStore,
        *,
        profile: Literal["weighted", "threshold"] = "weighted",
        threshold: float = 3.5,
    ) -> None:
        if profile not in ("weighted", "threshold"):
            raise ValueError(f"profile must be 'weighted' or 'threshold', got {profile!r}")
        self.model = model
        self.store = store
        self.profile = profile
        self.threshold = float(threshold)

    def user_profile(self, user_id: int) -> dict[str, float]:
        history = self.store.query_by_user(user_id)
        if not history:
            raise UnknownUserError(int(user_id))
        if self.profile == "threshold":
            return build_threshold_profile(history, self.model, threshold=self.threshold)
        return build_weighted_profile(history, self.model)

    def score(self, user_id: int, items: Iterable[int]) -> dict[int, float]:
        profile = self.user_profile(user_id)
        logger.debug("TFIDF profile for user=%d has %d tags", int(user_id), len(profile))
        return {
            int(item): vectors.nan_to_zero(vectors.cosine(profile, self.model.get_item_vector(item)))
            for item in items
        }
