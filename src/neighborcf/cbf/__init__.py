"""Content-based scoring from TF-IDF tag vectors."""
from __future__ import annotations

from .profile import ItemVectorProvider, build_threshold_profile, build_weighted_profile
from .scorer import TFIDFItemScorer
from .tfidf import TFIDFModel

__all__ = [
    "ItemVectorProvider",
    "TFIDFItemScorer",
    "TFIDFModel",
    "build_threshold_profile",
    "build_weighted_profile",
]
