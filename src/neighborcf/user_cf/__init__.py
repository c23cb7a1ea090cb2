"""User-user collaborative filtering (similar rating patterns).

Core idea:
- Mean-center every user's ratings so cosine similarity compares rating patterns,
  not rating scales
- Rank all other users by cosine similarity to the target user
- Predict an item as the target's mean plus the similarity-weighted average of
  the centered ratings from the closest positive neighbors who rated it
"""
from __future__ import annotations

from .scorer import SimilarUser, UserUserScorer

__all__ = ["SimilarUser", "UserUserScorer"]
