"""Item-item collaborative filtering.

Offline: mean-center each item's rating vector and store positive cosine
similarities between every pair of items.
Online: predict a user's rating as the item's mean plus the similarity-weighted
average of the user's mean-offset ratings on the item's nearest rated neighbors.
"""
from __future__ import annotations

from .model import ItemItemModel, SimilarItem, build_item_item_model
from .scorer import ItemItemScorer

__all__ = ["ItemItemModel", "ItemItemScorer", "SimilarItem", "build_item_item_model"]
