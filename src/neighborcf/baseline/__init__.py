"""Non-personalized damped item-mean baseline."""
from __future__ import annotations

from .damped import ItemMeanModel, ItemMeanScorer, build_damped_item_means

__all__ = ["ItemMeanModel", "ItemMeanScorer", "build_damped_item_means"]
