from __future__ import annotations


class NeighborCFError(Exception):
    """Base class for scoring and model-building failures."""


class EmptyVectorError(NeighborCFError, ValueError):
    """Raised when a mean is requested over a vector with no entries."""


class NoRatingsError(NeighborCFError, ValueError):
    """Raised when a model is built from a store with no rating observations."""


class UnknownUserError(NeighborCFError, KeyError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"Unknown userId: {user_id}")
        self.user_id = user_id


class UnknownItemError(NeighborCFError, KeyError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"Unknown itemId: {item_id}")
        self.item_id = item_id
