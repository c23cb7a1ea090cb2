from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from .errors import NeighborCFError


logger = logging.getLogger(__name__)


class ItemScorer(Protocol):
    def score(self, user_id: int, items: Iterable[int]) -> dict[int, float]:
        ...


@dataclass(frozen=True)
class ScoreRequest:
    user_id: int
    items: Sequence[int]


@dataclass(frozen=True)
class ScoreOutcome:
    """Result of one scoring request: either `scores` or the `error` that stopped it."""

    user_id: int
    scores: dict[int, float] = field(default_factory=dict)
    error: NeighborCFError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def score_batch(scorer: ItemScorer, requests: Iterable[ScoreRequest]) -> list[ScoreOutcome]:
    """Run independent requests; a failing request is reported, not raised."""
    outcomes: list[ScoreOutcome] = []
    for req in requests:
        try:
            scores = scorer.score(req.user_id, req.items)
        except NeighborCFError as exc:
            logger.warning("Scoring failed for user=%d: %s", int(req.user_id), exc)
            outcomes.append(ScoreOutcome(user_id=int(req.user_id), error=exc))
            continue
        outcomes.append(ScoreOutcome(user_id=int(req.user_id), scores=scores))
    return outcomes
