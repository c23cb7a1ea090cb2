from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import neighborcf` works from a source checkout without installing.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from neighborcf.store import FrameRatingStore  # noqa: E402


@pytest.fixture
def small_store() -> FrameRatingStore:
    """The five-rating example: i1 = (5+4+1)/3, i2 = (3+2)/2."""
    return FrameRatingStore.from_ratings([(1, 1, 5.0), (1, 2, 3.0), (2, 1, 4.0), (2, 2, 2.0), (3, 1, 1.0)])


@pytest.fixture
def neighborhood_store() -> FrameRatingStore:
    """Four users over four items.

    Centered vectors:
      u1: i1=+2, i2=0, i3=-2                  (mean 3)
      u2: i1=+.5, i2=-.5, i3=-1.5, i4=+1.5    (mean 3.5)
      u3: i1=+1, i2=0, i3=-1, i4=0            (mean 4)
      u4: i1=-1.5, i2=+.5, i3=+2.5, i4=-1.5   (mean 2.5)
    """
    return FrameRatingStore.from_ratings(
        [
            (1, 1, 5.0), (1, 2, 3.0), (1, 3, 1.0),
            (2, 1, 4.0), (2, 2, 3.0), (2, 3, 2.0), (2, 4, 5.0),
            (3, 1, 5.0), (3, 2, 4.0), (3, 3, 3.0), (3, 4, 4.0),
            (4, 1, 1.0), (4, 2, 3.0), (4, 3, 5.0), (4, 4, 1.0),
        ]
    )


@pytest.fixture
def single_neighbor_store() -> FrameRatingStore:
    """Item 3 has exactly one positively similar rater (u2) for target u1.

    u3 rates opposite to u1, so it is a negative neighbor. On the item side,
    i3's only positive neighbor is i1.
    """
    return FrameRatingStore.from_ratings(
        [
            (1, 1, 5.0), (1, 2, 1.0),
            (2, 1, 4.0), (2, 2, 2.0), (2, 3, 5.0),
            (3, 1, 1.0), (3, 2, 5.0), (3, 3, 2.0),
        ]
    )
