"""Score candidate items for one user from MovieLens-style CSV files.

Example:
    neighborcf-score --user-id 42 --items 1 50 260 --algorithm item-item --similar 5
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pandas as pd

from .baseline import ItemMeanScorer
from .cbf import TFIDFItemScorer, TFIDFModel
from .config import ScoringConfig, load_config
from .data import load_raw_data
from .item_cf import ItemItemScorer
from .paths import ProjectPaths, get_repo_root
from .scoring import ItemScorer
from .store import FrameRatingStore, RatingStore
from .user_cf import UserUserScorer
from .utils import setup_logging


logger = logging.getLogger(__name__)

ALGORITHMS = ("mean", "user-user", "item-item", "tfidf")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Neighborhood collaborative-filtering scorer")
    p.add_argument("--user-id", type=int, required=True, help="userId from ratings.csv")
    p.add_argument("--items", type=int, nargs="+", required=True, help="Candidate item ids to score")
    p.add_argument("--algorithm", choices=ALGORITHMS, default="item-item", help="Scoring algorithm")
    p.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config YAML.")
    p.add_argument("--raw-dir", type=Path, default=None, help="Override dataset.raw_dir from the config")
    p.add_argument("--similar", type=int, default=0, help="Also show N nearest users/items (user-user, item-item)")
    return p


def _resolve_config(config_path: Path) -> tuple[Path, ScoringConfig]:
    try:
        repo_root = get_repo_root()
    except FileNotFoundError:
        repo_root = Path.cwd().resolve()
    if not config_path.is_absolute() and not config_path.exists():
        config_path = repo_root / config_path
    if config_path.exists():
        return repo_root, load_config(config_path)
    logger.info("No config at %s; using defaults", config_path)
    return repo_root, ScoringConfig()


def build_scorer(algorithm: str, cfg: ScoringConfig, store: RatingStore, tags: pd.DataFrame) -> ItemScorer:
    if algorithm == "mean":
        return ItemMeanScorer.from_store(store, damping=cfg.damped_mean.damping)
    if algorithm == "user-user":
        return UserUserScorer(
            store,
            neighborhood_size=cfg.user_cf.neighborhood_size,
            min_neighbors=cfg.user_cf.min_neighbors,
        )
    if algorithm == "item-item":
        return ItemItemScorer.from_store(
            store,
            neighborhood_size=cfg.item_cf.neighborhood_size,
            min_neighbors=cfg.item_cf.min_neighbors,
        )
    if algorithm == "tfidf":
        return TFIDFItemScorer(
            TFIDFModel.from_tags(tags),
            store,
            profile=cfg.tfidf.profile,  # type: ignore[arg-type]
            threshold=cfg.tfidf.threshold,
        )
    raise ValueError(f"Unknown algorithm: {algorithm!r}")


def main(argv: list[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    repo_root, cfg = _resolve_config(Path(args.config))
    setup_logging(cfg.log_level)

    raw_dir = Path(args.raw_dir) if args.raw_dir is not None else cfg.raw_dir
    paths = ProjectPaths.from_repo_root(repo_root, raw_dir=raw_dir)
    logger.info("Loading ratings from %s", paths.raw_dir)
    data = load_raw_data(paths.raw_dir, ratings_csv=paths.ratings_csv, tags_csv=paths.tags_csv)
    store = FrameRatingStore(data.ratings)

    scorer = build_scorer(args.algorithm, cfg, store, data.tags)
    scores = scorer.score(int(args.user_id), [int(i) for i in args.items])

    print(f"\n=== Scores ({args.algorithm}) ===")
    if scores:
        df = pd.DataFrame({"itemId": list(scores), "score": list(scores.values())})
        print(df.sort_values("score", ascending=False, na_position="last").to_string(index=False))
    else:
        print("No items could be scored (too few contributing neighbors).")

    if int(args.similar) > 0:
        rows: list[dict[str, object]] = []
        if isinstance(scorer, UserUserScorer):
            print("\n=== Similar Users ===")
            rows = [s.__dict__ for s in scorer.similar_users(int(args.user_id), top_n=int(args.similar))]
        elif isinstance(scorer, ItemItemScorer):
            print("\n=== Similar Items ===")
            for item in args.items:
                for s in scorer.model.similar_items(int(item), top_n=int(args.similar)):
                    rows.append({"forItemId": int(item), **s.__dict__})
        else:
            print(f"\n--similar is not supported for {args.algorithm}")
        if rows:
            print(pd.DataFrame(rows).to_string(index=False))


if __name__ == "__main__":
    main()
