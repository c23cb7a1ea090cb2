from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProjectPaths:
    raw_dir: Path
    ratings_csv: Path
    tags_csv: Path

    @classmethod
    def from_repo_root(cls, repo_root: Path, *, raw_dir: Path | str = "data/raw") -> "ProjectPaths":
        raw_dir_p = Path(raw_dir) if isinstance(raw_dir, str) else raw_dir
        if not raw_dir_p.is_absolute():
            raw_dir_p = repo_root / raw_dir_p
        raw_dir_p = raw_dir_p.resolve()
        return cls(
            raw_dir=raw_dir_p,
            ratings_csv=raw_dir_p / "ratings.csv",
            tags_csv=raw_dir_p / "tags.csv",
        )


def get_repo_root(start: Path | None = None) -> Path:
    """Return repo root by searching upwards for `config.yaml` or `.git`."""
    origin = (Path(start) if start is not None else Path.cwd()).resolve()
    if origin.is_file():
        origin = origin.parent

    for candidate in (origin, *origin.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    # Fallback: search upwards from this file (useful if called from elsewhere).
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    raise FileNotFoundError("Could not locate repo root (expected `config.yaml` or `.git`).")
