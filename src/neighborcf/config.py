from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class DampedMeanConfig:
    damping: float = 5.0


@dataclass(frozen=True)
class NeighborhoodConfig:
    neighborhood_size: int
    min_neighbors: int


@dataclass(frozen=True)
class TFIDFConfig:
    profile: str = "weighted"
    threshold: float = 3.5


@dataclass(frozen=True)
class ScoringConfig:
    raw_dir: Path = Path("data/raw")
    log_level: str = "INFO"
    damped_mean: DampedMeanConfig = field(default_factory=DampedMeanConfig)
    user_cf: NeighborhoodConfig = field(default_factory=lambda: NeighborhoodConfig(neighborhood_size=30, min_neighbors=2))
    item_cf: NeighborhoodConfig = field(default_factory=lambda: NeighborhoodConfig(neighborhood_size=20, min_neighbors=0))
    tfidf: TFIDFConfig = field(default_factory=TFIDFConfig)


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"config section {name!r} must be a mapping, got {type(value).__name__}")
    return value


def config_from_dict(raw: dict[str, Any]) -> ScoringConfig:
    """Build a `ScoringConfig` from a parsed YAML mapping; missing keys use defaults."""
    if not isinstance(raw, dict):
        raise ValueError(f"Expected config YAML to be a mapping, got: {type(raw)}")

    defaults = ScoringConfig()
    dataset = _section(raw, "dataset")
    damped = _section(raw, "damped_mean")
    user_cf = _section(raw, "user_cf")
    item_cf = _section(raw, "item_cf")
    tfidf = _section(raw, "tfidf")
    logging_cfg = _section(raw, "logging")

    cfg = ScoringConfig(
        raw_dir=Path(str(dataset.get("raw_dir", defaults.raw_dir))),
        log_level=str(logging_cfg.get("level", defaults.log_level)).upper(),
        damped_mean=DampedMeanConfig(damping=float(damped.get("damping", defaults.damped_mean.damping))),
        user_cf=NeighborhoodConfig(
            neighborhood_size=int(user_cf.get("neighborhood_size", defaults.user_cf.neighborhood_size)),
            min_neighbors=int(user_cf.get("min_neighbors", defaults.user_cf.min_neighbors)),
        ),
        item_cf=NeighborhoodConfig(
            neighborhood_size=int(item_cf.get("neighborhood_size", defaults.item_cf.neighborhood_size)),
            min_neighbors=int(item_cf.get("min_neighbors", defaults.item_cf.min_neighbors)),
        ),
        tfidf=TFIDFConfig(
            profile=str(tfidf.get("profile", defaults.tfidf.profile)),
            threshold=float(tfidf.get("threshold", defaults.tfidf.threshold)),
        ),
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: ScoringConfig) -> None:
    if cfg.damped_mean.damping < 0:
        raise ValueError(f"damped_mean.damping must be >= 0, got {cfg.damped_mean.damping}")
    for name, section in (("user_cf", cfg.user_cf), ("item_cf", cfg.item_cf)):
        if section.neighborhood_size <= 0:
            raise ValueError(f"{name}.neighborhood_size must be > 0, got {section.neighborhood_size}")
        if section.min_neighbors < 0:
            raise ValueError(f"{name}.min_neighbors must be >= 0, got {section.min_neighbors}")
    if cfg.tfidf.profile not in ("weighted", "threshold"):
        raise ValueError(f"tfidf.profile must be 'weighted' or 'threshold', got {cfg.tfidf.profile!r}")


def load_config(config_path: Path) -> ScoringConfig:
    config_path = Path(config_path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")
    raw = yaml.safe_load(config_path.read_text())
    if raw is None:
        raw = {}
    return config_from_dict(raw)
