"""Thresholds shared by the duplicate detector and the identity validator."""

from __future__ import annotations

from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

CONFIG_PATH = Path(__file__).resolve().parent / "thresholds.yaml"


@dataclass(frozen=True)
class MatchingConfig:
    name_similarity: float = 0.8
    issuer_name_similarity: float = 0.85
    amount_similarity: float = 0.95
    duplicate_threshold: float = 0.85
    nickname_similarity: float = 0.9
    mismatch_threshold: float = 0.8
    medium_threshold: float = 0.7
    high_threshold: float = 0.5
    suggestion_floor: float = 0.5

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MatchingConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown matching config keys: {', '.join(unknown)}")
        values = {}
        for key, value in data.items():
            try:
                values[key] = float(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Matching config {key} must be a number, got {value!r}") from exc
        return cls(**values)


DEFAULT_CONFIG = MatchingConfig()


@lru_cache(maxsize=8)
def load_matching_config(path: Optional[Path | str] = None) -> MatchingConfig:
    """Load thresholds from YAML (``matching/thresholds.yaml`` by default)."""
    config_path = Path(path) if path else CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Matching config not found at {config_path}")
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Matching config must be a mapping: {config_path}")
    return MatchingConfig.from_mapping(raw)
