"""
Master configuration for the Apiary Sandbox.

ALL tunable parameters live here: grid size, expansion thresholds,
prices, assignment low-water marks and production rates.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ColonyConfig:
    """
    Master configuration for one colony simulation.

    Every threshold, cost and rate is configurable. The defaults reproduce
    the standard game. Use ``to_dict()`` / ``from_dict()`` for
    serialization and comparison.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int | None = None

    # === Grid ===
    grid_radius: int = 10
    tile_size: float = 0.9

    # === Initial layout ===
    initial_flowers: int = 3
    initial_flower_distance: int = 2  # Ring distance from the hive

    # === Field expansion ===
    flowers_needed_for_expansion: int = 3
    new_flowers_to_spawn: int = 3
    expansion_distance: int = 2

    # === Prices ===
    worker_cost: int = 30      # Nectar
    connector_cost: int = 10   # Wax

    # === Worker auto-assignment ===
    wax_low_water: int = 50
    nectar_low_water: int = 30

    # === Production ===
    # Per-second generation rate per assignment kind
    generation_rates: dict[str, float] = field(default_factory=lambda: {
        "hive": 1.0,
        "flower": 0.5,
    })
    click_yield: int = 1

    # === Tick loop ===
    tick_seconds: float = 0.1

    def __post_init__(self) -> None:
        missing = [k for k in ("hive", "flower") if k not in self.generation_rates]
        if missing:
            raise ValueError(f"generation_rates is missing {missing}")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        d: dict[str, Any] = {}
        for k, v in self.__dict__.items():
            if k.startswith("_"):
                continue
            d[k] = dict(v) if isinstance(v, dict) else v
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ColonyConfig:
        """Deserialize from a dict."""
        return cls(**{k: v for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> ColonyConfig:
        return cls.from_dict(json.loads(s))

    def diff(self, other: ColonyConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
