"""
Metrics Collector: per-tick colony statistics.

Records one TickMetrics row per tick (counters, worker split, field
size and connectivity) and provides time series extraction for
dashboards.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from apiary.core.engine import ColonySimulation, TickReport


@dataclass
class TickMetrics:
    """Colony state at the end of one tick."""

    tick: int
    clock: float

    # Counters
    wax: int
    nectar: int
    wax_gained: int
    nectar_gained: int

    # Workers
    hive_workers: int
    flower_workers: int

    # Field
    tile_count: int
    flower_count: int
    connected_flowers: int

    # Events
    expansion_fired: bool
    flowers_spawned: int


class MetricsCollector:
    """Collects per-tick metrics for one colony."""

    def __init__(self) -> None:
        self.metrics_history: list[TickMetrics] = []

    def collect(self, sim: ColonySimulation, report: TickReport) -> TickMetrics:
        counts = sim.economy.worker_counts()
        metrics = TickMetrics(
            tick=report.tick,
            clock=sim.clock,
            wax=sim.economy.wax,
            nectar=sim.economy.nectar,
            wax_gained=report.wax_gained,
            nectar_gained=report.nectar_gained,
            hive_workers=counts["hive"],
            flower_workers=counts["flower"],
            tile_count=len(sim.graph),
            flower_count=len(sim.all_resource_tiles()),
            connected_flowers=len(sim.reachable_resource_tiles()),
            expansion_fired=report.expansion is not None,
            flowers_spawned=len(report.expansion.spawned) if report.expansion else 0,
        )
        self.metrics_history.append(metrics)
        return metrics

    def get_time_series(self, field_name: str) -> list[Any]:
        """Extract one field across all recorded ticks.

        Raises:
            KeyError: field_name is not a TickMetrics field.
        """
        if field_name not in TickMetrics.__dataclass_fields__:
            raise KeyError(f"Unknown metric '{field_name}'")
        return [getattr(m, field_name) for m in self.metrics_history]

    def summary(self) -> dict[str, Any]:
        if not self.metrics_history:
            return {"ticks": 0}
        last = self.metrics_history[-1]
        return {
            "ticks": len(self.metrics_history),
            "expansions": sum(1 for m in self.metrics_history if m.expansion_fired),
            "total_wax_produced": sum(m.wax_gained for m in self.metrics_history),
            "total_nectar_produced": sum(m.nectar_gained for m in self.metrics_history),
            "final": asdict(last),
        }

    def to_dicts(self) -> list[dict[str, Any]]:
        return [asdict(m) for m in self.metrics_history]
