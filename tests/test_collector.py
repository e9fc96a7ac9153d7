"""Tests for MetricsCollector."""

import pytest

from apiary.core.config import ColonyConfig
from apiary.core.engine import ColonySimulation
from apiary.metrics.collector import MetricsCollector, TickMetrics


def _run(ticks: int, workers: int = 1) -> tuple[ColonySimulation, MetricsCollector]:
    sim = ColonySimulation(ColonyConfig(random_seed=42))
    for _ in range(workers):
        sim.spawn_worker(cost=0)
    collector = MetricsCollector()
    for _ in range(ticks):
        collector.collect(sim, sim.tick(0.5))
    return sim, collector


class TestCollectMetrics:
    def test_one_row_per_tick(self):
        _, collector = _run(4)
        assert len(collector.metrics_history) == 4
        assert all(isinstance(m, TickMetrics) for m in collector.metrics_history)

    def test_fields_reflect_simulation(self):
        sim, collector = _run(2)
        last = collector.metrics_history[-1]
        assert last.tick == 2
        assert last.clock == pytest.approx(1.0)
        assert last.wax == sim.economy.wax == 1
        assert last.hive_workers == 1
        assert last.flower_workers == 0
        assert last.tile_count == 4
        assert last.flower_count == 3
        assert last.connected_flowers == 0
        assert last.expansion_fired is False
        assert last.flowers_spawned == 0


class TestTimeSeries:
    def test_wax_series(self):
        _, collector = _run(4)
        assert collector.get_time_series("wax") == [0, 1, 1, 2]
        assert collector.get_time_series("wax_gained") == [0, 1, 0, 1]

    def test_unknown_field(self):
        _, collector = _run(1)
        with pytest.raises(KeyError):
            collector.get_time_series("population_size")


class TestSummary:
    def test_empty_summary(self):
        assert MetricsCollector().summary() == {"ticks": 0}

    def test_summary_totals(self):
        _, collector = _run(4, workers=2)
        summary = collector.summary()
        assert summary["ticks"] == 4
        assert summary["expansions"] == 0
        assert summary["total_wax_produced"] == 4
        assert summary["final"]["wax"] == 4

    def test_to_dicts(self):
        _, collector = _run(2)
        rows = collector.to_dicts()
        assert len(rows) == 2
        assert rows[0]["tick"] == 1
