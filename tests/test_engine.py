"""
Tests for the colony simulation context and tick loop.

Covers initial layout, determinism, connector building, the full
connect-then-expand cycle and accrual through the tick loop.
"""

import pytest

from apiary.core.config import ColonyConfig
from apiary.core.engine import ColonySimulation, giant_scale
from apiary.core.errors import (
    AlreadyOccupiedError,
    InsufficientFundsError,
    NotConnectedError,
)
from apiary.core.hex_coords import ORIGIN, GridCoordinate, hex_distance, neighbors
from apiary.core.tile_graph import TileKind

G = GridCoordinate


def _make_sim(**overrides) -> ColonySimulation:
    defaults = {"random_seed": 42}
    defaults.update(overrides)
    return ColonySimulation(ColonyConfig(**defaults))


def _connect_initial_flowers(sim: ColonySimulation) -> None:
    """Build one ring-1 connector under each starting flower."""
    for flower in sim.all_resource_tiles():
        link = next(n for n in neighbors(flower) if hex_distance(ORIGIN, n) == 1)
        if sim.exists(link):
            continue
        sim.economy.add_wax(sim.config.connector_cost)
        sim.build_connector(link)


class TestInitialLayout:
    def test_three_flowers_at_distance_two(self):
        sim = _make_sim()
        flowers = sim.all_resource_tiles()
        assert len(flowers) == 3
        assert len(set(flowers)) == 3
        assert all(hex_distance(ORIGIN, f) == 2 for f in flowers)
        assert sim.reachable_resource_tiles() == []
        assert len(sim.graph) == 4

    def test_same_seed_same_layout(self):
        assert _make_sim(random_seed=9).all_resource_tiles() == \
            _make_sim(random_seed=9).all_resource_tiles()

    def test_initial_count_configurable(self):
        sim = _make_sim(initial_flowers=5, initial_flower_distance=3)
        assert len(sim.all_resource_tiles()) == 5
        assert all(hex_distance(ORIGIN, f) == 3 for f in sim.all_resource_tiles())

    def test_starts_empty(self):
        sim = _make_sim()
        assert sim.current_tick == 0
        assert sim.workers == []
        assert sim.economy.wax == 0
        assert sim.economy.nectar == 0


class TestBuildConnector:
    def test_insufficient_wax(self):
        sim = _make_sim()
        with pytest.raises(InsufficientFundsError):
            sim.build_connector(G(1, 0))
        assert not sim.exists(G(1, 0))

    def test_not_adjacent_to_network(self):
        sim = _make_sim()
        sim.economy.add_wax(10)
        with pytest.raises(NotConnectedError):
            sim.build_connector(G(5, 0))
        assert sim.economy.wax == 10
        assert not sim.exists(G(5, 0))

    def test_success_spends_wax(self):
        sim = _make_sim()
        sim.economy.add_wax(25)
        tile = sim.build_connector(G(1, 0))
        assert tile.kind == TileKind.CONNECTOR
        assert sim.economy.wax == 15
        assert sim.is_reachable_from_root(G(1, 0))

    def test_occupied_keeps_wax(self):
        sim = _make_sim()
        sim.economy.add_wax(10)
        with pytest.raises(AlreadyOccupiedError):
            sim.build_connector(ORIGIN)
        assert sim.economy.wax == 10


class TestTickLoop:
    def test_tick_advances_clock(self):
        sim = _make_sim()
        report = sim.tick()
        assert report.tick == 1
        assert sim.current_tick == 1
        assert sim.clock == pytest.approx(0.1)
        assert report.expansion is None

    def test_accrual_through_run(self):
        sim = _make_sim()
        sim.spawn_worker(cost=0)
        reports = sim.run(10, elapsed=0.1)
        assert len(reports) == 10
        assert sim.economy.wax == 1
        assert sum(r.wax_gained for r in reports) == 1
        assert sim.clock == pytest.approx(1.0)

    def test_connect_all_then_expand(self):
        sim = _make_sim()
        _connect_initial_flowers(sim)
        assert len(sim.reachable_resource_tiles()) == 3

        before = set(sim.graph.tiles)
        report = sim.tick()
        assert report.expansion is not None
        spawned = report.expansion.spawned
        assert 0 < len(spawned) <= 3
        assert len(sim.all_resource_tiles()) == 3 + len(spawned)
        for pos in spawned:
            assert not any(n in before for n in neighbors(pos))
            assert not sim.is_reachable_from_root(pos)

        assert sim.tick().expansion is None

    def test_events_surface_in_report(self):
        sim = _make_sim()
        sim.economy.add_wax(60)
        sim.spawn_worker(cost=0)
        report = sim.tick()
        assert [e.kind for e in report.events] == ["no_reachable_resource_tile"]
        assert report.to_dict()["events"][0]["kind"] == "no_reachable_resource_tile"


class TestSnapshot:
    def test_giant_scale(self):
        assert giant_scale(0) == 1.0
        assert giant_scale(5) == pytest.approx(1.5)

    def test_snapshot_keys(self):
        sim = _make_sim()
        sim.spawn_worker(cost=0)
        snap = sim.snapshot()
        assert set(snap) == {"tick", "clock", "grid", "economy", "giant_scale"}
        assert snap["giant_scale"] == pytest.approx(1.1)
        assert len(snap["grid"]["flowers"]) == 3

    def test_planar_uses_config_tile_size(self):
        sim = _make_sim(tile_size=2.0)
        x, _ = sim.to_planar_position(G(1, 0))
        assert x == pytest.approx(3.0)
        assert sim.from_planar_position(x, 0.0 + 3 ** 0.5) == G(1, 0)
