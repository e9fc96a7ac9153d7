"""
Colony simulation context.

Owns the tile graph, the worker economy and the field expansion engine
for one game, and drives them with a single-threaded tick loop. Each
tick runs:

1. Economy accrual
2. Expansion trigger check

External collaborators (UI, rendering, the HTTP shell) go through this
object: they read snapshot copies between ticks and mutate only via the
methods below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from apiary.core.config import ColonyConfig
from apiary.core.economy import EconomyEvent, WorkerAgent, WorkerEconomy
from apiary.core.errors import InsufficientFundsError, NotConnectedError
from apiary.core.expansion import ExpansionResult, FieldExpansionEngine
from apiary.core.hex_coords import GridCoordinate, hexes_at_distance, is_within_bounds
from apiary.core.tile_graph import Tile, TileGraph, TileKind

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What happened during one tick."""

    tick: int
    elapsed: float
    wax_gained: int = 0
    nectar_gained: int = 0
    expansion: ExpansionResult | None = None
    events: list[EconomyEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "elapsed": self.elapsed,
            "wax_gained": self.wax_gained,
            "nectar_gained": self.nectar_gained,
            "expansion": self.expansion.to_dict() if self.expansion else None,
            "events": [
                {"kind": e.kind, "message": e.message, **e.data}
                for e in self.events
            ],
        }


def giant_scale(worker_count: int, base: float = 1.0, per_worker: float = 0.1) -> float:
    """Display scale for the colony's "giant bee": grows linearly, unbounded."""
    return base + per_worker * worker_count


class ColonySimulation:
    """One colony: tile graph, economy and expansion behind a tick loop."""

    def __init__(self, config: ColonyConfig | None = None):
        self.config = config or ColonyConfig()
        self.rng = np.random.default_rng(self.config.random_seed)

        self.graph = TileGraph(
            radius=self.config.grid_radius, tile_size=self.config.tile_size,
        )
        self._place_initial_flowers()

        # Built after the initial flowers so the latch starts at their count
        self.expansion = FieldExpansionEngine(self.graph, self.config, self.rng)
        self.economy = WorkerEconomy(self.graph, self.config)

        self.current_tick: int = 0
        self.clock: float = 0.0

    def _place_initial_flowers(self) -> None:
        """Scatter the starting flowers on a ring around the hive."""
        ring = [
            pos
            for pos in hexes_at_distance(self.graph.root, self.config.initial_flower_distance)
            if not self.graph.exists(pos) and is_within_bounds(pos, self.graph.radius)
        ]
        order = self.rng.permutation(len(ring))
        for i in order[: self.config.initial_flowers]:
            self.graph.spawn_tile(TileKind.FLOWER, ring[i])
        logger.debug(
            "Spawned %d initial tiles (1 hive + %d flowers)",
            len(self.graph), len(self.graph.all_resource_tiles()),
        )

    # ---- Tick loop ----

    def tick(self, elapsed: float | None = None) -> TickReport:
        """Advance the simulation by ``elapsed`` seconds."""
        elapsed = self.config.tick_seconds if elapsed is None else elapsed
        wax_gained, nectar_gained = self.economy.accrue(elapsed)
        expansion = self.expansion.check_for_expansion()

        self.current_tick += 1
        self.clock += elapsed
        return TickReport(
            tick=self.current_tick,
            elapsed=elapsed,
            wax_gained=wax_gained,
            nectar_gained=nectar_gained,
            expansion=expansion,
            events=self.economy.drain_events(),
        )

    def run(self, ticks: int, elapsed: float | None = None) -> list[TickReport]:
        return [self.tick(elapsed) for _ in range(ticks)]

    # ---- Queries ----

    def is_reachable_from_root(self, coord: GridCoordinate) -> bool:
        return self.graph.is_reachable_from_root(coord)

    def all_resource_tiles(self) -> list[GridCoordinate]:
        return self.graph.all_resource_tiles()

    def reachable_resource_tiles(self) -> list[GridCoordinate]:
        return self.graph.reachable_resource_tiles()

    def exists(self, coord: GridCoordinate) -> bool:
        return self.graph.exists(coord)

    def neighbors_in_bounds(self, coord: GridCoordinate) -> list[GridCoordinate]:
        return self.graph.neighbors_in_bounds(coord)

    def to_planar_position(self, coord: GridCoordinate) -> tuple[float, float]:
        return self.graph.to_planar_position(coord)

    def from_planar_position(self, x: float, z: float) -> GridCoordinate:
        return self.graph.from_planar_position(x, z)

    @property
    def workers(self) -> list[WorkerAgent]:
        return self.economy.workers

    # ---- Mutations ----

    def build_connector(self, coord: GridCoordinate) -> Tile:
        """Buy a connector tile next to the connected network.

        Wax is only spent once the tile has been placed, so a failed
        build leaves everything unchanged.

        Raises:
            InsufficientFundsError: not enough wax.
            NotConnectedError: coord has no connected neighbour.
            OutOfBoundsError, AlreadyOccupiedError: from the tile graph.
        """
        cost = self.config.connector_cost
        if not self.economy.can_afford_connector():
            raise InsufficientFundsError("wax", cost, self.economy.wax)
        if not self.graph.exists(coord) and not self.graph.is_adjacent_to_network(coord):
            raise NotConnectedError(f"{coord} is not adjacent to the connected network")

        tile = self.graph.spawn_tile(TileKind.CONNECTOR, coord)
        self.economy.spend_wax(cost)
        return tile

    def spawn_worker(self, cost: int | None = None) -> WorkerAgent:
        return self.economy.spawn_worker(cost)

    def spawn_worker_at(self, coord: GridCoordinate, cost: int | None = None) -> WorkerAgent:
        return self.economy.spawn_worker_at(coord, cost)

    def click_tile(self, coord: GridCoordinate) -> tuple[str, int]:
        return self.economy.click_tile(coord)

    # ---- Snapshot ----

    def snapshot(self) -> dict[str, Any]:
        """Copy of everything a presentation layer needs for one frame."""
        return {
            "tick": self.current_tick,
            "clock": self.clock,
            "grid": self.graph.to_dict(),
            "economy": self.economy.to_dict(),
            "giant_scale": giant_scale(len(self.economy.workers)),
        }
