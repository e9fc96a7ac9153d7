"""
Flower field expansion.

Once every flower is connected to the hive (and at least
``flowers_needed_for_expansion`` of them are), new flowers are spawned on
a ring around the connected ones. Candidates must be empty, in bounds,
unique, and have no occupied neighbour, so that a new flower never starts
out connected and the player has to build towards it.

A latch on the total flower count keeps the check from firing again on
every tick after the network is fully connected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from apiary.core.config import ColonyConfig
from apiary.core.hex_coords import GridCoordinate, hexes_at_distance, is_within_bounds
from apiary.core.tile_graph import TileGraph, TileKind

logger = logging.getLogger(__name__)


@dataclass
class ExpansionResult:
    """Outcome of one expansion search."""

    requested: int
    candidates: int
    spawned: list[GridCoordinate] = field(default_factory=list)

    @property
    def shortfall(self) -> int:
        """How many requested flowers could not be placed (0 if none)."""
        return max(0, self.requested - len(self.spawned))

    def to_dict(self) -> dict[str, Any]:
        return {
            "requested": self.requested,
            "candidates": self.candidates,
            "spawned": [[c.q, c.r] for c in self.spawned],
            "shortfall": self.shortfall,
        }


class FieldExpansionEngine:
    """Spawns new flowers when the whole field is connected.

    Attributes:
        graph: The tile graph to expand.
        flowers_needed: Minimum connected flowers before expansion.
        new_flowers_to_spawn: Flowers requested per expansion.
        expansion_distance: Ring distance around each connected flower.
        last_observed_total: Latch; expansion only fires while the total
            flower count equals this value.
        history: Results of every expansion fired so far.
    """

    def __init__(
        self,
        graph: TileGraph,
        config: ColonyConfig,
        rng: np.random.Generator,
    ) -> None:
        self.graph = graph
        self.rng = rng
        self.flowers_needed: int = config.flowers_needed_for_expansion
        self.new_flowers_to_spawn: int = config.new_flowers_to_spawn
        self.expansion_distance: int = config.expansion_distance

        self.last_observed_total: int = len(graph.all_resource_tiles())
        self.last_connected_count: int = 0
        self.history: list[ExpansionResult] = []

    def check_for_expansion(self) -> ExpansionResult | None:
        """Run the once-per-tick trigger check.

        Returns:
            The ExpansionResult if expansion fired this call, else None.
        """
        connected = self.graph.reachable_resource_tiles()
        connected_count = len(connected)
        total = len(self.graph.all_resource_tiles())

        if connected_count != self.last_connected_count:
            logger.debug("Connected flowers: %d / %d", connected_count, total)
            self.last_connected_count = connected_count

        if not (
            connected_count >= total
            and connected_count >= self.flowers_needed
            and total == self.last_observed_total
        ):
            return None

        logger.info(
            "All %d flowers connected, spawning %d new flowers",
            total, self.new_flowers_to_spawn,
        )
        self.last_observed_total = total + self.new_flowers_to_spawn
        self.last_connected_count = 0

        result = self.expand(connected)
        if 0 < len(result.spawned) < result.requested:
            # Re-arm for the flowers that did land
            self.last_observed_total = total + len(result.spawned)
        self.history.append(result)
        return result

    def find_candidates(self, sources: list[GridCoordinate]) -> list[GridCoordinate]:
        """Collect valid spawn positions on the ring around each source.

        A position qualifies if it is in bounds, empty, not already
        collected, and none of its in-bounds neighbours holds a tile.
        """
        candidates: list[GridCoordinate] = []
        seen: set[GridCoordinate] = set()
        for source in sources:
            for pos in hexes_at_distance(source, self.expansion_distance):
                if (
                    is_within_bounds(pos, self.graph.radius)
                    and not self.graph.exists(pos)
                    and pos not in seen
                    and not self._is_adjacent_to_any_tile(pos)
                ):
                    seen.add(pos)
                    candidates.append(pos)
        return candidates

    def expand(self, sources: list[GridCoordinate]) -> ExpansionResult:
        """Search around sources and commit up to ``new_flowers_to_spawn``."""
        candidates = self.find_candidates(sources)
        result = ExpansionResult(
            requested=self.new_flowers_to_spawn, candidates=len(candidates),
        )

        order = self.rng.permutation(len(candidates))
        shuffled = [candidates[i] for i in order]

        for pos in shuffled:
            if len(result.spawned) >= self.new_flowers_to_spawn:
                break
            # Two candidates may be neighbours of each other
            if self._is_adjacent_to_any_tile(pos):
                continue
            self.graph.spawn_tile(TileKind.FLOWER, pos)
            result.spawned.append(pos)
            logger.debug("Spawned new flower at %s", pos)

        if result.shortfall:
            logger.warning(
                "Only found %d valid positions for %d flowers",
                len(result.spawned), result.requested,
            )
        logger.info("Flower expansion complete, spawned %d flowers", len(result.spawned))
        return result

    def _is_adjacent_to_any_tile(self, pos: GridCoordinate) -> bool:
        return any(self.graph.exists(n) for n in self.graph.neighbors_in_bounds(pos))
