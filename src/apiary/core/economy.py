"""
Worker economy for the Apiary Sandbox.

Workers are bound to one tile and produce a resource at a fixed rate:
hive workers make wax, flower workers make nectar. Production accrues
into fractional accumulators every tick and only whole units move into
the integer counters, so per-tick amounts smaller than one are never lost.

New workers are placed by a priority ladder:

1. Wax below its low-water mark -> hive.
2. Nectar below its low-water mark -> least-loaded connected flower
   (hive if no flower is connected).
3. Otherwise balance: whichever kind has fewer workers (ties go to the
   hive), again falling back to the hive if no flower is connected.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from apiary.core.config import ColonyConfig
from apiary.core.errors import (
    InsufficientFundsError,
    InvalidPlacementError,
    UnreachableTileError,
)
from apiary.core.hex_coords import GridCoordinate
from apiary.core.tile_graph import TileGraph, TileKind

logger = logging.getLogger(__name__)

# Float sums such as ten additions of 0.1 land just under 1.0.
_ACCUMULATOR_EPSILON = 1e-9


class AssignmentKind(str, Enum):
    """What a worker is assigned to; decides what it produces."""

    HIVE = "hive"      # produces wax
    FLOWER = "flower"  # produces nectar


@dataclass(frozen=True)
class WorkerAgent:
    """One worker. Never reassigned or removed once created."""

    id: str
    coord: GridCoordinate
    assignment: AssignmentKind
    generation_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "q": self.coord.q,
            "r": self.coord.r,
            "assignment": self.assignment.value,
            "generation_rate": self.generation_rate,
        }


@dataclass
class EconomyState:
    """Resource counters and their fractional carry."""

    wax: int = 0
    nectar: int = 0
    wax_accumulator: float = 0.0
    nectar_accumulator: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "wax": self.wax,
            "nectar": self.nectar,
            "wax_accumulator": self.wax_accumulator,
            "nectar_accumulator": self.nectar_accumulator,
        }


@dataclass
class EconomyEvent:
    """A diagnostic the economy wants surfaced (not an error)."""

    kind: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)


class WorkerEconomy:
    """Owns the worker set and resource counters.

    Attributes:
        graph: Tile graph used for connectivity and flower enumeration.
        config: Prices, thresholds and rates.
        state: Current counters.
        events: Diagnostics recorded since the last ``drain_events()``.
    """

    def __init__(self, graph: TileGraph, config: ColonyConfig) -> None:
        self.graph = graph
        self.config = config
        self.state = EconomyState()
        self.events: list[EconomyEvent] = []
        self._workers: list[WorkerAgent] = []
        self._next_worker_id = 0

    # ---- Read-only views ----

    @property
    def wax(self) -> int:
        return self.state.wax

    @property
    def nectar(self) -> int:
        return self.state.nectar

    @property
    def workers(self) -> list[WorkerAgent]:
        """Copy of the active worker list."""
        return list(self._workers)

    def worker_counts(self) -> dict[str, int]:
        counts = {kind.value: 0 for kind in AssignmentKind}
        for worker in self._workers:
            counts[worker.assignment.value] += 1
        return counts

    def workers_at(self, coord: GridCoordinate) -> list[WorkerAgent]:
        return [w for w in self._workers if w.coord == coord]

    def drain_events(self) -> list[EconomyEvent]:
        events, self.events = self.events, []
        return events

    # ---- Affordability ----

    def can_afford_connector(self) -> bool:
        return self.state.wax >= self.config.connector_cost

    def can_afford_worker(self) -> bool:
        return self.state.nectar >= self.config.worker_cost

    def spend_wax(self, amount: int) -> None:
        """Deduct wax or raise InsufficientFundsError without changing it."""
        if self.state.wax < amount:
            raise InsufficientFundsError("wax", amount, self.state.wax)
        self.state.wax -= amount
        logger.debug("Spent %d wax, remaining %d", amount, self.state.wax)

    # ---- Manual production ----

    def add_wax(self, amount: int) -> None:
        self.state.wax += amount
        logger.debug("Added %d wax, total %d", amount, self.state.wax)

    def add_nectar(self, amount: int) -> None:
        self.state.nectar += amount
        logger.debug("Added %d nectar, total %d", amount, self.state.nectar)

    def click_tile(self, coord: GridCoordinate) -> tuple[str, int]:
        """Direct-click production on the hive or a connected flower.

        Returns:
            (resource name, amount added).

        Raises:
            UnreachableTileError: coord is a flower not connected to the hive.
            InvalidPlacementError: coord is empty or a connector.
        """
        tile = self.graph.get_tile(coord)
        amount = self.config.click_yield
        if tile is not None and tile.kind == TileKind.HIVE:
            self.add_wax(amount)
            return ("wax", amount)
        if tile is not None and tile.kind == TileKind.FLOWER:
            if not self.graph.is_reachable_from_root(coord):
                raise UnreachableTileError(f"Flower at {coord} is not connected to the hive")
            self.add_nectar(amount)
            return ("nectar", amount)
        raise InvalidPlacementError(f"Nothing to harvest at {coord}")

    # ---- Workers ----

    def spawn_worker(self, cost: int | None = None) -> WorkerAgent:
        """Buy a worker with nectar and place it by the assignment ladder.

        Raises:
            InsufficientFundsError: nectar < cost; nothing changes.
        """
        cost = self.config.worker_cost if cost is None else cost
        self._check_nectar(cost)

        self.state.nectar -= cost
        coord, assignment = self._choose_assignment()
        return self._add_worker(coord, assignment)

    def spawn_worker_at(
        self, coord: GridCoordinate, cost: int | None = None,
    ) -> WorkerAgent:
        """Buy a worker and place it on an explicit tile.

        The hive takes a hive worker; a connected flower takes a flower
        worker. Any other target is rejected before payment.

        Raises:
            InvalidPlacementError: coord is neither the hive nor a flower.
            UnreachableTileError: coord is a flower not connected to the hive.
            InsufficientFundsError: nectar < cost.
        """
        cost = self.config.worker_cost if cost is None else cost
        tile = self.graph.get_tile(coord)
        if tile is None or tile.kind == TileKind.CONNECTOR:
            raise InvalidPlacementError(f"Workers cannot be placed at {coord}")
        if tile.kind == TileKind.HIVE:
            assignment = AssignmentKind.HIVE
        else:
            if not self.graph.is_reachable_from_root(coord):
                raise UnreachableTileError(f"Flower at {coord} is not connected to the hive")
            assignment = AssignmentKind.FLOWER
        self._check_nectar(cost)

        self.state.nectar -= cost
        return self._add_worker(coord, assignment)

    def _check_nectar(self, cost: int) -> None:
        if self.state.nectar < cost:
            logger.debug("Cannot spawn worker: need %d nectar", cost)
            raise InsufficientFundsError("nectar", cost, self.state.nectar)

    def _add_worker(self, coord: GridCoordinate, assignment: AssignmentKind) -> WorkerAgent:
        worker = WorkerAgent(
            id=f"w{self._next_worker_id}",
            coord=coord,
            assignment=assignment,
            generation_rate=float(self.config.generation_rates[assignment.value]),
        )
        self._next_worker_id += 1
        self._workers.append(worker)
        logger.debug(
            "Worker #%d spawned, assigned to %s at %s",
            len(self._workers), assignment.value, coord,
        )
        return worker

    def _choose_assignment(self) -> tuple[GridCoordinate, AssignmentKind]:
        """Walk the priority ladder for a new worker."""
        hive = (self.graph.root, AssignmentKind.HIVE)

        if self.state.wax < self.config.wax_low_water:
            return hive

        if self.state.nectar < self.config.nectar_low_water:
            return self._flower_or_hive()

        counts = self.worker_counts()
        if counts[AssignmentKind.HIVE.value] <= counts[AssignmentKind.FLOWER.value]:
            return hive
        return self._flower_or_hive()

    def _flower_or_hive(self) -> tuple[GridCoordinate, AssignmentKind]:
        flower = self.least_loaded_flower()
        if flower is not None:
            return (flower, AssignmentKind.FLOWER)

        logger.info("No connected flowers for worker assignment, assigning to hive")
        self.events.append(EconomyEvent(
            kind="no_reachable_resource_tile",
            message="No connected flower found; worker assigned to the hive",
        ))
        return (self.graph.root, AssignmentKind.HIVE)

    def least_loaded_flower(self) -> GridCoordinate | None:
        """The connected flower with the fewest workers.

        Ties go to the flower that ``reachable_resource_tiles()`` lists
        first. Returns None if no flower is connected.
        """
        connected = self.graph.reachable_resource_tiles()
        if not connected:
            return None

        loads = {flower: 0 for flower in connected}
        for worker in self._workers:
            if worker.assignment == AssignmentKind.FLOWER and worker.coord in loads:
                loads[worker.coord] += 1

        best = connected[0]
        min_workers = loads[best]
        for flower in connected:
            if loads[flower] < min_workers:
                min_workers = loads[flower]
                best = flower
        return best

    # ---- Accrual ----

    def accrue(self, elapsed: float) -> tuple[int, int]:
        """Add ``rate * elapsed`` per worker and move whole units to counters.

        Args:
            elapsed: Seconds since the previous tick.

        Returns:
            (wax gained, nectar gained) this call.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed must be >= 0, got {elapsed}")

        st = self.state
        for worker in self._workers:
            if worker.assignment == AssignmentKind.HIVE:
                st.wax_accumulator += worker.generation_rate * elapsed
            else:
                st.nectar_accumulator += worker.generation_rate * elapsed

        wax_gained = self._whole_units(st.wax_accumulator)
        if wax_gained:
            st.wax += wax_gained
            st.wax_accumulator = max(0.0, st.wax_accumulator - wax_gained)

        nectar_gained = self._whole_units(st.nectar_accumulator)
        if nectar_gained:
            st.nectar += nectar_gained
            st.nectar_accumulator = max(0.0, st.nectar_accumulator - nectar_gained)

        return (wax_gained, nectar_gained)

    @staticmethod
    def _whole_units(accumulator: float) -> int:
        return int(math.floor(accumulator + _ACCUMULATOR_EPSILON))

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.state.to_dict(),
            "workers": [w.to_dict() for w in self._workers],
            "worker_counts": self.worker_counts(),
            "can_afford_connector": self.can_afford_connector(),
            "can_afford_worker": self.can_afford_worker(),
        }
