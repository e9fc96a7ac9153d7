"""
Sparse hex tile graph for the Apiary Sandbox.

Only occupied cells are stored. The hive sits at the origin and is the
root for connectivity: a tile is reachable when an unbroken chain of
occupied, in-bounds cells links it to the hive. Reachability is computed
on demand by breadth-first search and never cached, so callers always see
the current layout.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any

from apiary.core.errors import (
    AlreadyOccupiedError,
    InvalidTileKindError,
    OutOfBoundsError,
)
from apiary.core.hex_coords import (
    DEFAULT_TILE_SIZE,
    ORIGIN,
    GridCoordinate,
    from_planar_position,
    is_within_bounds,
    neighbors,
    to_planar_position,
)

logger = logging.getLogger(__name__)


class TileKind(str, Enum):
    """Tile classifications."""

    HIVE = "hive"            # the root; produces wax
    FLOWER = "flower"        # resource site; produces nectar once connected
    CONNECTOR = "connector"  # player-built link, no production


@dataclass(frozen=True)
class Tile:
    """An occupied grid cell. The kind is fixed for the tile's lifetime."""

    coord: GridCoordinate
    kind: TileKind

    def to_dict(self) -> dict[str, Any]:
        return {"q": self.coord.q, "r": self.coord.r, "kind": self.kind.value}


class TileGraph:
    """Occupied tiles keyed by axial coordinate, rooted at the hive.

    Attributes:
        radius: Boundary for ``is_within_bounds``.
        tile_size: World-space spacing used for planar conversion.
        root: The hive coordinate (always the origin).
        tiles: Mapping from coordinate to Tile.
    """

    def __init__(self, radius: int = 10, tile_size: float = DEFAULT_TILE_SIZE) -> None:
        self.radius: int = radius
        self.tile_size: float = tile_size
        self.root: GridCoordinate = ORIGIN
        self.tiles: dict[GridCoordinate, Tile] = {
            self.root: Tile(self.root, TileKind.HIVE),
        }
        # Flower coordinates in spawn order
        self._flowers: list[GridCoordinate] = []

    def __len__(self) -> int:
        return len(self.tiles)

    def __contains__(self, coord: object) -> bool:
        return coord in self.tiles

    # ---- Mutation ----

    def spawn_tile(self, kind: TileKind, coord: GridCoordinate) -> Tile:
        """Place a new tile.

        Args:
            kind: FLOWER or CONNECTOR. The hive is placed at construction.
            coord: Target coordinate.

        Returns:
            The created Tile.

        Raises:
            AlreadyOccupiedError: A tile already exists at coord.
            OutOfBoundsError: coord fails the boundary predicate.
            InvalidTileKindError: kind is HIVE.
        """
        if coord in self.tiles:
            raise AlreadyOccupiedError(coord)
        if not is_within_bounds(coord, self.radius):
            raise OutOfBoundsError(coord, self.radius)
        if kind == TileKind.HIVE:
            raise InvalidTileKindError(coord, "The hive can only exist at the root")

        tile = Tile(coord, kind)
        self.tiles[coord] = tile
        if kind == TileKind.FLOWER:
            self._flowers.append(coord)
        logger.debug("Spawned %s tile at %s", kind.value, coord)
        return tile

    # ---- Lookup ----

    def exists(self, coord: GridCoordinate) -> bool:
        return coord in self.tiles

    def get_tile(self, coord: GridCoordinate) -> Tile | None:
        return self.tiles.get(coord)

    def tiles_of_kind(self, kind: TileKind) -> list[Tile]:
        return [tile for tile in self.tiles.values() if tile.kind == kind]

    def neighbors_in_bounds(self, coord: GridCoordinate) -> list[GridCoordinate]:
        """The six neighbours of coord that pass the boundary predicate."""
        return [n for n in neighbors(coord) if is_within_bounds(n, self.radius)]

    # ---- Connectivity ----

    def is_reachable_from_root(self, coord: GridCoordinate) -> bool:
        """Check whether coord is linked to the hive by occupied tiles.

        Breadth-first search outward from coord, expanding only through
        occupied in-bounds cells. The visited set keeps cyclic layouts
        from looping forever.
        """
        if coord == self.root:
            return True
        if coord not in self.tiles:
            return False

        queue: deque[GridCoordinate] = deque([coord])
        visited: set[GridCoordinate] = {coord}

        while queue:
            current = queue.popleft()
            for neighbor in self.neighbors_in_bounds(current):
                if neighbor == self.root:
                    return True
                if neighbor in self.tiles and neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)

        return False

    def reachable_resource_tiles(self) -> list[GridCoordinate]:
        """Flower coordinates connected to the hive, in spawn order."""
        return [f for f in self._flowers if self.is_reachable_from_root(f)]

    def all_resource_tiles(self) -> list[GridCoordinate]:
        """All flower coordinates (connected or not), in spawn order."""
        return list(self._flowers)

    def is_adjacent_to_network(self, coord: GridCoordinate) -> bool:
        """Whether some in-bounds neighbour of coord is a connected tile."""
        return any(
            n in self.tiles and self.is_reachable_from_root(n)
            for n in self.neighbors_in_bounds(coord)
        )

    def buildable_positions(self, coord: GridCoordinate) -> list[GridCoordinate]:
        """Empty in-bounds neighbours of a connected tile.

        Returns an empty list if coord is not connected to the hive.
        """
        if not self.is_reachable_from_root(coord):
            return []
        return [n for n in self.neighbors_in_bounds(coord) if n not in self.tiles]

    # ---- Planar conversion ----

    def to_planar_position(self, coord: GridCoordinate) -> tuple[float, float]:
        return to_planar_position(coord, self.tile_size)

    def from_planar_position(self, x: float, z: float) -> GridCoordinate:
        return from_planar_position(x, z, self.tile_size)

    # ---- Serialization ----

    def to_dict(self) -> dict[str, Any]:
        """Snapshot of the graph for read-only consumers."""
        reachable = set(self.reachable_resource_tiles())
        return {
            "radius": self.radius,
            "tile_size": self.tile_size,
            "root": [self.root.q, self.root.r],
            "tiles": [tile.to_dict() for tile in self.tiles.values()],
            "flowers": [
                {"q": f.q, "r": f.r, "connected": f in reachable}
                for f in self._flowers
            ],
        }
