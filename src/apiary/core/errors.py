"""
Exception types raised by the colony simulation core.

All of these are local, recoverable conditions. Operations that raise
them leave the tile graph and the economy exactly as they were.
"""

from __future__ import annotations

from apiary.core.hex_coords import GridCoordinate


class ColonyError(Exception):
    """Base class for all colony simulation errors."""


# ---- Tile graph ----

class TileGraphError(ColonyError):
    """A tile could not be placed."""

    def __init__(self, coord: GridCoordinate, message: str):
        super().__init__(message)
        self.coord = coord


class OutOfBoundsError(TileGraphError):
    def __init__(self, coord: GridCoordinate, radius: int):
        super().__init__(coord, f"Position {coord} is outside grid radius {radius}")
        self.radius = radius


class AlreadyOccupiedError(TileGraphError):
    def __init__(self, coord: GridCoordinate):
        super().__init__(coord, f"Tile already exists at {coord}")


class InvalidTileKindError(TileGraphError):
    """Only connector and flower tiles may be spawned after setup."""


# ---- Economy ----

class EconomyError(ColonyError):
    """An economy action was rejected."""


class InsufficientFundsError(EconomyError):
    def __init__(self, resource: str, required: int, available: int):
        super().__init__(
            f"Not enough {resource}: need {required}, have {available}"
        )
        self.resource = resource
        self.required = required
        self.available = available


class InvalidPlacementError(EconomyError):
    """A worker or click targeted a tile that cannot take it."""


class UnreachableTileError(EconomyError):
    """The target flower is not connected to the hive."""


# ---- Building ----

class NotConnectedError(ColonyError):
    """A connector was requested away from the connected network."""
