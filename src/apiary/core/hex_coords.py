"""
Axial hex coordinate geometry for the Apiary Sandbox.

Flat-top hexagons addressed by axial (q, r) coordinates. Cube coordinates
are derived as (q, r, s) with s = -q - r, which satisfies q + r + s = 0.

Everything here is a pure function of its arguments: neighbour and ring
enumeration, the grid boundary predicate, and the conversion between grid
coordinates and planar (x, z) world positions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

SQRT3 = math.sqrt(3.0)

# Spacing between tile centres in world units.
DEFAULT_TILE_SIZE: float = 0.9


@dataclass(frozen=True)
class GridCoordinate:
    """Immutable axial hex coordinate.

    Frozen so it can be used as a dictionary key (the tile graph is keyed
    by these).
    """

    q: int
    r: int

    @property
    def s(self) -> int:
        """Implicit third cube coordinate."""
        return -self.q - self.r

    def __add__(self, other: GridCoordinate) -> GridCoordinate:
        return GridCoordinate(self.q + other.q, self.r + other.r)

    def __sub__(self, other: GridCoordinate) -> GridCoordinate:
        return GridCoordinate(self.q - other.q, self.r - other.r)

    def __mul__(self, k: int) -> GridCoordinate:
        return GridCoordinate(self.q * k, self.r * k)

    def __repr__(self) -> str:
        return f"GridCoordinate({self.q}, {self.r})"

    def to_tuple(self) -> tuple[int, int]:
        return (self.q, self.r)

    @classmethod
    def from_tuple(cls, t: tuple[int, int] | list[int]) -> GridCoordinate:
        return cls(int(t[0]), int(t[1]))


ORIGIN = GridCoordinate(0, 0)

# The six axial directions in rotational order. Ring walking depends on
# this order, so it must not be rearranged.
HEX_DIRECTIONS: list[GridCoordinate] = [
    GridCoordinate(1, 0),    # east
    GridCoordinate(1, -1),   # north-east
    GridCoordinate(0, -1),   # north-west
    GridCoordinate(-1, 0),   # west
    GridCoordinate(-1, 1),   # south-west
    GridCoordinate(0, 1),    # south-east
]


# ---- Neighbours and rings ----

def neighbors(coord: GridCoordinate) -> list[GridCoordinate]:
    """Return the six adjacent coordinates in ``HEX_DIRECTIONS`` order."""
    return [coord + d for d in HEX_DIRECTIONS]


def hexes_at_distance(center: GridCoordinate, distance: int) -> list[GridCoordinate]:
    """Return the ring of coordinates exactly ``distance`` steps from center.

    Starts at the corner ``center + HEX_DIRECTIONS[4] * distance`` and walks
    ``distance`` steps along each of the six directions in order, yielding
    ``6 * distance`` coordinates (or just ``[center]`` for distance 0).

    Args:
        center: Ring centre.
        distance: Ring radius in hex steps.

    Returns:
        Ordered list of ring coordinates.

    Raises:
        ValueError: If distance is negative.
    """
    if distance < 0:
        raise ValueError(f"distance must be >= 0, got {distance}")
    if distance == 0:
        return [center]

    results: list[GridCoordinate] = []
    current = center + HEX_DIRECTIONS[4] * distance
    for direction in HEX_DIRECTIONS:
        for _ in range(distance):
            results.append(current)
            current = current + direction
    return results


def hex_distance(a: GridCoordinate, b: GridCoordinate) -> int:
    """True hex distance between two coordinates (max of cube deltas)."""
    d = a - b
    return max(abs(d.q), abs(d.r), abs(d.s))


def is_within_bounds(coord: GridCoordinate, radius: int) -> bool:
    """Grid boundary predicate: ``|q + r| <= radius``.

    This is the only boundary rule the grid uses. It is looser than true
    hex distance from the origin.
    """
    return abs(coord.q + coord.r) <= radius


# ---- Planar conversion ----

def to_planar_position(
    coord: GridCoordinate, tile_size: float = DEFAULT_TILE_SIZE,
) -> tuple[float, float]:
    """Convert a grid coordinate to its (x, z) world position."""
    x = tile_size * (1.5 * coord.q)
    z = tile_size * (SQRT3 / 2.0 * coord.q + SQRT3 * coord.r)
    return (x, z)


def from_planar_position(
    x: float, z: float, tile_size: float = DEFAULT_TILE_SIZE,
) -> GridCoordinate:
    """Convert an (x, z) world position to the grid coordinate containing it.

    Raises:
        ValueError: If the position is infinite, NaN, or too large to
            map to a grid cell.
    """
    q = (2.0 / 3.0 * x) / tile_size
    r = (-1.0 / 3.0 * x + SQRT3 / 3.0 * z) / tile_size
    if not all(math.isfinite(v) for v in (q, r, q + r)):
        raise ValueError(f"Position must be finite, got ({x}, {z})")
    return cube_round(q, r)


def cube_round(frac_q: float, frac_r: float) -> GridCoordinate:
    """Round fractional axial coordinates to the nearest hex.

    All three cube components are rounded, then the one that moved the
    most is recomputed from the other two so that q + r + s == 0 holds.
    q is checked before r; s is implicit in the returned coordinate.
    """
    frac_s = -frac_q - frac_r

    q = round(frac_q)
    r = round(frac_r)
    s = round(frac_s)

    q_diff = abs(q - frac_q)
    r_diff = abs(r - frac_r)
    s_diff = abs(s - frac_s)

    if q_diff > r_diff and q_diff > s_diff:
        q = -r - s
    elif r_diff > s_diff:
        r = -q - s

    return GridCoordinate(int(q), int(r))
