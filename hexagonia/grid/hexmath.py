"""Hex coordinate math — offset/cube conversion, distance, world placement.

The grid uses column offset coordinates ``(col, row)``.  Cube coordinates
``(q, r, s)`` with ``q + r + s == 0`` are only used for exact distances.
All functions here are pure.
"""

from __future__ import annotations

import math
from enum import IntEnum

Coordinate = tuple[int, int]
CubeCoordinate = tuple[int, int, int]

_COS_30 = math.cos(math.radians(30))


class HexDirection(IntEnum):
    """The six neighbour directions, in their canonical order."""

    NE = 0
    E = 1
    SE = 2
    SW = 3
    W = 4
    NW = 5

    @property
    def opposite(self) -> HexDirection:
        """Return the direction pointing back the other way."""
        return HexDirection((self.value + 3) % 6)

    @property
    def delta(self) -> Coordinate:
        """Return the ``(dx, dy)`` offset step for this direction."""
        return DIRECTION_DELTAS[self]


DIRECTION_DELTAS: dict[HexDirection, Coordinate] = {
    HexDirection.NE: (0, 1),
    HexDirection.E: (1, 0),
    HexDirection.SE: (1, -1),
    HexDirection.SW: (0, -1),
    HexDirection.W: (-1, 0),
    HexDirection.NW: (-1, 1),
}


def offset_to_cube(col: int, row: int) -> CubeCoordinate:
    """Convert offset coordinates to cube coordinates.

    Args:
        col: Column index.
        row: Row index.

    Returns:
        The ``(q, r, s)`` cube coordinate.
    """
    q = col
    r = row - (col + (col & 1)) // 2
    return q, r, -q - r


def hex_distance(a: Coordinate, b: Coordinate) -> int:
    """Return the number of hex steps between two offset coordinates."""
    qa, ra, sa = offset_to_cube(*a)
    qb, rb, sb = offset_to_cube(*b)
    return max(abs(qa - qb), abs(ra - rb), abs(sa - sb))


def neighbour_coordinate(x: int, y: int, direction: HexDirection) -> Coordinate:
    """Return the offset coordinate one step from ``(x, y)`` in ``direction``."""
    dx, dy = DIRECTION_DELTAS[direction]
    return x + dx, y + dy


def cell_world_position(
    x: int,
    y: int,
    tile_size: float = 1.0,
    elevation: float = 0.0,
) -> tuple[float, float, float]:
    """Map an offset coordinate to a world-space position.

    Columns are packed ``cos(30°) * tile_size`` apart and odd columns are
    pushed half a tile along the row axis.  The result is ``(x, y, z)``
    with ``y`` being the vertical axis.

    Args:
        x: Column index.
        y: Row index.
        tile_size: Distance between adjacent rows in world units.
        elevation: Vertical offset for the cell (mountain tiers).

    Returns:
        A 3-tuple world position.
    """
    world_x = x * tile_size * _COS_30
    world_z = y * tile_size + (tile_size * 0.5 if x % 2 == 1 else 0.0)
    return world_x, elevation, world_z
