"""Grid — the container that owns every Cell, plus the topology builder.

``build_grid`` classifies every position from the height field, creates
the cells, and then wires the six-direction neighbour graph in a single
pass once all cells exist.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hexagonia.grid.cell import Cell
from hexagonia.grid.hexmath import (
    HexDirection,
    cell_world_position,
    neighbour_coordinate,
)
from hexagonia.terrain.classifier import (
    TerrainThresholds,
    TerrainType,
    classify,
    mountain_tier,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    import numpy as np
    from numpy.typing import NDArray


@dataclass
class Grid:
    """A fixed-size hex map.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        cells: 2D list of Cell objects indexed as ``cells[y][x]``.
    """

    width: int
    height: int
    cells: list[list[Cell]] = field(default_factory=list, repr=False)

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        """Return the cell at grid coordinates ``(x, y)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return self.cells[y][x]

    def get_cell_at(self, x: int, y: int) -> Cell | None:
        """Bounds-checked lookup; returns None outside the grid."""
        if not self.in_bounds(x, y):
            return None
        return self.cells[y][x]

    def iter_cells(self) -> Iterator[Cell]:
        """Yield every cell column by column (x outer, y inner).

        This is the generation order; the placement pass relies on it.
        """
        for x in range(self.width):
            for y in range(self.height):
                yield self.cells[y][x]

    def neighbours(self, x: int, y: int) -> list[Cell]:
        """Return the linked neighbours of ``(x, y)`` in direction order."""
        cell = self.cell_at(x, y)
        return [cell.neighbours[d] for d in HexDirection if d in cell.neighbours]

    def terrain_counts(self) -> Counter[TerrainType]:
        """Count cells per current terrain type."""
        return Counter(cell.terrain for cell in self.iter_cells())

    def features(self) -> list[Cell]:
        """Return cells carrying a special feature, in generation order."""
        return [cell for cell in self.iter_cells() if cell.feature is not None]

    def __len__(self) -> int:
        return self.width * self.height


def link_neighbours(grid: Grid) -> None:
    """Wire the neighbour graph of a fully populated grid.

    For every cell and direction, an in-bounds neighbour is linked in both
    directions.  Out-of-bounds positions are skipped, so edge and corner
    cells end up with fewer entries.
    """
    for cell in grid.iter_cells():
        for direction in HexDirection:
            nx, ny = neighbour_coordinate(cell.x, cell.y, direction)
            other = grid.get_cell_at(nx, ny)
            if other is not None:
                cell.link(direction, other)


def build_grid(
    width: int,
    height: int,
    height_map: NDArray[np.float64],
    thresholds: TerrainThresholds,
    *,
    forest_map: NDArray[np.float64] | None = None,
    tile_size: float = 1.0,
) -> Grid:
    """Create and link every cell of a map.

    Args:
        width: Number of columns.
        height: Number of rows.
        height_map: Normalised primary field, shape ``(height, width)``.
        thresholds: Terrain classification thresholds.
        forest_map: Optional cosmetic secondary field, same shape.
        tile_size: World-space size of one tile.

    Returns:
        A fully linked Grid.
    """
    if height_map.shape != (height, width):
        msg = f"height map shape {height_map.shape} does not match {height}x{width}"
        raise ValueError(msg)

    def make_cell(x: int, y: int) -> Cell:
        value = float(height_map[y, x])
        terrain = classify(value, thresholds)
        tier = mountain_tier(value, terrain, thresholds)
        return Cell(
            x=x,
            y=y,
            world_position=cell_world_position(x, y, tile_size, tier * 0.5),
            terrain=terrain,
            mountain_tier=tier,
            forest_density=float(forest_map[y, x]) if forest_map is not None else 0.0,
        )

    # Every cell exists before any neighbour is linked
    grid = Grid(
        width=width,
        height=height,
        cells=[[make_cell(x, y) for x in range(width)] for y in range(height)],
    )
    link_neighbours(grid)
    return grid
