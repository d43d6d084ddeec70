"""Tests for hexagonia.grid — cells, grid lookups and neighbour wiring."""

from collections.abc import Callable

import numpy as np
import pytest

from hexagonia.grid.cell import Cell
from hexagonia.grid.grid import Grid, build_grid
from hexagonia.grid.hexmath import HexDirection
from hexagonia.terrain.classifier import TerrainThresholds, TerrainType, classify


def _ramp(width: int, height: int) -> np.ndarray:
    values = np.arange(width * height, dtype=np.float64).reshape(height, width)
    return values / values.max()


class TestCell:
    """Tests for the Cell dataclass."""

    def test_defaults(self) -> None:
        cell = Cell(x=1, y=2, world_position=(0.0, 0.0, 0.0), terrain=TerrainType.LAND)
        assert cell.coord == (1, 2)
        assert cell.mountain_tier == 0
        assert cell.feature is None
        assert not cell.has_feature
        assert cell.neighbours == {}
        assert cell.elevation == 0.0
        assert cell.vertical_scale == 1.0

    def test_mountain_presentation(self) -> None:
        cell = Cell(
            x=0,
            y=0,
            world_position=(0.0, 1.5, 0.0),
            terrain=TerrainType.MOUNTAIN,
            mountain_tier=3,
        )
        assert cell.is_mountainous
        assert cell.elevation == 1.5
        assert cell.vertical_scale == 1.5

    def test_link_is_symmetric(self) -> None:
        a = Cell(x=0, y=0, world_position=(0.0, 0.0, 0.0), terrain=TerrainType.LAND)
        b = Cell(x=1, y=0, world_position=(0.0, 0.0, 0.0), terrain=TerrainType.LAND)
        a.link(HexDirection.E, b)
        assert a.neighbour(HexDirection.E) is b
        assert b.neighbour(HexDirection.W) is a
        assert a.neighbour(HexDirection.NE) is None


class TestBuildGrid:
    """Tests for the grid topology builder."""

    def test_cell_count(self, default_thresholds: TerrainThresholds) -> None:
        grid = build_grid(6, 4, _ramp(6, 4), default_thresholds)
        assert len(grid) == 24
        assert sum(1 for _ in grid.iter_cells()) == 24
        coords = {cell.coord for cell in grid.iter_cells()}
        assert len(coords) == 24

    def test_cells_indexed_by_position(
        self,
        default_thresholds: TerrainThresholds,
    ) -> None:
        grid = build_grid(6, 4, _ramp(6, 4), default_thresholds)
        for y in range(4):
            for x in range(6):
                assert grid.cells[y][x].coord == (x, y)

    def test_classification_matches_height(
        self,
        default_thresholds: TerrainThresholds,
    ) -> None:
        heights = _ramp(6, 4)
        grid = build_grid(6, 4, heights, default_thresholds)
        for cell in grid.iter_cells():
            assert cell.terrain is classify(float(heights[cell.y, cell.x]), default_thresholds)

    def test_tiers_only_on_mountains(
        self,
        default_thresholds: TerrainThresholds,
    ) -> None:
        grid = build_grid(8, 8, _ramp(8, 8), default_thresholds)
        for cell in grid.iter_cells():
            if cell.is_mountainous:
                assert 1 <= cell.mountain_tier <= 4
                assert cell.world_position[1] == cell.mountain_tier * 0.5
            else:
                assert cell.mountain_tier == 0
                assert cell.world_position[1] == 0.0

    def test_mountain_on_threshold_is_flat(
        self,
        make_grid: Callable[..., Grid],
        default_thresholds: TerrainThresholds,
    ) -> None:
        grid = make_grid(default_thresholds.mountain, default_thresholds, width=3, height=3)
        cell = grid.cell_at(1, 1)
        assert cell.terrain is TerrainType.MOUNTAIN
        assert cell.mountain_tier == 0
        assert cell.elevation == 0.0
        assert cell.vertical_scale == 1.0

    def test_forest_density_copied(
        self,
        default_thresholds: TerrainThresholds,
    ) -> None:
        forest = np.full((3, 3), 0.25)
        grid = build_grid(3, 3, _ramp(3, 3), default_thresholds, forest_map=forest)
        assert all(cell.forest_density == 0.25 for cell in grid.iter_cells())

    def test_shape_mismatch_rejected(
        self,
        default_thresholds: TerrainThresholds,
    ) -> None:
        with pytest.raises(ValueError):
            build_grid(4, 5, _ramp(5, 4), default_thresholds)

    def test_iteration_is_column_major(
        self,
        default_thresholds: TerrainThresholds,
    ) -> None:
        grid = build_grid(3, 2, _ramp(3, 2), default_thresholds)
        order = [cell.coord for cell in grid.iter_cells()]
        assert order == [(0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1)]


class TestNeighbours:
    """Tests for the six-direction neighbour graph."""

    @pytest.fixture
    def grid(self, make_grid: Callable[..., Grid], default_thresholds: TerrainThresholds) -> Grid:
        """A 6x5 all-land grid."""
        return make_grid(0.5, default_thresholds, width=6, height=5)

    def test_symmetry(self, grid: Grid) -> None:
        for cell in grid.iter_cells():
            for direction, other in cell.neighbours.items():
                assert other.neighbours[direction.opposite] is cell

    def test_links_follow_direction_deltas(self, grid: Grid) -> None:
        for cell in grid.iter_cells():
            for direction, other in cell.neighbours.items():
                dx, dy = direction.delta
                assert other.coord == (cell.x + dx, cell.y + dy)

    def test_interior_has_six(self, grid: Grid) -> None:
        assert len(grid.cell_at(2, 2).neighbours) == 6

    def test_origin_corner(self, grid: Grid) -> None:
        cell = grid.cell_at(0, 0)
        assert set(cell.neighbours) == {HexDirection.NE, HexDirection.E}

    def test_far_corner(self, grid: Grid) -> None:
        cell = grid.cell_at(5, 4)
        assert set(cell.neighbours) == {HexDirection.SW, HexDirection.W}

    def test_bottom_right_corner(self, grid: Grid) -> None:
        cell = grid.cell_at(5, 0)
        assert set(cell.neighbours) == {HexDirection.NE, HexDirection.W, HexDirection.NW}

    def test_neighbours_helper(self, grid: Grid) -> None:
        coords = [c.coord for c in grid.neighbours(0, 0)]
        assert coords == [(0, 1), (1, 0)]


class TestLookup:
    """Tests for bounds-checked lookups."""

    def test_get_cell_at_valid(
        self,
        make_grid: Callable[..., Grid],
        default_thresholds: TerrainThresholds,
    ) -> None:
        grid = make_grid(0.5, default_thresholds, width=4, height=4)
        cell = grid.get_cell_at(3, 1)
        assert cell is not None
        assert cell.coord == (3, 1)

    @pytest.mark.parametrize(("x", "y"), [(-1, 0), (0, -1), (4, 0), (0, 4)])
    def test_get_cell_at_out_of_bounds(
        self,
        make_grid: Callable[..., Grid],
        default_thresholds: TerrainThresholds,
        x: int,
        y: int,
    ) -> None:
        grid = make_grid(0.5, default_thresholds, width=4, height=4)
        assert grid.get_cell_at(x, y) is None
        with pytest.raises(IndexError):
            grid.cell_at(x, y)

    def test_terrain_counts(
        self,
        make_grid: Callable[..., Grid],
        default_thresholds: TerrainThresholds,
    ) -> None:
        grid = make_grid(0.1, default_thresholds, width=4, height=3)
        assert grid.terrain_counts() == {TerrainType.WATER: 12}
        assert grid.features() == []
