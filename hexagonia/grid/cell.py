"""Cell — a single hex position in the generated map.

A cell records its offset coordinate, world position, terrain, mountain
tier and an optional special feature.  Neighbour links are references to
other cells owned by the same Grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hexagonia.terrain.classifier import TerrainType

if TYPE_CHECKING:
    from hexagonia.features.rarity import FeatureKind, RarityTier
    from hexagonia.grid.hexmath import HexDirection


@dataclass(frozen=True)
class SpecialFeature:
    """A special feature placed on a cell.

    Attributes:
        base_terrain: The terrain the cell had before the feature replaced it.
        rarity: Rarity tier of the feature.
        kind: Which feature was placed.
    """

    base_terrain: TerrainType
    rarity: RarityTier
    kind: FeatureKind


@dataclass(eq=False)
class Cell:
    """One hex grid position.

    Attributes:
        x: Column index.
        y: Row index.
        world_position: ``(x, y, z)`` world-space position, ``y`` vertical.
        terrain: Terrain category.
        mountain_tier: 1-4 for mountainous cells above the mountain
            threshold, 0 otherwise.
        forest_density: Cosmetic secondary-noise value in ``[0, 1]``.
        feature: Special feature placed here, if any.
        neighbours: Adjacent cells keyed by direction.
    """

    x: int
    y: int
    world_position: tuple[float, float, float]
    terrain: TerrainType
    mountain_tier: int = 0
    forest_density: float = 0.0
    feature: SpecialFeature | None = None
    neighbours: dict[HexDirection, Cell] = field(default_factory=dict, repr=False)

    @property
    def coord(self) -> tuple[int, int]:
        """Return the ``(x, y)`` offset coordinate."""
        return self.x, self.y

    @property
    def is_mountainous(self) -> bool:
        """Return True if the cell is Mountain or MountainForest."""
        return self.terrain.is_mountainous

    @property
    def has_feature(self) -> bool:
        """Return True if a special feature was placed on this cell."""
        return self.feature is not None

    @property
    def elevation(self) -> float:
        """Vertical lift for presentation: half a unit per mountain tier."""
        return self.mountain_tier * 0.5

    @property
    def vertical_scale(self) -> float:
        """Height scale for presentation; 1.0 for flat cells."""
        if self.mountain_tier <= 0:
            return 1.0
        return 1.0 + (self.mountain_tier - 1) * 0.25

    def neighbour(self, direction: HexDirection) -> Cell | None:
        """Return the adjacent cell in ``direction``, or None at an edge."""
        return self.neighbours.get(direction)

    def link(self, direction: HexDirection, other: Cell) -> None:
        """Link ``other`` under ``direction`` and this cell back under the opposite."""
        self.neighbours[direction] = other
        other.neighbours[direction.opposite] = self

    def apply_feature(self, feature: SpecialFeature) -> None:
        """Turn this cell into a special-feature cell."""
        self.feature = feature
        self.terrain = TerrainType.SPECIAL_FEATURE
