"""Terrain classification — height value to terrain bucket and mountain tier.

Five target shares (water, land, forest, mountain, mountain-forest) are
normalised and turned into cumulative thresholds over ``[0, 1]``.  A
height value is classified by the first threshold it falls below.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Mountain tier breakpoints on the normalised excess above the mountain
# threshold, highest first.
_TIER_BREAKPOINTS: tuple[tuple[float, int], ...] = (
    (0.95, 4),
    (0.75, 3),
    (0.45, 2),
)


class TerrainType(Enum):
    """Closed set of cell terrain categories."""

    WATER = "water"
    LAND = "land"
    FOREST = "forest"
    MOUNTAIN = "mountain"
    MOUNTAIN_FOREST = "mountain_forest"
    SPECIAL_FEATURE = "special_feature"

    @property
    def is_mountainous(self) -> bool:
        """Return True for the two mountain categories."""
        return self in (TerrainType.MOUNTAIN, TerrainType.MOUNTAIN_FOREST)


# Bucket order used by the thresholds, lowest heights first.
BUCKETS: tuple[TerrainType, ...] = (
    TerrainType.WATER,
    TerrainType.LAND,
    TerrainType.FOREST,
    TerrainType.MOUNTAIN,
    TerrainType.MOUNTAIN_FOREST,
)


@dataclass(frozen=True)
class TerrainThresholds:
    """Cumulative classification thresholds.

    Attributes:
        water: Heights below this are Water.
        forest: Heights below this (and not water) are Land.
        mountain: Heights below this (and not land) are Forest.
        mountain_forest: Heights below this (and not forest) are Mountain;
            everything else is MountainForest.
        shares: The normalised per-bucket shares (sum to 1), in
            ``BUCKETS`` order.
    """

    water: float
    forest: float
    mountain: float
    mountain_forest: float
    shares: tuple[float, float, float, float, float]

    @classmethod
    def from_percentages(
        cls,
        water: float,
        land: float,
        forest: float,
        mountain: float,
        mountain_forest: float,
    ) -> TerrainThresholds:
        """Build thresholds from five percentage shares.

        The shares are rescaled to sum to 100 and then expressed as
        fractions, so ``(35, 30, 20, 10, 5)`` and ``(7, 6, 4, 2, 1)`` give
        the same thresholds.

        Raises:
            ValueError: If the shares sum to zero or any share is negative.
        """
        raw = (water, land, forest, mountain, mountain_forest)
        if any(share < 0 for share in raw):
            msg = f"terrain percentages must be non-negative, got {raw}"
            raise ValueError(msg)
        total = sum(raw)
        if total <= 0:
            msg = "terrain percentages must not sum to zero"
            raise ValueError(msg)

        normaliser = 100.0 / total
        w, ln, f, m, mf = (share * normaliser / 100.0 for share in raw)
        water_t = w
        forest_t = water_t + ln
        mountain_t = forest_t + f
        mountain_forest_t = mountain_t + m
        return cls(
            water=water_t,
            forest=forest_t,
            mountain=mountain_t,
            mountain_forest=mountain_forest_t,
            shares=(w, ln, f, m, mf),
        )

    @property
    def cumulative(self) -> tuple[float, float, float, float]:
        """Return the four thresholds in ascending order."""
        return self.water, self.forest, self.mountain, self.mountain_forest


def classify(height: float, thresholds: TerrainThresholds) -> TerrainType:
    """Return the terrain bucket for a normalised height value.

    Values that clear every threshold land in MountainForest, with one
    deliberate deviation from a plain cumulative lookup: when MountainForest
    (or any bucket above the last populated one) has a zero share, the value
    falls back to the highest bucket with a non-zero share.  Only the top of
    the range reaches this branch, and without the fallback the field
    maximum would always yield one cell of a terrain requested at 0%.

    Args:
        height: Normalised height in ``[0, 1]``.
        thresholds: Cumulative thresholds.

    Returns:
        The matching TerrainType.
    """
    for bucket, limit in zip(BUCKETS, thresholds.cumulative):
        if height < limit:
            return bucket
    for bucket, share in zip(reversed(BUCKETS), reversed(thresholds.shares)):
        if share > 0:
            return bucket
    return TerrainType.MOUNTAIN_FOREST


def mountain_excess(height: float, mountain_threshold: float) -> float:
    """Return how far ``height`` sits above the mountain threshold, in ``[0, 1]``."""
    if mountain_threshold >= 1.0:
        return 0.0
    excess = (height - mountain_threshold) / (1.0 - mountain_threshold)
    return min(1.0, max(0.0, excess))


def tier_for_excess(excess: float) -> int:
    """Map a normalised mountain excess to a tier from 1 to 4."""
    for breakpoint, tier in _TIER_BREAKPOINTS:
        if excess > breakpoint:
            return tier
    return 1


def mountain_tier(
    height: float,
    terrain: TerrainType,
    thresholds: TerrainThresholds,
) -> int:
    """Return the mountain tier for a classified cell.

    Only mountainous cells strictly above the mountain threshold are tiered;
    everything else, including a Mountain cell sitting exactly on the
    threshold, gets tier 0.
    """
    if not terrain.is_mountainous or height <= thresholds.mountain:
        return 0
    return tier_for_excess(mountain_excess(height, thresholds.mountain))
