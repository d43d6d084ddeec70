"""Rarity table — which features exist, how rare they are, where they fit.

Each ``FeatureRule`` binds a feature kind to its rarity tier, spawn chance
and the terrains it may appear on.  Rules are kept in check order: the
rarest feature for a terrain is tried first.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from hexagonia.terrain.classifier import TerrainType

if TYPE_CHECKING:
    from hexagonia.generation.config import GeneratorConfig

DEFAULT_LILY_PAD_CHANCE = 0.1
DEFAULT_POD_CHANCE = 0.01
DEFAULT_ARCHERY_CHANCE = 0.009
DEFAULT_CHEST_CHANCE = 0.001


class RarityTier(IntEnum):
    """Ordinal rarity; higher is rarer."""

    COMMON = 1
    UNCOMMON = 2
    RARE = 3
    VERY_RARE = 4


class FeatureKind(Enum):
    """Special features that can replace a cell's terrain."""

    LILY_PAD = "lily_pad"
    POD = "pod"
    ARCHERY_ZONE = "archery_zone"
    CHEST = "chest"


@dataclass(frozen=True)
class FeatureRule:
    """Placement rule for one feature kind.

    Attributes:
        kind: The feature this rule places.
        rarity: Rarity tier recorded on placed features.
        spawn_chance: Probability threshold a cell's roll must fall below.
        terrains: Terrain types the feature may be placed on.
    """

    kind: FeatureKind
    rarity: RarityTier
    spawn_chance: float
    terrains: frozenset[TerrainType]


_WATER = frozenset({TerrainType.WATER})
_LOWLAND = frozenset({TerrainType.LAND, TerrainType.FOREST})


def build_rarity_table(
    *,
    chest: float = DEFAULT_CHEST_CHANCE,
    archery: float = DEFAULT_ARCHERY_CHANCE,
    pod: float = DEFAULT_POD_CHANCE,
    lily_pad: float = DEFAULT_LILY_PAD_CHANCE,
) -> tuple[FeatureRule, ...]:
    """Return the feature rules, rarest first."""
    return (
        FeatureRule(FeatureKind.CHEST, RarityTier.VERY_RARE, chest, _LOWLAND),
        FeatureRule(FeatureKind.ARCHERY_ZONE, RarityTier.RARE, archery, _LOWLAND),
        FeatureRule(FeatureKind.POD, RarityTier.UNCOMMON, pod, _LOWLAND),
        FeatureRule(FeatureKind.LILY_PAD, RarityTier.COMMON, lily_pad, _WATER),
    )


def rarity_table_from_config(config: GeneratorConfig) -> tuple[FeatureRule, ...]:
    """Build the rule table from a generator config's spawn chances."""
    return build_rarity_table(
        chest=config.chest_spawn_chance,
        archery=config.archery_spawn_chance,
        pod=config.pod_spawn_chance,
        lily_pad=config.lily_pad_spawn_chance,
    )


DEFAULT_RARITY_TABLE = build_rarity_table()


def rules_for(
    terrain: TerrainType,
    table: tuple[FeatureRule, ...],
) -> list[FeatureRule]:
    """Return the rules eligible on ``terrain``, rarest first."""
    eligible = [rule for rule in table if terrain in rule.terrains]
    return sorted(eligible, key=lambda rule: rule.rarity, reverse=True)
