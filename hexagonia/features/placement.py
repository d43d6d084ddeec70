"""Placement engine — scatter special features under spacing constraints.

The pass walks the grid in generation order and draws exactly one uniform
roll per cell from the shared generator, whether or not the cell is
eligible for anything.  A feature is accepted when the roll is below its
spawn chance and it is at least ``min_distance`` hex steps from every
earlier placement of the same kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from hexagonia.features.rarity import (
    DEFAULT_RARITY_TABLE,
    FeatureKind,
    FeatureRule,
    rules_for,
)
from hexagonia.grid.cell import SpecialFeature
from hexagonia.grid.hexmath import Coordinate, hex_distance

if TYPE_CHECKING:
    from numpy.random import Generator

    from hexagonia.grid.cell import Cell
    from hexagonia.grid.grid import Grid

logger = structlog.get_logger()

DEFAULT_MIN_DISTANCE = 3


@dataclass
class PlacementRegistry:
    """Accepted feature positions, per kind, in placement order.

    Attributes:
        positions: Mapping from feature kind to its accepted coordinates.
    """

    positions: dict[FeatureKind, list[Coordinate]] = field(
        default_factory=lambda: {kind: [] for kind in FeatureKind},
    )

    def can_place(self, kind: FeatureKind, x: int, y: int, min_distance: int) -> bool:
        """Return True if ``(x, y)`` is far enough from every ``kind`` placement."""
        return all(
            hex_distance((x, y), placed) >= min_distance
            for placed in self.positions[kind]
        )

    def record(self, kind: FeatureKind, x: int, y: int) -> None:
        """Append an accepted position for ``kind``."""
        self.positions[kind].append((x, y))

    def count(self, kind: FeatureKind) -> int:
        """Return how many ``kind`` features have been placed."""
        return len(self.positions[kind])


def _select_rule(
    cell: Cell,
    roll: float,
    rules: list[FeatureRule],
    registry: PlacementRegistry,
    min_distance: int,
    *,
    cascade: bool,
) -> FeatureRule | None:
    """Pick the rule to apply to ``cell`` for this roll, if any.

    With ``cascade`` a rule whose roll passes but whose spacing fails lets
    the next, less rare rule try.  Without it the first rule whose roll
    passes is the only candidate.
    """
    for rule in rules:
        if roll >= rule.spawn_chance:
            continue
        if registry.can_place(rule.kind, cell.x, cell.y, min_distance):
            return rule
        logger.debug(
            "Feature spacing rejected",
            kind=rule.kind.value,
            x=cell.x,
            y=cell.y,
        )
        if not cascade:
            return None
    return None


def place_feature(
    cell: Cell,
    rule: FeatureRule,
    registry: PlacementRegistry,
) -> None:
    """Apply ``rule``'s feature to ``cell`` and record the position."""
    cell.apply_feature(
        SpecialFeature(base_terrain=cell.terrain, rarity=rule.rarity, kind=rule.kind),
    )
    registry.record(rule.kind, cell.x, cell.y)
    logger.debug(
        "Feature placed",
        kind=rule.kind.value,
        rarity=int(rule.rarity),
        x=cell.x,
        y=cell.y,
    )


def place_features(
    grid: Grid,
    rng: Generator,
    rarity_table: tuple[FeatureRule, ...] = DEFAULT_RARITY_TABLE,
    min_distance: int = DEFAULT_MIN_DISTANCE,
    *,
    cascade_on_spacing_failure: bool = True,
    registry: PlacementRegistry | None = None,
) -> PlacementRegistry:
    """Run the special-feature pass over ``grid`` in place.

    Args:
        grid: A fully built and linked grid.
        rng: Shared seeded generator; one ``random()`` draw per cell.
        rarity_table: Feature rules, see ``hexagonia.features.rarity``.
        min_distance: Minimum hex distance between features of one kind.
        cascade_on_spacing_failure: Let a spacing failure fall through to
            less rare features on the same cell.
        registry: Existing registry to extend; a new one is created if
            omitted.

    Returns:
        The registry of accepted positions.
    """
    if registry is None:
        registry = PlacementRegistry()

    for cell in grid.iter_cells():
        roll = float(rng.random())
        if cell.feature is not None:
            continue
        rules = rules_for(cell.terrain, rarity_table)
        if not rules:
            continue
        rule = _select_rule(
            cell,
            roll,
            rules,
            registry,
            min_distance,
            cascade=cascade_on_spacing_failure,
        )
        if rule is not None:
            place_feature(cell, rule, registry)

    return registry
