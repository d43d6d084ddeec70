"""Shared fixtures for the Hexagonia test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import numpy as np
import pytest
import structlog
from numpy.random import Generator

from hexagonia.generation.config import GeneratorConfig
from hexagonia.generation.engine import MapGenerator
from hexagonia.grid.grid import Grid, build_grid
from hexagonia.terrain.classifier import TerrainThresholds


class ScriptedRng:
    """Stand-in generator that returns pre-set rolls, then a fixed default."""

    def __init__(
        self,
        rolls: dict[int, float] | None = None,
        default: float = 0.99,
    ) -> None:
        self.rolls = rolls or {}
        self.default = default
        self.calls = 0

    def random(self) -> float:
        value = self.rolls.get(self.calls, self.default)
        self.calls += 1
        return value


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def default_thresholds() -> TerrainThresholds:
    """Thresholds for the default 35/30/20/10/5 distribution."""
    return TerrainThresholds.from_percentages(35, 30, 20, 10, 5)


@pytest.fixture
def small_config() -> GeneratorConfig:
    """The 10x10, seed 42 configuration with default shares."""
    return GeneratorConfig(seed=42, width=10, height=10)


@pytest.fixture
def small_generator(small_config: GeneratorConfig) -> MapGenerator:
    """A generator that has run every stage on ``small_config``."""
    generator = MapGenerator(config=small_config)
    generator.run()
    return generator


def uniform_grid(
    value: float,
    thresholds: TerrainThresholds,
    width: int = 10,
    height: int = 10,
) -> Grid:
    """Build a grid whose every cell has the same height value."""
    return build_grid(width, height, np.full((height, width), value), thresholds)


@pytest.fixture
def make_grid() -> Callable[..., Grid]:
    """Factory for grids with a single uniform height value."""
    return uniform_grid


@pytest.fixture
def scripted_rng() -> type[ScriptedRng]:
    """The ScriptedRng class, for tests that need exact roll sequences."""
    return ScriptedRng


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo any structlog configuration a test (e.g. the CLI) applied."""
    yield
    structlog.reset_defaults()
