"""MapGenerator — the generation pipeline.

Owns all per-run state and advances it through the stages in a fixed
order, each consuming the full output of the previous one:

1. Validate config and derive terrain thresholds
2. Randomise noise parameters from the master generator
3. Generate the height and forest noise fields
4. Build cells and wire the neighbour graph
5. Place special features (shares the master generator)
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import structlog
from numpy.random import Generator
from numpy.typing import NDArray

from hexagonia.features.placement import PlacementRegistry, place_features
from hexagonia.features.rarity import rarity_table_from_config
from hexagonia.generation.config import GeneratorConfig
from hexagonia.grid.grid import Grid, build_grid
from hexagonia.terrain.classifier import TerrainThresholds
from hexagonia.terrain.noise import (
    NoiseParameters,
    generate_noise_map,
    make_rng,
)

logger = structlog.get_logger()


@dataclass
class MapGenerator:
    """Runs one seeded generation.

    Attributes:
        config: Validated generation configuration.
        rng: Master seeded random generator (parameters, then features).
        thresholds: Terrain classification thresholds.
        noise_params: Parameters of the primary height field.
        height_map: Normalised primary field, ``(height, width)``.
        forest_map: Normalised secondary field, ``(height, width)``.
        grid: The generated grid once ``run`` has finished.
        registry: Accepted feature positions from the placement pass.
    """

    config: GeneratorConfig
    rng: Generator = field(init=False)
    thresholds: TerrainThresholds = field(init=False)
    noise_params: NoiseParameters = field(init=False)
    height_map: NDArray[np.float64] | None = field(init=False, default=None, repr=False)
    forest_map: NDArray[np.float64] | None = field(init=False, default=None, repr=False)
    grid: Grid | None = field(init=False, default=None, repr=False)
    registry: PlacementRegistry | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate config, seed the master RNG and draw noise parameters."""
        self.config.validate()
        self.rng = make_rng(self.config.seed)
        self.thresholds = self.config.thresholds()
        self._log_distribution()
        self.noise_params = self._randomise_parameters()

    def _randomise_parameters(self) -> NoiseParameters:
        """Draw noise parameters from the master RNG, honouring overrides.

        Every draw is made even when overridden so the generator is left
        in the same state for the placement pass.
        """
        cfg = self.config
        scale = 15.0 + float(self.rng.random()) * 30.0
        octaves = 3 + int(self.rng.integers(0, 4))
        persistence = 0.3 + float(self.rng.random()) * 0.4
        lacunarity = 1.5 + float(self.rng.random())
        offset = (
            float(self.rng.integers(-10000, 10000)),
            float(self.rng.integers(-10000, 10000)),
        )

        params = NoiseParameters(
            scale=cfg.noise_scale if cfg.noise_scale is not None else scale,
            octaves=cfg.octaves if cfg.octaves is not None else octaves,
            persistence=cfg.persistence if cfg.persistence is not None else persistence,
            lacunarity=cfg.lacunarity if cfg.lacunarity is not None else lacunarity,
            offset=cfg.offset if cfg.offset is not None else offset,
        )
        logger.info(
            "Noise parameters",
            scale=round(params.scale, 3),
            octaves=params.octaves,
            persistence=round(params.persistence, 3),
            lacunarity=round(params.lacunarity, 3),
            offset=params.offset,
        )
        return params

    def _log_distribution(self) -> None:
        water, land, forest, mountain, mountain_forest = self.thresholds.shares
        logger.info(
            "Terrain distribution",
            water=f"{water * 100:.1f}%",
            land=f"{land * 100:.1f}%",
            forest=f"{forest * 100:.1f}%",
            mountain=f"{mountain * 100:.1f}%",
            mountain_forest=f"{mountain_forest * 100:.1f}%",
        )

    def generate_noise_maps(self) -> NDArray[np.float64]:
        """Generate the primary height field and the secondary forest field.

        Returns:
            The primary height field.
        """
        cfg = self.config
        height_map = generate_noise_map(
            cfg.width,
            cfg.height,
            cfg.seed,
            self.noise_params,
        )
        self.height_map = height_map
        self.forest_map = generate_noise_map(
            cfg.width,
            cfg.height,
            cfg.seed + 1,
            self.noise_params.for_forest(),
        )
        return height_map

    def build(self) -> Grid:
        """Classify every position and build the linked grid."""
        height_map = self.height_map
        if height_map is None:
            height_map = self.generate_noise_maps()
        self.grid = build_grid(
            self.config.width,
            self.config.height,
            height_map,
            self.thresholds,
            forest_map=self.forest_map,
            tile_size=self.config.tile_size,
        )
        return self.grid

    def place_special_features(self) -> PlacementRegistry:
        """Run the feature pass on the built grid."""
        grid = self.grid if self.grid is not None else self.build()
        self.registry = place_features(
            grid,
            self.rng,
            rarity_table_from_config(self.config),
            self.config.min_distance_between_same_type,
            cascade_on_spacing_failure=self.config.cascade_on_spacing_failure,
        )
        return self.registry

    def run(self) -> Grid:
        """Run every stage and return the finished grid."""
        self.generate_noise_maps()
        grid = self.build()
        self.place_special_features()
        counts = grid.terrain_counts()
        logger.info(
            "Map generated",
            width=self.config.width,
            height=self.config.height,
            seed=self.config.seed,
            terrain={t.value: n for t, n in counts.items()},
            features=len(grid.features()),
        )
        return grid


def generate(config: GeneratorConfig) -> Grid:
    """Generate a complete map from ``config``.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    return MapGenerator(config=config).run()
