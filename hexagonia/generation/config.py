"""Config — load map-generation parameters from YAML files.

All caller-supplied knobs (map size, seed, terrain shares, feature spawn
chances, spacing, tile size, optional noise overrides) live in YAML and are
parsed into a typed dataclass here.  ``validate`` rejects unusable values
before any generation stage runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from hexagonia.features.placement import DEFAULT_MIN_DISTANCE
from hexagonia.features.rarity import (
    DEFAULT_ARCHERY_CHANCE,
    DEFAULT_CHEST_CHANCE,
    DEFAULT_LILY_PAD_CHANCE,
    DEFAULT_POD_CHANCE,
)
from hexagonia.terrain.classifier import TerrainThresholds


class ConfigError(ValueError):
    """Raised when a GeneratorConfig cannot produce a map."""


@dataclass
class GeneratorConfig:
    """Top-level map generation configuration.

    Attributes:
        seed: RNG seed, any integer; identical configs always produce
            identical maps.
        width: Number of grid columns.
        height: Number of grid rows.
        water_percentage: Target share of water cells.
        land_percentage: Target share of plain land cells.
        forest_percentage: Target share of forest cells.
        mountain_percentage: Target share of mountain cells.
        mountain_forest_percentage: Target share of forested mountain cells.
        min_distance_between_same_type: Minimum hex distance between two
            features of the same kind.
        chest_spawn_chance: Very rare feature roll threshold.
        archery_spawn_chance: Rare feature roll threshold.
        pod_spawn_chance: Uncommon feature roll threshold.
        lily_pad_spawn_chance: Common (water) feature roll threshold.
        tile_size: World-space size of one tile.
        cascade_on_spacing_failure: Whether a spacing failure for a rare
            feature lets less rare features try the same cell.
        noise_scale: Fixed noise scale, or None to randomise from the seed.
        octaves: Fixed octave count, or None to randomise.
        persistence: Fixed persistence, or None to randomise.
        lacunarity: Fixed lacunarity, or None to randomise.
        offset: Fixed ``(x, y)`` noise offset, or None to randomise.
    """

    seed: int = 0
    width: int = 10
    height: int = 10

    # Terrain distribution
    water_percentage: float = 35.0
    land_percentage: float = 30.0
    forest_percentage: float = 20.0
    mountain_percentage: float = 10.0
    mountain_forest_percentage: float = 5.0

    # Special features
    min_distance_between_same_type: int = DEFAULT_MIN_DISTANCE
    chest_spawn_chance: float = DEFAULT_CHEST_CHANCE
    archery_spawn_chance: float = DEFAULT_ARCHERY_CHANCE
    pod_spawn_chance: float = DEFAULT_POD_CHANCE
    lily_pad_spawn_chance: float = DEFAULT_LILY_PAD_CHANCE
    cascade_on_spacing_failure: bool = True

    tile_size: float = 1.0

    # Noise overrides (None -> derived from seed)
    noise_scale: float | None = None
    octaves: int | None = None
    persistence: float | None = None
    lacunarity: float | None = None
    offset: tuple[float, float] | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> GeneratorConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GeneratorConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        offset = data.get("offset", cls.offset)
        return cls(
            seed=data.get("seed", cls.seed),
            width=data.get("width", cls.width),
            height=data.get("height", cls.height),
            water_percentage=data.get("water_percentage", cls.water_percentage),
            land_percentage=data.get("land_percentage", cls.land_percentage),
            forest_percentage=data.get("forest_percentage", cls.forest_percentage),
            mountain_percentage=data.get(
                "mountain_percentage",
                cls.mountain_percentage,
            ),
            mountain_forest_percentage=data.get(
                "mountain_forest_percentage",
                cls.mountain_forest_percentage,
            ),
            min_distance_between_same_type=data.get(
                "min_distance_between_same_type",
                cls.min_distance_between_same_type,
            ),
            chest_spawn_chance=data.get(
                "chest_spawn_chance",
                cls.chest_spawn_chance,
            ),
            archery_spawn_chance=data.get(
                "archery_spawn_chance",
                cls.archery_spawn_chance,
            ),
            pod_spawn_chance=data.get("pod_spawn_chance", cls.pod_spawn_chance),
            lily_pad_spawn_chance=data.get(
                "lily_pad_spawn_chance",
                cls.lily_pad_spawn_chance,
            ),
            cascade_on_spacing_failure=data.get(
                "cascade_on_spacing_failure",
                cls.cascade_on_spacing_failure,
            ),
            tile_size=data.get("tile_size", cls.tile_size),
            noise_scale=data.get("noise_scale", cls.noise_scale),
            octaves=data.get("octaves", cls.octaves),
            persistence=data.get("persistence", cls.persistence),
            lacunarity=data.get("lacunarity", cls.lacunarity),
            offset=tuple(offset) if offset is not None else None,
        )

    @property
    def percentages(self) -> tuple[float, float, float, float, float]:
        """Return the five terrain shares in bucket order."""
        return (
            self.water_percentage,
            self.land_percentage,
            self.forest_percentage,
            self.mountain_percentage,
            self.mountain_forest_percentage,
        )

    def thresholds(self) -> TerrainThresholds:
        """Derive classification thresholds from the terrain shares."""
        return TerrainThresholds.from_percentages(*self.percentages)

    def validate(self) -> None:
        """Reject configurations that cannot produce a map.

        Raises:
            ConfigError: On a non-positive size, bad terrain shares, a
                spawn chance outside ``[0, 1]``, a negative spacing, a
                non-positive tile size or fewer than one octave.
        """
        if self.width <= 0 or self.height <= 0:
            msg = f"grid size must be positive, got {self.width}x{self.height}"
            raise ConfigError(msg)
        if any(share < 0 for share in self.percentages):
            msg = f"terrain percentages must be non-negative, got {self.percentages}"
            raise ConfigError(msg)
        if sum(self.percentages) <= 0:
            msg = "terrain percentages must not sum to zero"
            raise ConfigError(msg)
        chances = {
            "chest_spawn_chance": self.chest_spawn_chance,
            "archery_spawn_chance": self.archery_spawn_chance,
            "pod_spawn_chance": self.pod_spawn_chance,
            "lily_pad_spawn_chance": self.lily_pad_spawn_chance,
        }
        for name, chance in chances.items():
            if not 0.0 <= chance <= 1.0:
                msg = f"{name} must be within [0, 1], got {chance}"
                raise ConfigError(msg)
        if self.min_distance_between_same_type < 0:
            msg = "min_distance_between_same_type must not be negative"
            raise ConfigError(msg)
        if self.tile_size <= 0:
            msg = f"tile_size must be positive, got {self.tile_size}"
            raise ConfigError(msg)
        if self.octaves is not None and self.octaves < 1:
            msg = f"octaves must be at least 1, got {self.octaves}"
            raise ConfigError(msg)
