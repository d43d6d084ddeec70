"""Fractal noise fields — seeded, multi-octave, min-max normalised.

Each field is a ``(height, width)`` NumPy array indexed ``[y, x]``.  The
per-octave sampling coordinates are separable (the x coordinate only
depends on the column, the y coordinate only on the row), so each octave
is evaluated as one vectorised OpenSimplex grid.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from opensimplex import OpenSimplex

MIN_SCALE = 0.0001
_OCTAVE_OFFSET_RANGE = 100_000
_SEED_SPACE = 2**64


@dataclass(frozen=True)
class NoiseParameters:
    """Shape parameters for a fractal noise field.

    Attributes:
        scale: Zoom factor; larger values give broader features.
        octaves: Number of noise layers summed together.
        persistence: Amplitude multiplier applied per octave.
        lacunarity: Frequency multiplier applied per octave.
        offset: Base ``(x, y)`` offset added to every octave offset.
    """

    scale: float
    octaves: int
    persistence: float
    lacunarity: float
    offset: tuple[float, float] = (0.0, 0.0)

    def for_forest(self) -> NoiseParameters:
        """Derive the finer secondary parameters used for forest density."""
        return NoiseParameters(
            scale=self.scale * 1.5,
            octaves=max(1, self.octaves - 1),
            persistence=self.persistence,
            lacunarity=self.lacunarity,
            offset=(self.offset[0] + 100, self.offset[1] + 100),
        )


def make_rng(seed: int) -> Generator:
    """Return a numpy generator for any integer seed, negative ones included.

    numpy only accepts non-negative seeds, so ``seed`` is folded into the
    unsigned 64-bit range first.
    """
    return np.random.default_rng(seed % _SEED_SPACE)


def octave_offsets(
    seed: int,
    octaves: int,
    offset: tuple[float, float],
) -> list[tuple[float, float]]:
    """Draw one ``(x, y)`` offset per octave from a generator seeded by ``seed``.

    Args:
        seed: Seed for the offset generator.
        octaves: Number of offsets to draw.
        offset: Base offset added to every draw.

    Returns:
        A list of ``octaves`` offset pairs.
    """
    rng = make_rng(seed)
    result: list[tuple[float, float]] = []
    for _ in range(octaves):
        ox = int(rng.integers(-_OCTAVE_OFFSET_RANGE, _OCTAVE_OFFSET_RANGE))
        oy = int(rng.integers(-_OCTAVE_OFFSET_RANGE, _OCTAVE_OFFSET_RANGE))
        result.append((ox + offset[0], oy + offset[1]))
    return result


def normalise(field: NDArray[np.float64]) -> NDArray[np.float64]:
    """Linearly remap a field so its minimum is 0 and its maximum is 1.

    A constant field has no spread and maps to all zeros.
    """
    lo = float(field.min())
    hi = float(field.max())
    if hi == lo:
        return np.zeros_like(field)
    out = (field - lo) / (hi - lo)
    # Pin the extremes so float rounding cannot leave them a hair off
    out[field == lo] = 0.0
    out[field == hi] = 1.0
    return out


def generate_noise_map(
    width: int,
    height: int,
    seed: int,
    params: NoiseParameters,
) -> NDArray[np.float64]:
    """Generate a normalised fractal noise field.

    Each octave samples the coherent noise at
    ``((x - width/2) / scale * frequency + ox, (y - height/2) / scale *
    frequency + oy)``, a value in ``[-1, 1]``, and adds it weighted by the
    current amplitude.  Amplitude starts at 1 and is multiplied by
    ``persistence`` per octave; frequency starts at 1 and is multiplied by
    ``lacunarity``.  The summed field is min-max normalised.

    Args:
        width: Number of columns.
        height: Number of rows.
        seed: Seed for the octave offsets and the noise permutation.
        params: Fractal shape parameters.

    Returns:
        A ``(height, width)`` float64 array with values in ``[0, 1]``.
    """
    scale = params.scale if params.scale > 0 else MIN_SCALE
    offsets = octave_offsets(seed, params.octaves, params.offset)
    simplex = OpenSimplex(seed=seed)

    xs = (np.arange(width, dtype=np.float64) - width / 2.0) / scale
    ys = (np.arange(height, dtype=np.float64) - height / 2.0) / scale

    total = np.zeros((height, width), dtype=np.float64)
    amplitude = 1.0
    frequency = 1.0
    for ox, oy in offsets:
        # noise2array returns shape (len(ys), len(xs)), values already in [-1, 1]
        raw = simplex.noise2array(xs * frequency + ox, ys * frequency + oy)
        total += raw * amplitude
        amplitude *= params.persistence
        frequency *= params.lacunarity

    return normalise(total)
