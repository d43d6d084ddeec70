"""Entry point for ``python -m hexagonia``.

Loads the default YAML config, generates a map, and prints a text preview
with terrain and feature counts.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from dataclasses import replace
from typing import TYPE_CHECKING, TextIO

import structlog

from hexagonia.generation.config import ConfigError, GeneratorConfig
from hexagonia.generation.engine import generate
from hexagonia.terrain.classifier import TerrainType

if TYPE_CHECKING:
    from hexagonia.grid.grid import Grid

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

_GLYPHS: dict[TerrainType, str] = {
    TerrainType.WATER: "~",
    TerrainType.LAND: ".",
    TerrainType.FOREST: "f",
    TerrainType.MOUNTAIN: "^",
    TerrainType.MOUNTAIN_FOREST: "A",
    TerrainType.SPECIAL_FEATURE: "*",
}


def configure_logging(*, verbose: bool = False) -> None:
    """Send structured logs to stderr so stdout only carries the preview."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO,
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def render_text(grid: Grid) -> str:
    """Render the grid as text, top row first.

    Odd columns sit half a row higher, so each text row interleaves two
    half-rows: even columns on one line and odd columns on the line above.
    """
    lines: list[str] = []
    for y in reversed(range(grid.height)):
        odd = " ".join(
            _glyph(grid, x, y) if x % 2 == 1 else " " for x in range(grid.width)
        )
        even = " ".join(
            _glyph(grid, x, y) if x % 2 == 0 else " " for x in range(grid.width)
        )
        lines.extend((odd.rstrip(), even.rstrip()))
    return "\n".join(lines)


def _glyph(grid: Grid, x: int, y: int) -> str:
    return _GLYPHS[grid.cell_at(x, y).terrain]


def print_summary(grid: Grid, out: TextIO) -> None:
    """Write terrain and feature counts for ``grid`` to ``out``."""
    counts = grid.terrain_counts()
    out.write(f"Cells: {len(grid)}\n")
    for terrain in TerrainType:
        out.write(f"  {terrain.value}: {counts.get(terrain, 0)}\n")
    out.write("Features:\n")
    for cell in grid.features():
        feature = cell.feature
        if feature is None:
            continue
        out.write(
            f"  {feature.kind.value} at ({cell.x}, {cell.y}) "
            f"on {feature.base_terrain.value} [rarity {int(feature.rarity)}]\n",
        )


def main(argv: list[str] | None = None) -> int:
    """Parse CLI args, generate a map, print the preview."""
    parser = argparse.ArgumentParser(
        prog="hexagonia",
        description="Hexagonia - seeded hex map generator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument("--seed", type=int, help="Override the config seed")
    parser.add_argument("--width", type=int, help="Override the grid width")
    parser.add_argument("--height", type=int, help="Override the grid height")
    parser.add_argument(
        "--no-map",
        action="store_true",
        help="Only print the summary",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every feature placement decision",
    )
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    config = GeneratorConfig.from_yaml(args.config)
    overrides = {
        name: value
        for name, value in (
            ("seed", args.seed),
            ("width", args.width),
            ("height", args.height),
        )
        if value is not None
    }
    config = replace(config, **overrides)

    try:
        grid = generate(config)
    except ConfigError as exc:
        parser.error(str(exc))

    if not args.no_map:
        sys.stdout.write(render_text(grid) + "\n\n")
    print_summary(grid, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
