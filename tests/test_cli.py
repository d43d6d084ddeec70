"""Tests for the ``python -m hexagonia`` entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from hexagonia.__main__ import main, render_text
from hexagonia.generation.config import GeneratorConfig
from hexagonia.generation.engine import generate


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    assert callable(main)


def test_render_text_two_lines_per_row() -> None:
    grid = generate(GeneratorConfig(seed=1, width=6, height=4))
    lines = render_text(grid).splitlines()
    assert len(lines) == 8


def test_main_prints_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "map.yaml"
    cfg.write_text("seed: 42\nwidth: 10\nheight: 10\n")
    assert main(["-c", str(cfg), "--no-map"]) == 0
    out = capsys.readouterr().out
    assert "Cells: 100" in out
    assert "water:" in out


def test_main_overrides_size(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "map.yaml"
    cfg.write_text("seed: 1\n")
    main(["-c", str(cfg), "--width", "3", "--height", "2", "--no-map"])
    assert "Cells: 6" in capsys.readouterr().out


def test_main_rejects_bad_config(tmp_path: Path) -> None:
    cfg = tmp_path / "map.yaml"
    cfg.write_text("width: 0\n")
    with pytest.raises(SystemExit):
        main(["-c", str(cfg)])


def test_main_accepts_negative_seed(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    cfg = tmp_path / "map.yaml"
    cfg.write_text("width: 4\nheight: 4\n")
    assert main(["-c", str(cfg), "--seed", "-5", "--no-map"]) == 0
    assert "Cells: 16" in capsys.readouterr().out
