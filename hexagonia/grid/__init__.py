"""Hex coordinate math, cells, and the grid topology."""
