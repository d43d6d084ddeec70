"""Hexagonia — seeded hexagonal map generation."""
