"""Noise synthesis and terrain classification."""
