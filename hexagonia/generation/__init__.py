"""Configuration and the end-to-end generation pipeline."""
