"""Progression and race-resolution engine for seasonal creature racing."""

__version__ = "0.1.0"
