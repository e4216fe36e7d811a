"""Bitruvius: 2D mannequin rigging, posing and keyframe animation."""

__version__ = "0.1.0"
