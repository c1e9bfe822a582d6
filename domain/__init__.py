"""Surfer Grid Domain Layer.

This package contains the core logic organized by bounded context:
- grid: Scalar grid model, bounds/step consistency, z-range statistics
"""

from domain import grid

__all__ = ["grid"]
