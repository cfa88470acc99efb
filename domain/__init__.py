"""Scalar Map Domain Layer.

This package contains the core data structures organized by bounded contexts:
- scalarmap: Dense 2D scalar fields (noise / height maps), cell arithmetic,
  early-exit iteration
"""

from domain import scalarmap

__all__ = ["scalarmap"]
