"""Scalar Map Bounded Context.

Responsible for the dense 2D scalar field that generation algorithms write
into and consumers read from:
- Value Objects: GridShape
- Field: row-major float storage, cell/field arithmetic, iteration
- Visitors: CellVisitor callback with BREAK / CONTINUE signals
"""

from .errors import (
    ConstructionError,
    DimensionMismatchError,
    OutOfBoundsError,
    ScalarMapError,
)
from .field import CELL_DTYPE, Field
from .value_objects import GridShape
from .visitors import BREAK, CONTINUE, CellVisitor

__all__ = [
    "BREAK",
    "CELL_DTYPE",
    "CONTINUE",
    "CellVisitor",
    "ConstructionError",
    "DimensionMismatchError",
    "Field",
    "GridShape",
    "OutOfBoundsError",
    "ScalarMapError",
]
