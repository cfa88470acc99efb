"""Scalar Map Bounded Context - Error Hierarchy.

Custom exceptions for field construction, pairwise arithmetic and
unchecked cell access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.scalarmap.value_objects import GridShape


class ScalarMapError(Exception):
    """Base error for scalar map operations."""


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------
class ConstructionError(ScalarMapError, ValueError):
    """Field cannot be created from the given dimensions or storage.

    Attributes:
        width: Requested amount of columns
        height: Requested amount of rows
        length: Length of the adopted storage (None for dimension failures)
    """

    def __init__(
        self,
        message: str,
        *,
        width: object = None,
        height: object = None,
        length: int | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.length = length
        super().__init__(message)

    @classmethod
    def storage_length(
        cls, length: int, width: int, height: int
    ) -> "ConstructionError":
        return cls(
            f"Storage with length: {length} is too small or too big to store a "
            f"field with {width} columns and {height} rows",
            width=width,
            height=height,
            length=length,
        )


# ---------------------------------------------------------------------------
# Pairwise Operations
# ---------------------------------------------------------------------------
class DimensionMismatchError(ScalarMapError, ValueError):
    """Pairwise operation invoked with a field of a different shape.

    Raised before any cell is modified.

    Attributes:
        expected: Shape of the field being modified
        actual: Shape of the operand field
    """

    def __init__(self, expected: "GridShape", actual: "GridShape") -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Field sizes do not match: expected {expected.width}x{expected.height}, "
            f"got {actual.width}x{actual.height}. Unable to perform operation."
        )


# ---------------------------------------------------------------------------
# Cell Access
# ---------------------------------------------------------------------------
class OutOfBoundsError(ScalarMapError, IndexError):
    """Linear index falls outside the backing storage.

    Coordinates are never checked against width and height individually,
    only the resulting linear index is. Use Field.is_valid() beforehand.

    Attributes:
        index: The offending linear index
        size: Amount of cells in the storage
    """

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"Cell index {index} out of range [0, {size})")
