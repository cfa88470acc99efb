"""Scalar Map Bounded Context - Value Objects.

Immutable data structures describing field geometry.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GridShape(BaseModel):
    """Dimensions of a field (Value Object).

    Invariants:
        width > 0
        height > 0

    Pydantic frozen models compare by value and are hashable, so two fields
    can compare shapes directly with ==.
    """

    width: int = Field(gt=0)  # Amount of columns
    height: int = Field(gt=0)  # Amount of rows

    model_config = ConfigDict(frozen=True)

    @property
    def size(self) -> int:
        """Return total amount of cells (width * height)."""
        return self.width * self.height

    def as_tuple(self) -> tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
