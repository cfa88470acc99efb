"""Pytest configuration for scalar map domain tests.

Fields are cheap to build, so most tests construct them directly. The
fixtures here cover the shapes and helpers reused across modules.
"""

from __future__ import annotations

import numpy as np
import pytest

from domain.scalarmap.field import Field


class RecordingVisitor:
    """Visitor that records every call and optionally stops after N visits.

    Attributes:
        calls: (x, y, value) per invocation, in call order
        fields: Field instance passed on each invocation
        stop_after: Zero-based visit number on which to return True (None = never)
    """

    def __init__(self, stop_after: int | None = None) -> None:
        self.calls: list[tuple[int, int, float]] = []
        self.fields: list[Field] = []
        self.stop_after = stop_after

    def __call__(self, field: Field, x: int, y: int, value: float) -> bool:
        self.fields.append(field)
        self.calls.append((x, y, value))
        return self.stop_after is not None and len(self.calls) - 1 >= self.stop_after

    @property
    def coordinates(self) -> list[tuple[int, int]]:
        return [(x, y) for x, y, _ in self.calls]


@pytest.fixture
def counting_field() -> Field:
    """3x2 field whose cells hold their own linear index (0.0 .. 5.0).

    Layout:
        row 0: 0 1 2
        row 1: 3 4 5
    """
    return Field.from_storage(np.arange(6, dtype=np.float64), 3, 2)


@pytest.fixture
def recorder() -> RecordingVisitor:
    """Visitor that never stops and records every cell."""
    return RecordingVisitor()


@pytest.fixture
def stopping_recorder():
    """Factory for visitors that return True on the given zero-based visit."""

    def _make(stop_after: int) -> RecordingVisitor:
        return RecordingVisitor(stop_after=stop_after)

    return _make
