"""Cell visitor capability consumed by Field iteration.

A visitor is any callable accepting (field, x, y, value) and returning a
stop flag. Plain functions and lambdas satisfy the Protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol

if TYPE_CHECKING:
    from domain.scalarmap.field import Field

# Return values for code clarity inside visitors.
BREAK: Final[bool] = True
CONTINUE: Final[bool] = False


class CellVisitor(Protocol):
    """Performs an action on a single cell during iteration.

    Invoked once per visited cell, in ascending linear index order. Returning
    True (BREAK) cancels the remaining traversal immediately.
    """

    def __call__(self, field: "Field", x: int, y: int, value: float) -> bool:
        ...
