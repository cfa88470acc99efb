"""Scalar Map Bounded Context - Field.

A dense, fixed-size 2D scalar field backed by one contiguous float64 array.

Layout is row-major: the cell at column x and row y lives at linear index
``x + y * width``. The amount of cells always equals ``width * height``;
the shape never changes after construction.

Cell access is unchecked in the same way a raw array access is: coordinates
are not validated individually, only the resulting linear index is (see
OutOfBoundsError). Call is_valid() first when coordinates may be off the map.

Arithmetic follows IEEE-754 semantics silently: dividing by zero yields
inf or NaN instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Final, overload

import numpy as np
from numpy.typing import ArrayLike, NDArray
from pydantic import ValidationError

from domain.scalarmap.errors import (
    ConstructionError,
    DimensionMismatchError,
    OutOfBoundsError,
)
from domain.scalarmap.value_objects import GridShape
from domain.scalarmap.visitors import CONTINUE, CellVisitor

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Storage Constants
# ---------------------------------------------------------------------------
# float64 matches Python's float, so set() followed by get() is exact.
CELL_DTYPE: Final = np.float64


def _shape_of(width: Any, height: Any) -> GridShape:
    """Validate dimensions, converting Pydantic failures to ConstructionError."""
    try:
        return GridShape(width=width, height=height)
    except ValidationError as exc:
        raise ConstructionError(
            f"Invalid field dimensions: {width!r} columns, {height!r} rows",
            width=width,
            height=height,
        ) from exc


def _adopt_storage(buffer: ArrayLike, shape: GridShape) -> NDArray[np.float64]:
    """Turn a caller buffer into backing storage, avoiding copies where possible.

    Accepts a flat sequence of ``width * height`` values, or a 2D array shaped
    (height, width). float64 C-contiguous writable arrays are used as-is.
    """
    try:
        array = np.asarray(buffer, dtype=CELL_DTYPE)
    except (TypeError, ValueError) as exc:
        raise ConstructionError(
            "Storage cannot be converted to float cells",
            width=shape.width,
            height=shape.height,
        ) from exc

    if array.ndim == 2 and array.shape == (shape.height, shape.width):
        array = array.reshape(-1)  # view when C-contiguous
    if array.ndim != 1:
        raise ConstructionError(
            f"Storage with shape {array.shape} cannot back a field with "
            f"{shape.width} columns and {shape.height} rows",
            width=shape.width,
            height=shape.height,
            length=int(array.size),
        )
    if array.size != shape.size:
        raise ConstructionError.storage_length(
            int(array.size), shape.width, shape.height
        )

    cells = np.ascontiguousarray(array)
    if not cells.flags.writeable:
        cells = cells.copy()

    if isinstance(buffer, np.ndarray) and np.may_share_memory(cells, buffer):
        logger.debug("Adopted %d-cell storage in place", cells.size)
    else:
        logger.debug(
            "Converted %s storage into a fresh %d-cell array",
            type(buffer).__name__,
            cells.size,
        )
    return cells


class Field:
    """Dense 2D scalar field with elementwise arithmetic (mutable).

    Fields compare and hash by value. Both are O(width * height) and are
    recomputed on every call; do not mutate a field while it is used as a
    dict key or set member.

    Examples:
        >>> field = Field.filled(0.0, 3, 2)
        >>> field.set(1, 1, 5.0)
        5.0
        >>> field.add(Field.filled(1.0, 3, 2)).get(1, 1)
        6.0
    """

    _shape: GridShape
    _cells: NDArray[np.float64]

    def __init__(self, width: int, height: int) -> None:
        """Create a field with every cell set to 0.0.

        Raises:
            ConstructionError: If width or height is not a positive integer
        """
        self._shape = _shape_of(width, height)
        self._cells = np.zeros(self._shape.size, dtype=CELL_DTYPE)

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------
    @classmethod
    def _wrap(cls, shape: GridShape, cells: NDArray[np.float64]) -> Field:
        field = cls.__new__(cls)
        field._shape = shape
        field._cells = cells
        return field

    @classmethod
    def sized(cls, width: int, height: int) -> Field:
        """Create a zero-filled field with the given amount of columns and rows."""
        return cls(width, height)

    @classmethod
    def square(cls, size: int) -> Field:
        """Create a zero-filled field with ``size`` columns and ``size`` rows."""
        return cls(size, size)

    @classmethod
    def filled(cls, initial: float, width: int, height: int) -> Field:
        """Create a field with every cell set to ``initial``."""
        shape = _shape_of(width, height)
        return cls._wrap(shape, np.full(shape.size, initial, dtype=CELL_DTYPE))

    @classmethod
    def from_storage(cls, buffer: ArrayLike, width: int, height: int) -> Field:
        """Create a field that takes ownership of ``buffer``.

        Ownership is transferred, not copied: when ``buffer`` is already a
        writable, C-contiguous float64 numpy array (flat, or shaped
        (height, width)), the field mutates that very memory. The caller must
        treat its handle as consumed and neither read nor write it afterwards.
        Other sequences are converted once into fresh storage.

        Args:
            buffer: ``width * height`` values in row-major order
            width: Amount of columns
            height: Amount of rows

        Raises:
            ConstructionError: If the dimensions are invalid or the buffer
                length does not equal ``width * height``
        """
        shape = _shape_of(width, height)
        return cls._wrap(shape, _adopt_storage(buffer, shape))

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------
    @property
    def width(self) -> int:
        """Amount of columns."""
        return self._shape.width

    @property
    def height(self) -> int:
        """Amount of rows."""
        return self._shape.height

    @property
    def shape(self) -> GridShape:
        return self._shape

    @property
    def size(self) -> int:
        """Total amount of cells."""
        return self._cells.size

    @property
    def array(self) -> NDArray[np.float64]:
        """Direct reference to the backing storage.

        Use in extreme cases (bulk numpy processing); prefer the cell methods.
        Writes through this array change the field's cells. Never resize it.
        """
        return self._cells

    def __len__(self) -> int:
        return self._cells.size

    # -----------------------------------------------------------------------
    # Index Conversion
    # -----------------------------------------------------------------------
    def to_index(self, x: int, y: int) -> int:
        """Return the linear storage index of the cell at column x, row y."""
        return x + y * self._shape.width

    def to_x(self, index: int) -> int:
        """Return the column of the cell stored at ``index``."""
        return index % self._shape.width

    def to_y(self, index: int) -> int:
        """Return the row of the cell stored at ``index``."""
        return index // self._shape.width

    def is_valid(self, x: int, y: int) -> bool:
        """Check if coordinates can be safely used with get(), set() etc."""
        return 0 <= x < self._shape.width and 0 <= y < self._shape.height

    def _cell_index(self, x: int, y: int) -> int:
        index = x + y * self._shape.width
        if not 0 <= index < self._cells.size:
            raise OutOfBoundsError(index, self._cells.size)
        return index

    def _validate_field(self, other: Field) -> None:
        if other._shape != self._shape:
            raise DimensionMismatchError(self._shape, other._shape)

    # -----------------------------------------------------------------------
    # Cell Access & Arithmetic
    # -----------------------------------------------------------------------
    def get(self, x: int, y: int) -> float:
        """Return the value stored in the cell at column x, row y."""
        return self._cells.item(self._cell_index(x, y))

    @overload
    def set(self, x: int, y: int, value: float, /) -> float: ...

    @overload
    def set(self, operand: float | Field, /) -> Field: ...

    def set(self, *args: Any) -> float | Field:
        """Overwrite one cell, every cell, or copy values from another field.

        ``set(x, y, value)`` returns the value, for chaining.
        ``set(value)`` and ``set(other)`` return this field.

        Raises:
            OutOfBoundsError: If (x, y) maps outside the storage
            DimensionMismatchError: If ``other`` has a different shape
        """
        if len(args) == 3:
            x, y, value = args
            index = self._cell_index(x, y)
            self._cells[index] = float(value)
            return self._cells.item(index)
        if len(args) == 1:
            (operand,) = args
            if isinstance(operand, Field):
                self._validate_field(operand)
                np.copyto(self._cells, operand._cells)
            else:
                self._cells.fill(float(operand))
            return self
        raise TypeError(_arity_message("set", len(args)))

    @overload
    def add(self, x: int, y: int, value: float, /) -> float: ...

    @overload
    def add(self, operand: float | Field, /) -> Field: ...

    def add(self, *args: Any) -> float | Field:
        """Add to one cell, every cell, or cell-wise from another field.

        ``add(x, y, value)`` returns the cell value after adding.
        ``add(value)`` and ``add(other)`` return this field.
        """
        return self._apply("add", np.add, args)

    @overload
    def subtract(self, x: int, y: int, value: float, /) -> float: ...

    @overload
    def subtract(self, operand: float | Field, /) -> Field: ...

    def subtract(self, *args: Any) -> float | Field:
        """Subtract from one cell, every cell, or cell-wise by another field."""
        return self._apply("subtract", np.subtract, args)

    @overload
    def multiply(self, x: int, y: int, value: float, /) -> float: ...

    @overload
    def multiply(self, operand: float | Field, /) -> Field: ...

    def multiply(self, *args: Any) -> float | Field:
        """Multiply one cell, every cell, or cell-wise by another field."""
        return self._apply("multiply", np.multiply, args)

    @overload
    def divide(self, x: int, y: int, value: float, /) -> float: ...

    @overload
    def divide(self, operand: float | Field, /) -> Field: ...

    def divide(self, *args: Any) -> float | Field:
        """Divide one cell, every cell, or cell-wise by another field.

        Division by zero yields inf or NaN.
        """
        return self._apply("divide", np.divide, args)

    @overload
    def modulo(self, x: int, y: int, mod: float, /) -> float: ...

    @overload
    def modulo(self, operand: float | Field, /) -> Field: ...

    def modulo(self, *args: Any) -> float | Field:
        """Truncated remainder (sign follows the cell value, as C fmod).

        Modulo by zero yields NaN.
        """
        return self._apply("modulo", np.fmod, args)

    def negate(self) -> Field:
        """Flip the sign of every cell. Returns this field, for chaining."""
        np.negative(self._cells, out=self._cells)
        return self

    def _apply(
        self, name: str, ufunc: np.ufunc, args: tuple[Any, ...]
    ) -> float | Field:
        if len(args) == 3:
            x, y, value = args
            index = self._cell_index(x, y)
            with np.errstate(all="ignore"):
                self._cells[index] = ufunc(self._cells[index], float(value))
            return self._cells.item(index)
        if len(args) == 1:
            (operand,) = args
            if isinstance(operand, Field):
                # Validate before touching any cell: all-or-nothing
                self._validate_field(operand)
                other: Any = operand._cells
            else:
                other = float(operand)
            with np.errstate(all="ignore"):
                ufunc(self._cells, other, out=self._cells)
            return self
        raise TypeError(_arity_message(name, len(args)))

    # In-place operators delegate to the whole-field operations.
    def __iadd__(self, operand: float | Field) -> Field:
        return self.add(operand)

    def __isub__(self, operand: float | Field) -> Field:
        return self.subtract(operand)

    def __imul__(self, operand: float | Field) -> Field:
        return self.multiply(operand)

    def __itruediv__(self, operand: float | Field) -> Field:
        return self.divide(operand)

    def __imod__(self, operand: float | Field) -> Field:
        return self.modulo(operand)

    # -----------------------------------------------------------------------
    # Iteration
    # -----------------------------------------------------------------------
    def for_each(self, visitor: CellVisitor) -> None:
        """Visit every cell in ascending index order.

        Args:
            visitor: Called with (field, x, y, value); returning True stops
                the iteration
        """
        self._iterate(visitor, 0, self._cells.size)

    def for_each_from(self, visitor: CellVisitor, from_x: int, from_y: int) -> None:
        """Visit cells from (from_x, from_y) up to the last cell."""
        self._iterate(visitor, self.to_index(from_x, from_y), self._cells.size)

    def for_each_in_range(
        self,
        visitor: CellVisitor,
        from_x: int,
        from_y: int,
        to_x: int,
        to_y: int,
    ) -> None:
        """Visit cells in the linear range [(from_x, from_y), (to_x, to_y)).

        The range is linear, not rectangular: every row between the two
        positions is visited in full. A reversed range visits nothing.

        Raises:
            OutOfBoundsError: When the range reaches an index outside the
                storage (after the cells before it were visited)
        """
        self._iterate(
            visitor, self.to_index(from_x, from_y), self.to_index(to_x, to_y)
        )

    def _iterate(self, visitor: CellVisitor, from_index: int, to_index: int) -> None:
        for x, y, value in self.cells(from_index, to_index):
            if visitor(self, x, y, value):
                break

    def cells(
        self, from_index: int = 0, to_index: int | None = None
    ) -> Iterator[tuple[int, int, float]]:
        """Lazily yield (x, y, value) for the linear range [from_index, to_index).

        Values are read when yielded, so writes made while consuming the
        generator are visible to later cells. Stop early with ``break``.
        """
        size = self._cells.size
        if to_index is None:
            to_index = size
        width = self._shape.width
        for index in range(from_index, to_index):
            if not 0 <= index < size:
                raise OutOfBoundsError(index, size)
            yield index % width, index // width, self._cells.item(index)

    # -----------------------------------------------------------------------
    # Value Semantics
    # -----------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, Field):
            return NotImplemented
        # Equal width and equal cell count imply equal height.
        return other._shape.width == self._shape.width and bool(
            np.array_equal(self._cells, other._cells, equal_nan=True)
        )

    def __hash__(self) -> int:
        # Canonical NaN and +0.0 keep the hash consistent with __eq__.
        canonical = np.where(np.isnan(self._cells), np.nan, self._cells + 0.0)
        return hash(canonical.tobytes())

    def copy(self) -> Field:
        """Return a new field with the same shape and values and its own storage."""
        return self._wrap(self._shape, self._cells.copy())

    def __copy__(self) -> Field:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Field:
        return self.copy()

    def __repr__(self) -> str:
        return f"Field(width={self._shape.width}, height={self._shape.height})"

    def __str__(self) -> str:
        parts: list[str] = []

        def _render(field: Field, x: int, y: int, value: float) -> bool:
            parts.append(f"[{x},{y}|{value}]")
            parts.append("\n" if x == field.width - 1 else " ")
            return CONTINUE

        self.for_each(_render)
        return "".join(parts)


def _arity_message(name: str, count: int) -> str:
    return (
        f"{name}() takes (value), (field) or (x, y, value) positional "
        f"arguments but {count} were given"
    )
