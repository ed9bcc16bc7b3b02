"""Strided arrays of two or more dimensions that share storage between views."""

from __future__ import annotations

from itertools import product
from math import prod
from typing import Iterator, List, Sequence, Tuple, Union

from .vector import Number, Vector, format_scalar

Shape = Tuple[int, ...]


def _default_strides(shape: Sequence[int]) -> Shape:
    strides = [1] * len(shape)
    for axis in range(len(shape) - 2, -1, -1):
        strides[axis] = strides[axis + 1] * shape[axis + 1]
    return tuple(strides)


def _normalize(item):
    if isinstance(item, (NDArray, Vector)):
        return item.tolist()
    if isinstance(item, (list, tuple)):
        return [_normalize(element) for element in item]
    return item


def _shape_of(rows) -> Shape:
    shape = []
    level = rows
    while isinstance(level, list):
        shape.append(len(level))
        if not level:
            break
        level = level[0]
    return tuple(shape)


def _flatten(item, shape: Shape, depth: int, out: list) -> None:
    if depth == len(shape):
        if isinstance(item, list):
            raise ValueError("Rows must all have the same nesting depth.")
        out.append(item)
        return
    if not isinstance(item, list) or len(item) != shape[depth]:
        raise ValueError("Rows must all have the same length.")
    for element in item:
        _flatten(element, shape, depth + 1, out)


class NDArray:
    """An array of at least two dimensions, possibly a view into shared data.

    Indexing returns views: ``arr[i]`` of a 2D array is a :class:`Vector`
    over row ``i``, and of a higher-dimensional array an :class:`NDArray`.
    Writing through a view changes the original.
    """

    __slots__ = ("_buffer", "_offset", "_strides", "_shape")

    def __init__(self, shape: Sequence[int]):
        shape = tuple(int(n) for n in shape)
        if len(shape) < 2:
            raise ValueError("Use a Vector for one-dimensional data.")
        if any(n < 0 for n in shape):
            raise ValueError("Array dimensions must not be negative.")
        self._buffer: List[Number] = [0.0] * prod(shape)
        self._offset = 0
        self._shape = shape
        self._strides = _default_strides(shape)

    @classmethod
    def view(cls, buffer: list, offset: int, strides: Sequence[int], shape: Sequence[int]) -> "NDArray":
        """Make an array that reads and writes ``buffer`` without copying it."""
        shape = tuple(shape)
        strides = tuple(strides)
        if len(shape) < 2:
            raise ValueError("Use a Vector for one-dimensional data.")
        if len(strides) != len(shape):
            raise ValueError("Strides and shape must have the same length.")
        arr = cls.__new__(cls)
        arr._buffer = buffer
        arr._offset = offset
        arr._strides = strides
        arr._shape = shape
        return arr

    @classmethod
    def from_rows(cls, rows) -> "NDArray":
        """Make a new contiguous array from nested rows of equal length."""
        nested = _normalize(rows)
        shape = _shape_of(nested)
        if len(shape) < 2:
            raise ValueError("Use a Vector for one-dimensional data.")
        data: list = []
        _flatten(nested, shape, 0, data)
        return cls.view(data, 0, _default_strides(shape), shape)

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def strides(self) -> Shape:
        return self._strides

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return prod(self._shape)

    @property
    def is_contiguous(self) -> bool:
        """True when the strides are the default row-major ones."""
        return self._strides == _default_strides(self._shape)

    def _positions(self) -> Iterator[int]:
        for index in product(*(range(n) for n in self._shape)):
            yield self._offset + sum(i * s for i, s in zip(index, self._strides))

    def __len__(self) -> int:
        return self._shape[0]

    def __iter__(self) -> Iterator[Union["NDArray", Vector]]:
        return (self[i] for i in range(self._shape[0]))

    def __getitem__(self, index: int) -> Union["NDArray", Vector]:
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError("Array indices must be integers.")
        if index < 0 or index >= self._shape[0]:
            raise IndexError("Index out of bounds.")
        start = self._offset + index * self._strides[0]
        if self.ndim > 2:
            return NDArray.view(self._buffer, start, self._strides[1:], self._shape[1:])
        return Vector.view(self._buffer, start, self._strides[1], self._shape[1])

    def __str__(self) -> str:
        count = self._shape[0]
        if count > 6:
            head = [str(self[i]) for i in range(3)]
            tail = [str(self[i]) for i in range(count - 3, count)]
            return (
                "[\n " + "\n ".join(head) + "\n ... \n" + "\n ".join(tail) + "\n]"
            )
        return "[\n" + "".join(f" {sub}\n" for sub in self) + "]"

    def __repr__(self) -> str:
        return f"NDArray({self.tolist()!r})"

    def tolist(self) -> list:
        """Return the elements as nested lists."""
        return [sub.tolist() for sub in self]

    def transpose(self) -> "NDArray":
        """Return a transposed view of a 2D array sharing its data."""
        if self.ndim != 2:
            raise ValueError("Transpose is currently only implemented for 2D arrays.")
        rows, cols = self._shape
        row_stride, col_stride = self._strides
        return NDArray.view(self._buffer, self._offset, (col_stride, row_stride), (cols, rows))

    def copy(self) -> "NDArray":
        """Return an independent contiguous copy."""
        data = [self._buffer[pos] for pos in self._positions()]
        return NDArray.view(data, 0, _default_strides(self._shape), self._shape)

    def __imul__(self, scalar: Number) -> "NDArray":
        for pos in self._positions():
            self._buffer[pos] *= scalar
        return self

    def __iadd__(self, scalar: Number) -> "NDArray":
        for pos in self._positions():
            self._buffer[pos] += scalar
        return self

    def zeros(self) -> "NDArray":
        """Return a new zero-filled array of the same shape."""
        return NDArray(self._shape)

    def __matmul__(self, other) -> "NDArray":
        if isinstance(other, Vector):
            if self.ndim != 2:
                raise ValueError("Shape Error: Matrix must be 2D")
            if self._shape[1] != len(other):
                raise ValueError("Shape Error: Vector length must be length of rows in matrix")
            column = NDArray((self._shape[0], 1))
            for i, row in enumerate(self):
                column.set(i, 0, row @ other)
            return column
        if not isinstance(other, NDArray):
            return NotImplemented
        if self.ndim != 2 or other.ndim != 2:
            raise ValueError("Shape Error: Matrix must be 2D")
        if self._shape[1] != other._shape[0]:
            raise ValueError("Shape Error: Columns and rows are different shapes")
        result = NDArray((self._shape[0], other._shape[1]))
        rows = list(self)
        columns = list(other.transpose())
        for i, row in enumerate(rows):
            for j, col in enumerate(columns):
                result.set(i, j, row @ col)
        return result

    def assign(self, other: "NDArray") -> "NDArray":
        """Replace this array's storage with a contiguous copy of ``other``."""
        if not isinstance(other, NDArray):
            raise TypeError("Only arrays can be assigned to an array.")
        if other is self:
            return self
        if other.ndim != self.ndim:
            raise ValueError("Shape Error: Arrays must have the same number of dimensions")
        fresh = other.copy()
        self._buffer = fresh._buffer
        self._offset = 0
        self._shape = fresh._shape
        self._strides = fresh._strides
        return self

    def max(self) -> Number:
        """Return the largest element."""
        if self._shape[0] == 0:
            raise IndexError("Index out of bounds.")
        return max(sub.max() for sub in self)

    def min(self) -> Number:
        """Return the smallest element."""
        if self._shape[0] == 0:
            raise IndexError("Index out of bounds.")
        return min(sub.min() for sub in self)

    def _fast_position(self, i: int, j: int) -> int:
        return self._offset + i * self._strides[0] + j * self._strides[1]

    def get(self, i: int, j: int) -> Number:
        """Read element (i, j) of a 2D array without bounds checks."""
        return self._buffer[self._fast_position(i, j)]

    def set(self, i: int, j: int, value: Number) -> None:
        """Write element (i, j) of a 2D array without bounds checks."""
        self._buffer[self._fast_position(i, j)] = value

    def increment(self, i: int, j: int, value: Number) -> None:
        """Add ``value`` to element (i, j) of a 2D array without bounds checks."""
        self._buffer[self._fast_position(i, j)] += value

    def __eq__(self, other) -> bool:
        if not isinstance(other, NDArray):
            return NotImplemented
        return self._shape == other._shape and self.tolist() == other.tolist()

    __hash__ = None  # type: ignore[assignment]


__all__ = ["NDArray", "format_scalar"]