"""One-dimensional strided vectors backed by a shared list buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, List

if TYPE_CHECKING:
    from .matrix import NDArray

Number = float


def format_scalar(value) -> str:
    """Render a scalar like a fixed six-decimal number, integers unchanged."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return f"{value:.6f}"


class Vector:
    """A vector of numbers, possibly a strided view into a larger buffer.

    Several vectors (and matrices) may share one buffer; writing through a
    view changes the data every other view of that buffer sees.
    """

    __slots__ = ("buffer", "offset", "stride", "length")

    def __init__(self, length: int):
        if length < 0:
            raise ValueError("Vector length must not be negative.")
        self.buffer: List[Number] = [0.0] * length
        self.offset = 0
        self.stride = 1
        self.length = length

    @classmethod
    def view(cls, buffer: list, offset: int, stride: int, length: int) -> "Vector":
        """Make a vector that reads and writes ``buffer`` without copying it."""
        vec = cls.__new__(cls)
        vec.buffer = buffer
        vec.offset = offset
        vec.stride = stride
        vec.length = length
        return vec

    @classmethod
    def from_values(cls, values: Iterable[Number]) -> "Vector":
        """Make a new contiguous vector holding a copy of ``values``."""
        data = list(values)
        return cls.view(data, 0, 1, len(data))

    def _position(self, index: int) -> int:
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError("Vector indices must be integers.")
        if index < 0 or index >= self.length:
            raise IndexError("Index out of bounds.")
        return self.offset + index * self.stride

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[Number]:
        buffer, stride = self.buffer, self.stride
        return (buffer[self.offset + i * stride] for i in range(self.length))

    def __getitem__(self, index: int) -> Number:
        return self.buffer[self._position(index)]

    def __setitem__(self, index: int, value: Number) -> None:
        self.buffer[self._position(index)] = value

    def __str__(self) -> str:
        values = self.tolist()
        if len(values) > 6:
            shown = [*values[:3], None, *values[-3:]]
            parts = ["..." if v is None else format_scalar(v) for v in shown]
            return "[ " + " ".join(parts) + " ]"
        return "[ " + "".join(format_scalar(v) + " " for v in values) + "]"

    def __repr__(self) -> str:
        return f"Vector({self.tolist()!r})"

    def tolist(self) -> list:
        """Return the elements as a new list."""
        return list(self)

    def transpose(self) -> "NDArray":
        """Return a column view (length x 1) sharing this vector's data."""
        from .matrix import NDArray

        return NDArray.view(self.buffer, self.offset, (self.stride, 1), (self.length, 1))

    def copy(self) -> "Vector":
        """Return an independent contiguous copy."""
        return Vector.from_values(self)

    def __imul__(self, scalar: Number) -> "Vector":
        for i in range(self.length):
            self.buffer[self.offset + i * self.stride] *= scalar
        return self

    def __iadd__(self, scalar: Number) -> "Vector":
        for i in range(self.length):
            self.buffer[self.offset + i * self.stride] += scalar
        return self

    def zeros(self) -> "Vector":
        """Return a new zero-filled vector of the same length."""
        return Vector(self.length)

    def __matmul__(self, other: "Vector") -> Number:
        if not isinstance(other, Vector):
            return NotImplemented
        if self.length != other.length:
            raise ValueError("Shape Error: Vectors have different lengths.")
        total = 0
        for a, b in zip(self, other):
            total += a * b
        return total

    def assign(self, other: "Vector") -> "Vector":
        """Copy ``other``'s elements into this vector's storage in place."""
        if self.length != len(other):
            raise ValueError("Shape Error: Vectors must have equal length")
        values = list(other)
        for i, value in enumerate(values):
            self.buffer[self.offset + i * self.stride] = value
        return self

    def max(self) -> Number:
        """Return the largest element."""
        if self.length == 0:
            raise IndexError("Index out of bounds.")
        return max(self)

    def min(self) -> Number:
        """Return the smallest element."""
        if self.length == 0:
            raise IndexError("Index out of bounds.")
        return min(self)