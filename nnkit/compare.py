"""Whole-matrix comparisons and building matrices from nested rows."""

from __future__ import annotations

from typing import Sequence

from .matrix import NDArray
from .vector import Number


def _require_2d(*arrays: NDArray) -> None:
    for arr in arrays:
        if not isinstance(arr, NDArray):
            raise TypeError("Only arrays can be compared.")
        if arr.ndim != 2:
            raise ValueError("Shape Error: Matrix must be 2D")


def _pairs(first: NDArray, second: NDArray):
    rows, cols = first.shape
    for i in range(rows):
        for j in range(cols):
            yield first.get(i, j), second.get(i, j)


def check_equality(first: NDArray, second: NDArray) -> bool:
    """Return True when two 2D arrays have the same shape and equal elements."""
    _require_2d(first, second)
    if first.shape != second.shape:
        return False
    return all(a == b for a, b in _pairs(first, second))


def check_equality_loose(first: NDArray, second: NDArray, delta: Number) -> bool:
    """Compare two 2D arrays element by element against a relative bound.

    An element pair (a, b) is rejected when ``|a * (1 + delta)| > |b|`` or
    ``|a * (1 - delta)| < |b|``; the arrays match when no pair is rejected
    and their shapes agree.
    """
    _require_2d(first, second)
    if first.shape != second.shape:
        return False
    for a, b in _pairs(first, second):
        if abs(a * (1 + delta)) > abs(b) or abs(a * (1 - delta)) < abs(b):
            return False
    return True


def copy_matrix(rows: Sequence[Sequence[Number]]) -> NDArray:
    """Copy a sequence of equal-length rows into a new contiguous 2D array."""
    rows = [list(row) for row in rows]
    cols = len(rows[0]) if rows else 0
    if any(len(row) != cols for row in rows):
        raise ValueError("Rows must all have the same length.")
    arr = NDArray((len(rows), cols))
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            arr.set(i, j, value)
    return arr