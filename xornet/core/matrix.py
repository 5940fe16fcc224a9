"""Dense float32 matrix engine used by every layer of XorNet.

All binary operations validate shapes up front and raise
:class:`ShapeMismatchError` instead of broadcasting.  Only
:func:`colwise_sum_broadcast` widens a row sum back across a row, and only
:func:`sub_assign` mutates its left operand.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from .types import DTYPE

GAUSSIAN_MEAN = 0.0
GAUSSIAN_STD = 0.02


class ShapeMismatchError(ValueError):
    """Raised when an operation receives incompatibly shaped matrices."""


class Matrix:
    """Rectangular grid of float32 values with value semantics."""

    __slots__ = ("_data",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data: np.ndarray) -> None:
        array = np.array(data, dtype=DTYPE, copy=True)
        if array.ndim != 2:
            raise ShapeMismatchError(f"Matrix storage must be 2-D, got {array.ndim}-D")
        if array.shape[0] <= 0 or array.shape[1] <= 0:
            raise ValueError(f"Matrix dimensions must be positive, got {array.shape}")
        self._data = array

    # ------------------------------------------------------------------
    # Factories

    @classmethod
    def fill(cls, value: float, rows: int, cols: int) -> "Matrix":
        _check_dims(rows, cols)
        return cls(np.full((rows, cols), value, dtype=DTYPE))

    @classmethod
    def from_rows(cls, rows: int, cols: int, data: Sequence[Sequence[float]]) -> "Matrix":
        _check_dims(rows, cols)
        if len(data) != rows or any(len(row) != cols for row in data):
            raise ShapeMismatchError(
                f"from_rows expected {rows}x{cols} data, got rows of lengths "
                f"{[len(row) for row in data]}"
            )
        return cls(np.asarray(data, dtype=DTYPE))

    @classmethod
    def random_gaussian(
        cls,
        rows: int,
        cols: int,
        rng: np.random.Generator | None = None,
        std: float = GAUSSIAN_STD,
    ) -> "Matrix":
        _check_dims(rows, cols)
        rng = rng if rng is not None else np.random.default_rng()
        return cls(rng.normal(GAUSSIAN_MEAN, std, size=(rows, cols)))

    @classmethod
    def one_hot(cls, rows: int, cols: int, hot: int) -> "Matrix":
        if not 0 <= hot < rows:
            raise IndexError(f"hot row {hot} out of range for {rows} rows")
        result = cls.fill(0.0, rows, cols)
        result._data[hot, 0] = 1.0
        return result

    # ------------------------------------------------------------------
    # Accessors

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def cols(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._data[_check_index(index)])

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        self._data[_check_index(index)] = value

    def to_rows(self) -> list[list[float]]:
        return self._data.tolist()

    def to_array(self) -> np.ndarray:
        """Return a float32 copy of the storage."""

        return self._data.copy()

    def copy(self) -> "Matrix":
        return Matrix(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __isub__(self, other: "Matrix") -> "Matrix":
        return sub_assign(self, other)

    def __repr__(self) -> str:
        return f"Matrix({self.rows}x{self.cols}, {self.to_rows()!r})"

    def __str__(self) -> str:
        return "[" + "\n ".join(str(row) for row in self.to_rows()) + "]"


def _check_dims(rows: int, cols: int) -> None:
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Matrix dimensions must be positive, got ({rows}, {cols})")


def _check_index(index: object) -> tuple[int, int]:
    if not isinstance(index, tuple) or len(index) != 2:
        raise TypeError(f"Matrix indices must be (row, col) tuples, got {index!r}")
    return index  # type: ignore[return-value]


def _require_same_shape(op: str, a: Matrix, b: Matrix) -> None:
    if a.shape != b.shape:
        raise ShapeMismatchError(f"{op}: shapes {a.shape} and {b.shape} differ")


def _wrap(array: np.ndarray) -> Matrix:
    # Skips the defensive copy for freshly computed arrays.
    result = Matrix.__new__(Matrix)
    result._data = array.astype(DTYPE, copy=False)
    return result


# ----------------------------------------------------------------------
# Linear algebra


def dot_product(a: Matrix, b: Matrix) -> Matrix:
    """Standard matrix product accumulated in float32."""

    if a.cols != b.rows:
        raise ShapeMismatchError(
            f"dot_product: {a.shape} cannot be multiplied by {b.shape}"
        )
    left, right = a._data, b._data
    out = np.zeros((a.rows, b.cols), dtype=DTYPE)
    for i in range(a.rows):
        for j in range(b.cols):
            acc = DTYPE(0.0)
            for k in range(b.rows):
                acc += left[i, k] * right[k, j]
            out[i, j] = acc
    return _wrap(out)


def transpose(a: Matrix) -> Matrix:
    return _wrap(a._data.T.copy())


# ----------------------------------------------------------------------
# Elementwise arithmetic


def add(a: Matrix, b: Matrix) -> Matrix:
    _require_same_shape("add", a, b)
    return _wrap(a._data + b._data)


def sub(a: Matrix, b: Matrix) -> Matrix:
    _require_same_shape("sub", a, b)
    return _wrap(a._data - b._data)


def mul(a: Matrix, b: Matrix) -> Matrix:
    _require_same_shape("mul", a, b)
    return _wrap(a._data * b._data)


def div(a: Matrix, b: Matrix) -> Matrix:
    _require_same_shape("div", a, b)
    with np.errstate(divide="ignore", invalid="ignore"):
        return _wrap(a._data / b._data)


def sub_assign(a: Matrix, b: Matrix) -> Matrix:
    """Subtract ``b`` from ``a`` in place and return ``a``.

    This is the only operation that mutates an operand; layers use it to
    update parameters they exclusively own.
    """

    _require_same_shape("sub_assign", a, b)
    a._data -= b._data
    return a


def scalar_apply(a: Matrix, scalar: float) -> Matrix:
    return _wrap(a._data * DTYPE(scalar))


# ----------------------------------------------------------------------
# Reductions and elementwise maps


def sum_all(a: Matrix) -> float:
    total = DTYPE(0.0)
    for value in a._data.flat:
        total += value
    return float(total)


def max_of(threshold: float, a: Matrix) -> Matrix:
    return _wrap(np.maximum(a._data, DTYPE(threshold)))


def colwise_sum_broadcast(a: Matrix) -> Matrix:
    """Replace every element of each row with that row's sum."""

    sums = a._data.sum(axis=1, dtype=DTYPE, keepdims=True)
    return _wrap(np.repeat(sums, a.cols, axis=1))


def exp(a: Matrix) -> Matrix:
    with np.errstate(over="ignore"):
        return _wrap(np.exp(a._data))


def tanh(a: Matrix) -> Matrix:
    return _wrap(np.tanh(a._data))


def greater_than(a: Matrix, threshold: float) -> Matrix:
    """Return 1.0 where ``a > threshold`` and 0.0 elsewhere."""

    return _wrap((a._data > DTYPE(threshold)).astype(DTYPE))


# ----------------------------------------------------------------------
# Classification helpers


def one_hot_by_argmax(a: Matrix) -> Matrix:
    """One-hot encode the maximal row of column 0; ties keep the first row."""

    column = a._data[:, 0]
    best_row = 0
    best = column[0]
    for row in range(1, a.rows):
        if column[row] > best:
            best = column[row]
            best_row = row
    return Matrix.one_hot(a.rows, a.cols, best_row)


def stack_rows(values: Iterable[float]) -> Matrix:
    """Build a column vector from ``values``."""

    data = [[float(v)] for v in values]
    return Matrix.from_rows(len(data), 1, data)


__all__ = [
    "GAUSSIAN_MEAN",
    "GAUSSIAN_STD",
    "Matrix",
    "ShapeMismatchError",
    "add",
    "colwise_sum_broadcast",
    "div",
    "dot_product",
    "exp",
    "greater_than",
    "max_of",
    "mul",
    "one_hot_by_argmax",
    "scalar_apply",
    "stack_rows",
    "sub",
    "sub_assign",
    "sum_all",
    "tanh",
    "transpose",
]
