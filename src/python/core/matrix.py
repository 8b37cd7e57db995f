"""Dense matrix used for homogeneous transforms.

The matrix stores its elements in a row-major NumPy ``float64`` buffer of
shape ``(rows, cols)``. Element and row access is always bounds-checked and
never wraps negative indices. Shape mismatches raise ``MatrixSizeError``.

Example:
    >>> m = Matrix.identity(4)
    >>> m.set(0, 3, 2.0)           # translate x by 2
    >>> p = Vector3(1, 1, 1).to_matrix()
    >>> Vector3.from_matrix(m * p)
    Vector3(3.0, 1.0, 1.0)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np
import numpy.typing as npt

from src.python.core.errors import MatrixIndexError, MatrixSizeError


class Matrix:
    """A ``rows x cols`` dense matrix of floats.

    Operators ``*`` (matrix or scalar), ``@``, ``+``, ``-`` and ``/`` return
    new matrices; their in-place forms update the receiver.
    """

    def __init__(self, rows: int = 0, cols: int = 0) -> None:
        """Create a zero-filled matrix.

        Args:
            rows: Number of rows.
            cols: Number of columns.

        Raises:
            ValueError: If either dimension is negative.
        """
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got {rows}x{cols}")
        self._data: npt.NDArray[np.float64] = np.zeros((rows, cols), dtype=np.float64)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def identity(cls, n: int) -> Matrix:
        m = cls()
        m.set_identity(n)
        return m

    @classmethod
    def zero(cls, n: int) -> Matrix:
        return cls(n, n)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix from a sequence of equal-length rows.

        Raises:
            ValueError: If the rows have different lengths.
        """
        n_cols = len(rows[0]) if rows else 0
        if any(len(r) != n_cols for r in rows):
            raise ValueError("All rows must have the same length")
        m = cls(len(rows), n_cols)
        for i, row in enumerate(rows):
            m.set_row(i, row)
        return m

    @classmethod
    def _wrap(cls, data: npt.NDArray[np.float64]) -> Matrix:
        m = cls()
        m._data = data
        return m

    def copy(self) -> Matrix:
        return Matrix._wrap(self._data.copy())

    # =========================================================================
    # Shape
    # =========================================================================

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def cols(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    def set_size(self, rows: int, cols: int) -> None:
        """Resize the matrix.

        Contents are kept only when the shape is unchanged; otherwise the
        matrix is reallocated and zero-filled.
        """
        if (rows, cols) != self.shape:
            self._data = np.zeros((rows, cols), dtype=np.float64)

    def set_zero(self, n: int) -> None:
        """Make this an ``n x n`` zero matrix."""
        self.set_size(n, n)
        self._data.fill(0.0)

    def set_identity(self, n: int) -> None:
        """Make this an ``n x n`` identity matrix."""
        self.set_size(n, n)
        self._data[:] = np.eye(n, dtype=np.float64)

    # =========================================================================
    # Element access
    # =========================================================================

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.rows:
            raise MatrixIndexError(f"Row {row} out of range for {self.rows}x{self.cols} matrix")

    def _check_col(self, col: int) -> None:
        if not 0 <= col < self.cols:
            raise MatrixIndexError(f"Column {col} out of range for {self.rows}x{self.cols} matrix")

    def get(self, row: int, col: int) -> float:
        self._check_row(row)
        self._check_col(col)
        return float(self._data[row, col])

    def set(self, row: int, col: int, value: float) -> None:
        self._check_row(row)
        self._check_col(col)
        self._data[row, col] = value

    def row(self, row: int) -> tuple[float, ...]:
        self._check_row(row)
        return tuple(float(v) for v in self._data[row])

    def set_row(self, row: int, values: Sequence[float]) -> None:
        self._check_row(row)
        if len(values) != self.cols:
            raise MatrixSizeError("set_row", self.shape, (1, len(values)))
        self._data[row, :] = values

    def set_all(self, values: Iterable[float]) -> None:
        """Replace every element from a row-major sequence."""
        flat = np.asarray(list(values), dtype=np.float64)
        if flat.size != self.rows * self.cols:
            raise MatrixSizeError("set_all", self.shape, (1, int(flat.size)))
        self._data[:] = flat.reshape(self.shape)

    def __getitem__(self, key: int | tuple[int, int]) -> float | tuple[float, ...]:
        if isinstance(key, tuple):
            return self.get(*key)
        return self.row(key)

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        self.set(key[0], key[1], value)

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a copy of the elements as a ``(rows, cols)`` array."""
        return self._data.copy()

    # =========================================================================
    # Arithmetic
    # =========================================================================

    @staticmethod
    def multiply(a: Matrix, b: Matrix | float) -> Matrix:
        """Matrix product ``a * b`` or scalar product when ``b`` is a number.

        Raises:
            MatrixSizeError: If ``a.cols != b.rows``.
        """
        if isinstance(b, Matrix):
            if a.cols != b.rows:
                raise MatrixSizeError("multiply", a.shape, b.shape)
            return Matrix._wrap(a._data @ b._data)
        return Matrix._wrap(a._data * float(b))

    @staticmethod
    def add(a: Matrix, b: Matrix) -> Matrix:
        if a.shape != b.shape:
            raise MatrixSizeError("add", a.shape, b.shape)
        return Matrix._wrap(a._data + b._data)

    @staticmethod
    def subtract(a: Matrix, b: Matrix) -> Matrix:
        if a.shape != b.shape:
            raise MatrixSizeError("subtract", a.shape, b.shape)
        return Matrix._wrap(a._data - b._data)

    def transpose(self) -> Matrix:
        return Matrix._wrap(self._data.T.copy())

    def __mul__(self, other: Matrix | float) -> Matrix:
        return Matrix.multiply(self, other)

    def __rmul__(self, other: float) -> Matrix:
        return Matrix.multiply(self, other)

    def __matmul__(self, other: Matrix) -> Matrix:
        return Matrix.multiply(self, other)

    def __truediv__(self, c: float) -> Matrix:
        if c == 0.0:
            raise ZeroDivisionError("Matrix division by zero")
        return Matrix.multiply(self, 1.0 / c)

    def __add__(self, other: Matrix) -> Matrix:
        return Matrix.add(self, other)

    def __sub__(self, other: Matrix) -> Matrix:
        return Matrix.subtract(self, other)

    def __imul__(self, other: Matrix | float) -> Matrix:
        self._data = Matrix.multiply(self, other)._data
        return self

    def __itruediv__(self, c: float) -> Matrix:
        self._data = (self / c)._data
        return self

    def __iadd__(self, other: Matrix) -> Matrix:
        self._data = Matrix.add(self, other)._data
        return self

    def __isub__(self, other: Matrix) -> Matrix:
        self._data = Matrix.subtract(self, other)._data
        return self

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def almost_equal(self, other: Matrix, tol: float = 1e-9) -> bool:
        return self.shape == other.shape and bool(np.allclose(self._data, other._data, rtol=0.0, atol=tol))

    def __repr__(self) -> str:
        return f"Matrix({self.rows}x{self.cols}, {self._data.tolist()!r})"

    def pretty(self) -> str:
        return "\n".join("[" + ", ".join(f"{v:g}" for v in row) + "]" for row in self._data)
