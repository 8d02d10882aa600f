"""Square matrices with cofactor-expansion inverse.

Matrices are stored as float64 NumPy arrays. Public transforms are always
4x4; 3x3 and 2x2 matrices only appear as submatrices while computing
determinants by cofactor expansion.

Example:
    >>> from whitted.core.matrix import Matrix
    >>> m = Matrix([[2, 0, 0, 0], [0, 2, 0, 0], [0, 0, 2, 0], [0, 0, 0, 1]])
    >>> m.inverse()[0, 0]
    0.5
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from whitted.core.tuples import EPSILON, Tuple


class NotInvertibleError(ValueError):
    """Raised when inverting a matrix whose determinant is (nearly) zero."""


class Matrix:
    """An immutable square matrix of size 2, 3 or 4.

    Args:
        rows: Row-major values, e.g. a list of 4 lists of 4 numbers.

    Raises:
        ValueError: If the rows do not form a square matrix of size 2-4.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: Sequence[Sequence[float]] | npt.NDArray[np.float64]) -> None:
        data = np.array(rows, dtype=np.float64)
        if data.ndim != 2 or data.shape[0] != data.shape[1] or not 2 <= data.shape[0] <= 4:
            raise ValueError(f"Expected a square matrix of size 2 to 4, got shape {data.shape}")
        data.setflags(write=False)
        self._data = data

    @classmethod
    def identity(cls, size: int = 4) -> Matrix:
        return cls(np.identity(size, dtype=np.float64))

    @property
    def size(self) -> int:
        return int(self._data.shape[0])

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._data[index])

    def __repr__(self) -> str:
        rows = ", ".join("[" + ", ".join(f"{v:g}" for v in row) + "]" for row in self._data)
        return f"Matrix([{rows}])"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.size != other.size:
            return False
        return bool(np.all(np.abs(self._data - other._data) < EPSILON))

    __hash__ = None  # type: ignore[assignment]

    def __matmul__(self, other: Matrix | Tuple) -> Matrix | Tuple:
        if isinstance(other, Matrix):
            if self.size != other.size:
                raise ValueError("Cannot multiply matrices of different sizes")
            return Matrix(self._data @ other._data)
        if isinstance(other, Tuple):
            if self.size != 4:
                raise ValueError("Only 4x4 matrices can transform tuples")
            x, y, z, w = self._data @ other.to_numpy()
            return Tuple(x, y, z, w)
        return NotImplemented

    __mul__ = __matmul__

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    def submatrix(self, row: int, column: int) -> Matrix:
        """Remove one row and one column."""
        data = np.delete(np.delete(self._data, row, axis=0), column, axis=1)
        return Matrix(data)

    def minor(self, row: int, column: int) -> float:
        return self.submatrix(row, column).determinant()

    def cofactor(self, row: int, column: int) -> float:
        minor = self.minor(row, column)
        return -minor if (row + column) % 2 else minor

    def determinant(self) -> float:
        if self.size == 2:
            d = self._data
            return float(d[0, 0] * d[1, 1] - d[0, 1] * d[1, 0])
        return float(sum(self._data[0, c] * self.cofactor(0, c) for c in range(self.size)))

    def is_invertible(self) -> bool:
        return abs(self.determinant()) >= EPSILON

    def inverse(self) -> Matrix:
        """Invert by the cofactor method.

        Raises:
            NotInvertibleError: If the determinant is within EPSILON of zero.
        """
        det = self.determinant()
        if abs(det) < EPSILON:
            raise NotInvertibleError(f"Matrix is not invertible (determinant {det:g})")
        n = self.size
        cofactors = np.empty((n, n), dtype=np.float64)
        for row in range(n):
            for col in range(n):
                cofactors[row, col] = self.cofactor(row, col)
        # Transposing the cofactor matrix gives the adjugate
        return Matrix(cofactors.T / det)

    def to_numpy(self) -> npt.NDArray[np.float64]:
        return self._data.copy()

    def to_list(self) -> list[list[float]]:
        return self._data.tolist()
