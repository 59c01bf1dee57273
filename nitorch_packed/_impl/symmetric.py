__all__ = ['SymmetricMatrix']
from typing import Optional
from ..errors import StructuralViolationError
from .indexing import index_of, index_of_upper, index_of_lower
from .packed import PackedMatrix, is_bitwise_symmetric


class SymmetricMatrix(PackedMatrix):
    r"""Symmetric matrix that only stores its upper triangle.

    The buffer holds the $N(N+1)/2$ elements $(i, j)$, $i \le j$, in
    column-major order. Reads and writes through `at` / `set_at` are
    normalised so that `(i, j)` and `(j, i)` always refer to the same
    storage cell: writing to the lower triangle writes to its mirror.

    `at_upper`, `at_lower` and `at_diagonal` skip the normalisation and
    expect the caller to respect `row <= column` (resp. `row >= column`).

    Examples
    --------
    ```python
    >>> mat = SymmetricMatrix.from_array([[1, 2, 3], [2, 2, 0], [3, 0, 3]])
    >>> mat.at(2, 0)
    3.0
    >>> mat.at(1, 0, 5.)
    >>> mat.at(0, 1)
    5.0
    ```
    """

    layout = 'sym'

    def _offset(self, row, column):
        return index_of(row, column)

    _check_offset = _offset

    @classmethod
    def _structure_error(cls, full):
        if not is_bitwise_symmetric(full):
            return 'Source matrix is not symmetric'
        return None

    @classmethod
    def _check_source(cls, matrix):
        if not matrix.is_symmetric:
            raise StructuralViolationError('Source matrix is not symmetric')

    @property
    def is_symmetric(self) -> bool:
        return True

    def at_upper(self, row: int, column: int, value: Optional[float] = None):
        """Unchecked access to `(row, column)`, with `row <= column`"""
        if value is not None:
            self.data[index_of_upper(row, column)] = value
            return
        return self.data[index_of_upper(row, column)].item()

    def at_lower(self, row: int, column: int, value: Optional[float] = None):
        """Unchecked access to `(row, column)`, with `row >= column`"""
        if value is not None:
            self.data[index_of_lower(row, column)] = value
            return
        return self.data[index_of_lower(row, column)].item()
