__all__ = ['UpperTriangularMatrix', 'LowerTriangularMatrix']
import torch
from typing import Optional
from ..errors import StructuralViolationError
from .indexing import index_of_upper, index_of_lower, stored_indices
from .packed import PackedMatrix


class TriangularMatrix(PackedMatrix):
    """Common checks of upper and lower triangular matrices.

    The stored triangle holds live values, the other triangle reads
    exactly zero and cannot be written.
    """

    side = None

    def _offset(self, row, column):
        if not self._in_triangle(row, column):
            return None
        return self._stored_offset(row, column)

    def _check_offset(self, row, column):
        if not self._in_triangle(row, column):
            raise StructuralViolationError(
                'Cannot write element ({}, {}) outside of the {} triangle '
                'of a triangular matrix'.format(row, column, self.side))
        return self._stored_offset(row, column)

    @classmethod
    def _structure_error(cls, full):
        n = full.shape[-1]
        offdiag = 1 if cls.layout == 'tril' else -1
        if cls.layout == 'triu':
            zeros = full.tril(offdiag)
        else:
            zeros = full.triu(offdiag)
        if n and zeros.ne(0).any():
            return 'Source matrix has non-zero values outside of the ' \
                   '{} triangle'.format(cls.side)
        return None

    @property
    def is_symmetric(self) -> bool:
        # symmetric if and only if diagonal
        rows, columns = stored_indices(self.order, self.layout, self.device)
        offdiag = self.data[rows != columns]
        return not bool(offdiag.ne(0).any())

    def transpose(self):
        """Triangular matrix of the other side, over a copy of the buffer"""
        other = (LowerTriangularMatrix if self.layout == 'triu' else
                 UpperTriangularMatrix)
        return other._wrap(self.data.clone(), self.order)


class UpperTriangularMatrix(TriangularMatrix):
    """Upper triangular matrix stored in a packed buffer.

    Elements `(i, j)` with `i > j` are zero.

    Examples
    --------
    ```python
    >>> mat = UpperTriangularMatrix(3)
    >>> mat.at_upper(0, 0, 5.)
    >>> mat.at(1, 0)
    0.0
    >>> mat.at(1, 0, 9.)
    StructuralViolationError: Cannot write element (1, 0) outside of the upper triangle of a triangular matrix
    ```
    """

    layout = 'triu'
    side = 'upper'

    @staticmethod
    def _in_triangle(row, column):
        return row <= column

    @staticmethod
    def _stored_offset(row, column):
        return index_of_upper(row, column)

    def at_upper(self, row: int, column: int, value: Optional[float] = None):
        """Unchecked access to `(row, column)`, with `row <= column`"""
        if value is not None:
            self.data[index_of_upper(row, column)] = value
            return
        return self.data[index_of_upper(row, column)].item()


class LowerTriangularMatrix(TriangularMatrix):
    """Lower triangular matrix stored in a packed buffer.

    Elements `(i, j)` with `i < j` are zero. The lower triangle is stored
    row after row, which is the packing of the transposed (upper) matrix.
    """

    layout = 'tril'
    side = 'lower'

    @staticmethod
    def _in_triangle(row, column):
        return row >= column

    @staticmethod
    def _stored_offset(row, column):
        return index_of_lower(row, column)

    def at_lower(self, row: int, column: int, value: Optional[float] = None):
        """Unchecked access to `(row, column)`, with `row >= column`"""
        if value is not None:
            self.data[index_of_lower(row, column)] = value
            return
        return self.data[index_of_lower(row, column)].item()
