__all__ = ['DenseMatrix', 'create_matrix', 'create_vector']
import torch
from torch import Tensor
from typing import Optional
from ..errors import (
    DimensionMismatchError, InvalidArgumentError, NullArgumentError,
)
from .packed import (
    default_backend, check_sample_source, is_bitwise_symmetric,
)


class DenseMatrix:
    """General (rows x columns) matrix backed by a contiguous 2D tensor.

    This is the generic collaborator of packed matrices: results that
    cannot keep a packed structure (products, mixed-layout arithmetic)
    are materialised as dense matrices.
    """

    layout = 'dense'

    def __init__(self, rows: int, columns: Optional[int] = None,
                 fill: float = 0., *, dtype=None, device=None):
        if columns is None:
            columns = rows
        if rows < 0 or columns < 0:
            raise InvalidArgumentError(
                'Matrix shape must be non-negative, got {}x{}'
                .format(rows, columns))
        self.data = torch.full([int(rows), int(columns)], fill,
                               **default_backend(dtype, device))

    @classmethod
    def from_array(cls, array, *, dtype=None, device=None):
        """Build a dense matrix from a 2D array (copied)"""
        if array is None:
            raise NullArgumentError('array')
        if torch.is_tensor(array):
            if dtype is None and not array.is_floating_point():
                dtype = torch.double
            array = array.to(dtype=dtype, device=device, copy=True)
        else:
            array = torch.as_tensor(array, **default_backend(dtype, device))
        if array.dim() != 2:
            raise InvalidArgumentError(
                'Expected a 2D array but got {} dimensions'
                .format(array.dim()))
        obj = cls.__new__(cls)
        obj.data = array.contiguous()
        return obj

    @classmethod
    def from_matrix(cls, matrix):
        """Dense copy of any matrix"""
        if matrix is None:
            raise NullArgumentError('matrix')
        obj = cls.__new__(cls)
        obj.data = matrix.to_dense().contiguous()
        return obj

    @classmethod
    def identity(cls, order: int, *, dtype=None, device=None):
        return cls.from_array(
            torch.eye(order, **default_backend(dtype, device)))

    @property
    def row_count(self) -> int:
        return self.data.shape[0]

    @property
    def column_count(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self):
        return tuple(self.data.shape)

    @property
    def order(self) -> int:
        if self.row_count != self.column_count:
            raise DimensionMismatchError(
                'A {}x{} matrix is not square'.format(*self.shape))
        return self.row_count

    @property
    def dtype(self):
        return self.data.dtype

    @property
    def device(self):
        return self.data.device

    @property
    def is_symmetric(self) -> bool:
        return is_bitwise_symmetric(self.data)

    def packed_view(self, layout: str) -> Optional[Tensor]:
        """Row-major flat view of the data, if `layout == 'dense'`"""
        return self.data.view(-1) if layout == self.layout else None

    def _check_bounds(self, row, column):
        if not (0 <= row < self.row_count and 0 <= column < self.column_count):
            raise IndexError('Index ({}, {}) out of range for a {}x{} matrix'
                             .format(row, column, *self.shape))

    def at(self, row: int, column: int, value: Optional[float] = None):
        if value is not None:
            return self.set_at(row, column, value)
        self._check_bounds(row, column)
        return self.data[row, column].item()

    def set_at(self, row: int, column: int, value: float):
        self._check_bounds(row, column)
        self.data[row, column] = value

    def __getitem__(self, index):
        return self.at(*index)

    def __setitem__(self, index, value):
        self.set_at(*index, value)

    def to_dense(self) -> Tensor:
        return self.data.clone()

    def assign(self, full: Tensor):
        if tuple(full.shape) != self.shape:
            raise DimensionMismatchError(
                'Cannot assign a {} tensor to a {}x{} matrix'
                .format('x'.join(map(str, full.shape)), *self.shape))
        self.data.copy_(full)
        return self

    def clear(self):
        self.data.zero_()
        return self

    def clone(self):
        return DenseMatrix.from_array(self.data)

    def copy_to(self, target):
        if target is None:
            raise NullArgumentError('target')
        return target.assign(self.data)

    def fill_random(self, distribution):
        """Draw one sample per cell"""
        check_sample_source(distribution)
        sample = distribution.sample((self.data.numel(),))
        self.data.view(-1).copy_(sample.reshape(-1))
        return self

    def __repr__(self):
        return 'DenseMatrix(shape={}x{}, dtype={}, device={})'.format(
            *self.shape, self.dtype, self.device)


def create_matrix(rows: int, columns: int, **backend) -> DenseMatrix:
    """Allocate a zero dense matrix"""
    return DenseMatrix(rows, columns, **backend)


def create_vector(size: int, **backend) -> Tensor:
    """Allocate a zero vector"""
    return torch.zeros([size], **default_backend(**backend))
