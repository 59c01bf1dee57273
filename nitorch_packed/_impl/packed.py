"""Buffer handling shared by all packed matrices.

Subclasses define
- `layout` : the layout tag (`'sym'`, `'triu'` or `'tril'`)
- `_offset(row, column)` : offset of a logical cell, or None if the
  cell is an implicit zero
- `_check_offset(row, column)` : offset of a cell that may be written
- `_structure_error(full)` : message if a full tensor cannot be stored
"""
import torch
from torch import Tensor
from typing import Optional
from warnings import warn
from ..errors import (
    DimensionMismatchError, LengthMismatchError, InvalidArgumentError,
    NullArgumentError, StructuralViolationError,
)
from .indexing import (
    index_of_diagonal, packed_size, order_from_size, unpack, pack,
)


def default_backend(dtype=None, device=None):
    return dict(dtype=dtype or torch.double, device=device)


def as_square(array, dtype=None, device=None) -> Tensor:
    """Convert an array-like to a square 2D floating point tensor"""
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
            'Expected a 2D array but got {} dimensions'.format(array.dim()))
    if array.shape[0] != array.shape[1]:
        raise DimensionMismatchError(
            'Expected a square array but got shape {}x{}'
            .format(*array.shape))
    return array


def check_sample_source(distribution):
    if distribution is None:
        raise NullArgumentError('distribution')
    if not hasattr(distribution, 'sample'):
        raise InvalidArgumentError(
            'Distribution must implement `sample(sample_shape)`')


_BIT_VIEWS = {1: torch.int8, 2: torch.int16, 4: torch.int32, 8: torch.int64}


def is_bitwise_symmetric(full: Tensor) -> bool:
    """Whether every off-diagonal pair of a square tensor matches bit for bit.

    Values are compared through their integer representation, so NaNs
    with identical payloads match and `-0.` does not match `0.`.
    The diagonal always matches itself.
    """
    if full.dim() != 2 or full.shape[0] != full.shape[1]:
        return False
    if full.is_complex():
        full = torch.view_as_real(full)
    else:
        full = full[..., None]
    full = full.contiguous()
    bits = full.view(_BIT_VIEWS[full.element_size()])
    return torch.equal(bits, bits.transpose(0, 1))


class PackedMatrix:
    """Square matrix stored in a packed buffer of `N*(N+1)//2` elements"""

    layout = None

    def __init__(self, order: int, fill: float = 0., *,
                 dtype=None, device=None):
        order = int(order)
        if order < 0:
            raise InvalidArgumentError(
                'Matrix order must be non-negative, got {}'.format(order))
        self._order = order
        self.data = torch.full([packed_size(order)], fill,
                               **default_backend(dtype, device))

    @classmethod
    def _wrap(cls, data: Tensor, order: int):
        obj = cls.__new__(cls)
        obj._order = order
        obj.data = data
        return obj

    # ------------------------------------------------------------------
    #   construction
    # ------------------------------------------------------------------

    @classmethod
    def from_packed(cls, data, order: Optional[int] = None, *,
                    dtype=None, device=None):
        """Build a matrix that takes ownership of an existing buffer.

        The buffer is not copied: the new matrix uses it as its storage
        and the caller must not modify it through any other reference
        for as long as the matrix is in use.

        Parameters
        ----------
        data : `(N*(N+1)//2,) tensor`
            Packed buffer.
        order : `int`, optional
            Matrix order. By default, inferred from the buffer length.
        dtype : `torch.dtype`, optional
            If it differs from that of `data`, the buffer must be copied.
        device : `torch.device`, optional
            If it differs from that of `data`, the buffer must be copied.

        Returns
        -------
        matrix : packed matrix
        """
        if data is None:
            raise NullArgumentError('data')
        if not torch.is_tensor(data):
            data = torch.as_tensor(data, **default_backend(dtype, device))
        else:
            if dtype is None and not data.is_floating_point():
                dtype = torch.double
            dtype = dtype or data.dtype
            device = torch.device(device) if device is not None else data.device
            if dtype != data.dtype or device != data.device:
                warn('Packed buffer converted to {} on {}: the matrix does '
                     'not share memory with the input buffer'
                     .format(dtype, device), RuntimeWarning)
                data = data.to(dtype=dtype, device=device)
        if data.dim() != 1:
            raise InvalidArgumentError(
                'Packed buffer must be one-dimensional, got {} dimensions'
                .format(data.dim()))
        if order is None:
            order = order_from_size(len(data))
        elif len(data) != packed_size(order):
            raise LengthMismatchError(
                'A packed matrix of order {} needs {} elements, got {}'
                .format(order, packed_size(order), len(data)))
        return cls._wrap(data, int(order))

    @classmethod
    def from_array(cls, array, *, dtype=None, device=None):
        """Build a matrix from a full square array (copied).

        Raises `StructuralViolationError` if the array does not have the
        structure of the matrix type.
        """
        array = as_square(array, dtype, device)
        cls._check_structure(array)
        return cls._wrap(pack(array, cls.layout), array.shape[0])

    @classmethod
    def from_matrix(cls, matrix):
        """Build a matrix from any other matrix (copied).

        If `matrix` has the same packed layout, its buffer is copied
        directly. Otherwise, its structure is checked and its stored
        triangle is copied through its logical view.
        """
        if matrix is None:
            raise NullArgumentError('matrix')
        view = matrix.packed_view(cls.layout)
        if view is not None:
            return cls._wrap(view.clone(), matrix.order)
        if matrix.row_count != matrix.column_count:
            raise DimensionMismatchError(
                'Expected a square matrix but got shape {}x{}'
                .format(matrix.row_count, matrix.column_count))
        cls._check_source(matrix)
        full = matrix.to_dense()
        return cls._wrap(pack(full, cls.layout), matrix.row_count)

    @classmethod
    def _check_source(cls, matrix):
        cls._check_structure(matrix.to_dense())

    @classmethod
    def _check_structure(cls, full):
        msg = cls._structure_error(full)
        if msg:
            raise StructuralViolationError(msg)

    @classmethod
    def identity(cls, order: int, *, dtype=None, device=None):
        """Identity matrix of order `order`"""
        mat = cls(order, dtype=dtype, device=device)
        for i in range(order):
            mat.data[index_of_diagonal(i)] = 1
        return mat

    @classmethod
    def random(cls, order: int, distribution, *, dtype=None, device=None):
        """Matrix whose stored cells are sampled from a distribution"""
        check_sample_source(distribution)
        return cls(order, dtype=dtype, device=device).fill_random(distribution)

    # ------------------------------------------------------------------
    #   storage trait
    # ------------------------------------------------------------------

    @property
    def order(self) -> int:
        return self._order

    @property
    def row_count(self) -> int:
        return self._order

    @property
    def column_count(self) -> int:
        return self._order

    @property
    def shape(self):
        return (self._order, self._order)

    @property
    def dtype(self):
        return self.data.dtype

    @property
    def device(self):
        return self.data.device

    def packed_view(self, layout: str) -> Optional[Tensor]:
        """Packed buffer, if this matrix is stored with layout `layout`"""
        return self.data if layout == self.layout else None

    def _check_bounds(self, row, column):
        if not (0 <= row < self._order and 0 <= column < self._order):
            raise IndexError('Index ({}, {}) out of range for a matrix of '
                             'order {}'.format(row, column, self._order))

    def at(self, row: int, column: int, value: Optional[float] = None):
        """Read (or write, if `value` is provided) element `(row, column)`"""
        if value is not None:
            return self.set_at(row, column, value)
        self._check_bounds(row, column)
        offset = self._offset(row, column)
        if offset is None:
            return 0.
        return self.data[offset].item()

    def set_at(self, row: int, column: int, value: float):
        self._check_bounds(row, column)
        self.data[self._check_offset(row, column)] = value

    def at_diagonal(self, row: int, value: Optional[float] = None):
        """Unchecked access to the diagonal element `(row, row)`"""
        if value is not None:
            self.data[index_of_diagonal(row)] = value
            return
        return self.data[index_of_diagonal(row)].item()

    def __getitem__(self, index):
        return self.at(*index)

    def __setitem__(self, index, value):
        self.set_at(*index, value)

    def to_dense(self) -> Tensor:
        """Full `(N, N)` tensor holding the logical values"""
        return unpack(self.data, self.layout, self._order)

    def assign(self, full: Tensor):
        """Overwrite the matrix with the values of a full tensor.

        The shape and structure of `full` are checked before the
        storage is modified.
        """
        if tuple(full.shape) != self.shape:
            raise DimensionMismatchError(
                'Cannot assign a {} tensor to a {}x{} matrix'
                .format('x'.join(map(str, full.shape)), *self.shape))
        self._check_structure(full)
        self.data.copy_(pack(full, self.layout))
        return self

    def clear(self):
        self.data.zero_()
        return self

    def clone(self):
        return self._wrap(self.data.clone(), self._order)

    def copy_to(self, target):
        """Copy the values of this matrix into `target`"""
        if target is None:
            raise NullArgumentError('target')
        if target.shape != self.shape:
            raise DimensionMismatchError(
                'Cannot copy a {}x{} matrix into a {}x{} matrix'
                .format(*self.shape, *target.shape))
        view = target.packed_view(self.layout)
        if view is not None:
            if view is not self.data:
                view.copy_(self.data)
            return target
        return target.assign(self.to_dense())

    def fill_random(self, distribution):
        """Draw one sample per stored cell"""
        check_sample_source(distribution)
        sample = distribution.sample((len(self.data),))
        self.data.copy_(sample.reshape(-1))
        return self

    def __repr__(self):
        return '{}(order={}, dtype={}, device={})'.format(
            type(self).__name__, self._order, self.dtype, self.device)
