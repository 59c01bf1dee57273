__all__ = [
    'index_of', 'index_of_upper', 'index_of_lower', 'index_of_diagonal',
    'packed_size', 'order_from_size', 'upper_indices', 'lower_indices',
    'stored_indices', 'full_index', 'unpack', 'pack',
]
import torch
from torch import Tensor
from typing import Literal, Optional, Tuple
from math import isqrt
from ..errors import LengthMismatchError, InvalidArgumentError

Layout = Literal['sym', 'triu', 'tril']


def index_of_upper(row: int, column: int) -> int:
    """Offset of an element of the upper triangle (requires `row <= column`)"""
    return row + (column * (column + 1)) // 2


def index_of_lower(row: int, column: int) -> int:
    """Offset of an element of the lower triangle (requires `row >= column`)"""
    return column + (row * (row + 1)) // 2


def index_of_diagonal(row: int) -> int:
    """Offset of the diagonal element `(row, row)`"""
    return (row * (row + 3)) // 2


def index_of(row: int, column: int) -> int:
    """Offset of `(row, column)` or `(column, row)`, whichever is upper"""
    r = min(row, column)
    c = max(row, column)
    return index_of_upper(r, c)


def packed_size(order: int) -> int:
    """Number of stored elements in a packed matrix of order `order`"""
    return (order * (order + 1)) // 2


def order_from_size(size: int) -> int:
    """Order of a packed matrix that stores `size` elements"""
    order = (isqrt(1 + 8 * size) - 1) // 2
    if packed_size(order) != size:
        raise LengthMismatchError(
            'A packed buffer of length {} does not correspond to any '
            'matrix order (expected a triangular number)'.format(size))
    return order


def upper_indices(order: int, device=None) -> Tuple[Tensor, Tensor]:
    """Rows and columns of the stored upper cells, in buffer order"""
    rows, columns = torch.triu_indices(order, order, device=device)
    offsets = rows + (columns * (columns + 1)).div(2, rounding_mode='floor')
    out_rows = torch.empty_like(rows)
    out_columns = torch.empty_like(columns)
    out_rows[offsets] = rows
    out_columns[offsets] = columns
    return out_rows, out_columns


def lower_indices(order: int, device=None) -> Tuple[Tensor, Tensor]:
    """Rows and columns of the stored lower cells, in buffer order"""
    rows, columns = upper_indices(order, device)
    return columns, rows


def stored_indices(order: int, layout: Layout, device=None):
    """Rows and columns of the physically stored cells of a layout"""
    if layout == 'tril':
        return lower_indices(order, device)
    elif layout in ('sym', 'triu'):
        return upper_indices(order, device)
    raise InvalidArgumentError('Unknown packed layout {}'.format(layout))


def full_index(order: int, layout: Layout, device=None) -> Tensor:
    """Buffer offset of every logical cell of a packed matrix.

    Parameters
    ----------
    order : `int`
        Matrix order `N`.
    layout : `{'sym', 'triu', 'tril'}`
        Packed layout.
    device : `torch.device`, optional
        Device of the returned tensor.

    Returns
    -------
    index : `(N, N) tensor[long]`
        `index[i, j]` is the offset of `(i, j)` in the packed buffer.
        For triangular layouts, cells of the implicit zero triangle
        point to the out-of-range slot `N*(N+1)//2`.

    """
    i = torch.arange(order, device=device)
    row, column = i[:, None], i[None, :]
    r = torch.minimum(row, column)
    c = torch.maximum(row, column)
    index = r + (c * (c + 1)).div(2, rounding_mode='floor')
    if layout == 'sym':
        return index
    sentinel = packed_size(order)
    if layout == 'triu':
        return torch.where(row <= column, index, index.new_full([], sentinel))
    elif layout == 'tril':
        return torch.where(row >= column, index, index.new_full([], sentinel))
    raise InvalidArgumentError('Unknown packed layout {}'.format(layout))


def unpack(data: Tensor, layout: Layout, order: Optional[int] = None) -> Tensor:
    """Expand a packed buffer into a full `(N, N)` tensor"""
    if order is None:
        order = order_from_size(len(data))
    index = full_index(order, layout, data.device)
    if layout != 'sym':
        data = torch.cat([data, data.new_zeros([1])])
    return data[index]


def pack(full: Tensor, layout: Layout) -> Tensor:
    """Extract the stored triangle of a full `(N, N)` tensor (no check)"""
    rows, columns = stored_indices(full.shape[-1], layout, full.device)
    return full[rows, columns]
