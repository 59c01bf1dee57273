__all__ = [
    'trace', 'norm', 'l1_norm', 'frobenius_norm', 'infinity_norm', 'random',
]
from typing import Literal
from ..errors import DimensionMismatchError, InvalidArgumentError
from .provider import get_provider
from .dispatch import _check_matrix
from .packed import check_sample_source


def trace(a) -> float:
    """Sum of the diagonal elements of a square matrix"""
    _check_matrix(a, 'a')
    if a.row_count != a.column_count:
        raise DimensionMismatchError(
            'Trace requires a square matrix, got {}x{}'.format(*a.shape))
    diag = getattr(a, 'at_diagonal', None)
    if diag is None:
        diag = lambda i: a.at(i, i)
    total = 0.
    for i in range(a.row_count):
        total += diag(i)
    return total


def norm(a, kind: Literal['l1', 'fro', 'inf'] = 'fro') -> float:
    """Matrix norm.

    Packed matrices are explicitly expanded into a dense buffer before
    being handed to the numeric provider, which only understands dense
    row-major buffers.

    Parameters
    ----------
    a : matrix
        Input matrix.
    kind : `{'l1', 'fro', 'inf'}`, default='fro'
        - `'l1'`  : maximum absolute column sum
        - `'fro'` : Frobenius norm
        - `'inf'` : maximum absolute row sum

    Returns
    -------
    norm : `float`
    """
    _check_matrix(a, 'a')
    if kind not in ('l1', 'fro', 'inf'):
        raise InvalidArgumentError('Unknown norm {}'.format(kind))
    buffer = a.packed_view('dense')
    if buffer is None:
        buffer = a.to_dense().reshape(-1)
    return get_provider().matrix_norm(kind, a.row_count, a.column_count, buffer)


def l1_norm(a) -> float:
    """Maximum absolute column sum"""
    return norm(a, 'l1')


def frobenius_norm(a) -> float:
    """Square root of the sum of squared elements"""
    return norm(a, 'fro')


def infinity_norm(a) -> float:
    """Maximum absolute row sum"""
    return norm(a, 'inf')


def random(a, distribution):
    """Fill a matrix (in-place) with samples from a distribution.

    Exactly one sample is drawn per physically stored cell, so that
    symmetric and triangular structures are preserved.

    Parameters
    ----------
    a : matrix
        Matrix to fill.
    distribution : `torch.distributions.Distribution`
        Any object implementing `sample(sample_shape)`.

    Returns
    -------
    a : matrix
    """
    _check_matrix(a, 'a')
    check_sample_source(distribution)
    return a.fill_random(distribution)
