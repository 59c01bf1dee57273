__all__ = [
    'add', 'subtract', 'scale', 'negate', 'modulus',
    'pointwise_multiply', 'pointwise_divide',
    'multiply', 'transpose_and_multiply', 'matvec', 'vecmat',
    'transpose', 'conjugate_transpose',
]
import math
import torch
from torch import Tensor
from typing import Optional
from ..errors import (
    DimensionMismatchError, InvalidArgumentError, NullArgumentError,
)
from .provider import get_provider
from .packed import PackedMatrix
from .dense import DenseMatrix, create_matrix, create_vector

# layouts whose non-stored cells are implicit zeros
_ZERO_LAYOUTS = ('triu', 'tril')


def _check_matrix(x, name):
    if x is None:
        raise NullArgumentError(name)
    if not hasattr(x, 'packed_view') or not hasattr(x, 'to_dense'):
        raise InvalidArgumentError(
            'Argument `{}` is not a matrix: {}'.format(name, type(x)))


def _check_scalar(x, name):
    if x is None:
        raise NullArgumentError(name)
    try:
        return float(x)
    except (TypeError, ValueError):
        raise InvalidArgumentError(
            'Argument `{}` is not a scalar: {}'.format(name, type(x)))


def _check_same_shape(a, b, name_a, name_b):
    if a.shape != b.shape:
        raise DimensionMismatchError(
            'Shapes of `{}` ({}x{}) and `{}` ({}x{}) do not match'
            .format(name_a, *a.shape, name_b, *b.shape))


def _empty_like(matrix, dtype):
    backend = dict(dtype=dtype, device=matrix.device)
    if isinstance(matrix, PackedMatrix):
        return type(matrix)(matrix.order, **backend)
    return create_matrix(matrix.row_count, matrix.column_count, **backend)


def _flat(matrix, dtype):
    """Row-major flat buffer of the logical values of a matrix"""
    view = matrix.packed_view('dense')
    if view is None:
        view = matrix.to_dense().reshape(-1)
    return view.to(dtype)


def _elementwise(kernel, operands, scalar, out, zero_safe):
    """Route an elementwise operation to the packed or generic path.

    Parameters
    ----------
    kernel : str
        Name of the provider kernel.
    operands : list[matrix]
        One or two matrices with identical shapes.
    scalar : float or None
        Scalar argument passed first to unary kernels.
    out : matrix or None
        Result placeholder.
    zero_safe : bool
        Whether the operation maps implicit zeros to zero.
    """
    provider = get_provider()
    kernel = getattr(provider, kernel)
    first = operands[0]
    layout = first.layout
    dtype = first.dtype
    for operand in operands[1:]:
        dtype = torch.promote_types(dtype, operand.dtype)
    same_layout = all(x.layout == layout for x in operands)
    preserving = same_layout and (zero_safe or layout not in _ZERO_LAYOUTS)

    if out is None:
        if preserving:
            out = _empty_like(first, dtype)
        else:
            out = create_matrix(*first.shape, dtype=dtype, device=first.device)

    # packed path: all operands expose the same packed layout
    views = [x.packed_view(layout) for x in (*operands, out)]
    if preserving and all(view is not None for view in views):
        *inputs, target = views
        args = (scalar, *inputs) if scalar is not None else inputs
        kernel(*args, out=target)
        return out

    # generic path: logical values
    inputs = [_flat(x, dtype) for x in operands]
    args = (scalar, *inputs) if scalar is not None else inputs
    target = out.packed_view('dense')
    if target is not None:
        kernel(*args, out=target)
    else:
        result = inputs[0].new_empty([first.row_count * first.column_count])
        kernel(*args, out=result)
        out.assign(result.reshape(first.shape))
    return out


def _binary(kernel, a, b, out, zero_safe=True):
    _check_matrix(a, 'a')
    _check_matrix(b, 'b')
    if out is not None:
        _check_matrix(out, 'out')
    _check_same_shape(a, b, 'a', 'b')
    if out is not None:
        _check_same_shape(a, out, 'a', 'out')
    return _elementwise(kernel, [a, b], None, out, zero_safe)


def _unary(kernel, a, scalar, out, zero_safe=True):
    _check_matrix(a, 'a')
    if out is not None:
        _check_matrix(out, 'out')
        _check_same_shape(a, out, 'a', 'out')
    return _elementwise(kernel, [a], scalar, out, zero_safe)


def add(a, b, out=None):
    r"""Matrix addition $\mathbf{A} + \mathbf{B}$

    Parameters
    ----------
    a, b : matrix
        Input matrices with identical shapes.
    out : matrix, optional
        Output placeholder. May be `a` or `b`.

    Returns
    -------
    out : matrix
        If `a` and `b` share a packed layout, the result has this layout.
        Otherwise it is a `DenseMatrix`.
    """
    return _binary('add_arrays', a, b, out)


def subtract(a, b, out=None):
    r"""Matrix subtraction $\mathbf{A} - \mathbf{B}$ (see `add`)"""
    return _binary('subtract_arrays', a, b, out)


def pointwise_multiply(a, b, out=None):
    r"""Hadamard product $\mathbf{A} \odot \mathbf{B}$ (see `add`)"""
    return _binary('pointwise_multiply_arrays', a, b, out)


def pointwise_divide(a, b, out=None):
    r"""Elementwise division $\mathbf{A} \oslash \mathbf{B}$

    Dividing the implicit zeros of two triangular matrices yields NaNs,
    so the result of triangular operands is a `DenseMatrix`.
    """
    return _binary('pointwise_divide_arrays', a, b, out, zero_safe=False)


def scale(a, scalar, out=None):
    r"""Multiplication by a scalar $\alpha\mathbf{A}$

    Parameters
    ----------
    a : matrix
        Input matrix.
    scalar : float
        Scaling factor.
    out : matrix, optional
        Output placeholder. May be `a`.

    Returns
    -------
    out : matrix
        Same layout as `a` (a triangular matrix scaled by a non-finite
        value is returned as a `DenseMatrix`).
    """
    _check_matrix(a, 'a')
    scalar = _check_scalar(scalar, 'scalar')
    return _unary('scale_array', a, scalar, out,
                  zero_safe=math.isfinite(scalar))


def negate(a, out=None):
    r"""Negation $-\mathbf{A}$"""
    return _unary('scale_array', a, -1., out)


def modulus(a, divisor, out=None):
    """Elementwise remainder of the truncated division by `divisor`.

    The sign of the result is that of the dividend (as `torch.fmod`).
    """
    _check_matrix(a, 'a')
    divisor = _check_scalar(divisor, 'divisor')
    zero_safe = divisor != 0 and not math.isnan(divisor)
    return _unary('modulus_array', a, divisor, out, zero_safe=zero_safe)


def _product(a, trans_a, b, trans_b, out):
    a_rows, a_columns = a.shape
    b_rows, b_columns = b.shape
    m, k = (a_columns, a_rows) if trans_a else (a_rows, a_columns)
    kb, n = (b_columns, b_rows) if trans_b else (b_rows, b_columns)
    if k != kb:
        raise DimensionMismatchError(
            'Cannot multiply a {}x{} matrix with a {}x{} matrix'
            .format(m, k, kb, n))
    if out is not None and out.shape != (m, n):
        raise DimensionMismatchError(
            'Expected a {}x{} output but got {}x{}'.format(m, n, *out.shape))

    dtype = torch.promote_types(a.dtype, b.dtype)
    if out is None:
        out = create_matrix(m, n, dtype=dtype, device=a.device)
    buf_a = _flat(a, dtype)
    buf_b = _flat(b, dtype)

    provider = get_provider()
    target = out.packed_view('dense')
    if target is None:
        # packed output: the product is checked against its structure
        result = buf_a.new_zeros([m * n])
    else:
        result = target
    provider.matrix_multiply_with_update(
        trans_a, trans_b, 1., buf_a, a_rows, a_columns,
        buf_b, b_rows, b_columns, 0., result)
    if target is None:
        out.assign(result.reshape(m, n))
    return out


def multiply(a, b, out=None):
    r"""Matrix product $\mathbf{A}\mathbf{B}$

    The product of two symmetric (or triangular) matrices is computed
    from their packed buffers but is materialised as a `DenseMatrix`,
    since it is not symmetric in general. A packed `out` may be
    provided, in which case the product must have its structure.

    Parameters
    ----------
    a : `(m, k) matrix`
    b : `(k, n) matrix`
    out : `(m, n) matrix`, optional

    Returns
    -------
    out : `(m, n) matrix`
    """
    _check_matrix(a, 'a')
    _check_matrix(b, 'b')
    if out is not None:
        _check_matrix(out, 'out')
    return _product(a, False, b, False, out)


def transpose_and_multiply(a, b, out=None):
    r"""Matrix product $\mathbf{A}\mathbf{B}^\mathrm{T}$ (see `multiply`)"""
    _check_matrix(a, 'a')
    _check_matrix(b, 'b')
    if out is not None:
        _check_matrix(out, 'out')
    return _product(a, False, b, True, out)


def _as_vector(vec, name, like):
    if vec is None:
        raise NullArgumentError(name)
    if not torch.is_tensor(vec):
        try:
            vec = torch.as_tensor(vec, dtype=like.dtype, device=like.device)
        except (TypeError, ValueError, RuntimeError):
            raise InvalidArgumentError(
                'Argument `{}` is not a vector: {}'.format(name, type(vec)))
    if vec.dim() != 1:
        raise InvalidArgumentError(
            'Argument `{}` must be one-dimensional, got {} dimensions'
            .format(name, vec.dim()))
    return vec


def _check_out_vector(out, size):
    if not torch.is_tensor(out) or out.dim() != 1:
        raise InvalidArgumentError('Argument `out` must be a 1D tensor')
    if len(out) != size:
        raise DimensionMismatchError(
            'Expected an output vector of length {} but got {}'
            .format(size, len(out)))


def matvec(a, vec, out: Optional[Tensor] = None, transpose: bool = False):
    r"""Matrix-vector product $\mathbf{A}\mathbf{x}$

    Parameters
    ----------
    a : `(m, n) matrix`
        Input matrix.
    vec : `(n,) tensor_like`
        Input vector (`(m,)` if `transpose`).
    out : `(m,) tensor`, optional
        Output placeholder (`(n,)` if `transpose`). May be `vec`.
    transpose : `bool`, default=False
        Compute $\mathbf{A}^\mathrm{T}\mathbf{x}$ instead.

    Returns
    -------
    out : `(m,) tensor`
    """
    _check_matrix(a, 'a')
    vec = _as_vector(vec, 'vec', a)
    rows, columns = a.shape
    if transpose:
        rows, columns = columns, rows
    if len(vec) != columns:
        raise DimensionMismatchError(
            'Cannot multiply a {}x{} matrix with a vector of length {}'
            .format(rows, columns, len(vec)))
    dtype = torch.promote_types(a.dtype, vec.dtype)
    if out is None:
        out = create_vector(rows, dtype=dtype, device=vec.device)
    else:
        _check_out_vector(out, rows)
    get_provider().matrix_multiply_with_update(
        transpose, False, 1., _flat(a, dtype), *a.shape,
        vec.to(dtype), len(vec), 1, 0., out)
    return out


def vecmat(vec, a, out: Optional[Tensor] = None):
    r"""Vector-matrix product $\mathbf{x}^\mathrm{T}\mathbf{A}$

    Parameters
    ----------
    vec : `(m,) tensor_like`
    a : `(m, n) matrix`
    out : `(n,) tensor`, optional

    Returns
    -------
    out : `(n,) tensor`
    """
    _check_matrix(a, 'a')
    vec = _as_vector(vec, 'vec', a)
    rows, columns = a.shape
    if len(vec) != rows:
        raise DimensionMismatchError(
            'Cannot multiply a vector of length {} with a {}x{} matrix'
            .format(len(vec), rows, columns))
    dtype = torch.promote_types(a.dtype, vec.dtype)
    if out is None:
        out = create_vector(columns, dtype=dtype, device=vec.device)
    else:
        _check_out_vector(out, columns)
    get_provider().matrix_multiply_with_update(
        False, False, 1., vec.to(dtype), 1, len(vec),
        _flat(a, dtype), rows, columns, 0., out)
    return out


def transpose(a):
    """Transpose of a matrix.

    A symmetric matrix is returned as is. The transpose of a triangular
    matrix is a triangular matrix of the other side.
    """
    _check_matrix(a, 'a')
    if a.packed_view('sym') is not None:
        return a
    if a.layout in _ZERO_LAYOUTS:
        return a.transpose()
    return DenseMatrix.from_array(a.to_dense().T)


def conjugate_transpose(a):
    """Conjugate transpose (equal to the transpose for real matrices)"""
    return transpose(a)
