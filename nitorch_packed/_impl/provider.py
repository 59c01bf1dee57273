__all__ = [
    'TorchProvider', 'get_provider', 'set_provider',
    'set_num_threads', 'get_num_threads',
]
import torch
from torch import Tensor
from typing import Literal
from ..errors import InvalidArgumentError, DimensionMismatchError

NormKind = Literal['l1', 'fro', 'inf']


def _byte_range(x):
    start = x.data_ptr()
    return start, start + x.numel() * x.element_size()


def _check_alias(out, *inputs):
    # Elementwise kernels accept `out` to be one of their inputs, but
    # partially overlapping buffers would race across worker threads.
    out_start, out_stop = _byte_range(out)
    for inp in inputs:
        if inp is out or out.numel() == 0 or inp.numel() == 0:
            continue
        inp_start, inp_stop = _byte_range(inp)
        if inp_start == out_start and inp_stop == out_stop \
                and inp.stride() == out.stride():
            continue
        if inp_start < out_stop and out_start < inp_stop:
            raise InvalidArgumentError(
                'Output buffer partially overlaps with an input buffer')


class TorchProvider:
    """Flat-buffer numeric kernels backed by torch.

    The provider knows nothing about packing: it receives 1-D buffers
    (and, for matrix kernels, explicit row-major dimensions) and writes
    into a pre-allocated output buffer. Elementwise kernels run on
    torch's intra-op thread pool.
    """

    def add_arrays(self, x: Tensor, y: Tensor, out: Tensor) -> Tensor:
        _check_alias(out, x, y)
        return torch.add(x, y, out=out)

    def subtract_arrays(self, x: Tensor, y: Tensor, out: Tensor) -> Tensor:
        _check_alias(out, x, y)
        return torch.sub(x, y, out=out)

    def scale_array(self, alpha: float, x: Tensor, out: Tensor) -> Tensor:
        _check_alias(out, x)
        return torch.mul(x, alpha, out=out)

    def pointwise_multiply_arrays(self, x: Tensor, y: Tensor, out: Tensor) -> Tensor:
        _check_alias(out, x, y)
        return torch.mul(x, y, out=out)

    def pointwise_divide_arrays(self, x: Tensor, y: Tensor, out: Tensor) -> Tensor:
        _check_alias(out, x, y)
        return torch.div(x, y, out=out)

    def modulus_array(self, divisor: float, x: Tensor, out: Tensor) -> Tensor:
        # remainder of the truncated division (sign of the dividend)
        _check_alias(out, x)
        return torch.fmod(x, divisor, out=out)

    def matrix_multiply_with_update(
            self,
            trans_a: bool,
            trans_b: bool,
            alpha: float,
            a: Tensor, a_rows: int, a_columns: int,
            b: Tensor, b_rows: int, b_columns: int,
            beta: float,
            c: Tensor,
    ) -> Tensor:
        r"""General matrix product $\mathbf{C} \leftarrow \alpha
        \operatorname{op}(\mathbf{A}) \operatorname{op}(\mathbf{B}) +
        \beta \mathbf{C}$

        Parameters
        ----------
        trans_a, trans_b : `bool`
            Transpose the left (right) operand before multiplying.
        alpha : `float`
            Scaling of the product.
        a : `(a_rows * a_columns) tensor`
            Left operand, flattened in row-major order.
        a_rows, a_columns : `int`
            Shape of the (non-transposed) left operand.
        b : `(b_rows * b_columns) tensor`
            Right operand, flattened in row-major order.
        b_rows, b_columns : `int`
            Shape of the (non-transposed) right operand.
        beta : `float`
            Scaling of the previous value of `c`.
            If zero, the previous content of `c` is ignored.
        c : `(m * n) tensor`
            Output buffer, flattened in row-major order.

        Returns
        -------
        c : `(m * n) tensor`

        """
        mat_a = a.reshape(a_rows, a_columns)
        mat_b = b.reshape(b_rows, b_columns)
        if trans_a:
            mat_a = mat_a.T
        if trans_b:
            mat_b = mat_b.T
        if mat_a.shape[1] != mat_b.shape[0]:
            raise DimensionMismatchError(
                'Cannot multiply a {}x{} matrix with a {}x{} matrix'
                .format(*mat_a.shape, *mat_b.shape))
        m, n = mat_a.shape[0], mat_b.shape[1]
        if c.numel() != m * n:
            raise DimensionMismatchError(
                'Output buffer has {} elements but the product has {}'
                .format(c.numel(), m * n))
        # `c` may alias `b` (in-place matrix-vector products), so the
        # product is fully evaluated before being written.
        res = torch.mm(mat_a, mat_b.to(mat_a.dtype))
        if alpha != 1:
            res.mul_(alpha)
        if beta != 0:
            res.add_(c.reshape(m, n), alpha=beta)
        c.copy_(res.reshape(-1))
        return c

    def matrix_norm(self, kind: NormKind, rows: int, columns: int,
                    buffer: Tensor) -> float:
        """Norm of a dense matrix stored in a row-major flat buffer.

        Parameters
        ----------
        kind : `{'l1', 'fro', 'inf'}`
            Maximum absolute column sum, Frobenius norm or maximum
            absolute row sum.
        rows, columns : `int`
            Shape of the matrix
        buffer : `(rows * columns) tensor`
            Dense data

        Returns
        -------
        norm : `float`
        """
        if buffer.numel() != rows * columns:
            raise DimensionMismatchError(
                'Buffer has {} elements but a {}x{} matrix has {}'
                .format(buffer.numel(), rows, columns, rows * columns))
        if kind not in ('l1', 'fro', 'inf'):
            raise InvalidArgumentError('Unknown norm {}'.format(kind))
        if rows * columns == 0:
            return 0.
        mat = buffer.reshape(rows, columns)
        if kind == 'l1':
            return mat.abs().sum(0).max().item()
        elif kind == 'inf':
            return mat.abs().sum(1).max().item()
        else:
            return torch.linalg.matrix_norm(mat, ord='fro').item()


_provider = TorchProvider()


def get_provider():
    """Return the numeric provider used by all matrix operations"""
    return _provider


def set_provider(provider):
    """Replace the numeric provider used by all matrix operations.

    Parameters
    ----------
    provider : object
        Any object implementing the methods of `TorchProvider`.

    Returns
    -------
    previous : object
        The provider that was active before the call.
    """
    global _provider
    if provider is None:
        raise InvalidArgumentError('Provider cannot be None')
    previous, _provider = _provider, provider
    return previous


def set_num_threads(num_threads: int):
    """Set the number of threads used by elementwise kernels"""
    torch.set_num_threads(int(num_threads))


def get_num_threads() -> int:
    """Number of threads used by elementwise kernels"""
    return torch.get_num_threads()
