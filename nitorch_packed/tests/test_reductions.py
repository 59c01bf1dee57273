from .utils import (
    get_test_devices, init_device, symmetric3x3, symmetric4x4, square4x4,
)
from nitorch_packed.matrices import (
    SymmetricMatrix, UpperTriangularMatrix, LowerTriangularMatrix, DenseMatrix,
)
from nitorch_packed.arith import (
    trace, norm, l1_norm, frobenius_norm, infinity_norm, random,
)
from nitorch_packed.indexing import packed_size
from nitorch_packed.errors import (
    DimensionMismatchError, InvalidArgumentError, NullArgumentError,
)
import torch
import pytest

devices = get_test_devices()


class CountingDistribution:
    """Returns 1, 2, 3, ... and records every call"""

    def __init__(self):
        self.calls = []

    def sample(self, sample_shape=torch.Size()):
        self.calls.append(tuple(sample_shape))
        n = 1
        for s in sample_shape:
            n *= s
        return torch.arange(1, n + 1, dtype=torch.double).reshape(sample_shape)


@pytest.mark.parametrize("order", [0, 1, 4, 13])
def test_trace_identity(order):
    assert trace(SymmetricMatrix.identity(order)) == order
    assert trace(UpperTriangularMatrix.identity(order)) == order
    assert trace(DenseMatrix.identity(order)) == order


def test_trace():
    assert trace(SymmetricMatrix.from_array(symmetric3x3)) == 6.0
    assert trace(LowerTriangularMatrix.from_array(
        torch.as_tensor(square4x4, dtype=torch.double).tril())) \
        == -1.1 + 1.1 + 6.2 - 7.7
    with pytest.raises(DimensionMismatchError):
        trace(DenseMatrix(2, 3))
    with pytest.raises(NullArgumentError):
        trace(None)


@pytest.mark.parametrize("device", devices)
def test_norms(device):
    device = init_device(device)
    backend = dict(dtype=torch.double, device=device)
    full = torch.as_tensor(symmetric4x4, **backend)
    tri = torch.as_tensor(square4x4, **backend).triu()

    for mat, ref in ((SymmetricMatrix.from_array(full), full),
                     (UpperTriangularMatrix.from_array(tri), tri),
                     (DenseMatrix.from_array(tri), tri)):
        assert l1_norm(mat) == pytest.approx(
            torch.linalg.matrix_norm(ref, ord=1).item())
        assert infinity_norm(mat) == pytest.approx(
            torch.linalg.matrix_norm(ref, ord=float('inf')).item())
        assert frobenius_norm(mat) == pytest.approx(
            torch.linalg.matrix_norm(ref, ord='fro').item())
        assert norm(mat) == frobenius_norm(mat)

    # column sums of the full symmetric matrix, not of the stored triangle
    assert l1_norm(SymmetricMatrix.from_array(full)) == 30.

    assert frobenius_norm(SymmetricMatrix(0)) == 0.
    with pytest.raises(InvalidArgumentError):
        norm(SymmetricMatrix(2), 'nuc')


def test_random_one_sample_per_cell():
    dist = CountingDistribution()
    mat = SymmetricMatrix(5)
    out = random(mat, dist)
    assert out is mat
    assert dist.calls == [(packed_size(5),)]
    assert mat.data.tolist() == [float(i) for i in range(1, 16)]
    for i in range(5):
        for j in range(5):
            assert mat.at(i, j) == mat.at(j, i)

    dist = CountingDistribution()
    mat = UpperTriangularMatrix.random(4, dist)
    assert dist.calls == [(packed_size(4),)]
    for i in range(4):
        for j in range(i):
            assert mat.at(i, j) == 0.

    dist = CountingDistribution()
    mat = random(DenseMatrix(2, 3), dist)
    assert dist.calls == [(6,)]
    assert mat.data.tolist() == [[1., 2., 3.], [4., 5., 6.]]

    with pytest.raises(NullArgumentError):
        random(SymmetricMatrix(2), None)


def test_random_torch_distribution():
    torch.manual_seed(0)
    dist = torch.distributions.Normal(torch.tensor(0., dtype=torch.double),
                                      torch.tensor(1., dtype=torch.double))
    mat = SymmetricMatrix.random(6, dist)
    assert mat.data.abs().sum().item() > 0
    assert torch.equal(mat.to_dense(), mat.to_dense().T)
