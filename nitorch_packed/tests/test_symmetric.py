from .utils import (
    get_test_devices, init_device, symmetric3x3, symmetric4x4, square3x3,
)
from nitorch_packed.matrices import (
    SymmetricMatrix, UpperTriangularMatrix, DenseMatrix,
)
from nitorch_packed.arith import add
from nitorch_packed.errors import (
    StructuralViolationError, LengthMismatchError, DimensionMismatchError,
    NullArgumentError,
)
import torch
import pytest
import math

devices = get_test_devices()


@pytest.mark.parametrize("device", devices)
def test_from_array(device):
    device = init_device(device)
    mat = SymmetricMatrix.from_array(symmetric3x3, device=device)
    assert mat.order == 3
    assert len(mat.data) == 6
    assert mat.at(0, 2) == 3.0
    assert mat.at(2, 0) == 3.0
    for i in range(3):
        for j in range(3):
            assert mat.at(i, j) == symmetric3x3[i][j]
            assert mat.at(i, j) == mat.at(j, i)
            if i <= j:
                assert mat.at(i, j) == mat.at_upper(i, j)
            else:
                assert mat.at(i, j) == mat.at_lower(i, j)
    assert torch.equal(mat.to_dense().cpu(),
                       torch.as_tensor(symmetric3x3, dtype=torch.double))


def test_from_array_not_symmetric():
    with pytest.raises(StructuralViolationError):
        SymmetricMatrix.from_array(square3x3)
    with pytest.raises(DimensionMismatchError):
        SymmetricMatrix.from_array([[1., 2., 3.], [2., 1., 0.]])
    with pytest.raises(NullArgumentError):
        SymmetricMatrix.from_array(None)


def test_mirrored_write():
    mat = SymmetricMatrix(4)
    mat.at(3, 1, 7.5)
    assert mat.at(1, 3) == 7.5
    assert mat.at_upper(1, 3) == 7.5
    mat[0, 2] = -1.
    assert mat[2, 0] == -1.
    mat.set_at(2, 2, 4.)
    assert mat.at_diagonal(2) == 4.
    assert torch.equal(mat.to_dense(), mat.to_dense().T)


def test_fast_accessors():
    mat = SymmetricMatrix(3)
    mat.at_upper(0, 1, 2.)
    mat.at_lower(2, 1, 3.)
    mat.at_diagonal(0, 1.)
    assert mat.at(1, 0) == 2.
    assert mat.at(1, 2) == 3.
    assert mat.at(0, 0) == 1.
    assert mat.data.tolist() == [1., 2., 0., 0., 3., 0.]


def test_out_of_range():
    mat = SymmetricMatrix(3)
    with pytest.raises(IndexError):
        mat.at(3, 0)
    with pytest.raises(IndexError):
        mat.at(0, -1, 1.)


@pytest.mark.parametrize("device", devices)
def test_constructors(device):
    device = init_device(device)
    backend = dict(dtype=torch.double, device=device)

    mat = SymmetricMatrix(3, **backend)
    assert mat.data.tolist() == [0.] * 6

    mat = SymmetricMatrix(3, 2.5, **backend)
    assert mat.at(2, 1) == 2.5

    mat = SymmetricMatrix(0, **backend)
    assert mat.shape == (0, 0)
    assert len(mat.data) == 0

    mat = SymmetricMatrix(2, dtype=torch.float32, device=device)
    assert mat.dtype == torch.float32


def test_from_packed_takes_ownership():
    buffer = torch.arange(6, dtype=torch.double)
    mat = SymmetricMatrix.from_packed(buffer)
    assert mat.data is buffer
    assert mat.order == 3
    assert mat.at(2, 1) == 4.
    mat.at(1, 2, -4.)
    assert buffer[4].item() == -4.

    mat = SymmetricMatrix.from_packed(buffer, 3)
    assert mat.order == 3

    with pytest.raises(LengthMismatchError):
        SymmetricMatrix.from_packed(buffer, 4)
    with pytest.raises(LengthMismatchError):
        SymmetricMatrix.from_packed(torch.zeros(7, dtype=torch.double))
    with pytest.raises(NullArgumentError):
        SymmetricMatrix.from_packed(None)


def test_from_packed_conversion_warns():
    buffer = torch.arange(6)
    with pytest.warns(RuntimeWarning):
        mat = SymmetricMatrix.from_packed(buffer)
    assert mat.dtype == torch.double
    assert mat.data is not buffer


def test_from_matrix():
    sym = SymmetricMatrix.from_array(symmetric4x4)

    copy = SymmetricMatrix.from_matrix(sym)
    assert torch.equal(copy.data, sym.data)
    assert copy.data is not sym.data

    dense = DenseMatrix.from_array(symmetric4x4)
    copy = SymmetricMatrix.from_matrix(dense)
    assert torch.equal(copy.data, sym.data)

    with pytest.raises(StructuralViolationError):
        SymmetricMatrix.from_matrix(DenseMatrix.from_array(square3x3))

    diag = UpperTriangularMatrix(3)
    diag.at_diagonal(1, 2.)
    copy = SymmetricMatrix.from_matrix(diag)
    assert copy.at(1, 1) == 2.
    diag.at_upper(0, 2, 1.)
    with pytest.raises(StructuralViolationError):
        SymmetricMatrix.from_matrix(diag)


@pytest.mark.parametrize("order", [0, 1, 3, 10])
def test_identity(order):
    mat = SymmetricMatrix.identity(order)
    for i in range(order):
        for j in range(order):
            assert mat.at(i, j) == (1. if i == j else 0.)


def test_clone_clear():
    mat = SymmetricMatrix.from_array(symmetric3x3)
    clone = mat.clone()
    clone.at(0, 1, 100.)
    assert mat.at(0, 1) == 2.
    mat.clear()
    assert mat.data.abs().sum().item() == 0.
    assert clone.at(1, 0) == 100.


def test_copy_to():
    mat = SymmetricMatrix.from_array(symmetric3x3)
    target = SymmetricMatrix(3)
    mat.copy_to(target)
    assert torch.equal(target.data, mat.data)

    dense = DenseMatrix(3)
    mat.copy_to(dense)
    assert torch.equal(dense.data, mat.to_dense())

    with pytest.raises(DimensionMismatchError):
        mat.copy_to(SymmetricMatrix(4))


def test_assign_checks_structure():
    mat = SymmetricMatrix.from_array(symmetric3x3)
    with pytest.raises(StructuralViolationError):
        mat.assign(torch.as_tensor(square3x3, dtype=torch.double))
    assert mat.at(0, 2) == 3.
    assert mat.is_symmetric


def test_symmetry_is_judged_on_off_diagonal_bits():
    nan = float('nan')

    # special values on the diagonal never break symmetry
    mat = SymmetricMatrix.from_array([[nan, 2.], [2., 1.]])
    assert math.isnan(mat.at(0, 0))
    assert mat.at(1, 0) == 2.
    mat = SymmetricMatrix.from_array([[-0., 1.], [1., float('inf')]])
    assert mat.at(1, 1) == float('inf')

    # identical NaNs on both sides match
    mat = SymmetricMatrix.from_array([[1., nan], [nan, 1.]])
    assert math.isnan(mat.at(1, 0))

    # -0 and +0 are equal values but different bits
    with pytest.raises(StructuralViolationError):
        SymmetricMatrix.from_array([[1., -0.], [0., 1.]])
    with pytest.raises(StructuralViolationError):
        SymmetricMatrix.from_array([[1., nan], [2., 1.]])

    assert DenseMatrix.from_array([[nan, 2.], [2., nan]]).is_symmetric
    assert not DenseMatrix.from_array([[1., 2.], [2.5, 1.]]).is_symmetric
    assert not DenseMatrix(2, 3).is_symmetric


def test_nan_diagonal_round_trip():
    mat = SymmetricMatrix(2, 1.)
    mat.at_diagonal(0, float('nan'))
    dense = DenseMatrix.from_matrix(mat)
    assert dense.is_symmetric
    copy = SymmetricMatrix.from_matrix(dense)
    assert math.isnan(copy.at(0, 0))
    assert copy.at(0, 1) == 1.

    out = SymmetricMatrix(2)
    add(mat, DenseMatrix.identity(2), out=out)
    assert math.isnan(out.at(0, 0))
    assert out.at(1, 1) == 2.
    assert out.at(1, 0) == 1.
