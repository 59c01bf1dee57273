"""
## Overview
Errors raised by packed matrices and by the arithmetic router.

All errors derive from `PackedMatrixError` and from the builtin exception
that best describes them, so that `except ValueError` keeps working.

- `DimensionMismatchError`: operand shapes are incompatible.
- `StructuralViolationError`: a write (or a source) breaks the symmetry
  or triangularity of a matrix.
- `LengthMismatchError`: a raw packed buffer does not hold `N*(N+1)//2`
  elements.
- `NullArgumentError`: an operand is `None`.
- `InvalidArgumentError`: an operand is malformed.

---
"""
__all__ = [
    'PackedMatrixError',
    'DimensionMismatchError',
    'StructuralViolationError',
    'LengthMismatchError',
    'NullArgumentError',
    'InvalidArgumentError',
]


class PackedMatrixError(Exception):
    """Base class for all errors raised by this package."""
    pass


class DimensionMismatchError(PackedMatrixError, ValueError):
    pass


class StructuralViolationError(PackedMatrixError, ValueError):
    pass


class LengthMismatchError(PackedMatrixError, ValueError):
    pass


class NullArgumentError(PackedMatrixError, TypeError):

    def __init__(self, name):
        super().__init__('Argument `{}` cannot be None'.format(name))
        self.name = name


class InvalidArgumentError(PackedMatrixError, ValueError):
    pass
