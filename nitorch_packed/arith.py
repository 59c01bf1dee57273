"""
## Overview
Arithmetic on packed and dense matrices.

Every operation follows the same routing rule. The operands (and the
output placeholder `out`, if provided) are asked for a packed view with
the layout of the first operand:

- if all of them have one, and the operation maps implicit zeros to
  zero, the provider kernel runs directly on the packed buffers
  ($N(N+1)/2$ elements instead of $N^2$);
- otherwise, the operands are read through their logical
  `(row, column)` view and the result is written into `out` after its
  structure has been checked.

Both paths return identical values. Matrix products are never written
into a packed matrix unless one is explicitly passed as `out` (and the
product has its structure).

```python
a = SymmetricMatrix.from_array([[1, 2], [2, 3]])
b = SymmetricMatrix.identity(2)
add(a, b)           # -> SymmetricMatrix (packed path)
add(a, dense)       # -> DenseMatrix (generic path)
multiply(a, b)      # -> DenseMatrix
matvec(a, [1., 1.]) # -> tensor([3., 5.])
```

---
"""
__all__ = [
    'add', 'subtract', 'scale', 'negate', 'modulus',
    'pointwise_multiply', 'pointwise_divide',
    'multiply', 'transpose_and_multiply', 'matvec', 'vecmat',
    'transpose', 'conjugate_transpose',
    'trace', 'norm', 'l1_norm', 'frobenius_norm', 'infinity_norm', 'random',
]
from ._impl.dispatch import (
    add, subtract, scale, negate, modulus,
    pointwise_multiply, pointwise_divide,
    multiply, transpose_and_multiply, matvec, vecmat,
    transpose, conjugate_transpose,
)
from ._impl.reductions import (
    trace, norm, l1_norm, frobenius_norm, infinity_norm, random,
)
