"""
## Overview
This module contains matrix types stored in a compact way, together with
the dense matrix used whenever a result cannot keep a compact structure.

- `SymmetricMatrix`: only the upper triangle is stored; `(i, j)` and
  `(j, i)` share the same storage cell.
- `UpperTriangularMatrix` / `LowerTriangularMatrix`: only the triangle
  is stored; the other triangle reads zero and cannot be written.
- `DenseMatrix`: general `rows x columns` matrix.

Packed matrices of order $N$ store $N(N+1)/2$ values in a 1D tensor
(`matrix.data`); see `nitorch_packed.indexing` for the layout.

All matrix types implement the same small interface:

```python
matrix.shape, matrix.row_count, matrix.column_count, matrix.order
matrix.layout                 # 'sym', 'triu', 'tril' or 'dense'
matrix.packed_view(layout)    # raw buffer if stored with `layout`, else None
matrix.at(i, j)               # read
matrix.at(i, j, value)        # write (also `set_at` and `matrix[i, j]`)
matrix.is_symmetric
matrix.to_dense()             # (rows, columns) tensor
matrix.assign(tensor)         # checked write of all values
```

Packed matrices can be built from:

```python
SymmetricMatrix(order, fill=0.)
SymmetricMatrix.from_packed(buffer)   # takes ownership, no copy
SymmetricMatrix.from_array(array)     # copy of a full 2D array
SymmetricMatrix.from_matrix(matrix)   # copy of any matrix
SymmetricMatrix.identity(order)
SymmetricMatrix.random(order, torch.distributions.Normal(0., 1.))
```

---
"""
__all__ = [
    'SymmetricMatrix', 'UpperTriangularMatrix', 'LowerTriangularMatrix',
    'DenseMatrix', 'create_matrix', 'create_vector',
]
from ._impl.symmetric import SymmetricMatrix
from ._impl.triangular import UpperTriangularMatrix, LowerTriangularMatrix
from ._impl.dense import DenseMatrix, create_matrix, create_vector
