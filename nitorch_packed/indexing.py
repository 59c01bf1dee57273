r"""
## Overview
This module contains the index arithmetic of packed matrices.

Packed matrices of order $N$ only store $N(N+1)/2$ values. The upper
triangle is stored column after column (column-major packing):

    [ a b d ]
    [ . c e ]   =>  [a b c d e f]
    [ . . f ]

so that element $(i, j)$, with $i \le j$, lives at offset
$i + j(j+1)/2$. The lower triangle of a lower-triangular matrix uses the
mirrored (row-major) packing, such that `index_of_lower(i, j)` equals
`index_of_upper(j, i)`, and the packed buffer of a lower-triangular
matrix is the packed buffer of its (upper-triangular) transpose.

!!! warning
    `index_of_upper`, `index_of_lower` and `index_of_diagonal` do not
    check their inputs. Calling `index_of_upper(i, j)` with `i > j`
    returns a wrong offset rather than raising. Use `index_of` when the
    ordering of the coordinates is not known.

---
"""
__all__ = [
    'index_of', 'index_of_upper', 'index_of_lower', 'index_of_diagonal',
    'packed_size', 'order_from_size', 'upper_indices', 'lower_indices',
    'full_index', 'unpack', 'pack',
]
from ._impl.indexing import (
    index_of, index_of_upper, index_of_lower, index_of_diagonal,
    packed_size, order_from_size, upper_indices, lower_indices,
    full_index, unpack, pack,
)
