"""
## Overview
Numeric provider and runtime configuration.

All bulk numeric work (elementwise kernels, matrix products, norms) is
delegated to a process-global provider, which operates on flat torch
buffers and knows nothing about packed layouts. The default provider,
`TorchProvider`, runs elementwise kernels on torch's intra-op thread
pool, whose size is controlled with `set_num_threads`.

```python
from nitorch_packed.provider import set_num_threads, get_provider
set_num_threads(4)
get_provider().matrix_norm('fro', 2, 2, torch.ones(4))   # -> 2.
```

---
"""
__all__ = [
    'TorchProvider', 'get_provider', 'set_provider',
    'set_num_threads', 'get_num_threads',
]
from ._impl.provider import (
    TorchProvider, get_provider, set_provider,
    set_num_threads, get_num_threads,
)
