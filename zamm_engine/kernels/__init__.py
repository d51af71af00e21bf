"""
Kernel layer.

Integer-only kernels that reproduce the contracts' arithmetic:
- `fixed_point` floor/ceil mul-div and Newton square root,
- `cpmm_swap` constant-product quotes,
- `lp_math` LP mint/burn,
- `zcurve` bonding-curve cost function.

Everything above this layer composes these functions and never re-derives a
formula on its own.
"""
