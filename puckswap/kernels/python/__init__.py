"""
Production Python kernels.

These modules are designed to be:
- deterministic (integer-only),
- easy to audit (explicit intermediate variables),
- small surface-area (pure functions, typed results).

`puckswap.core` wraps them with the pool data model and checks every kernel
precondition up front, so a kernel `ValueError` means a caller bug.
"""
