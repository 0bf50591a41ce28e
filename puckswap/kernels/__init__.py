"""
Integer kernels for the pool core.

- `puckswap/kernels/python/` contains the pure-Python kernel implementations.
"""
