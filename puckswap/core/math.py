"""Fixed-point integer arithmetic shared by the pool calculators.

Every function is stateless and operates on plain Python ints.

Rounding is explicit: `//` is floor division, and callers only divide
non-negative numerators, so floor and truncation agree. Nothing here touches
floating point; the results are identical on every platform and magnitude.
"""

from __future__ import annotations

BPS_SCALE: int = 10_000
PRECISION: int = 1_000_000

U16_MAX: int = (1 << 16) - 1
U64_MAX: int = (1 << 64) - 1
U128_MAX: int = (1 << 128) - 1


# -- Domain checks -----------------------------------------------------------

def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_uint(name: str, value: int, bits: int = 128) -> None:
    """Raise unless *value* is an int in ``[0, 2**bits - 1]``."""
    require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    if value >> bits:
        raise ValueError(f"{name} must fit in u{bits}: {value}")


def require_bps(name: str, value: int) -> None:
    require_int(name, value)
    if not (0 <= value <= BPS_SCALE):
        raise ValueError(f"{name} must be in [0, {BPS_SCALE}]: {value}")


def fits_u128(value: int) -> bool:
    return 0 <= value <= U128_MAX


# -- Square root -------------------------------------------------------------

def integer_sqrt(n: int) -> int:
    """Floor square root of *n* by integer Newton iteration.

    The iterate starts above the root and strictly decreases until it reaches
    ``floor(sqrt(n))``; the loop stops at the first non-decreasing step.
    """
    require_int("n", n)
    if n < 0:
        raise ValueError(f"cannot take the square root of a negative number: {n}")
    if n < 2:
        return n

    # 2**ceil(bits/2) >= sqrt(n), so the first iterate is an upper bound.
    x = 1 << ((n.bit_length() + 1) // 2)
    while True:
        y = (x + n // x) // 2
        if y >= x:
            break
        x = y

    if not (x * x <= n < (x + 1) * (x + 1)):
        raise AssertionError(f"integer_sqrt did not converge for {n}")
    return x


# -- Division helpers --------------------------------------------------------

def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """``floor(a * b / denominator)`` for non-negative operands."""
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if a < 0 or b < 0:
        raise ValueError("operands must be non-negative")
    return (a * b) // denominator


def mul_div_ceil(a: int, b: int, denominator: int) -> int:
    """``ceil(a * b / denominator)`` for non-negative operands."""
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if a < 0 or b < 0:
        raise ValueError("operands must be non-negative")
    return (a * b + denominator - 1) // denominator


# -- Basis points ------------------------------------------------------------

def bps_of(amount: int, bps: int) -> int:
    """Floor of *bps* basis points of *amount*."""
    return mul_div_floor(amount, bps, BPS_SCALE)


def ratio_scaled(part: int, whole: int, scale: int = PRECISION) -> int:
    """``floor(part * scale / whole)``; the caller guarantees ``whole > 0``."""
    return mul_div_floor(part, scale, whole)


def abs_diff(x: int, y: int) -> int:
    return x - y if x >= y else y - x


def relative_deviation_bps(x: int, y: int) -> int:
    """Floor of ``|x - y| / max(x, y)`` in basis points (0 when both are 0)."""
    hi = max(x, y)
    if hi == 0:
        return 0
    return mul_div_floor(abs_diff(x, y), BPS_SCALE, hi)


def exceeds_relative_deviation(x: int, y: int, max_deviation_bps: int) -> bool:
    """True when ``|x - y| / max(x, y) > max_deviation_bps / 10_000``.

    Compared by cross-multiplication so no precision is lost to division:
    ``|x - y| * 10_000 > max_deviation_bps * max(x, y)``.
    """
    return abs_diff(x, y) * BPS_SCALE > max_deviation_bps * max(x, y)
