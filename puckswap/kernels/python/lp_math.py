"""
Liquidity math kernel.

Pure functions with explicit rounding rules for:
- deposit ratios (`amount * PRECISION // reserve`),
- LP minting (geometric mean for the first deposit, limiting ratio after),
- ratio-preserving deposit clamping with refunds,
- proportional LP burning.

All divisions floor, so the pool never pays out more than it holds.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...core.math import PRECISION, integer_sqrt, ratio_scaled


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class DepositRatios:
    ratio0: int
    ratio1: int

    @property
    def effective(self) -> int:
        return min(self.ratio0, self.ratio1)


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount0_used: int
    amount1_used: int
    amount0_refund: int
    amount1_refund: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount0_out: int
    amount1_out: int


def deposit_ratios(*, reserve0: int, reserve1: int, amount0: int, amount1: int) -> DepositRatios:
    """
    Share of each reserve a deposit represents, scaled by PRECISION (floor).
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("amount0", amount0),
        ("amount1", amount1),
    ):
        _require_int(name, v)

    if reserve0 <= 0 or reserve1 <= 0:
        raise ValueError("reserves must be positive to price a deposit")
    if amount0 < 0 or amount1 < 0:
        raise ValueError("deposit amounts must be non-negative")

    return DepositRatios(
        ratio0=ratio_scaled(amount0, reserve0),
        ratio1=ratio_scaled(amount1, reserve1),
    )


def optimal_liquidity(
    *,
    reserve0: int,
    reserve1: int,
    amount0_desired: int,
    amount1_desired: int,
) -> OptimalLiquidityResult:
    """
    Compute ratio-preserving used amounts and refunds.

    One side is used in full; the other is scaled down to the pool ratio
    (floor), and the remainder is refunded.
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("amount0_desired", amount0_desired),
        ("amount1_desired", amount1_desired),
    ):
        _require_int(name, v)

    if reserve0 <= 0 or reserve1 <= 0:
        raise ValueError("reserves must be positive")
    if amount0_desired < 0 or amount1_desired < 0:
        raise ValueError("desired amounts must be non-negative")

    amount1_from_amount0 = (amount0_desired * reserve1) // reserve0
    if amount1_from_amount0 <= amount1_desired:
        amount0_used = amount0_desired
        amount1_used = amount1_from_amount0
    else:
        amount0_used = (amount1_desired * reserve0) // reserve1
        amount1_used = amount1_desired

    if amount0_used > amount0_desired or amount1_used > amount1_desired:
        raise AssertionError("used amounts exceed desired amounts")

    return OptimalLiquidityResult(
        amount0_used=amount0_used,
        amount1_used=amount1_used,
        amount0_refund=amount0_desired - amount0_used,
        amount1_refund=amount1_desired - amount1_used,
    )


def mint_liquidity_initial(*, amount0: int, amount1: int) -> int:
    """
    Initial liquidity mint: `floor(sqrt(amount0 * amount1))`.
    """
    _require_int("amount0", amount0)
    _require_int("amount1", amount1)
    if amount0 <= 0 or amount1 <= 0:
        raise ValueError("initial amounts must be positive")
    return integer_sqrt(amount0 * amount1)


def mint_liquidity_proportional(*, total_supply: int, effective_ratio: int) -> int:
    """
    LP minted for a deposit worth `effective_ratio / PRECISION` of the pool.
    """
    _require_int("total_supply", total_supply)
    _require_int("effective_ratio", effective_ratio)
    if total_supply <= 0:
        raise ValueError("total_supply must be positive")
    if effective_ratio < 0:
        raise ValueError("effective_ratio must be non-negative")
    return (total_supply * effective_ratio) // PRECISION


def burn_liquidity(*, lp_amount: int, reserve0: int, reserve1: int, total_supply: int) -> BurnLiquidityResult:
    """
    Burn LP tokens for underlying assets (floor rounding).
    """
    for name, v in (
        ("lp_amount", lp_amount),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
    ):
        _require_int(name, v)

    if lp_amount <= 0:
        raise ValueError("lp_amount must be positive")
    if reserve0 < 0 or reserve1 < 0:
        raise ValueError("reserves must be non-negative")
    if total_supply <= 0:
        raise ValueError("total_supply must be positive")
    if lp_amount > total_supply:
        raise ValueError("cannot burn more than total_supply")

    amount0_out = (lp_amount * reserve0) // total_supply
    amount1_out = (lp_amount * reserve1) // total_supply
    if amount0_out > reserve0 or amount1_out > reserve1:
        raise AssertionError("burn outputs exceed reserves")
    return BurnLiquidityResult(amount0_out=amount0_out, amount1_out=amount1_out)
