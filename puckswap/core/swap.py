"""
Swap Calculator: fee-adjusted constant-product pricing.

This module wraps the integer swap kernel with the pool data model and
deterministic result values.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per swap
- Space Complexity: O(1) auxiliary
- Invariant: after each swap x' * y' >= x * y, and 0 <= out < reserve_out
"""

from __future__ import annotations

from ..kernels.python.cpmm_swap import required_amount_in as _kernel_required_amount_in
from ..kernels.python.cpmm_swap import swap_exact_in as _kernel_swap_exact_in
from ..state.intents import SwapIntent
from ..state.pool import Direction, PoolReserves
from .errors import ErrorKind
from .math import BPS_SCALE, PRECISION, fits_u128
from .types import CalcResult, SwapOutcome


def compute_swap(reserves: PoolReserves, intent: SwapIntent) -> CalcResult[SwapOutcome]:
    """
    Quote an exact-in swap and the post-trade pool state.

    Formula (all integer, single final division):
        effective_in = floor(amount_in * (10_000 - fee_bps) / 10_000)
        output = floor(amount_in*(10_000-fee_bps) * reserve_out
                       / (reserve_in*10_000 + amount_in*(10_000-fee_bps)))
        new_reserve_in = reserve_in + amount_in
        new_reserve_out = reserve_out - output
        fee_amount = amount_in - effective_in

    Price impact compares the output against the no-slippage output
    `floor(amount_in * reserve_out / reserve_in)`.

    An empty reserve, a zero input, or a 100% fee quote zero output against
    unchanged reserves. The only failure is a post-trade reserve that no
    longer fits in u128 (`InvalidAmount`).
    """
    reserve_in, reserve_out = reserves.reserves_for(intent.direction)

    res = _kernel_swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=intent.amount_in,
        fee_bps=reserves.fee_bps,
        protocol_fee_bps=reserves.protocol_fee_bps,
    )

    if not fits_u128(res.new_reserve_in):
        return CalcResult.failure(
            ErrorKind.INVALID_AMOUNT,
            f"reserve_in would overflow u128: {reserve_in} + {intent.amount_in}",
        )

    if res.no_slip_out > 0:
        price_impact_bps = ((res.no_slip_out - res.amount_out) * BPS_SCALE) // res.no_slip_out
    else:
        price_impact_bps = 0

    effective_price = (res.amount_out * PRECISION) // intent.amount_in if intent.amount_in > 0 else 0

    if res.new_reserve_in == reserve_in and res.new_reserve_out == reserve_out:
        new_reserves = reserves
    else:
        new_reserves = reserves.with_swap(intent.direction, res.new_reserve_in, res.new_reserve_out)

    return CalcResult.success(
        SwapOutcome(
            output_amount=res.amount_out,
            fee_amount=res.fee_amount,
            new_reserves=new_reserves,
            price_impact_bps=price_impact_bps,
            effective_price=effective_price,
            protocol_fee_amount=res.protocol_fee,
        )
    )


def quote_amount_in(reserves: PoolReserves, direction: Direction, desired_out: int) -> CalcResult[int]:
    """
    Minimal `amount_in` whose `compute_swap` output is at least `desired_out`.

    Fails with `InsufficientOutput` when the pool cannot deliver: an empty
    reserve, `desired_out >= reserve_out`, or a 100% fee.
    """
    if not isinstance(desired_out, int) or isinstance(desired_out, bool):
        raise TypeError("desired_out must be an int")
    if desired_out <= 0:
        return CalcResult.failure(ErrorKind.INVALID_AMOUNT, f"desired_out must be positive: {desired_out}")

    reserve_in, reserve_out = reserves.reserves_for(direction)
    if reserve_in == 0 or reserve_out == 0:
        return CalcResult.failure(ErrorKind.INSUFFICIENT_OUTPUT, "pool has an empty reserve")
    if desired_out >= reserve_out:
        return CalcResult.failure(
            ErrorKind.INSUFFICIENT_OUTPUT,
            f"cannot drain full reserve: desired_out ({desired_out}) >= reserve_out ({reserve_out})",
        )
    if reserves.fee_bps == BPS_SCALE:
        return CalcResult.failure(ErrorKind.INSUFFICIENT_OUTPUT, "a 100% fee never produces output")

    amount_in = _kernel_required_amount_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=desired_out,
        fee_bps=reserves.fee_bps,
    )
    if not fits_u128(amount_in) or not fits_u128(reserve_in + amount_in):
        return CalcResult.failure(ErrorKind.INVALID_AMOUNT, f"required input overflows u128: {amount_in}")
    return CalcResult.success(amount_in)


def spot_price(reserves: PoolReserves, direction: Direction) -> int:
    """Marginal output per unit input before fees, scaled by PRECISION."""
    reserve_in, reserve_out = reserves.reserves_for(direction)
    if reserve_in == 0:
        return 0
    return (reserve_out * PRECISION) // reserve_in
