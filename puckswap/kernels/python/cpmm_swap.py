"""
Constant-product swap kernel.

- The fee is taken from the gross input in basis points with floor rounding on
  the net side: `effective_in = floor(amount_in * (10_000 - fee_bps) / 10_000)`.
- Pricing multiplies through by 10_000 so the fee-adjusted input is never
  rounded before the final division:
      out = floor(amount_in*(10_000-fee_bps)*reserve_out
                  / (reserve_in*10_000 + amount_in*(10_000-fee_bps)))
- The whole gross input (fee included) stays in the pool.

This is a small, auditable, integer-only implementation used by the functional
core in `puckswap.core.swap`.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...core.math import mul_div_ceil

BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    fee_amount: int
    protocol_fee: int
    effective_in: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int
    no_slip_out: int


def compute_effective_in(*, gross_in: int, fee_bps: int) -> int:
    """
    Compute `effective_in = floor(gross_in * (10_000 - fee_bps) / 10_000)`.
    """
    _require_int("gross_in", gross_in)
    _require_int("fee_bps", fee_bps)
    if gross_in < 0:
        raise ValueError("gross_in must be non-negative")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]")
    return (gross_in * (BPS_DENOM - fee_bps)) // BPS_DENOM


def compute_protocol_fee(*, fee_amount: int, protocol_fee_bps: int) -> int:
    """
    Compute `protocol_fee = floor(fee_amount * protocol_fee_bps / 10_000)`.
    """
    _require_int("fee_amount", fee_amount)
    _require_int("protocol_fee_bps", protocol_fee_bps)
    if fee_amount < 0:
        raise ValueError("fee_amount must be non-negative")
    if not (0 <= protocol_fee_bps <= BPS_DENOM):
        raise ValueError(f"protocol_fee_bps must be in [0, {BPS_DENOM}]")
    return (fee_amount * protocol_fee_bps) // BPS_DENOM


def _unchanged(*, reserve_in: int, reserve_out: int, amount_in: int, fee_amount: int) -> SwapExactInResult:
    k = reserve_in * reserve_out
    return SwapExactInResult(
        amount_out=0,
        fee_amount=fee_amount,
        protocol_fee=0,
        effective_in=0,
        gross_in=amount_in,
        new_reserve_in=reserve_in,
        new_reserve_out=reserve_out,
        k_before=k,
        k_after=k,
        no_slip_out=0,
    )


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
    protocol_fee_bps: int = 0,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Degenerate inputs quote a zero output against unchanged reserves:
    an empty reserve, `amount_in == 0`, or a 100% fee (in which case the fee
    equals the whole input).

    Raises ValueError on invalid inputs and AssertionError if the post-state
    breaks the constant-product invariant.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
        ("fee_bps", fee_bps),
        ("protocol_fee_bps", protocol_fee_bps),
    ):
        _require_int(name, v)

    if reserve_in < 0 or reserve_out < 0:
        raise ValueError("reserves must be non-negative")
    if amount_in < 0:
        raise ValueError("amount_in must be non-negative")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]")
    if not (0 <= protocol_fee_bps <= BPS_DENOM):
        raise ValueError(f"protocol_fee_bps must be in [0, {BPS_DENOM}]")

    if reserve_in == 0 or reserve_out == 0 or amount_in == 0:
        return _unchanged(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, fee_amount=0)

    in_with_fee = amount_in * (BPS_DENOM - fee_bps)
    effective_in = compute_effective_in(gross_in=amount_in, fee_bps=fee_bps)
    fee_amount = amount_in - effective_in
    if fee_bps == BPS_DENOM:
        return _unchanged(
            reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, fee_amount=fee_amount
        )

    k_before = reserve_in * reserve_out

    denominator = reserve_in * BPS_DENOM + in_with_fee
    amount_out = (in_with_fee * reserve_out) // denominator
    if not (0 <= amount_out < reserve_out):
        raise AssertionError("amount_out must be in [0, reserve_out)")

    protocol_fee = compute_protocol_fee(fee_amount=fee_amount, protocol_fee_bps=protocol_fee_bps)

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise AssertionError(f"invariant violation: k_after ({k_after}) < k_before ({k_before})")

    return SwapExactInResult(
        amount_out=amount_out,
        fee_amount=fee_amount,
        protocol_fee=protocol_fee,
        effective_in=effective_in,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
        no_slip_out=(amount_in * reserve_out) // reserve_in,
    )


def required_amount_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_out: int,
    fee_bps: int,
) -> int:
    """
    Smallest gross input whose exact-in quote is at least `amount_out`.

    Inverting the pricing formula gives the lower bound
        amount_in >= ceil(reserve_in * amount_out * 10_000
                          / ((reserve_out - amount_out) * (10_000 - fee_bps)))
    which is exact because the exact-in quote never rounds the input.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_out", amount_out),
        ("fee_bps", fee_bps),
    ):
        _require_int(name, v)

    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("cannot quote against an empty reserve")
    if amount_out <= 0:
        raise ValueError("amount_out must be positive")
    if amount_out >= reserve_out:
        raise ValueError("cannot drain full reserve_out")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]")
    if fee_bps == BPS_DENOM:
        raise ValueError("cannot compute with 100% fee")

    denominator = (reserve_out - amount_out) * (BPS_DENOM - fee_bps)
    amount_in = mul_div_ceil(reserve_in * amount_out, BPS_DENOM, denominator)

    quoted = swap_exact_in(
        reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, fee_bps=fee_bps
    ).amount_out
    if quoted < amount_out:
        raise AssertionError("computed amount_in insufficient for desired amount_out")
    return amount_in
