"""
Liquidity management: add liquidity (initial and proportional) and remove
liquidity.
"""

from __future__ import annotations

from ..kernels.python.lp_math import burn_liquidity, deposit_ratios
from ..kernels.python.lp_math import mint_liquidity_initial, mint_liquidity_proportional
from ..kernels.python.lp_math import optimal_liquidity
from ..state.intents import LiquidityIntent, WithdrawalIntent
from ..state.pool import PoolReserves, fits_pool
from .config import DepositPolicy
from .errors import ErrorKind
from .math import PRECISION
from .types import CalcResult, LiquidityOutcome, WithdrawalOutcome


def compute_add_liquidity(
    reserves: PoolReserves,
    intent: LiquidityIntent,
    *,
    policy: DepositPolicy = DepositPolicy.ABSORB_FULL,
) -> CalcResult[LiquidityOutcome]:
    """
    Compute LP tokens minted and the post-deposit pool state.

    Initial deposit (`is_initial`, empty pool):
        lp = floor(sqrt(amount_a * amount_b))

    Subsequent deposits:
        ratio_x = floor(amount_x * PRECISION / reserve_x)
        lp = floor(total_lp_supply * min(ratio_a, ratio_b) / PRECISION)

    Minting against the smaller ratio means an unbalanced deposit never earns
    more than its scarcer side is worth. Under `ABSORB_FULL` both declared
    amounts enter the pool anyway; under `CLAMP_TO_RATIO` only the
    ratio-preserving part is used and the rest is returned as refunds.

    Args:
        reserves: Current pool state
        intent: Deposit request
        policy: How an unbalanced deposit is absorbed

    Returns:
        CalcResult with a LiquidityOutcome, or one of InvalidAmount,
        AlreadyInitialized, NotInitialized.
    """
    amount_a = intent.amount_a
    amount_b = intent.amount_b

    if intent.is_initial:
        if not reserves.is_empty:
            return CalcResult.failure(
                ErrorKind.ALREADY_INITIALIZED,
                "pool already has liquidity, cannot add initial liquidity",
            )
        if amount_a <= 0 or amount_b <= 0:
            return CalcResult.failure(
                ErrorKind.INVALID_AMOUNT,
                f"initial deposits must be positive: ({amount_a}, {amount_b})",
            )
        lp_minted = mint_liquidity_initial(amount0=amount_a, amount1=amount_b)
        if not fits_pool(lp_minted):
            return CalcResult.failure(ErrorKind.INVALID_AMOUNT, "initial LP supply overflows u128")
        return CalcResult.success(
            LiquidityOutcome(
                lp_tokens_minted=lp_minted,
                new_reserves=reserves.with_liquidity(amount_a, amount_b, lp_minted),
                ratio_a_bps=PRECISION,
                ratio_b_bps=PRECISION,
                effective_ratio_bps=PRECISION,
                amount_a_used=amount_a,
                amount_b_used=amount_b,
            )
        )

    if reserves.total_lp_supply == 0:
        return CalcResult.failure(
            ErrorKind.NOT_INITIALIZED,
            "pool has no liquidity, must add initial liquidity first",
        )
    if reserves.reserve_a == 0 or reserves.reserve_b == 0:
        return CalcResult.failure(
            ErrorKind.INVALID_AMOUNT,
            f"cannot price a deposit against an empty reserve: ({reserves.reserve_a}, {reserves.reserve_b})",
        )
    if amount_a == 0 and amount_b == 0:
        return CalcResult.failure(ErrorKind.INVALID_AMOUNT, "deposit amounts are both zero")

    declared = deposit_ratios(
        reserve0=reserves.reserve_a,
        reserve1=reserves.reserve_b,
        amount0=amount_a,
        amount1=amount_b,
    )

    refund_a = refund_b = 0
    minted_from = declared
    if policy is DepositPolicy.CLAMP_TO_RATIO:
        opt = optimal_liquidity(
            reserve0=reserves.reserve_a,
            reserve1=reserves.reserve_b,
            amount0_desired=amount_a,
            amount1_desired=amount_b,
        )
        amount_a, amount_b = opt.amount0_used, opt.amount1_used
        refund_a, refund_b = opt.amount0_refund, opt.amount1_refund
        minted_from = deposit_ratios(
            reserve0=reserves.reserve_a,
            reserve1=reserves.reserve_b,
            amount0=amount_a,
            amount1=amount_b,
        )

    lp_minted = mint_liquidity_proportional(
        total_supply=reserves.total_lp_supply,
        effective_ratio=minted_from.effective,
    )
    if lp_minted <= 0:
        return CalcResult.failure(
            ErrorKind.INVALID_AMOUNT,
            f"deposit too small: LP tokens calculation resulted in zero ({intent.amount_a}, {intent.amount_b})",
        )

    new_a = reserves.reserve_a + amount_a
    new_b = reserves.reserve_b + amount_b
    new_supply = reserves.total_lp_supply + lp_minted
    if not fits_pool(new_a, new_b, new_supply):
        return CalcResult.failure(ErrorKind.INVALID_AMOUNT, "post-deposit pool state overflows u128")

    return CalcResult.success(
        LiquidityOutcome(
            lp_tokens_minted=lp_minted,
            new_reserves=reserves.with_liquidity(new_a, new_b, new_supply),
            ratio_a_bps=declared.ratio0,
            ratio_b_bps=declared.ratio1,
            effective_ratio_bps=minted_from.effective,
            amount_a_used=amount_a,
            amount_b_used=amount_b,
            refund_a=refund_a,
            refund_b=refund_b,
            absorbed_ratio_a_bps=minted_from.ratio0,
            absorbed_ratio_b_bps=minted_from.ratio1,
        )
    )


def compute_remove_liquidity(reserves: PoolReserves, intent: WithdrawalIntent) -> CalcResult[WithdrawalOutcome]:
    """
    Compute the assets returned for an LP burn.

    Outputs:
        amount_a_out = floor(reserve_a * lp_tokens_to_burn / total_lp_supply)
        amount_b_out = floor(reserve_b * lp_tokens_to_burn / total_lp_supply)

    Burning the whole supply returns both reserves in full and leaves an
    empty pool.

    Failures:
        InvalidBurnAmount: `lp_tokens_to_burn` is zero or exceeds the supply.
        InsufficientOutput: the burn is valid but redeems nothing on either
            side, or an output falls below `min_a_out` / `min_b_out`.
    """
    burn = intent.lp_tokens_to_burn
    if burn <= 0 or burn > reserves.total_lp_supply:
        return CalcResult.failure(
            ErrorKind.INVALID_BURN_AMOUNT,
            f"lp_tokens_to_burn must be in (0, {reserves.total_lp_supply}]: {burn}",
        )

    res = burn_liquidity(
        lp_amount=burn,
        reserve0=reserves.reserve_a,
        reserve1=reserves.reserve_b,
        total_supply=reserves.total_lp_supply,
    )

    if res.amount0_out == 0 and res.amount1_out == 0:
        return CalcResult.failure(
            ErrorKind.INSUFFICIENT_OUTPUT,
            f"burning {burn} LP tokens redeems nothing",
        )
    if res.amount0_out < intent.min_a_out:
        return CalcResult.failure(
            ErrorKind.INSUFFICIENT_OUTPUT,
            f"amount_a_out ({res.amount0_out}) < min_a_out ({intent.min_a_out})",
        )
    if res.amount1_out < intent.min_b_out:
        return CalcResult.failure(
            ErrorKind.INSUFFICIENT_OUTPUT,
            f"amount_b_out ({res.amount1_out}) < min_b_out ({intent.min_b_out})",
        )

    new_reserves = reserves.with_liquidity(
        reserves.reserve_a - res.amount0_out,
        reserves.reserve_b - res.amount1_out,
        reserves.total_lp_supply - burn,
    )
    return CalcResult.success(
        WithdrawalOutcome(
            amount_a_out=res.amount0_out,
            amount_b_out=res.amount1_out,
            new_reserves=new_reserves,
        )
    )
