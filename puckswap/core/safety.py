"""Reserve safety checks.

Pure predicates evaluated before a computed outcome is committed. Each
``check_*`` function returns a `Verdict` naming the rejection reason; the
``validate_*`` functions are the boolean (or, for dust, `Verdict`) surface the
orchestrator calls directly.

None of these functions mutates anything: replay protection compares against
a caller-supplied last nonce, and the `NonceTable` in `puckswap.state.nonces`
is where a caller records acceptance.
"""

from __future__ import annotations

import logging
from enum import Enum, unique
from typing import Optional

from ..state.intents import FinalityWindow, LiquidityIntent, SwapIntent
from ..state.pool import Direction, PoolReserves
from .config import DEADLINE_BOUNDARY_INCLUSIVE, DeadlinePolicy, SafetyConfig
from .errors import ErrorKind
from .math import BPS_SCALE, U64_MAX, exceeds_relative_deviation, relative_deviation_bps
from .types import ACCEPTED, LiquidityOutcome, SwapOutcome, Verdict, WithdrawalOutcome

logger = logging.getLogger(__name__)


def _reject(reason: ErrorKind, detail: str) -> Verdict:
    logger.debug("rejected %s: %s", reason.value, detail)
    return Verdict.reject(reason, detail)


# -- Dust / excessive trade --------------------------------------------------

def check_dust(
    reserves: PoolReserves,
    amount_in: int,
    direction: Direction,
    *,
    config: SafetyConfig,
) -> Verdict:
    """Reject trades below the minimum size or above the max reserve fraction.

    Both bounds are inclusive on the accepted side:
    ``min_trade_amount <= amount_in`` and
    ``amount_in * 10_000 <= reserve_in * max_trade_fraction_bps``.
    """
    reserve_in, _ = reserves.reserves_for(direction)
    if amount_in < config.min_trade_amount:
        return _reject(
            ErrorKind.DUST_OR_EXCESSIVE_TRADE,
            f"amount_in ({amount_in}) below minimum trade size ({config.min_trade_amount})",
        )
    if reserve_in == 0:
        return _reject(ErrorKind.DUST_OR_EXCESSIVE_TRADE, "input reserve is empty")
    if amount_in * BPS_SCALE > reserve_in * config.max_trade_fraction_bps:
        return _reject(
            ErrorKind.DUST_OR_EXCESSIVE_TRADE,
            f"amount_in ({amount_in}) exceeds {config.max_trade_fraction_bps} bps of reserve_in ({reserve_in})",
        )
    return ACCEPTED


def validate_dust(
    reserves: PoolReserves,
    amount_in: int,
    direction: Direction,
    *,
    config: Optional[SafetyConfig] = None,
) -> Verdict:
    return check_dust(reserves, amount_in, direction, config=config or SafetyConfig())


# -- Ratio balance -----------------------------------------------------------

def check_ratio_balance(ratio_a_bps: int, ratio_b_bps: int, max_deviation_bps: int) -> Verdict:
    """Reject deposits whose two reserve ratios diverge too far.

    The deviation is relative to the larger ratio:
    ``|a - b| / max(a, b) <= max_deviation_bps / 10_000``.
    A deposit with either ratio zero is one-sided and always rejected.
    """
    if ratio_a_bps < 0 or ratio_b_bps < 0:
        raise ValueError("ratios must be non-negative")
    if ratio_a_bps == 0 or ratio_b_bps == 0:
        return _reject(
            ErrorKind.RATIO_IMBALANCE,
            f"one-sided deposit: ratios ({ratio_a_bps}, {ratio_b_bps})",
        )
    if exceeds_relative_deviation(ratio_a_bps, ratio_b_bps, max_deviation_bps):
        return _reject(
            ErrorKind.RATIO_IMBALANCE,
            f"ratios ({ratio_a_bps}, {ratio_b_bps}) deviate by {relative_deviation_bps(ratio_a_bps, ratio_b_bps)} bps"
            f" (max {max_deviation_bps})",
        )
    return ACCEPTED


def validate_ratio_balance(ratio_a_bps: int, ratio_b_bps: int, max_deviation_bps: int) -> bool:
    return check_ratio_balance(ratio_a_bps, ratio_b_bps, max_deviation_bps).accepted


# -- Slippage ----------------------------------------------------------------

def check_slippage(outcome: SwapOutcome, intent: SwapIntent) -> Verdict:
    """Reject a quote below `min_out`, with zero output, or with too much impact."""
    if outcome.output_amount == 0:
        return _reject(ErrorKind.INSUFFICIENT_OUTPUT, "swap produces zero output")
    if outcome.output_amount < intent.min_out:
        return _reject(
            ErrorKind.INSUFFICIENT_OUTPUT,
            f"output ({outcome.output_amount}) < min_out ({intent.min_out})",
        )
    if outcome.price_impact_bps > intent.max_slippage_bps:
        return _reject(
            ErrorKind.EXCESSIVE_SLIPPAGE,
            f"price impact ({outcome.price_impact_bps} bps) > max slippage ({intent.max_slippage_bps} bps)",
        )
    return ACCEPTED


# -- Deadline ----------------------------------------------------------------

def check_deadline(
    deadline: int,
    window: FinalityWindow,
    *,
    policy: DeadlinePolicy = DeadlinePolicy.WITHIN_WINDOW,
) -> Verdict:
    """Compare `deadline` with the current finality window under `policy`.

    WITHIN_WINDOW: ``lower <= deadline`` and, for a bounded window,
    ``deadline <= upper``.
    WINDOW_ENDS_BY_DEADLINE: the window is bounded and ``upper <= deadline``.
    """
    if policy is DeadlinePolicy.WITHIN_WINDOW:
        if _before(deadline, window.lower):
            return _reject(
                ErrorKind.DEADLINE_EXPIRED,
                f"deadline ({deadline}) is before window lower bound ({window.lower})",
            )
        if window.upper is not None and _before(window.upper, deadline):
            return _reject(
                ErrorKind.DEADLINE_EXPIRED,
                f"deadline ({deadline}) is beyond window upper bound ({window.upper})",
            )
        return ACCEPTED

    if policy is DeadlinePolicy.WINDOW_ENDS_BY_DEADLINE:
        if window.upper is None:
            return _reject(ErrorKind.DEADLINE_EXPIRED, "unbounded window cannot end by a deadline")
        if _before(deadline, window.upper):
            return _reject(
                ErrorKind.DEADLINE_EXPIRED,
                f"window upper bound ({window.upper}) is after deadline ({deadline})",
            )
        return ACCEPTED

    raise ValueError(f"unknown deadline policy: {policy!r}")


def _before(x: int, y: int) -> bool:
    """True when `x` falls strictly outside an inclusive bound `y` from below."""
    return x < y if DEADLINE_BOUNDARY_INCLUSIVE else x <= y


def validate_deadline(
    deadline: int,
    current_window: FinalityWindow,
    *,
    policy: DeadlinePolicy = DeadlinePolicy.WITHIN_WINDOW,
) -> bool:
    return check_deadline(deadline, current_window, policy=policy).accepted


# -- Replay / nonce ----------------------------------------------------------

@unique
class NonceStatus(Enum):
    NEXT = "next"
    REPLAY = "replay"
    GAP = "gap"
    OUT_OF_WINDOW = "out_of_window"


def classify_nonce(new_nonce: int, last_nonce: int, window: int) -> NonceStatus:
    """Classify `new_nonce` against the last processed nonce.

    Only ``last_nonce + 1`` is acceptable, and only while it stays within
    ``window`` of the last nonce and within u64.
    """
    for name, v in (("new_nonce", new_nonce), ("last_nonce", last_nonce), ("window", window)):
        if not isinstance(v, int) or isinstance(v, bool):
            raise TypeError(f"{name} must be an int")
    if last_nonce < 0:
        raise ValueError(f"last_nonce must be non-negative: {last_nonce}")

    if new_nonce <= last_nonce:
        return NonceStatus.REPLAY
    if window < 1 or new_nonce - last_nonce > window or new_nonce > U64_MAX:
        return NonceStatus.OUT_OF_WINDOW
    if new_nonce != last_nonce + 1:
        return NonceStatus.GAP
    return NonceStatus.NEXT


def check_nonce(new_nonce: int, last_nonce: int, window: int) -> Verdict:
    status = classify_nonce(new_nonce, last_nonce, window)
    if status is NonceStatus.NEXT:
        return ACCEPTED
    return _reject(
        ErrorKind.NONCE_REPLAY_OR_GAP,
        f"nonce {new_nonce} after {last_nonce} ({status.value}, window {window})",
    )


def validate_nonce(new_nonce: int, last_nonce: int, window: int) -> bool:
    return check_nonce(new_nonce, last_nonce, window).accepted


# -- Standing liquidity ------------------------------------------------------

def check_withdrawal(outcome: WithdrawalOutcome, *, config: SafetyConfig) -> Verdict:
    """Reject withdrawals that leave less than `min_lp_remaining` LP supply."""
    remaining = outcome.new_reserves.total_lp_supply
    if config.min_lp_remaining > 0 and remaining < config.min_lp_remaining:
        return _reject(
            ErrorKind.INSUFFICIENT_BALANCE,
            f"remaining LP supply ({remaining}) below standing minimum ({config.min_lp_remaining})",
        )
    return ACCEPTED


# -- Composite checks --------------------------------------------------------

def check_swap(
    reserves: PoolReserves,
    intent: SwapIntent,
    outcome: SwapOutcome,
    *,
    config: SafetyConfig,
    window: Optional[FinalityWindow] = None,
) -> Verdict:
    """Dust, slippage, then deadline (when both a deadline and window exist)."""
    verdict = check_dust(reserves, intent.amount_in, intent.direction, config=config)
    if not verdict:
        return verdict
    verdict = check_slippage(outcome, intent)
    if not verdict:
        return verdict
    return check_optional_deadline(intent.deadline, window, config)


def check_add_liquidity(
    intent: LiquidityIntent,
    outcome: LiquidityOutcome,
    *,
    config: SafetyConfig,
    window: Optional[FinalityWindow] = None,
) -> Verdict:
    """Ratio balance of the absorbed amounts for proportional deposits, then deadline.

    Under `DepositPolicy.CLAMP_TO_RATIO` the refunded excess never enters the
    pool, so only the clamped portion is judged.
    """
    if not intent.is_initial:
        max_deviation = intent.max_ratio_deviation_bps
        if max_deviation is None:
            max_deviation = config.default_max_ratio_deviation_bps
        ratio_a, ratio_b = outcome.absorbed_ratios
        verdict = check_ratio_balance(ratio_a, ratio_b, max_deviation)
        if not verdict:
            return verdict
    return check_optional_deadline(intent.deadline, window, config)


def check_optional_deadline(
    deadline: Optional[int],
    window: Optional[FinalityWindow],
    config: SafetyConfig,
) -> Verdict:
    if deadline is None:
        return ACCEPTED
    if window is None:
        return _reject(ErrorKind.DEADLINE_EXPIRED, "intent has a deadline but no finality window was supplied")
    return check_deadline(deadline, window, policy=config.deadline_policy)
