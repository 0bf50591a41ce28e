# [TESTER] v1

from __future__ import annotations

from dataclasses import replace

import pytest

from puckswap.core.config import DeadlinePolicy, SafetyConfig
from puckswap.core.errors import ErrorKind
from puckswap.core.math import U64_MAX
from puckswap.core.safety import (
    NonceStatus,
    check_add_liquidity,
    check_deadline,
    check_dust,
    check_nonce,
    check_ratio_balance,
    check_slippage,
    check_swap,
    check_withdrawal,
    classify_nonce,
    validate_deadline,
    validate_dust,
    validate_nonce,
    validate_ratio_balance,
)
from puckswap.core.types import LiquidityOutcome, SwapOutcome, WithdrawalOutcome
from puckswap.state.intents import FinalityWindow, LiquidityIntent, SwapIntent
from puckswap.state.pool import Direction, PoolReserves

POOL = PoolReserves(reserve_a=10_000, reserve_b=10_000, total_lp_supply=10_000)
CONFIG = SafetyConfig()


def _swap_outcome(output: int, impact_bps: int = 0) -> SwapOutcome:
    return SwapOutcome(
        output_amount=output,
        fee_amount=0,
        new_reserves=POOL,
        price_impact_bps=impact_bps,
        effective_price=0,
    )


def _liquidity_outcome(ratio_a: int, ratio_b: int) -> LiquidityOutcome:
    return LiquidityOutcome(
        lp_tokens_minted=1,
        new_reserves=POOL,
        ratio_a_bps=ratio_a,
        ratio_b_bps=ratio_b,
        effective_ratio_bps=min(ratio_a, ratio_b),
        amount_a_used=1,
        amount_b_used=1,
    )


# ---------------------------------------------------------------------------
# dust / excessive trade
# ---------------------------------------------------------------------------

class TestDust:
    @pytest.mark.parametrize(("amount", "accepted"), [(999, False), (1_000, True), (5_000, True), (5_001, False)])
    def test_boundaries_are_exact(self, amount: int, accepted: bool) -> None:
        verdict = check_dust(POOL, amount, Direction.A_TO_B, config=CONFIG)
        assert verdict.accepted is accepted
        if not accepted:
            assert verdict.reason is ErrorKind.DUST_OR_EXCESSIVE_TRADE

    def test_uses_input_side_reserve(self) -> None:
        pool = PoolReserves(reserve_a=10_000, reserve_b=2_000, total_lp_supply=1)
        assert check_dust(pool, 5_000, Direction.A_TO_B, config=CONFIG)
        assert not check_dust(pool, 5_000, Direction.B_TO_A, config=CONFIG)

    def test_empty_input_reserve_rejects(self) -> None:
        pool = PoolReserves(reserve_a=0, reserve_b=10_000, total_lp_supply=1)
        assert not check_dust(pool, 1_000, Direction.A_TO_B, config=CONFIG)

    def test_validate_dust_defaults(self) -> None:
        assert validate_dust(POOL, 1_000, Direction.A_TO_B)
        strict = SafetyConfig(min_trade_amount=2_000)
        assert not validate_dust(POOL, 1_000, Direction.A_TO_B, config=strict)


# ---------------------------------------------------------------------------
# ratio balance
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("ratio_a", "ratio_b", "max_bps", "expected"),
    [
        (100_000, 100_000, 500, True),
        (100_000, 80_000, 500, False),
        (100_000, 95_000, 500, True),
        (95_000, 100_000, 500, True),
        (100_000, 94_999, 500, False),
        (0, 100_000, 500, False),
        (100_000, 0, 10_000, False),
        (0, 0, 500, False),
    ],
)
def test_ratio_balance(ratio_a: int, ratio_b: int, max_bps: int, expected: bool) -> None:
    assert validate_ratio_balance(ratio_a, ratio_b, max_bps) is expected


def test_ratio_imbalance_reason() -> None:
    verdict = check_ratio_balance(100_000, 80_000, 500)
    assert verdict.reason is ErrorKind.RATIO_IMBALANCE
    assert "deviate by 2000 bps" in verdict.detail


# ---------------------------------------------------------------------------
# slippage
# ---------------------------------------------------------------------------

class TestSlippage:
    def test_zero_output_rejected(self) -> None:
        verdict = check_slippage(_swap_outcome(0), SwapIntent(amount_in=1, direction=Direction.A_TO_B))
        assert verdict.reason is ErrorKind.INSUFFICIENT_OUTPUT

    def test_below_min_out(self) -> None:
        intent = SwapIntent(amount_in=1, direction=Direction.A_TO_B, min_out=91)
        assert check_slippage(_swap_outcome(90), intent).reason is ErrorKind.INSUFFICIENT_OUTPUT
        assert check_slippage(_swap_outcome(91), intent)

    def test_price_impact_bound_inclusive(self) -> None:
        intent = SwapIntent(amount_in=1, direction=Direction.A_TO_B, max_slippage_bps=100)
        assert check_slippage(_swap_outcome(90, impact_bps=100), intent)
        verdict = check_slippage(_swap_outcome(90, impact_bps=101), intent)
        assert verdict.reason is ErrorKind.EXCESSIVE_SLIPPAGE


# ---------------------------------------------------------------------------
# deadline
# ---------------------------------------------------------------------------

class TestDeadlineWithinWindow:
    @pytest.mark.parametrize(("deadline", "expected"), [(99, False), (100, True), (150, True), (200, True), (201, False)])
    def test_bounded_window(self, deadline: int, expected: bool) -> None:
        assert validate_deadline(deadline, FinalityWindow(lower=100, upper=200)) is expected

    def test_unbounded_window(self) -> None:
        window = FinalityWindow(lower=100)
        assert validate_deadline(10**9, window)
        assert not validate_deadline(99, window)

    def test_reason(self) -> None:
        verdict = check_deadline(99, FinalityWindow(lower=100, upper=200))
        assert verdict.reason is ErrorKind.DEADLINE_EXPIRED


class TestDeadlineWindowEndsByDeadline:
    policy = DeadlinePolicy.WINDOW_ENDS_BY_DEADLINE

    @pytest.mark.parametrize(("deadline", "expected"), [(199, False), (200, True), (500, True)])
    def test_bounded_window(self, deadline: int, expected: bool) -> None:
        window = FinalityWindow(lower=100, upper=200)
        assert validate_deadline(deadline, window, policy=self.policy) is expected

    def test_unbounded_window_rejected(self) -> None:
        assert not validate_deadline(U64_MAX, FinalityWindow(lower=100), policy=self.policy)


# ---------------------------------------------------------------------------
# nonce
# ---------------------------------------------------------------------------

class TestNonce:
    def test_next_nonce_accepted(self) -> None:
        assert validate_nonce(6, 5, 1_000)
        assert validate_nonce(1, 0, 1)

    @pytest.mark.parametrize(
        ("new", "last", "window", "status"),
        [
            (5, 5, 1_000, NonceStatus.REPLAY),
            (4, 5, 1_000, NonceStatus.REPLAY),
            (7, 5, 1_000, NonceStatus.GAP),
            (1_006, 5, 1_000, NonceStatus.OUT_OF_WINDOW),
            (6, 5, 0, NonceStatus.OUT_OF_WINDOW),
            (U64_MAX + 1, U64_MAX, 1_000, NonceStatus.OUT_OF_WINDOW),
        ],
    )
    def test_rejections(self, new: int, last: int, window: int, status: NonceStatus) -> None:
        assert classify_nonce(new, last, window) is status
        verdict = check_nonce(new, last, window)
        assert verdict.reason is ErrorKind.NONCE_REPLAY_OR_GAP


# ---------------------------------------------------------------------------
# standing liquidity and composite checks
# ---------------------------------------------------------------------------

def test_withdrawal_below_standing_minimum() -> None:
    outcome = WithdrawalOutcome(
        amount_a_out=1, amount_b_out=1, new_reserves=PoolReserves(reserve_a=5, reserve_b=5, total_lp_supply=5)
    )
    assert check_withdrawal(outcome, config=CONFIG)
    verdict = check_withdrawal(outcome, config=SafetyConfig(min_lp_remaining=10))
    assert verdict.reason is ErrorKind.INSUFFICIENT_BALANCE


def test_check_swap_with_deadline_needs_window() -> None:
    intent = SwapIntent(amount_in=1_000, direction=Direction.A_TO_B, deadline=150)
    outcome = _swap_outcome(900)
    assert check_swap(POOL, intent, outcome, config=CONFIG).reason is ErrorKind.DEADLINE_EXPIRED
    assert check_swap(POOL, intent, outcome, config=CONFIG, window=FinalityWindow(100, 200))


def test_check_add_liquidity_falls_back_to_configured_deviation() -> None:
    outcome = _liquidity_outcome(100_000, 99_500)
    # 50 bps apart: inside the default 100 bps, outside an explicit 10 bps.
    assert check_add_liquidity(LiquidityIntent(amount_a=1, amount_b=1), outcome, config=CONFIG)
    tight = LiquidityIntent(amount_a=1, amount_b=1, max_ratio_deviation_bps=10)
    assert check_add_liquidity(tight, outcome, config=CONFIG).reason is ErrorKind.RATIO_IMBALANCE


def test_check_add_liquidity_skips_ratio_for_initial_deposit() -> None:
    intent = LiquidityIntent(amount_a=1, amount_b=1, is_initial=True)
    assert check_add_liquidity(intent, _liquidity_outcome(0, 0), config=CONFIG)


def test_check_add_liquidity_judges_absorbed_ratios() -> None:
    # Declared ratios are 25% apart, but only the balanced part was absorbed.
    outcome = replace(_liquidity_outcome(100_000, 75_000), absorbed_ratio_a_bps=75_000, absorbed_ratio_b_bps=75_000)
    assert check_add_liquidity(LiquidityIntent(amount_a=1, amount_b=1), outcome, config=CONFIG)
