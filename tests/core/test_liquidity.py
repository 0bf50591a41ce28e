# [TESTER] v1

from __future__ import annotations

from puckswap.core.config import DepositPolicy
from puckswap.core.errors import ErrorKind
from puckswap.core.liquidity import compute_add_liquidity, compute_remove_liquidity
from puckswap.core.math import PRECISION
from puckswap.state.intents import LiquidityIntent, WithdrawalIntent
from puckswap.state.pool import PoolReserves


def _pool(a: int, b: int, supply: int) -> PoolReserves:
    return PoolReserves(reserve_a=a, reserve_b=b, total_lp_supply=supply)


# ---------------------------------------------------------------------------
# add liquidity
# ---------------------------------------------------------------------------

class TestInitialDeposit:
    def test_mints_geometric_mean(self) -> None:
        out = compute_add_liquidity(
            PoolReserves.empty(), LiquidityIntent(amount_a=100, amount_b=400, is_initial=True)
        ).unwrap()
        assert out.lp_tokens_minted == 200
        assert (out.new_reserves.reserve_a, out.new_reserves.reserve_b) == (100, 400)
        assert out.new_reserves.total_lp_supply == 200
        assert out.ratio_a_bps == out.ratio_b_bps == PRECISION

    def test_rejected_on_initialized_pool(self) -> None:
        res = compute_add_liquidity(_pool(10, 10, 10), LiquidityIntent(amount_a=1, amount_b=1, is_initial=True))
        assert res.error is ErrorKind.ALREADY_INITIALIZED

    def test_requires_both_sides(self) -> None:
        res = compute_add_liquidity(PoolReserves.empty(), LiquidityIntent(amount_a=0, amount_b=1, is_initial=True))
        assert res.error is ErrorKind.INVALID_AMOUNT

    def test_fee_settings_survive_initialization(self) -> None:
        reserves = PoolReserves.empty(fee_bps=100, protocol_fee_bps=500)
        out = compute_add_liquidity(reserves, LiquidityIntent(amount_a=9, amount_b=4, is_initial=True)).unwrap()
        assert out.lp_tokens_minted == 6
        assert out.new_reserves.fee_bps == 100
        assert out.new_reserves.protocol_fee_bps == 500


class TestProportionalDeposit:
    def test_balanced_deposit(self) -> None:
        out = compute_add_liquidity(_pool(1000, 2000, 1000), LiquidityIntent(amount_a=100, amount_b=200)).unwrap()
        assert out.lp_tokens_minted == 100
        assert out.ratio_a_bps == out.ratio_b_bps == 100_000
        assert (out.new_reserves.reserve_a, out.new_reserves.reserve_b) == (1100, 2200)
        assert out.new_reserves.total_lp_supply == 1100

    def test_unbalanced_deposit_mints_against_smaller_ratio(self) -> None:
        out = compute_add_liquidity(_pool(1000, 2000, 1000), LiquidityIntent(amount_a=100, amount_b=150)).unwrap()
        assert out.lp_tokens_minted == 75
        assert out.ratio_a_bps == 100_000
        assert out.ratio_b_bps == 75_000
        assert out.effective_ratio_bps == out.ratio_b_bps
        # Default policy absorbs both declared amounts.
        assert (out.new_reserves.reserve_a, out.new_reserves.reserve_b) == (1100, 2150)
        assert (out.refund_a, out.refund_b) == (0, 0)
        assert out.absorbed_ratios == (100_000, 75_000)

    def test_clamp_policy_refunds_excess(self) -> None:
        out = compute_add_liquidity(
            _pool(1000, 2000, 1000),
            LiquidityIntent(amount_a=100, amount_b=150),
            policy=DepositPolicy.CLAMP_TO_RATIO,
        ).unwrap()
        assert out.lp_tokens_minted == 75
        assert (out.amount_a_used, out.amount_b_used) == (75, 150)
        assert (out.refund_a, out.refund_b) == (25, 0)
        assert out.absorbed_ratios == (75_000, 75_000)
        assert (out.new_reserves.reserve_a, out.new_reserves.reserve_b) == (1075, 2150)
        assert out.new_reserves.total_lp_supply == 1075

    def test_requires_initialized_pool(self) -> None:
        res = compute_add_liquidity(PoolReserves.empty(), LiquidityIntent(amount_a=100, amount_b=100))
        assert res.error is ErrorKind.NOT_INITIALIZED

    def test_both_zero_is_invalid(self) -> None:
        res = compute_add_liquidity(_pool(1000, 2000, 1000), LiquidityIntent(amount_a=0, amount_b=0))
        assert res.error is ErrorKind.INVALID_AMOUNT

    def test_deposit_minting_nothing_is_invalid(self) -> None:
        res = compute_add_liquidity(_pool(1000, 2000, 1000), LiquidityIntent(amount_a=0, amount_b=1))
        assert res.error is ErrorKind.INVALID_AMOUNT


# ---------------------------------------------------------------------------
# remove liquidity
# ---------------------------------------------------------------------------

class TestWithdrawal:
    def test_proportional_outputs(self) -> None:
        out = compute_remove_liquidity(_pool(1100, 2200, 1100), WithdrawalIntent(lp_tokens_to_burn=100)).unwrap()
        assert (out.amount_a_out, out.amount_b_out) == (100, 200)
        assert (out.new_reserves.reserve_a, out.new_reserves.reserve_b) == (1000, 2000)
        assert out.new_reserves.total_lp_supply == 1000

    def test_full_burn_empties_pool(self) -> None:
        out = compute_remove_liquidity(_pool(123, 456, 789), WithdrawalIntent(lp_tokens_to_burn=789)).unwrap()
        assert (out.amount_a_out, out.amount_b_out) == (123, 456)
        assert out.new_reserves.is_empty

    def test_burn_bounds(self) -> None:
        reserves = _pool(1000, 1000, 1000)
        assert compute_remove_liquidity(reserves, WithdrawalIntent(0)).error is ErrorKind.INVALID_BURN_AMOUNT
        assert compute_remove_liquidity(reserves, WithdrawalIntent(1001)).error is ErrorKind.INVALID_BURN_AMOUNT

    def test_burn_redeeming_nothing_is_rejected(self) -> None:
        res = compute_remove_liquidity(_pool(1, 1, 1000), WithdrawalIntent(lp_tokens_to_burn=1))
        assert res.error is ErrorKind.INSUFFICIENT_OUTPUT

    def test_min_outputs_enforced(self) -> None:
        reserves = _pool(1000, 2000, 1000)
        res = compute_remove_liquidity(reserves, WithdrawalIntent(lp_tokens_to_burn=100, min_a_out=101))
        assert res.error is ErrorKind.INSUFFICIENT_OUTPUT
        res = compute_remove_liquidity(reserves, WithdrawalIntent(lp_tokens_to_burn=100, min_b_out=201))
        assert res.error is ErrorKind.INSUFFICIENT_OUTPUT
        res = compute_remove_liquidity(reserves, WithdrawalIntent(lp_tokens_to_burn=100, min_a_out=100, min_b_out=200))
        assert res.ok


def test_add_then_withdraw_round_trip_within_one_unit() -> None:
    reserves = _pool(1000, 3001, 1000)
    added = compute_add_liquidity(reserves, LiquidityIntent(amount_a=333, amount_b=1000)).unwrap()
    assert added.lp_tokens_minted == 333

    removed = compute_remove_liquidity(
        added.new_reserves, WithdrawalIntent(lp_tokens_to_burn=added.lp_tokens_minted)
    ).unwrap()
    assert abs(removed.amount_a_out - 333) <= 1
    assert abs(removed.amount_b_out - 1000) <= 1
    assert removed.amount_a_out <= 333
    assert removed.amount_b_out <= 1000
