"""Dispatch-table engine for the pool core.

``step(config, reserves, intent, ctx)`` is the single entry point. It:

1. Dispatches on the intent type to the matching calculator and checks.
2. Checks the nonce carried by ``ctx`` (when present).
3. Runs the minimum-balance gate on the post-state (when configured).
4. Returns a ``StepResult`` (accepted with the proposed state, or rejected
   with an ``ErrorKind``).

Nothing is committed here: the caller compares ``StepResult.pre_state`` with
its stored pool state and swaps in ``StepResult.state`` on acceptance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..state.intents import FinalityWindow, LiquidityIntent, PoolIntent, SwapIntent, WithdrawalIntent
from ..state.pool import PoolReserves
from .config import CoreConfig, Role
from .errors import ErrorKind, PoolRejected
from .liquidity import compute_add_liquidity, compute_remove_liquidity
from .min_balance import check_min_balance
from .safety import check_add_liquidity, check_nonce, check_optional_deadline, check_swap, check_withdrawal
from .swap import compute_swap
from .types import CalcResult, Outcome, StepResult, Verdict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepContext:
    """Per-step inputs that are not part of the intent itself."""

    window: Optional[FinalityWindow] = None
    last_nonce: Optional[int] = None
    nonce: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.nonce is None) != (self.last_nonce is None):
            raise ValueError("nonce and last_nonce must be supplied together")


_EMPTY_CONTEXT = StepContext()

Handler = Callable[[CoreConfig, PoolReserves, PoolIntent, StepContext], tuple[CalcResult, Optional[Verdict]]]


def _handle_swap(
    config: CoreConfig, reserves: PoolReserves, intent: SwapIntent, ctx: StepContext
) -> tuple[CalcResult, Optional[Verdict]]:
    calc = compute_swap(reserves, intent)
    if not calc.ok:
        return calc, None
    return calc, check_swap(reserves, intent, calc.value, config=config.safety, window=ctx.window)


def _handle_add_liquidity(
    config: CoreConfig, reserves: PoolReserves, intent: LiquidityIntent, ctx: StepContext
) -> tuple[CalcResult, Optional[Verdict]]:
    calc = compute_add_liquidity(reserves, intent, policy=config.deposit_policy)
    if not calc.ok:
        return calc, None
    return calc, check_add_liquidity(intent, calc.value, config=config.safety, window=ctx.window)


def _handle_remove_liquidity(
    config: CoreConfig, reserves: PoolReserves, intent: WithdrawalIntent, ctx: StepContext
) -> tuple[CalcResult, Optional[Verdict]]:
    calc = compute_remove_liquidity(reserves, intent)
    if not calc.ok:
        return calc, None
    verdict = check_withdrawal(calc.value, config=config.safety)
    if verdict:
        verdict = check_optional_deadline(intent.deadline, ctx.window, config.safety)
    return calc, verdict


_DISPATCH: dict[type, Handler] = {
    SwapIntent: _handle_swap,
    LiquidityIntent: _handle_add_liquidity,
    WithdrawalIntent: _handle_remove_liquidity,
}


def _min_balance_gate(config: CoreConfig, new_reserves: PoolReserves) -> Verdict:
    if new_reserves.is_empty:
        # A fully drained pool no longer has an output to carry a balance.
        return Verdict.accept()
    gate = config.min_balance_gate
    return check_min_balance(
        Role.POOL,
        gate.asset_count,
        gate.payload_byte_size,
        new_reserves.reserve_of(gate.base_side),
        table=config.cost_table,
    )


def _rejected(reserves: PoolReserves, intent: PoolIntent, kind: ErrorKind, detail: str) -> StepResult:
    logger.debug("step rejected %s: %s (%s)", intent.kind.value, kind.value, detail)
    return StepResult(accepted=False, pre_state=reserves, rejection=kind, detail=detail)


def step(
    config: CoreConfig,
    reserves: PoolReserves,
    intent: PoolIntent,
    ctx: Optional[StepContext] = None,
) -> StepResult:
    """Evaluate one intent against the given pool snapshot.

    Returns ``StepResult`` with ``accepted=True`` and the proposed state on
    success, or ``accepted=False`` with a ``rejection`` kind. The input
    snapshot is never modified.

    Raises:
        TypeError: `intent` is not one of the known intent types.
    """
    handler = _DISPATCH.get(type(intent))
    if handler is None:
        raise TypeError(f"unknown intent type: {type(intent).__name__}")
    ctx = ctx or _EMPTY_CONTEXT

    calc, verdict = handler(config, reserves, intent, ctx)
    if not calc.ok:
        return _rejected(reserves, intent, calc.error, calc.detail)
    if verdict is not None and not verdict:
        return _rejected(reserves, intent, verdict.reason, verdict.detail)

    if ctx.nonce is not None:
        verdict = check_nonce(ctx.nonce, ctx.last_nonce, config.safety.nonce_window)
        if not verdict:
            return _rejected(reserves, intent, verdict.reason, verdict.detail)

    outcome: Outcome = calc.value
    new_reserves = outcome.new_reserves
    if config.min_balance_gate is not None:
        verdict = _min_balance_gate(config, new_reserves)
        if not verdict:
            return _rejected(reserves, intent, verdict.reason, verdict.detail)

    logger.debug("step accepted %s", intent.kind.value)
    return StepResult(accepted=True, pre_state=reserves, state=new_reserves, outcome=outcome)


def step_or_raise(
    config: CoreConfig,
    reserves: PoolReserves,
    intent: PoolIntent,
    ctx: Optional[StepContext] = None,
) -> StepResult:
    """Like ``step()`` but raises on rejection instead of returning a result.

    Raises:
        PoolRejected: The intent was rejected; ``kind`` names the reason.
    """
    result = step(config, reserves, intent, ctx)
    if result.accepted:
        return result
    raise PoolRejected(result.rejection, result.detail)
