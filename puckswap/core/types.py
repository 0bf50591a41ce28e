"""Result types for the pool core.

All types are frozen dataclasses (immutable).

Units/conventions:
- amounts are integer base units of the respective asset,
- `*_bps` fields named after fees/slippage are basis points (1/10_000),
- deposit ratios (`ratio_*_bps`, `effective_ratio_bps`) and
  `effective_price` are scaled by PRECISION (1_000_000).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from ..state.pool import PoolReserves
from .errors import ErrorKind, PoolRejected

T = TypeVar("T")


@dataclass(frozen=True)
class SwapOutcome:
    output_amount: int
    fee_amount: int
    new_reserves: PoolReserves
    price_impact_bps: int
    effective_price: int
    protocol_fee_amount: int = 0


@dataclass(frozen=True)
class LiquidityOutcome:
    lp_tokens_minted: int
    new_reserves: PoolReserves
    ratio_a_bps: int
    ratio_b_bps: int
    effective_ratio_bps: int
    amount_a_used: int
    amount_b_used: int
    refund_a: int = 0
    refund_b: int = 0
    # Ratios of the amounts the pool actually absorbs; None means the
    # declared ratios were absorbed in full.
    absorbed_ratio_a_bps: Optional[int] = None
    absorbed_ratio_b_bps: Optional[int] = None

    @property
    def absorbed_ratios(self) -> tuple[int, int]:
        if self.absorbed_ratio_a_bps is None or self.absorbed_ratio_b_bps is None:
            return self.ratio_a_bps, self.ratio_b_bps
        return self.absorbed_ratio_a_bps, self.absorbed_ratio_b_bps


@dataclass(frozen=True)
class WithdrawalOutcome:
    amount_a_out: int
    amount_b_out: int
    new_reserves: PoolReserves


Outcome = Union[SwapOutcome, LiquidityOutcome, WithdrawalOutcome]


@dataclass(frozen=True)
class CalcResult(Generic[T]):
    """Success value or error kind; never both."""

    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    detail: str = ""

    @classmethod
    def success(cls, value: T) -> "CalcResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str = "") -> "CalcResult[T]":
        return cls(ok=False, error=error, detail=detail)

    def unwrap(self) -> T:
        if not self.ok or self.value is None:
            raise PoolRejected(self.error or ErrorKind.INVALID_AMOUNT, self.detail)
        return self.value


@dataclass(frozen=True)
class Verdict:
    """Outcome of a safety check: accepted, or rejected with a reason."""

    accepted: bool
    reason: Optional[ErrorKind] = None
    detail: str = ""

    @classmethod
    def accept(cls) -> "Verdict":
        return ACCEPTED

    @classmethod
    def reject(cls, reason: ErrorKind, detail: str = "") -> "Verdict":
        return cls(accepted=False, reason=reason, detail=detail)

    def __bool__(self) -> bool:
        return self.accepted


ACCEPTED = Verdict(accepted=True)


@dataclass(frozen=True)
class StepResult:
    """Result of one engine step.

    `pre_state` is the snapshot the proposal was computed from; the
    orchestrator compares it with the stored state before committing.
    """

    accepted: bool
    pre_state: PoolReserves
    state: Optional[PoolReserves] = None
    outcome: Optional[Outcome] = None
    rejection: Optional[ErrorKind] = None
    detail: str = ""
