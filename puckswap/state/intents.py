"""
Intent data models for the pool core.

Intents are user-authored requests (swap, add liquidity, remove liquidity).
They form a closed set: `PoolIntent` is the union of the three records, and
every consumer dispatches on the concrete type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional, Union

from ..core.math import require_bps, require_uint
from .pool import Direction


@unique
class IntentKind(Enum):
    """Intent type enumeration."""
    SWAP = "SWAP"
    ADD_LIQUIDITY = "ADD_LIQUIDITY"
    REMOVE_LIQUIDITY = "REMOVE_LIQUIDITY"


def _require_deadline(deadline: Optional[int]) -> None:
    if deadline is not None:
        require_uint("deadline", deadline, bits=64)


@dataclass(frozen=True)
class SwapIntent:
    """
    Exact-in swap request.

    `amount_in == 0` is representable (it quotes a zero output); the dust
    check rejects it before commit.
    """

    amount_in: int
    direction: Direction
    min_out: int = 0
    max_slippage_bps: int = 10_000
    deadline: Optional[int] = None

    kind = IntentKind.SWAP

    def __post_init__(self) -> None:
        require_uint("amount_in", self.amount_in)
        require_uint("min_out", self.min_out)
        require_bps("max_slippage_bps", self.max_slippage_bps)
        if not isinstance(self.direction, Direction):
            raise TypeError(f"direction must be a Direction, got {self.direction!r}")
        _require_deadline(self.deadline)


@dataclass(frozen=True)
class LiquidityIntent:
    """
    Deposit of both assets; `is_initial` marks the pool-creating deposit.

    `max_ratio_deviation_bps=None` defers to the configured default.
    """

    amount_a: int
    amount_b: int
    is_initial: bool = False
    max_ratio_deviation_bps: Optional[int] = None
    deadline: Optional[int] = None

    kind = IntentKind.ADD_LIQUIDITY

    def __post_init__(self) -> None:
        require_uint("amount_a", self.amount_a)
        require_uint("amount_b", self.amount_b)
        if not isinstance(self.is_initial, bool):
            raise TypeError("is_initial must be a bool")
        if self.max_ratio_deviation_bps is not None:
            require_bps("max_ratio_deviation_bps", self.max_ratio_deviation_bps)
        _require_deadline(self.deadline)


@dataclass(frozen=True)
class WithdrawalIntent:
    """Burn of LP tokens for a proportional share of both reserves."""

    lp_tokens_to_burn: int
    min_a_out: int = 0
    min_b_out: int = 0
    deadline: Optional[int] = None

    kind = IntentKind.REMOVE_LIQUIDITY

    def __post_init__(self) -> None:
        require_uint("lp_tokens_to_burn", self.lp_tokens_to_burn)
        require_uint("min_a_out", self.min_a_out)
        require_uint("min_b_out", self.min_b_out)
        _require_deadline(self.deadline)


PoolIntent = Union[SwapIntent, LiquidityIntent, WithdrawalIntent]


@dataclass(frozen=True)
class FinalityWindow:
    """
    Logical-clock range for which a pending transition remains valid.

    `upper=None` is an unbounded window.
    """

    lower: int
    upper: Optional[int] = None

    def __post_init__(self) -> None:
        require_uint("lower", self.lower, bits=64)
        if self.upper is not None:
            require_uint("upper", self.upper, bits=64)
            if self.upper < self.lower:
                raise ValueError(f"window upper ({self.upper}) < lower ({self.lower})")

    @property
    def is_bounded(self) -> bool:
        return self.upper is not None
