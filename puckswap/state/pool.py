"""
Pool reserve snapshot.

`PoolReserves` is immutable: calculators return a new snapshot and the
orchestrator decides whether to commit it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Tuple

from ..core.math import U128_MAX, require_bps, require_uint


@unique
class Direction(Enum):
    """Swap direction."""
    A_TO_B = "A_TO_B"
    B_TO_A = "B_TO_A"


@unique
class Side(Enum):
    """One of the two pooled assets."""
    A = "A"
    B = "B"


@dataclass(frozen=True)
class PoolReserves:
    """
    Two-asset pool state.

    Invariant: both reserves are zero only when `total_lp_supply` is zero
    (uninitialized or fully drained pool).
    """

    reserve_a: int
    reserve_b: int
    total_lp_supply: int
    fee_bps: int = 30
    protocol_fee_bps: int = 0

    def __post_init__(self) -> None:
        require_uint("reserve_a", self.reserve_a)
        require_uint("reserve_b", self.reserve_b)
        require_uint("total_lp_supply", self.total_lp_supply)
        require_bps("fee_bps", self.fee_bps)
        require_bps("protocol_fee_bps", self.protocol_fee_bps)
        if self.reserve_a == 0 and self.reserve_b == 0 and self.total_lp_supply != 0:
            raise ValueError(
                f"both reserves are zero but total_lp_supply is {self.total_lp_supply}"
            )

    @classmethod
    def empty(cls, fee_bps: int = 30, protocol_fee_bps: int = 0) -> "PoolReserves":
        """The all-zero record a pool starts from."""
        return cls(
            reserve_a=0,
            reserve_b=0,
            total_lp_supply=0,
            fee_bps=fee_bps,
            protocol_fee_bps=protocol_fee_bps,
        )

    @property
    def is_empty(self) -> bool:
        return self.reserve_a == 0 and self.reserve_b == 0 and self.total_lp_supply == 0

    def reserve_of(self, side: Side) -> int:
        return self.reserve_a if side is Side.A else self.reserve_b

    def reserves_for(self, direction: Direction) -> Tuple[int, int]:
        """Return `(reserve_in, reserve_out)` for a swap in `direction`."""
        if direction is Direction.A_TO_B:
            return self.reserve_a, self.reserve_b
        return self.reserve_b, self.reserve_a

    def with_swap(self, direction: Direction, new_reserve_in: int, new_reserve_out: int) -> "PoolReserves":
        if direction is Direction.A_TO_B:
            return replace(self, reserve_a=new_reserve_in, reserve_b=new_reserve_out)
        return replace(self, reserve_a=new_reserve_out, reserve_b=new_reserve_in)

    def with_liquidity(self, reserve_a: int, reserve_b: int, total_lp_supply: int) -> "PoolReserves":
        return replace(self, reserve_a=reserve_a, reserve_b=reserve_b, total_lp_supply=total_lp_supply)


def fits_pool(*values: int) -> bool:
    """True if every value fits a u128 reserve/supply field."""
    return all(0 <= v <= U128_MAX for v in values)
