"""
Minimum-balance calculator.

Every output the settlement layer records must carry a minimum amount of the
base asset. The requirement grows with the number of assets the output holds
and the size of its payload, and pool/registry outputs add a proportional
safety buffer on top of the summed cost:

    subtotal = base_cost(role) + asset_count * per_asset + payload_bytes * per_byte
    required = subtotal + floor(subtotal * buffer_bps(role) / 10_000)

Costs come from an explicit `CostTable`; the module keeps no mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from .config import DEFAULT_COST_TABLE, CostTable, Role
from .errors import ErrorKind
from .math import bps_of, require_uint
from .types import ACCEPTED, Verdict


@unique
class PoolOperation(Enum):
    SWAP = "swap"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    CREATE_POOL = "create_pool"


@dataclass(frozen=True)
class MinBalanceBreakdown:
    base_cost: int
    asset_cost: int
    payload_cost: int
    buffer: int
    required: int
    actual: int = 0

    @property
    def deficit(self) -> int:
        return max(self.required - self.actual, 0)

    @property
    def is_valid(self) -> bool:
        return self.deficit == 0


def compute_min_balance(
    role: Role,
    asset_count: int,
    payload_byte_size: int,
    *,
    actual: int = 0,
    table: CostTable = DEFAULT_COST_TABLE,
) -> MinBalanceBreakdown:
    """Itemised minimum balance for an output of `role`."""
    if not isinstance(role, Role):
        raise TypeError(f"role must be a Role, got {role!r}")
    require_uint("asset_count", asset_count, bits=64)
    require_uint("payload_byte_size", payload_byte_size, bits=64)
    require_uint("actual", actual)

    base_cost = table.base_cost(role)
    asset_cost = asset_count * table.per_asset
    payload_cost = payload_byte_size * table.per_byte
    subtotal = base_cost + asset_cost + payload_cost
    buffer = bps_of(subtotal, table.buffer_bps(role))

    return MinBalanceBreakdown(
        base_cost=base_cost,
        asset_cost=asset_cost,
        payload_cost=payload_cost,
        buffer=buffer,
        required=subtotal + buffer,
        actual=actual,
    )


def min_balance_for(
    role: Role,
    asset_count: int,
    payload_byte_size: int,
    *,
    table: CostTable = DEFAULT_COST_TABLE,
) -> int:
    """Minimum base-asset balance an output of `role` must carry."""
    return compute_min_balance(role, asset_count, payload_byte_size, table=table).required


def check_min_balance(
    role: Role,
    asset_count: int,
    payload_byte_size: int,
    actual: int,
    *,
    table: CostTable = DEFAULT_COST_TABLE,
) -> Verdict:
    """Gate an output on its carried base-asset balance and payload size."""
    if payload_byte_size > table.max_payload_bytes:
        return Verdict.reject(
            ErrorKind.INVALID_AMOUNT,
            f"payload of {payload_byte_size} bytes exceeds {table.max_payload_bytes}",
        )
    calc = compute_min_balance(role, asset_count, payload_byte_size, actual=actual, table=table)
    if not calc.is_valid:
        return Verdict.reject(
            ErrorKind.INSUFFICIENT_BALANCE,
            f"output has {calc.actual} but requires {calc.required} (deficit: {calc.deficit})",
        )
    return ACCEPTED


def check_pool_operation_min_balance(
    operation: PoolOperation,
    pre_balance: int,
    post_balance: int,
    asset_count: int,
    payload_byte_size: int,
    *,
    table: CostTable = DEFAULT_COST_TABLE,
) -> Verdict:
    """
    Min-balance rules for the pool output across one operation.

    The post-operation output must meet the pool minimum for every operation;
    adding liquidity additionally must not decrease the base balance.
    """
    require_uint("pre_balance", pre_balance)
    verdict = check_min_balance(Role.POOL, asset_count, payload_byte_size, post_balance, table=table)
    if not verdict:
        return verdict
    if operation is PoolOperation.ADD_LIQUIDITY and post_balance < pre_balance:
        return Verdict.reject(
            ErrorKind.INSUFFICIENT_BALANCE,
            f"add liquidity should not decrease pool balance: {post_balance} < {pre_balance}",
        )
    return ACCEPTED


def top_up_amount(current: int, required: int, buffer_percent: int = 10) -> int:
    """Amount to add so `current` reaches `required` plus `buffer_percent`%."""
    require_uint("current", current)
    require_uint("required", required)
    require_uint("buffer_percent", buffer_percent, bits=16)
    target = required + (required * buffer_percent) // 100
    return max(target - current, 0)
