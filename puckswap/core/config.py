"""
Runtime configuration for the pool core.

Every threshold the calculators and validators use lives in one of these
frozen dataclasses and is passed in explicitly; there is no module-level
mutable configuration. `load_config()` reads the same structure from YAML.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from enum import Enum, unique
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..state.pool import Side
from .math import require_bps, require_int, require_uint

logger = logging.getLogger(__name__)


@unique
class DeadlinePolicy(Enum):
    """How a deadline is compared against the current finality window."""

    # lower <= deadline <= upper (inclusive); an unbounded upper accepts any
    # deadline at or after lower.
    WITHIN_WINDOW = "within_window"
    # The window must be bounded and close no later than the deadline.
    WINDOW_ENDS_BY_DEADLINE = "window_ends_by_deadline"


# Deadline comparisons are inclusive at both window boundaries.
DEADLINE_BOUNDARY_INCLUSIVE = True


@unique
class DepositPolicy(Enum):
    """How much of an unbalanced deposit the pool absorbs."""

    # Absorb both declared amounts; only the LP mint follows the limiting ratio.
    ABSORB_FULL = "absorb_full"
    # Absorb the ratio-preserving part and refund the excess.
    CLAMP_TO_RATIO = "clamp_to_ratio"


@unique
class Role(Enum):
    """Kind of output a minimum balance is computed for."""
    POOL = "pool"
    REGISTRY = "registry"
    LP_TOKEN = "lp_token"
    SCRIPT = "script"
    USER = "user"


@dataclass(frozen=True)
class SafetyConfig:
    min_trade_amount: int = 1_000
    max_trade_fraction_bps: int = 5_000
    default_max_ratio_deviation_bps: int = 100
    nonce_window: int = 1_000
    deadline_policy: DeadlinePolicy = DeadlinePolicy.WITHIN_WINDOW
    min_lp_remaining: int = 0

    def __post_init__(self) -> None:
        require_uint("min_trade_amount", self.min_trade_amount)
        require_bps("max_trade_fraction_bps", self.max_trade_fraction_bps)
        require_bps("default_max_ratio_deviation_bps", self.default_max_ratio_deviation_bps)
        require_uint("nonce_window", self.nonce_window, bits=64)
        if self.nonce_window < 1:
            raise ValueError("nonce_window must be at least 1")
        if not isinstance(self.deadline_policy, DeadlinePolicy):
            raise TypeError("deadline_policy must be a DeadlinePolicy")
        require_uint("min_lp_remaining", self.min_lp_remaining)


@dataclass(frozen=True)
class CostTable:
    """Minimum-balance cost table (base-asset units)."""

    pool_base: int = 3_000_000
    registry_base: int = 2_500_000
    lp_token_base: int = 2_000_000
    script_base: int = 2_000_000
    user_base: int = 1_000_000
    per_asset: int = 344_798
    per_byte: int = 4_310
    pool_buffer_bps: int = 1_000
    registry_buffer_bps: int = 500
    max_payload_bytes: int = 16_384

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if f.name.endswith("_bps"):
                require_bps(f.name, v)
            else:
                require_uint(f.name, v)

    def base_cost(self, role: Role) -> int:
        return {
            Role.POOL: self.pool_base,
            Role.REGISTRY: self.registry_base,
            Role.LP_TOKEN: self.lp_token_base,
            Role.SCRIPT: self.script_base,
            Role.USER: self.user_base,
        }[role]

    def buffer_bps(self, role: Role) -> int:
        if role is Role.POOL:
            return self.pool_buffer_bps
        if role is Role.REGISTRY:
            return self.registry_buffer_bps
        return 0


DEFAULT_COST_TABLE = CostTable()


@dataclass(frozen=True)
class MinBalanceGate:
    """Which reserve carries the base asset of the pool output, and its shape."""

    base_side: Side = Side.A
    asset_count: int = 3
    payload_byte_size: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.base_side, Side):
            raise TypeError("base_side must be a Side")
        require_uint("asset_count", self.asset_count, bits=64)
        require_uint("payload_byte_size", self.payload_byte_size, bits=64)


@dataclass(frozen=True)
class CoreConfig:
    """Config for the engine step."""

    safety: SafetyConfig = field(default_factory=SafetyConfig)
    cost_table: CostTable = field(default_factory=CostTable)
    deposit_policy: DepositPolicy = DepositPolicy.ABSORB_FULL
    min_balance_gate: Optional[MinBalanceGate] = None


# -- Loading -----------------------------------------------------------------

def _build(cls: type, raw: Any, *, name: str, enums: Optional[Mapping[str, type]] = None) -> Any:
    if raw is None:
        return cls()
    if not isinstance(raw, Mapping):
        raise ValueError(f"{name} must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"unknown {name} keys: {', '.join(unknown)}")
    kwargs: dict[str, Any] = {}
    for key, value in raw.items():
        enum_cls = (enums or {}).get(key)
        if enum_cls is not None:
            try:
                kwargs[key] = enum_cls(value)
            except ValueError as exc:
                raise ValueError(f"invalid {name}.{key}: {value!r}") from exc
        else:
            require_int(f"{name}.{key}", value)
            kwargs[key] = value
    return cls(**kwargs)


def config_from_dict(raw: Mapping[str, Any]) -> CoreConfig:
    """
    Build a `CoreConfig` from a plain mapping (as parsed from YAML).

    Missing sections take their defaults; unknown keys are rejected.
    """
    if not isinstance(raw, Mapping):
        raise ValueError("config must be a mapping")
    unknown = sorted(set(raw) - {"safety", "cost_table", "deposit_policy", "min_balance_gate"})
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")

    safety = _build(
        SafetyConfig,
        raw.get("safety"),
        name="safety",
        enums={"deadline_policy": DeadlinePolicy},
    )
    cost_table = _build(CostTable, raw.get("cost_table"), name="cost_table")

    policy_raw = raw.get("deposit_policy", DepositPolicy.ABSORB_FULL.value)
    try:
        deposit_policy = DepositPolicy(policy_raw)
    except ValueError as exc:
        raise ValueError(f"invalid deposit_policy: {policy_raw!r}") from exc

    gate = None
    if raw.get("min_balance_gate") is not None:
        gate = _build(
            MinBalanceGate,
            raw["min_balance_gate"],
            name="min_balance_gate",
            enums={"base_side": Side},
        )

    return CoreConfig(
        safety=safety,
        cost_table=cost_table,
        deposit_policy=deposit_policy,
        min_balance_gate=gate,
    )


def load_config(path: Union[str, Path]) -> CoreConfig:
    """Read a YAML config file; an empty file yields the defaults."""
    path = Path(path)
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    config = config_from_dict(raw or {})
    logger.info("loaded pool core config from %s", path)
    return config
