"""
PuckSwap pool core.

Deterministic, integer-only constant-product AMM arithmetic (swap, add and
remove liquidity), the reserve safety validators that gate a proposed pool
transition, the minimum-balance calculator, and a step engine tying them
together.
"""

from .state import (
    Direction,
    FinalityWindow,
    IntentKind,
    LiquidityIntent,
    NonceTable,
    PoolIntent,
    PoolReserves,
    Side,
    SwapIntent,
    WithdrawalIntent,
)
from .core.config import (
    CoreConfig,
    CostTable,
    DeadlinePolicy,
    DepositPolicy,
    MinBalanceGate,
    Role,
    SafetyConfig,
    config_from_dict,
    load_config,
)
from .core.errors import ErrorKind, PoolRejected
from .core.types import CalcResult, LiquidityOutcome, StepResult, SwapOutcome, Verdict, WithdrawalOutcome
from .core.swap import compute_swap, quote_amount_in, spot_price
from .core.liquidity import compute_add_liquidity, compute_remove_liquidity
from .core.safety import (
    check_deadline,
    check_dust,
    check_nonce,
    check_ratio_balance,
    check_slippage,
    validate_deadline,
    validate_dust,
    validate_nonce,
    validate_ratio_balance,
)
from .core.min_balance import check_min_balance, compute_min_balance, min_balance_for, top_up_amount
from .core.engine import StepContext, step, step_or_raise

__version__ = "0.1.0"

__all__ = [
    "Direction",
    "FinalityWindow",
    "IntentKind",
    "LiquidityIntent",
    "NonceTable",
    "PoolIntent",
    "PoolReserves",
    "Side",
    "SwapIntent",
    "WithdrawalIntent",
    "CoreConfig",
    "CostTable",
    "DeadlinePolicy",
    "DepositPolicy",
    "MinBalanceGate",
    "Role",
    "SafetyConfig",
    "config_from_dict",
    "load_config",
    "ErrorKind",
    "PoolRejected",
    "CalcResult",
    "LiquidityOutcome",
    "StepResult",
    "SwapOutcome",
    "Verdict",
    "WithdrawalOutcome",
    "compute_swap",
    "quote_amount_in",
    "spot_price",
    "compute_add_liquidity",
    "compute_remove_liquidity",
    "check_deadline",
    "check_dust",
    "check_nonce",
    "check_ratio_balance",
    "check_slippage",
    "validate_deadline",
    "validate_dust",
    "validate_nonce",
    "validate_ratio_balance",
    "check_min_balance",
    "compute_min_balance",
    "min_balance_for",
    "top_up_amount",
    "StepContext",
    "step",
    "step_or_raise",
]
