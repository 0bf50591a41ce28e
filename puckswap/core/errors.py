"""Error kinds and the exception type for the pool core.

Calculators and validators report failures as values (`CalcResult`,
`Verdict`, `StepResult`). `PoolRejected` exists for callers that prefer
exceptions: it is raised by ``CalcResult.unwrap()`` and ``step_or_raise()``.
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class ErrorKind(Enum):
    """Why a computation or proposal was refused."""
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_BURN_AMOUNT = "InvalidBurnAmount"
    ALREADY_INITIALIZED = "AlreadyInitialized"
    NOT_INITIALIZED = "NotInitialized"
    INSUFFICIENT_OUTPUT = "InsufficientOutput"
    EXCESSIVE_SLIPPAGE = "ExcessiveSlippage"
    DUST_OR_EXCESSIVE_TRADE = "DustOrExcessiveTrade"
    RATIO_IMBALANCE = "RatioImbalance"
    DEADLINE_EXPIRED = "DeadlineExpired"
    NONCE_REPLAY_OR_GAP = "NonceReplayOrGap"
    INSUFFICIENT_BALANCE = "InsufficientBalance"


class PoolRejected(Exception):
    """Raised when a caller asks for a rejected result to be unwrapped."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)
