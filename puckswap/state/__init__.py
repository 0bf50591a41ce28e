"""
State records for the PuckSwap pool core
"""

from .pool import Direction, PoolReserves, Side
from .intents import FinalityWindow, IntentKind, LiquidityIntent, PoolIntent, SwapIntent, WithdrawalIntent
from .nonces import NonceTable

__all__ = [
    "Direction",
    "PoolReserves",
    "Side",
    "FinalityWindow",
    "IntentKind",
    "LiquidityIntent",
    "PoolIntent",
    "SwapIntent",
    "WithdrawalIntent",
    "NonceTable",
]
