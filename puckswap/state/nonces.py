"""
Nonce table for replay protection.

We track, per channel (an intent author or any other replay domain the
integration layer chooses), the last accepted nonce. Acceptance is strictly
sequential within a bounded window; see `puckswap.core.safety.check_nonce`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, Mapping

from ..core.math import require_uint
from ..core.safety import check_nonce
from ..core.types import Verdict


@dataclass
class NonceTable:
    """
    Mutable mapping: channel -> last accepted nonce.

    Unknown channels start at nonce 0, so the first acceptable nonce is 1.
    The table only advances through `accept()`, after the nonce check passes.
    """

    _last: Dict[Hashable, int] = field(default_factory=dict)

    def get_last(self, channel: Hashable) -> int:
        v = self._last.get(channel, 0)
        if not isinstance(v, int) or isinstance(v, bool) or v < 0:
            raise ValueError(f"invalid stored nonce for {channel!r}: {v!r}")
        return v

    def set_last(self, channel: Hashable, last_nonce: int) -> None:
        require_uint("last_nonce", last_nonce, bits=64)
        self._last[channel] = last_nonce

    def check(self, channel: Hashable, nonce: int, window: int) -> Verdict:
        return check_nonce(nonce, self.get_last(channel), window)

    def accept(self, channel: Hashable, nonce: int, window: int) -> Verdict:
        """Record `nonce` for `channel` if it is the next acceptable one."""
        verdict = self.check(channel, nonce, window)
        if verdict:
            self._last[channel] = nonce
        return verdict

    def get_all(self) -> Mapping[Hashable, int]:
        # Shallow copy so callers cannot mutate the table while iterating.
        return dict(self._last)
