"""
Ledger-Sequence Clocks
----------------------
Supply the monotonically increasing sequence mark ("block height") used for
policy expiry windows and claim-frequency checks.

- ManualClock: explicit height, advanced by hand (tests, replays).
- WallClock: height derived from wall time since a genesis timestamp.
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional


class LedgerClock(ABC):
    """Source of the current ledger-sequence mark."""

    @abstractmethod
    def current_block(self) -> int:
        ...


class ManualClock(LedgerClock):
    def __init__(self, height: int = 0):
        if height < 0:
            raise ValueError("height must be non-negative")
        self._height = height

    def current_block(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        if blocks < 0:
            raise ValueError("clock cannot move backwards")
        self._height += blocks
        return self._height

    def set(self, height: int) -> int:
        if height < self._height:
            raise ValueError("clock cannot move backwards")
        self._height = height
        return self._height


class WallClock(LedgerClock):
    """One sequence mark per `block_seconds` elapsed since `genesis_timestamp`."""

    def __init__(
        self,
        genesis_timestamp: int = 0,
        block_seconds: int = 600,
        time_source: Optional[Callable[[], float]] = None,
    ):
        if block_seconds <= 0:
            raise ValueError("block_seconds must be positive")
        self.genesis_timestamp = genesis_timestamp
        self.block_seconds = block_seconds
        self._time = time_source or time.time
        self._last = 0

    def current_block(self) -> int:
        elapsed = int(self._time()) - self.genesis_timestamp
        height = max(elapsed // self.block_seconds, 0)
        # Never report a lower mark than one already handed out (clock skew).
        self._last = max(self._last, height)
        return self._last
