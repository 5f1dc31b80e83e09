"""
Currency Transfer Gateway
-------------------------
Narrow contract for the value-transfer primitive the ledger consumes.

The ledger only ever moves premiums from a caller into contract custody. How
funds actually settle is outside this package; InMemoryTransferGateway keeps
account balances in a dict for local runs and tests.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from underwriting.models.errors import TransferError
from underwriting.utils.logger import logger


class TransferGateway(ABC):

    @abstractmethod
    def transfer_to_custody(self, sender: str, amount: int) -> None:
        """Move `amount` from `sender` into custody, or raise TransferError with nothing moved.

        A zero amount succeeds without touching any balance.
        """

    @abstractmethod
    def refund(self, recipient: str, amount: int) -> None:
        """Return `amount` from custody to `recipient` (compensates a failed commit)."""


class InMemoryTransferGateway(TransferGateway):
    def __init__(self, balances: Optional[Dict[str, int]] = None):
        self._balances: Dict[str, int] = dict(balances or {})
        self.custody = 0
        self._lock = threading.Lock()

    def fund(self, identity: str, amount: int) -> int:
        if amount <= 0:
            raise TransferError("non-positive-amount", {"amount": amount})
        with self._lock:
            self._balances[identity] = self._balances.get(identity, 0) + amount
            logger.debug(f"[TRANSFER] Funded {identity} with {amount}")
            return self._balances[identity]

    def balance_of(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    def transfer_to_custody(self, sender: str, amount: int) -> None:
        if amount < 0:
            raise TransferError("negative-amount", {"amount": amount})
        if amount == 0:
            return
        with self._lock:
            available = self._balances.get(sender, 0)
            if available < amount:
                logger.info(f"[TRANSFER] ❌ {sender}: balance {available} < {amount}")
                raise TransferError(
                    "insufficient-balance",
                    {"sender": sender, "required": amount, "available": available},
                )
            self._balances[sender] = available - amount
            self.custody += amount
        logger.debug(f"[TRANSFER] {sender} -> custody: {amount}")

    def refund(self, recipient: str, amount: int) -> None:
        with self._lock:
            self.custody -= amount
            self._balances[recipient] = self._balances.get(recipient, 0) + amount
        logger.warning(f"[TRANSFER] Refunded {amount} to {recipient}")
