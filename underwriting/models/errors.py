"""
Ledger Errors
-------------
Categorical failure codes raised by the underwriting workflows.

Every workflow checks its preconditions before writing anything and raises the
first violation as one of the exceptions below. The store transaction rolls
back on any exception, so a raised LedgerError never leaves partial state.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Failure categories reported to callers."""
    NOT_FOUND = "not-found"
    UNAUTHORIZED = "unauthorized"
    INVALID_AMOUNT = "invalid-amount"
    POLICY_EXPIRED = "policy-expired"
    INVALID_RISK_SCORE = "invalid-risk-score"
    PAUSED = "paused"
    TRANSFER_FAILURE = "transfer-failure"
    INVALID_EVIDENCE = "invalid-evidence"


class LedgerError(Exception):
    """Base class for every categorical ledger failure."""
    code: ErrorCode = ErrorCode.NOT_FOUND

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body = {"detail": self.message, "code": self.code.value}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(LedgerError):
    code = ErrorCode.NOT_FOUND


class UnauthorizedError(LedgerError):
    code = ErrorCode.UNAUTHORIZED


class InvalidAmountError(LedgerError):
    code = ErrorCode.INVALID_AMOUNT


class PolicyExpiredError(LedgerError):
    code = ErrorCode.POLICY_EXPIRED


class InvalidRiskScoreError(LedgerError):
    code = ErrorCode.INVALID_RISK_SCORE


class PausedError(LedgerError):
    code = ErrorCode.PAUSED


class InvalidEvidenceError(LedgerError):
    code = ErrorCode.INVALID_EVIDENCE


class TransferError(LedgerError):
    """Failure reported by the currency transfer primitive, passed through as-is."""
    code = ErrorCode.TRANSFER_FAILURE

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Transfer failed: {reason}", details)
        self.reason = reason


class LedgerIntegrityError(RuntimeError):
    """A record key collided with an existing one. Nonce discipline makes this unreachable."""


__all__ = [
    "ErrorCode",
    "LedgerError",
    "NotFoundError",
    "UnauthorizedError",
    "InvalidAmountError",
    "PolicyExpiredError",
    "InvalidRiskScoreError",
    "PausedError",
    "InvalidEvidenceError",
    "TransferError",
    "LedgerIntegrityError",
]
