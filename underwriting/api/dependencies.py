"""
Dependencies for FastAPI endpoints
-----------------------------------
Manages:
- Database sessions
- Process-wide collaborators (ledger clock, transfer gateway)
- LedgerService wiring per request
- Caller identity and owner checks
"""

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Iterator

# =========================================================
# 📦 Internal Imports
# =========================================================
from underwriting.config import config
from underwriting.ledger.clock import LedgerClock, WallClock
from underwriting.ledger.store import LedgerStore
from underwriting.ledger.transfer import InMemoryTransferGateway, TransferGateway
from underwriting.services.ledger_service import LedgerService
from underwriting.utils.db import get_db
from underwriting.utils.logger import logger
from underwriting.utils.security import get_caller_identity

# Process-wide collaborators; tests swap them through app.dependency_overrides.
_clock: LedgerClock = WallClock(config.GENESIS_TIMESTAMP, config.BLOCK_TIME_SECONDS)
_transfers: TransferGateway = InMemoryTransferGateway()


# =========================================================
# 🗄️ DATABASE SESSION
# =========================================================
def get_db_session(db: Session = Depends(get_db)) -> Iterator[Session]:
    """Provide a managed SQLAlchemy DB session."""
    yield db


def get_clock() -> LedgerClock:
    return _clock


def get_transfer_gateway() -> TransferGateway:
    return _transfers


# =========================================================
# 🧠 SERVICE
# =========================================================
def get_ledger_service(
    db: Session = Depends(get_db_session),
    clock: LedgerClock = Depends(get_clock),
    transfers: TransferGateway = Depends(get_transfer_gateway),
) -> LedgerService:
    return LedgerService(LedgerStore(db), clock, transfers, owner=config.OWNER_IDENTITY)


# =========================================================
# 🔐 IDENTITY
# =========================================================
def current_caller(identity: str = Depends(get_caller_identity)) -> str:
    logger.debug(f"👤 Request caller: {identity}")
    return identity


def require_owner(caller: str = Depends(current_caller)) -> str:
    if caller != config.OWNER_IDENTITY:
        logger.warning(f"⚠️ Owner-only route called by {caller}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the contract owner can perform this action.",
        )
    return caller
