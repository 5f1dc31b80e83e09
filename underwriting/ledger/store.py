"""
Ledger State Store
------------------
Authoritative record of policies, claims, user profiles and contract counters.

All mutations go through one SQLAlchemy session. Workflows wrap their writes in
`transaction()`, which commits on success and rolls back on any exception, so a
failed call leaves every table and counter exactly as it was.

Usage:
    store = LedgerStore(session)
    with store.transaction():
        policy_id = store.advance_nonce(LedgerCounter.POLICY)
        store.insert_policy(policy)
"""

from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from underwriting.models.claim import Claim
from underwriting.models.errors import LedgerIntegrityError, NotFoundError
from underwriting.models.ledger import ContractCounters, LedgerCounter
from underwriting.models.policy import Policy
from underwriting.models.profile import UserProfile, profile_or_default
from underwriting.utils.db import (
    COUNTERS_ROW_ID,
    ClaimRecord,
    ContractCountersRecord,
    PolicyRecord,
    UserProfileRecord,
)
from underwriting.utils.logger import logger


class LedgerStore:
    def __init__(self, session: Session):
        self.session = session

    # =========================================================
    # 🔁 Transactions
    # =========================================================
    @contextmanager
    def transaction(self) -> Iterator["LedgerStore"]:
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.debug("[STORE] Transaction rolled back.")
            raise

    # =========================================================
    # 📖 Reads
    # =========================================================
    def get_policy(self, policy_id: int) -> Optional[Policy]:
        record = self.session.get(PolicyRecord, policy_id)
        return Policy.model_validate(record) if record else None

    def get_claim(self, claim_id: int) -> Optional[Claim]:
        record = self.session.get(ClaimRecord, claim_id)
        return Claim.model_validate(record) if record else None

    def get_profile(self, identity: str) -> Optional[UserProfile]:
        record = self.session.get(UserProfileRecord, identity)
        return UserProfile.model_validate(record) if record else None

    def list_claims_for_policy(self, policy_id: int) -> List[Claim]:
        rows = self.session.execute(
            select(ClaimRecord).where(ClaimRecord.policy_id == policy_id).order_by(ClaimRecord.claim_id)
        ).scalars()
        return [Claim.model_validate(row) for row in rows]

    def get_counters(self) -> ContractCounters:
        return ContractCounters.model_validate(self._counters())

    # =========================================================
    # ✍️ Writes
    # =========================================================
    def insert_policy(self, policy: Policy) -> None:
        if self.session.get(PolicyRecord, policy.policy_id) is not None:
            raise LedgerIntegrityError(f"Policy {policy.policy_id} already exists")
        self.session.add(PolicyRecord(**policy.model_dump()))
        self.session.flush()

    def insert_claim(self, claim: Claim) -> None:
        if self.session.get(ClaimRecord, claim.claim_id) is not None:
            raise LedgerIntegrityError(f"Claim {claim.claim_id} already exists")
        self.session.add(ClaimRecord(**claim.model_dump()))
        self.session.flush()

    def upsert_profile(self, identity: str, mutator: Callable[[UserProfile], UserProfile]) -> UserProfile:
        """Read-or-default the profile, apply `mutator`, write the result back."""
        record = self.session.get(UserProfileRecord, identity)
        current = profile_or_default(UserProfile.model_validate(record) if record else None, identity)
        updated = UserProfile.model_validate(mutator(current.model_copy()).model_dump())
        if updated.identity != identity:
            raise ValueError("Profile mutator must not change the identity")

        if record is None:
            self.session.add(UserProfileRecord(**updated.model_dump()))
        else:
            for field, value in updated.model_dump(exclude={"identity"}).items():
                setattr(record, field, value)
        self.session.flush()
        return updated

    def bump_policy_claims_count(self, policy_id: int) -> int:
        record = self.session.get(PolicyRecord, policy_id)
        if record is None:
            raise NotFoundError(f"Policy {policy_id} not found", {"policy_id": policy_id})
        record.claims_count += 1
        self.session.flush()
        return record.claims_count

    def advance_nonce(self, counter: LedgerCounter) -> int:
        """Increment a nonce and return the new value, which becomes the new record's key."""
        counters = self._counters(for_update=True)
        next_id = getattr(counters, counter.value) + 1
        setattr(counters, counter.value, next_id)
        self.session.flush()
        return next_id

    def credit_balance(self, amount: int) -> int:
        if amount < 0:
            raise ValueError("Contract balance can only be credited with a non-negative amount")
        counters = self._counters(for_update=True)
        counters.contract_balance += amount
        self.session.flush()
        return counters.contract_balance

    def set_paused(self, paused: bool) -> bool:
        counters = self._counters(for_update=True)
        counters.paused = paused
        self.session.flush()
        return counters.paused

    # =========================================================
    # 🔧 Internal
    # =========================================================
    def _counters(self, for_update: bool = False) -> ContractCountersRecord:
        # FOR UPDATE re-reads the row and holds it until commit (a no-op on SQLite)
        counters = self.session.get(ContractCountersRecord, COUNTERS_ROW_ID, with_for_update=for_update or None)
        if counters is None:
            raise LedgerIntegrityError("Contract counters not initialized; run init_db() first")
        return counters
