"""
Ledger Service
--------------
The two public workflows plus administration and read access.

create-policy:  Risk Assessor → Premium Calculator → store (policy insert,
                profile upsert, nonce advance, balance credit) → premium transfer
submit-claim:   store (policy lookup) → Fraud Detector → store (claim insert,
                claims_count bump, nonce advance)

Preconditions are checked in a fixed order and the first violation is raised
before anything is written. Writes run inside one store transaction.

Payout is NOT part of this service: `approved` on a recorded claim is a
recommendation only and `processed` stays False.
"""

import threading
from functools import wraps
from typing import List, NamedTuple, Optional

from underwriting.engine.constants import (
    CATEGORY_MAX_BYTES,
    DESCRIPTION_MAX_LENGTH,
    FRAUD_APPROVAL_THRESHOLD,
    MAX_COVERAGE,
    MAX_RISK_SCORE,
    POLICY_TERM_BLOCKS,
)
from underwriting.engine.fraud_detector import evaluate_claim
from underwriting.engine.premium_calculator import (
    base_rate_for,
    calculate_premium,
    category_multiplier,
)
from underwriting.engine.risk_assessor import assess_risk
from underwriting.ledger.clock import LedgerClock
from underwriting.ledger.store import LedgerStore
from underwriting.ledger.transfer import TransferGateway
from underwriting.models.claim import Claim, FraudSignal
from underwriting.models.digest import decode_digest
from underwriting.models.errors import (
    InvalidAmountError,
    InvalidRiskScoreError,
    LedgerError,
    NotFoundError,
    PausedError,
    PolicyExpiredError,
    InvalidEvidenceError,
    UnauthorizedError,
)
from underwriting.models.ledger import ContractCounters, LedgerCounter
from underwriting.models.policy import Policy, Quote
from underwriting.models.profile import UserProfile, profile_or_default
from underwriting.utils.logger import log_event, logger


# One writer at a time per process: a workflow reads the counters, then writes
# them back. The store also locks the counters row for writers in other processes.
_WRITE_LOCK = threading.Lock()


def serialized(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        with _WRITE_LOCK:
            return func(*args, **kwargs)
    return wrapper


class ClaimOutcome(NamedTuple):
    claim: Claim
    signals: List[FraudSignal]


class LedgerService:
    def __init__(self, store: LedgerStore, clock: LedgerClock, transfers: TransferGateway, owner: str):
        self.store = store
        self.clock = clock
        self.transfers = transfers
        self.owner = owner

    # =========================================================
    # 📜 create-policy
    # =========================================================
    @serialized
    def create_policy(self, caller: str, coverage_amount: int, policy_category: str, evidence_digest) -> int:
        try:
            self._require_not_paused()
            self._require_coverage(coverage_amount)

            risk_score = assess_risk(self.store, caller, policy_category, coverage_amount)
            if risk_score > MAX_RISK_SCORE:
                raise InvalidRiskScoreError(
                    f"Risk score {risk_score} exceeds {MAX_RISK_SCORE}",
                    {"risk_score": risk_score},
                )
            premium = calculate_premium(coverage_amount, risk_score, policy_category)
            self._require_category(policy_category)
            digest = decode_digest(evidence_digest)
        except LedgerError as e:
            self._log_rejection("create_policy", caller, e)
            raise

        now = self.clock.current_block()
        transferred = False
        try:
            with self.store.transaction():
                policy_id = self.store.advance_nonce(LedgerCounter.POLICY)
                self.store.insert_policy(Policy(
                    policy_id=policy_id,
                    holder=caller,
                    coverage_amount=coverage_amount,
                    premium_amount=premium,
                    risk_score=risk_score,
                    policy_category=policy_category,
                    start_block=now,
                    end_block=now + POLICY_TERM_BLOCKS,
                    active=True,
                    claims_count=0,
                ))
                self.store.upsert_profile(
                    caller,
                    lambda p: p.model_copy(update={"total_policies": p.total_policies + 1}),
                )
                self.store.credit_balance(premium)
                self.transfers.transfer_to_custody(caller, premium)
                transferred = True
        except LedgerError as e:
            self._log_rejection("create_policy", caller, e)
            raise
        except Exception:
            if transferred:
                self.transfers.refund(caller, premium)
            logger.exception(f"❌ create_policy failed for {caller}; state rolled back.")
            raise

        log_event(
            "policy_created",
            caller=caller,
            policy_id=policy_id,
            coverage_amount=coverage_amount,
            policy_category=policy_category,
            risk_score=risk_score,
            premium_amount=premium,
            start_block=now,
            evidence_digest=digest.hex(),
        )
        return policy_id

    # =========================================================
    # 🧾 submit-claim
    # =========================================================
    def submit_claim(self, caller: str, policy_id: int, claim_amount: int, description: str, evidence_digest) -> int:
        return self.record_claim(caller, policy_id, claim_amount, description, evidence_digest).claim.claim_id

    @serialized
    def record_claim(
        self, caller: str, policy_id: int, claim_amount: int, description: str, evidence_digest
    ) -> ClaimOutcome:
        """submit-claim, returning the stored claim and the fraud signals behind its score."""
        now = self.clock.current_block()
        try:
            self._require_not_paused()
            policy = self._require_policy(policy_id)
            if caller != policy.holder:
                raise UnauthorizedError(
                    f"{caller} is not the holder of policy {policy_id}",
                    {"policy_id": policy_id},
                )
            if not policy.active:
                raise PolicyExpiredError(f"Policy {policy_id} is inactive", {"policy_id": policy_id})
            if now > policy.end_block:
                raise PolicyExpiredError(
                    f"Policy {policy_id} expired at block {policy.end_block}",
                    {"policy_id": policy_id, "end_block": policy.end_block, "current_block": now},
                )
            if not 0 < claim_amount <= policy.coverage_amount:
                raise InvalidAmountError(
                    f"Claim amount must be between 1 and {policy.coverage_amount}",
                    {"claim_amount": claim_amount, "coverage_amount": policy.coverage_amount},
                )
            if len(description) > DESCRIPTION_MAX_LENGTH:
                raise InvalidEvidenceError(
                    f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters",
                    {"length": len(description)},
                )
            digest = decode_digest(evidence_digest)

            signals = evaluate_claim(self.store, policy_id, claim_amount, caller, now)
        except LedgerError as e:
            self._log_rejection("submit_claim", caller, e)
            raise

        fraud_score = sum(s.points for s in signals)
        approved = fraud_score < FRAUD_APPROVAL_THRESHOLD

        with self.store.transaction():
            claim_id = self.store.advance_nonce(LedgerCounter.CLAIM)
            claim = Claim(
                claim_id=claim_id,
                policy_id=policy_id,
                claimant=caller,
                amount=claim_amount,
                description=description,
                submitted_block=now,
                processed=False,
                approved=approved,
                fraud_score=fraud_score,
                evidence_digest=digest,
            )
            self.store.insert_claim(claim)
            self.store.bump_policy_claims_count(policy_id)

        log_event(
            "claim_recorded",
            caller=caller,
            claim_id=claim_id,
            policy_id=policy_id,
            claim_amount=claim_amount,
            fraud_score=fraud_score,
            approved=approved,
            signals=[s.type for s in signals],
            submitted_block=now,
        )
        return ClaimOutcome(claim, signals)

    # =========================================================
    # 💬 Quote (read-only)
    # =========================================================
    def quote(self, caller: str, coverage_amount: int, policy_category: str) -> Quote:
        self._require_coverage(coverage_amount)
        self._require_category(policy_category)
        risk_score = assess_risk(self.store, caller, policy_category, coverage_amount)
        eligible = risk_score <= MAX_RISK_SCORE
        return Quote(
            holder=caller,
            coverage_amount=coverage_amount,
            policy_category=policy_category,
            risk_score=risk_score,
            base_rate_bps=base_rate_for(risk_score),
            category_multiplier=category_multiplier(policy_category),
            premium_amount=calculate_premium(coverage_amount, risk_score, policy_category),
            eligible=eligible,
            reason=None if eligible else f"Risk score {risk_score} exceeds {MAX_RISK_SCORE}",
        )

    # =========================================================
    # 🛑 Administration
    # =========================================================
    @serialized
    def set_paused(self, caller: str, paused: bool) -> bool:
        if caller != self.owner:
            e = UnauthorizedError("Only the contract owner can change the pause flag")
            self._log_rejection("set_paused", caller, e)
            raise e
        with self.store.transaction():
            result = self.store.set_paused(paused)
        log_event("pause_changed", caller=caller, paused=result)
        return result

    # =========================================================
    # 📖 Reads
    # =========================================================
    def get_policy(self, policy_id: int) -> Policy:
        return self._require_policy(policy_id)

    def get_claim(self, claim_id: int) -> Claim:
        claim = self.store.get_claim(claim_id)
        if claim is None:
            raise NotFoundError(f"Claim {claim_id} not found", {"claim_id": claim_id})
        return claim

    def get_claims_for_policy(self, policy_id: int) -> List[Claim]:
        self._require_policy(policy_id)
        return self.store.list_claims_for_policy(policy_id)

    def get_user_profile(self, identity: str) -> UserProfile:
        return profile_or_default(self.store.get_profile(identity), identity)

    def has_profile(self, identity: str) -> bool:
        return self.store.get_profile(identity) is not None

    def get_contract_state(self) -> ContractCounters:
        return self.store.get_counters()

    def is_paused(self) -> bool:
        return self.store.get_counters().paused

    # =========================================================
    # 🔧 Preconditions
    # =========================================================
    def _require_not_paused(self) -> None:
        if self.is_paused():
            raise PausedError("Contract is paused")

    @staticmethod
    def _require_coverage(coverage_amount: int) -> None:
        if not 0 < coverage_amount <= MAX_COVERAGE:
            raise InvalidAmountError(
                f"Coverage must be between 1 and {MAX_COVERAGE}",
                {"coverage_amount": coverage_amount},
            )

    @staticmethod
    def _require_category(policy_category: str) -> None:
        if len(policy_category.encode("utf-8")) > CATEGORY_MAX_BYTES:
            raise InvalidEvidenceError(
                f"Policy category must be at most {CATEGORY_MAX_BYTES} bytes",
                {"policy_category": policy_category},
            )

    def _require_policy(self, policy_id: int) -> Policy:
        policy = self.store.get_policy(policy_id)
        if policy is None:
            raise NotFoundError(f"Policy {policy_id} not found", {"policy_id": policy_id})
        return policy

    @staticmethod
    def _log_rejection(workflow: str, caller: Optional[str], error: LedgerError) -> None:
        log_event(
            "workflow_rejected",
            level="warning",
            workflow=workflow,
            caller=caller,
            code=error.code.value,
            reason=error.message,
        )
