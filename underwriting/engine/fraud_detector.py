"""
Fraud Detector
--------------
Scores a submitted claim from policy and claimant history.

Each rule adds its points independently (several can fire on one claim):
1️⃣ Oversized claim      +25  amount > coverage // 2
2️⃣ Frequent claims      +30  current_block − last_claim_block < 144
3️⃣ Repeat claimant      +20  claims_history > 3
4️⃣ Blacklisted claimant +100

The sum is NOT clamped and can exceed 100 (up to 175). Claims scoring below
FRAUD_APPROVAL_THRESHOLD are recommended for approval.

Note: profiles that never claimed have last_claim_block == 0, so rule 2 is
measured from sequence mark 0. Early in the ledger's life this fires for
everyone; that behaviour is relied on and kept as-is.
"""

from typing import List

from underwriting.engine.constants import (
    BLACKLIST_PENALTY,
    FREQUENT_CLAIM_PENALTY,
    FREQUENT_CLAIM_WINDOW_BLOCKS,
    OVERSIZED_CLAIM_PENALTY,
    REPEAT_CLAIM_THRESHOLD,
    REPEAT_CLAIMANT_PENALTY,
)
from underwriting.ledger.store import LedgerStore
from underwriting.models.claim import FraudSignal
from underwriting.models.errors import NotFoundError
from underwriting.models.policy import Policy
from underwriting.models.profile import UserProfile, profile_or_default
from underwriting.utils.logger import logger


def collect_fraud_signals(
    policy: Policy,
    claim_amount: int,
    profile: UserProfile,
    current_block: int,
) -> List[FraudSignal]:
    """Evaluate every rule against resolved inputs and return the ones that fired."""
    signals: List[FraudSignal] = []

    if claim_amount > policy.coverage_amount // 2:
        signals.append(FraudSignal(
            type="oversized_claim",
            description=f"Claim {claim_amount} exceeds half of coverage {policy.coverage_amount}.",
            points=OVERSIZED_CLAIM_PENALTY,
        ))

    blocks_since_last = current_block - profile.last_claim_block
    if blocks_since_last < FREQUENT_CLAIM_WINDOW_BLOCKS:
        signals.append(FraudSignal(
            type="frequent_claims",
            description=f"Only {blocks_since_last} blocks since last claim (window {FREQUENT_CLAIM_WINDOW_BLOCKS}).",
            points=FREQUENT_CLAIM_PENALTY,
        ))

    if profile.claims_history > REPEAT_CLAIM_THRESHOLD:
        signals.append(FraudSignal(
            type="repeat_claimant",
            description=f"{profile.claims_history} prior claims (threshold {REPEAT_CLAIM_THRESHOLD}).",
            points=REPEAT_CLAIMANT_PENALTY,
        ))

    if profile.blacklisted:
        signals.append(FraudSignal(
            type="blacklisted",
            description="Claimant is blacklisted.",
            points=BLACKLIST_PENALTY,
        ))

    return signals


def evaluate_claim(
    store: LedgerStore,
    policy_id: int,
    claim_amount: int,
    claimant: str,
    current_block: int,
) -> List[FraudSignal]:
    """Load the policy and claimant profile, then collect signals. Raises NotFoundError."""
    policy = store.get_policy(policy_id)
    if policy is None:
        raise NotFoundError(f"Policy {policy_id} not found", {"policy_id": policy_id})

    profile = profile_or_default(store.get_profile(claimant), claimant)
    signals = collect_fraud_signals(policy, claim_amount, profile, current_block)

    for signal in signals:
        logger.info(f"[FRAUD] 🚨 {claimant} policy={policy_id}: {signal.type} (+{signal.points})")
    if not signals:
        logger.debug(f"[FRAUD] ✅ {claimant} policy={policy_id}: no signals.")
    return signals


def detect_fraud(
    store: LedgerStore,
    policy_id: int,
    claim_amount: int,
    claimant: str,
    current_block: int,
) -> int:
    """Unclamped fraud score for a claim against `policy_id`."""
    return sum(s.points for s in evaluate_claim(store, policy_id, claim_amount, claimant, current_block))
