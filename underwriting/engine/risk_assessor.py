"""
Risk Assessor
-------------
Scores a prospective policy from the requester's on-record history:

    risk = 50
         + 5 × claims_history          (every past claim worsens the score)
         + coverage_amount // 10_000   (larger coverage, larger risk)
         + (50 − reputation_score)     (signed: good standing lowers the score)

No clamping happens here; create-policy rejects anything above 100.
Identities with no profile are scored with the default profile.
"""

from underwriting.engine.constants import (
    CLAIM_HISTORY_PENALTY,
    COVERAGE_RISK_DIVISOR,
    NEUTRAL_REPUTATION,
    RISK_BASE_SCORE,
)
from underwriting.ledger.store import LedgerStore
from underwriting.models.profile import UserProfile, profile_or_default
from underwriting.utils.logger import logger


def score_risk(profile: UserProfile, coverage_amount: int) -> int:
    """Pure risk formula over a resolved profile."""
    history_penalty = CLAIM_HISTORY_PENALTY * profile.claims_history
    coverage_risk = coverage_amount // COVERAGE_RISK_DIVISOR
    reputation_adjustment = NEUTRAL_REPUTATION - profile.reputation_score
    return RISK_BASE_SCORE + history_penalty + coverage_risk + reputation_adjustment


def assess_risk(store: LedgerStore, user: str, policy_category: str, coverage_amount: int) -> int:
    """
    Risk score for `user` requesting `coverage_amount` of `policy_category` cover.

    Args:
        store: Ledger store to read the user's profile from (read-only).
        user: Requesting identity; may have no profile yet.
        policy_category: Category tag (carried for traceability, not weighted).
        coverage_amount: Requested coverage in minor units.

    Returns:
        int: Unclamped risk score.
    """
    profile = profile_or_default(store.get_profile(user), user)
    score = score_risk(profile, coverage_amount)
    logger.debug(
        f"[RISK] {user}: category={policy_category}, coverage={coverage_amount}, "
        f"claims_history={profile.claims_history}, reputation={profile.reputation_score} → {score}"
    )
    return score
