"""
Unit Tests: Fraud Detector
--------------------------
Covers underwriting/engine/fraud_detector.py.
Validates:
- Each rule in isolation and stacked
- Unclamped totals (up to 175)
- Frequency window boundary and the last_claim_block == 0 default
- NotFoundError for unknown policies
"""

import pytest

from underwriting.engine.fraud_detector import collect_fraud_signals, detect_fraud
from underwriting.models.errors import NotFoundError
from underwriting.models.policy import Policy
from underwriting.models.profile import UserProfile

COVERAGE = 200_000


@pytest.fixture
def policy(store, session):
    """A stored policy held by alice, written straight through the store."""
    policy = Policy(
        policy_id=7,
        holder="alice",
        coverage_amount=COVERAGE,
        premium_amount=40_000,
        risk_score=70,
        policy_category="property",
        start_block=500,
        end_block=53_060,
    )
    with store.transaction():
        store.insert_policy(policy)
    return policy


class TestFraudDetector:

    def test_clean_claim_scores_zero(self, store, policy):
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 5_000) == 0

    def test_oversized_claim(self, store, policy):
        assert detect_fraud(store, policy.policy_id, COVERAGE // 2, "alice", 5_000) == 0
        assert detect_fraud(store, policy.policy_id, COVERAGE // 2 + 1, "alice", 5_000) == 25

    def test_frequency_window_boundary(self, store, policy, seed_profile):
        seed_profile("alice", last_claim_block=4_000)
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 4_143) == 30
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 4_144) == 0

    def test_never_claimed_profile_measures_from_zero(self, store, policy):
        """last_claim_block defaults to 0, so very early sequence marks trip the window."""
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 143) == 30
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 144) == 0

    def test_repeat_claimant(self, store, policy, seed_profile):
        seed_profile("alice", claims_history=3)
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 5_000) == 0
        seed_profile("alice", claims_history=4)
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 5_000) == 20

    def test_blacklisted(self, store, policy, seed_profile):
        seed_profile("alice", blacklisted=True)
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 5_000) == 100

    def test_all_rules_stack_unclamped(self, store, policy, seed_profile):
        seed_profile("alice", blacklisted=True, claims_history=9, last_claim_block=4_990)
        assert detect_fraud(store, policy.policy_id, COVERAGE, "alice", 5_000) == 175

    def test_uses_claimant_profile(self, store, policy, seed_profile):
        seed_profile("mallory", blacklisted=True)
        assert detect_fraud(store, policy.policy_id, 1_000, "alice", 5_000) == 0
        assert detect_fraud(store, policy.policy_id, 1_000, "mallory", 5_000) == 100

    def test_unknown_policy(self, store):
        with pytest.raises(NotFoundError) as exc:
            detect_fraud(store, 999, 1_000, "alice", 5_000)
        assert exc.value.code.value == "not-found"

    def test_signals_explain_the_score(self, policy):
        profile = UserProfile(identity="alice", claims_history=5, last_claim_block=4_900)
        signals = collect_fraud_signals(policy, COVERAGE, profile, 5_000)
        assert [s.type for s in signals] == ["oversized_claim", "frequent_claims", "repeat_claimant"]
        assert sum(s.points for s in signals) == 75

    def test_determinism(self, store, policy, seed_profile):
        seed_profile("alice", claims_history=4)
        scores = {detect_fraud(store, policy.policy_id, 150_000, "alice", 5_000) for _ in range(5)}
        assert scores == {45}

    def test_logs_triggered_signals(self, store, policy, seed_profile, caplog):
        seed_profile("alice", blacklisted=True)
        with caplog.at_level("INFO"):
            detect_fraud(store, policy.policy_id, 1_000, "alice", 5_000)
        assert "[FRAUD]" in caplog.text
        assert "blacklisted" in caplog.text
