"""
Unit Tests: Risk Assessor
-------------------------
Covers underwriting/engine/risk_assessor.py (assess_risk & score_risk).
Validates:
- Neutral score for identities with no profile
- History penalty, coverage term and signed reputation term
- No clamping above 100

Run:
    pytest tests/unit/test_engine/test_risk_assessor.py -v
"""

from underwriting.engine.risk_assessor import assess_risk, score_risk
from underwriting.models.profile import UserProfile


class TestRiskAssessor:

    def test_first_time_user_gets_coverage_driven_score(self, store):
        """No profile → 50 + 0 + 200000 // 10000 + 0 = 70."""
        assert store.get_profile("newcomer") is None
        assert assess_risk(store, "newcomer", "property", 200_000) == 70

    def test_coverage_term_truncates(self, store):
        assert assess_risk(store, "newcomer", "auto", 19_999) == 51
        assert assess_risk(store, "newcomer", "auto", 9_999) == 50

    def test_claims_history_penalty(self, store, seed_profile):
        seed_profile("carol", claims_history=3)
        assert assess_risk(store, "carol", "health", 100_000) == 50 + 15 + 10

    def test_good_reputation_lowers_score(self, store, seed_profile):
        """Reputation above 50 contributes a negative term."""
        seed_profile("dave", reputation_score=90)
        assert assess_risk(store, "dave", "auto", 100_000) == 50 + 10 - 40

    def test_bad_reputation_raises_score(self, store, seed_profile):
        seed_profile("erin", reputation_score=10, claims_history=1)
        assert assess_risk(store, "erin", "auto", 0) == 50 + 5 + 40

    def test_score_is_not_clamped(self, store):
        assert assess_risk(store, "whale", "property", 1_000_000) == 150

    def test_category_does_not_change_score(self, store):
        scores = {assess_risk(store, "x", c, 250_000) for c in ("auto", "health", "property", "marine")}
        assert scores == {75}

    def test_pure_formula_matches_store_lookup(self, store, seed_profile):
        profile = seed_profile("frank", claims_history=2, reputation_score=60)
        assert score_risk(profile, 300_000) == assess_risk(store, "frank", "auto", 300_000) == 50 + 10 + 30 - 10

    def test_determinism(self, store):
        first = assess_risk(store, "gina", "auto", 123_456)
        assert all(assess_risk(store, "gina", "auto", 123_456) == first for _ in range(5))

    def test_does_not_create_profile(self, store):
        assess_risk(store, "ghost", "auto", 50_000)
        assert store.get_profile("ghost") is None

    def test_default_profile_values(self):
        profile = UserProfile.default("someone")
        assert (profile.total_policies, profile.claims_history, profile.reputation_score) == (0, 0, 50)
        assert profile.last_claim_block == 0
        assert profile.blacklisted is False
