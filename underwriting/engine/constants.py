"""
Underwriting Engine Constants
-----------------------------
Fixed scoring and pricing parameters shared by the risk assessor, premium
calculator, fraud detector and workflows.

All values are integers. Changing any of them changes recorded outcomes, so
they are deliberately not read from the environment.
"""

# 📜 Policy limits
MAX_COVERAGE = 1_000_000_000_000       # minor currency units
POLICY_TERM_BLOCKS = 52_560            # ~1 year of 10-minute sequence marks
CATEGORY_MAX_BYTES = 32
DESCRIPTION_MAX_LENGTH = 500
EVIDENCE_DIGEST_SIZE = 32

# 🧮 Risk assessment
RISK_BASE_SCORE = 50
CLAIM_HISTORY_PENALTY = 5
COVERAGE_RISK_DIVISOR = 10_000
NEUTRAL_REPUTATION = 50
MAX_RISK_SCORE = 100

# 💰 Premium calculation (rates in basis points, multipliers per-mille)
MIN_PREMIUM_RATE = 100
MID_PREMIUM_RATE = 500
MAX_PREMIUM_RATE = 2000
LOW_RISK_CUTOFF = 30
HIGH_RISK_CUTOFF = 70
CATEGORY_MULTIPLIERS = {
    "auto": 120,
    "health": 150,
    "property": 100,
}
DEFAULT_CATEGORY_MULTIPLIER = 130
PREMIUM_SCALE = 1_000_000              # 10_000 bps * 1_000 per-mille

# 🚨 Fraud detection
FRAUD_APPROVAL_THRESHOLD = 50
OVERSIZED_CLAIM_PENALTY = 25
FREQUENT_CLAIM_WINDOW_BLOCKS = 144
FREQUENT_CLAIM_PENALTY = 30
REPEAT_CLAIM_THRESHOLD = 3
REPEAT_CLAIMANT_PENALTY = 20
BLACKLIST_PENALTY = 100

# 👤 Default profile
DEFAULT_REPUTATION_SCORE = 50
