"""
Premium Calculator
------------------
premium = coverage × base_rate (bps) × category multiplier (per-mille) // 1_000_000

Rate tiers:
- risk < 30       → MIN_PREMIUM_RATE
- 30 ≤ risk < 70  → MID_PREMIUM_RATE
- risk ≥ 70       → MAX_PREMIUM_RATE

Unknown categories fall back to DEFAULT_CATEGORY_MULTIPLIER.
Integer arithmetic only; the single truncating division happens last.
"""

from underwriting.engine.constants import (
    CATEGORY_MULTIPLIERS,
    DEFAULT_CATEGORY_MULTIPLIER,
    HIGH_RISK_CUTOFF,
    LOW_RISK_CUTOFF,
    MAX_PREMIUM_RATE,
    MID_PREMIUM_RATE,
    MIN_PREMIUM_RATE,
    PREMIUM_SCALE,
)
from underwriting.utils.logger import logger


def base_rate_for(risk_score: int) -> int:
    if risk_score < LOW_RISK_CUTOFF:
        return MIN_PREMIUM_RATE
    if risk_score < HIGH_RISK_CUTOFF:
        return MID_PREMIUM_RATE
    return MAX_PREMIUM_RATE


def category_multiplier(policy_category: str) -> int:
    return CATEGORY_MULTIPLIERS.get(policy_category, DEFAULT_CATEGORY_MULTIPLIER)


def calculate_premium(coverage_amount: int, risk_score: int, policy_category: str) -> int:
    rate = base_rate_for(risk_score)
    multiplier = category_multiplier(policy_category)
    premium = coverage_amount * rate * multiplier // PREMIUM_SCALE
    logger.debug(
        f"[PREMIUM] coverage={coverage_amount}, risk={risk_score}, rate={rate}bps, "
        f"category={policy_category}×{multiplier}‰ → {premium}"
    )
    return premium
