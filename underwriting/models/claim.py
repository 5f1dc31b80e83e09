"""
Claim Models
------------
Stored claim record, fraud signals and the schemas of the claim routes.
Compatible with Pydantic v2 and FastAPI 0.104+.
"""

from typing import List
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_serializer

from underwriting.engine.constants import DESCRIPTION_MAX_LENGTH, EVIDENCE_DIGEST_SIZE
from underwriting.models.digest import DIGEST_HEX_PATTERN, encode_digest


# =========================================================
# 🧩 ENUMS
# =========================================================
class Decision(str, Enum):
    """Recommendation attached to a recorded claim. Neither value moves funds."""
    APPROVE = "APPROVE"
    REVIEW = "REVIEW"


# =========================================================
# 🚨 FRAUD SIGNAL MODEL
# =========================================================
class FraudSignal(BaseModel):
    """One triggered fraud rule and the points it contributes."""
    type: str = Field(..., description="Signal type (e.g., 'oversized_claim', 'blacklisted')")
    description: str = Field(..., description="Why this signal fired.")
    points: int = Field(..., ge=0, description="Contribution to the fraud score")

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 📄 STORED CLAIM
# =========================================================
class Claim(BaseModel):
    """One request for payout against a policy."""
    claim_id: int = Field(..., gt=0)
    policy_id: int = Field(..., gt=0)
    claimant: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    description: str = Field("", max_length=DESCRIPTION_MAX_LENGTH)
    submitted_block: int = Field(..., ge=0)
    processed: bool = False
    approved: bool = False
    fraud_score: int = Field(..., ge=0, description="Unclamped; may exceed 100")
    evidence_digest: bytes = Field(..., min_length=EVIDENCE_DIGEST_SIZE, max_length=EVIDENCE_DIGEST_SIZE)

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    @property
    def decision(self) -> Decision:
        return Decision.APPROVE if self.approved else Decision.REVIEW

    @field_serializer("evidence_digest", when_used="json")
    def serialize_digest(self, value: bytes) -> str:
        return encode_digest(value)


# =========================================================
# 📩 REQUEST MODEL
# =========================================================
class SubmitClaimRequest(BaseModel):
    policy_id: int = Field(..., description="Policy the claim is filed against")
    claim_amount: int = Field(..., description="Requested amount in minor currency units")
    description: str = Field("", max_length=DESCRIPTION_MAX_LENGTH, description="Free-text description")
    evidence_digest: str = Field(..., pattern=DIGEST_HEX_PATTERN, description="32-byte digest as hex")

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "policy_id": 1,
                "claim_amount": 120000,
                "description": "Water damage in kitchen",
                "evidence_digest": "0x" + "cd" * 32,
            }
        },
    )


# =========================================================
# 🧠 RESPONSE MODEL
# =========================================================
class ClaimRecordedResponse(BaseModel):
    claim_id: int
    fraud_score: int
    approved: bool
    decision: Decision
    signals: List[FraudSignal] = Field(default_factory=list)
    explanation: str

    model_config = ConfigDict(extra="ignore")
