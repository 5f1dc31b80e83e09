"""
Policy Models
-------------
Stored policy record plus the request/response schemas of the policy routes.
Compatible with Pydantic v2 and FastAPI 0.104+.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from underwriting.engine.constants import CATEGORY_MAX_BYTES, MAX_RISK_SCORE
from underwriting.models.digest import DIGEST_HEX_PATTERN


def _check_category(value: str) -> str:
    if len(value.encode("utf-8")) > CATEGORY_MAX_BYTES:
        raise ValueError(f"policy_category must be at most {CATEGORY_MAX_BYTES} bytes")
    return value


# =========================================================
# 📄 STORED POLICY
# =========================================================
class Policy(BaseModel):
    """One issued underwriting contract."""
    policy_id: int = Field(..., gt=0)
    holder: str = Field(..., min_length=1)
    coverage_amount: int = Field(..., gt=0, description="Coverage in minor currency units")
    premium_amount: int = Field(..., ge=0, description="Premium charged at issuance")
    risk_score: int = Field(..., ge=0, le=MAX_RISK_SCORE, description="Risk score at issuance")
    policy_category: str = Field(..., min_length=1)
    start_block: int = Field(..., ge=0)
    end_block: int = Field(..., ge=0)
    active: bool = True
    claims_count: int = Field(0, ge=0)

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    @field_validator("policy_category")
    @classmethod
    def validate_category(cls, value: str) -> str:
        return _check_category(value)

    @model_validator(mode="after")
    def check_window(self) -> "Policy":
        if self.end_block <= self.start_block:
            raise ValueError("end_block must be after start_block")
        return self


# =========================================================
# 📩 REQUEST MODELS
# =========================================================
class CreatePolicyRequest(BaseModel):
    coverage_amount: int = Field(..., description="Requested coverage in minor currency units")
    policy_category: str = Field(..., min_length=1, description="Category tag, e.g. 'auto', 'health', 'property'")
    evidence_digest: str = Field(..., pattern=DIGEST_HEX_PATTERN, description="32-byte digest as hex")

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "coverage_amount": 500000,
                "policy_category": "property",
                "evidence_digest": "0x" + "ab" * 32,
            }
        },
    )

    @field_validator("policy_category")
    @classmethod
    def validate_category(cls, value: str) -> str:
        return _check_category(value)


class QuoteRequest(BaseModel):
    coverage_amount: int
    policy_category: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="ignore")

    @field_validator("policy_category")
    @classmethod
    def validate_category(cls, value: str) -> str:
        return _check_category(value)


# =========================================================
# 📤 RESPONSE MODELS
# =========================================================
class Quote(BaseModel):
    """Read-only pricing of a prospective policy."""
    holder: str
    coverage_amount: int
    policy_category: str
    risk_score: int
    base_rate_bps: int
    category_multiplier: int
    premium_amount: int
    eligible: bool = Field(..., description="False when the risk score is above the valid band")
    reason: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class PolicyCreatedResponse(BaseModel):
    policy_id: int
    premium_amount: int
    risk_score: int
    start_block: int
    end_block: int

    model_config = ConfigDict(extra="ignore")
