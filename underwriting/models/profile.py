"""
Pydantic models for per-identity underwriting history.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from underwriting.engine.constants import DEFAULT_REPUTATION_SCORE


class UserProfile(BaseModel):
    """Underwriting history of one holder / claimant identity."""
    identity: str = Field(..., min_length=1, description="Holder or claimant identity")
    total_policies: int = Field(0, ge=0, description="Policies ever issued to this identity")
    claims_history: int = Field(0, ge=0, description="Past claims counted against this identity")
    reputation_score: int = Field(DEFAULT_REPUTATION_SCORE, ge=0, le=100, description="0-100 standing, higher is better")
    last_claim_block: int = Field(0, ge=0, description="Sequence mark of the last claim (0 if never)")
    blacklisted: bool = Field(False, description="Hard fraud flag")

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    @classmethod
    def default(cls, identity: str) -> "UserProfile":
        """Default-construction rule for identities with no stored profile."""
        return cls(identity=identity)


def profile_or_default(profile: Optional[UserProfile], identity: str) -> UserProfile:
    """Apply the default-construction rule to an optional lookup result."""
    return profile if profile is not None else UserProfile.default(identity)


class UserProfileResponse(BaseModel):
    profile: UserProfile
    on_record: bool = Field(..., description="False when the profile is the default and nothing is stored yet")

    model_config = ConfigDict(extra="ignore")
