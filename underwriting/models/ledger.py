"""
Contract-wide counters: nonces, custody balance and the pause flag.
"""

from enum import Enum
from pydantic import BaseModel, Field, ConfigDict


class LedgerCounter(str, Enum):
    """Nonces that mint record identities."""
    POLICY = "policy_nonce"
    CLAIM = "claim_nonce"


class ContractCounters(BaseModel):
    policy_nonce: int = Field(0, ge=0, description="Last issued policy id")
    claim_nonce: int = Field(0, ge=0, description="Last issued claim id")
    contract_balance: int = Field(0, ge=0, description="Premiums held in custody")
    paused: bool = False

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class PauseRequest(BaseModel):
    paused: bool


class FundRequest(BaseModel):
    identity: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
