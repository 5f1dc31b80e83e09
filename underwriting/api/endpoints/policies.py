"""
/policies Endpoints:
--------------------
create-policy, quote and policy reads.
LedgerError subclasses propagate to the handler in main.py, which maps each
error code to an HTTP status.
"""

from fastapi import APIRouter, Body, Depends, status
from typing import List

from underwriting.api.dependencies import current_caller, get_ledger_service
from underwriting.models.claim import Claim
from underwriting.models.policy import (
    CreatePolicyRequest,
    Policy,
    PolicyCreatedResponse,
    Quote,
    QuoteRequest,
)
from underwriting.services.ledger_service import LedgerService
from underwriting.utils.logger import logger

router = APIRouter(tags=["Policies"])


@router.post(
    "/policies",
    response_model=PolicyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a policy",
    description="Scores risk, prices the premium, collects it and records the policy.",
)
def create_policy_endpoint(
    request: CreatePolicyRequest = Body(...),
    caller: str = Depends(current_caller),
    service: LedgerService = Depends(get_ledger_service),
):
    logger.info(f"🚀 create-policy by {caller}: {request.coverage_amount} {request.policy_category}")
    policy_id = service.create_policy(
        caller,
        request.coverage_amount,
        request.policy_category,
        request.evidence_digest,
    )
    policy = service.get_policy(policy_id)
    return PolicyCreatedResponse(
        policy_id=policy.policy_id,
        premium_amount=policy.premium_amount,
        risk_score=policy.risk_score,
        start_block=policy.start_block,
        end_block=policy.end_block,
    )


@router.post("/policies/quote", response_model=Quote, summary="Price a prospective policy")
def quote_endpoint(
    request: QuoteRequest = Body(...),
    caller: str = Depends(current_caller),
    service: LedgerService = Depends(get_ledger_service),
):
    return service.quote(caller, request.coverage_amount, request.policy_category)


@router.get("/policies/{policy_id}", response_model=Policy)
def get_policy_endpoint(policy_id: int, service: LedgerService = Depends(get_ledger_service)):
    return service.get_policy(policy_id)


@router.get("/policies/{policy_id}/claims", response_model=List[Claim])
def list_policy_claims_endpoint(policy_id: int, service: LedgerService = Depends(get_ledger_service)):
    return service.get_claims_for_policy(policy_id)
