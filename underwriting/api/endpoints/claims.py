"""
/claims Endpoints:
------------------
submit-claim and claim / profile reads.
The fraud score decides the recommendation only; nothing is paid out here.
"""

from fastapi import APIRouter, Body, Depends, status

from underwriting.api.dependencies import current_caller, get_ledger_service
from underwriting.models.claim import Claim, ClaimRecordedResponse, Decision, SubmitClaimRequest
from underwriting.models.profile import UserProfileResponse
from underwriting.services.ledger_service import LedgerService
from underwriting.utils.logger import logger

router = APIRouter(tags=["Claims"])


@router.post(
    "/claims",
    response_model=ClaimRecordedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a claim",
    description="Validates the claim against its policy, scores it for fraud and records it.",
)
def submit_claim_endpoint(
    request: SubmitClaimRequest = Body(...),
    caller: str = Depends(current_caller),
    service: LedgerService = Depends(get_ledger_service),
):
    logger.info(f"🚀 submit-claim by {caller}: policy={request.policy_id}, amount={request.claim_amount}")
    claim, signals = service.record_claim(
        caller,
        request.policy_id,
        request.claim_amount,
        request.description,
        request.evidence_digest,
    )

    if claim.decision == Decision.APPROVE:
        outcome_msg = "Low risk – recommended for automatic approval."
    else:
        outcome_msg = "Elevated risk – flagged for manual review."
    fired = ", ".join(f"{s.type} (+{s.points})" for s in signals) or "no fraud signals"

    return ClaimRecordedResponse(
        claim_id=claim.claim_id,
        fraud_score=claim.fraud_score,
        approved=claim.approved,
        decision=claim.decision,
        signals=signals,
        explanation=f"Fraud score {claim.fraud_score} from {fired}. {outcome_msg}",
    )


@router.get("/claims/{claim_id}", response_model=Claim)
def get_claim_endpoint(claim_id: int, service: LedgerService = Depends(get_ledger_service)):
    return service.get_claim(claim_id)


@router.get("/profiles/{identity}", response_model=UserProfileResponse)
def get_profile_endpoint(identity: str, service: LedgerService = Depends(get_ledger_service)):
    return UserProfileResponse(
        profile=service.get_user_profile(identity),
        on_record=service.has_profile(identity),
    )
