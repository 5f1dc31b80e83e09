"""
Contract administration:
- GET  /contract     counters snapshot
- POST /admin/pause  owner-only pause toggle
- POST /admin/fund   owner-only credit on the in-memory transfer gateway (non-prod)
"""

from fastapi import APIRouter, Body, Depends, HTTPException, status

from underwriting.api.dependencies import current_caller, get_ledger_service, get_transfer_gateway, require_owner
from underwriting.config import config
from underwriting.ledger.transfer import InMemoryTransferGateway, TransferGateway
from underwriting.models.ledger import ContractCounters, FundRequest, PauseRequest
from underwriting.services.ledger_service import LedgerService
from underwriting.utils.logger import log_event

router = APIRouter(tags=["Administration"])


@router.get("/contract", response_model=ContractCounters)
def contract_state_endpoint(service: LedgerService = Depends(get_ledger_service)):
    return service.get_contract_state()


@router.post("/admin/pause")
def pause_endpoint(
    request: PauseRequest = Body(...),
    caller: str = Depends(current_caller),
    service: LedgerService = Depends(get_ledger_service),
):
    return {"paused": service.set_paused(caller, request.paused)}


@router.post("/admin/fund")
def fund_endpoint(
    request: FundRequest = Body(...),
    owner: str = Depends(require_owner),
    transfers: TransferGateway = Depends(get_transfer_gateway),
):
    if config.is_production or not isinstance(transfers, InMemoryTransferGateway):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account funding is only available with the in-memory gateway outside production.",
        )
    balance = transfers.fund(request.identity, request.amount)
    log_event("account_funded", caller=owner, identity=request.identity, amount=request.amount)
    return {"identity": request.identity, "balance": balance}
