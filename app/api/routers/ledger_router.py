"""
Ledger Router for VCard Backend.
Simulated top-ups and withdrawal requests.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api.deps.record_deps import get_ledger_service
from app.api.dto.user_dto import (
    ErrorResponseDTO,
    NetworkListResponseDTO,
    TopUpRequestDTO,
    WithdrawRequestDTO,
)
from app.api.services.ledger_service import LedgerService
from app.domain.models.network import NETWORKS

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponseDTO}, 500: {"model": ErrorResponseDTO}}


@router.get("/networks", response_model=NetworkListResponseDTO)
async def list_networks() -> NetworkListResponseDTO:
    """List top-up networks with their fees."""
    return NetworkListResponseDTO(networks=NETWORKS)


@router.post("/user/{username}/topup", responses=ERROR_RESPONSES)
async def top_up(
    username: str,
    request: TopUpRequestDTO,
    ledger: LedgerService = Depends(get_ledger_service),
) -> Dict[str, Any]:
    """
    Credit a top-up minus the network fee and return the updated record.
    """
    record = await ledger.top_up(username, request.amount, request.network)
    return record.to_wire()


@router.post("/user/{username}/withdraw", responses=ERROR_RESPONSES)
async def withdraw(
    username: str,
    request: WithdrawRequestDTO,
    ledger: LedgerService = Depends(get_ledger_service),
) -> Dict[str, Any]:
    """
    Queue a withdrawal request and return the updated record.
    """
    record = await ledger.request_withdrawal(username, request.amount, request.destination)
    return record.to_wire()
