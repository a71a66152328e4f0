from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..core.config import Settings, get_settings
from ..core.dependencies import get_transfer_service
from ..models import (
    AccountCreate,
    AccountResponse,
    RecipientLookupResponse,
    TransferCreditsRequest,
    TransferHistoryResponse,
    TransferResult,
)
from ..services import CreditTransferService
from .exceptions import TRANSFER_ERROR_STATUS


router = APIRouter(prefix="/accounts", tags=["accounts"])

@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreate,
    service: CreditTransferService = Depends(get_transfer_service),
) -> AccountResponse:
    return service.create_account(payload)

@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    service: CreditTransferService = Depends(get_transfer_service),
) -> AccountResponse:
    return service.get_account(account_id)

@router.get("/{account_id}/transfers", response_model=TransferHistoryResponse)
def get_transfer_history(
    account_id: int,
    limit: Optional[int] = None,
    service: CreditTransferService = Depends(get_transfer_service),
    settings: Settings = Depends(get_settings),
) -> TransferHistoryResponse:
    if limit is None:
        limit = settings.history_default_limit
    return service.get_transfer_history(account_id, limit=limit)

transfer_router = APIRouter(prefix="/transfers", tags=["transfers"])

@transfer_router.post("", response_model=TransferResult)
def create_transfer(
    payload: TransferCreditsRequest,
    service: CreditTransferService = Depends(get_transfer_service),
):
    result = service.transfer_credits(payload)
    if result.success:
        return result
    return JSONResponse(
        status_code=TRANSFER_ERROR_STATUS.get(result.error_kind, 500),
        content=result.model_dump(mode="json"),
    )

@transfer_router.get("/recipients", response_model=RecipientLookupResponse)
def find_recipient(
    identifier: str,
    service: CreditTransferService = Depends(get_transfer_service),
) -> RecipientLookupResponse:
    return service.find_recipient(identifier)

__all__ = ["router", "transfer_router"]
