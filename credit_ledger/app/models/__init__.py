from .db import Account as AccountModel
from .db import TransferRecord as TransferRecordModel
from .db import TransferStatus
from .schemas import (
    AccountCreate,
    AccountResponse,
    RecipientLookupResponse,
    TransferCreditsRequest,
    TransferData,
    TransferHistoryItem,
    TransferHistoryResponse,
    TransferParty,
    TransferResult,
)

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "RecipientLookupResponse",
    "TransferCreditsRequest",
    "TransferData",
    "TransferHistoryItem",
    "TransferHistoryResponse",
    "TransferParty",
    "TransferResult",
    "AccountModel",
    "TransferRecordModel",
    "TransferStatus",
]
