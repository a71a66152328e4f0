from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ..core.errors import TransferErrorKind


class AccountCreate(BaseModel):
    display_name: str = Field(..., min_length=1, description="Name shown to other merchants")
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    merchant_code: Optional[str] = Field(default=None, min_length=1)
    balance: Decimal = Field(default=Decimal("0"), ge=0, description="Opening credit balance")


class AccountResponse(BaseModel):
    id: int
    display_name: str
    email: str
    merchant_code: Optional[str] = None
    balance: Decimal = Field(..., ge=0)
    created_at: datetime


class RecipientLookupResponse(BaseModel):
    id: int
    display_name: str
    email: str
    merchant_code: Optional[str] = None


class TransferCreditsRequest(BaseModel):
    sender_id: Optional[int] = None
    recipient_identifier: Optional[str] = None
    # Presence, sign and precision are checked by CreditTransferService.
    amount: Optional[Decimal] = Field(default=None, allow_inf_nan=True)
    service_fee: Decimal = Field(default=Decimal("0"), ge=0)
    note: Optional[str] = Field(default=None, max_length=500)
    send_email_notification: bool = True


class TransferData(BaseModel):
    transaction_id: str
    amount: Decimal
    recipient_id: int
    new_sender_balance: Decimal
    timestamp: datetime
    emails_sent: Optional[bool] = None


class TransferResult(BaseModel):
    success: bool
    error: Optional[str] = None
    error_kind: Optional[TransferErrorKind] = None
    data: Optional[TransferData] = None


class TransferParty(BaseModel):
    id: int
    name: str


class TransferHistoryItem(BaseModel):
    transaction_id: str
    sender_id: int
    recipient_id: int
    amount: Decimal
    service_fee: Decimal
    note: Optional[str] = None
    created_at: datetime
    status: str
    sender: Optional[TransferParty] = None
    recipient: Optional[TransferParty] = None
    is_incoming: bool


class TransferHistoryResponse(BaseModel):
    items: list[TransferHistoryItem]
