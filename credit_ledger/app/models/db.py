from __future__ import annotations
from datetime import datetime, UTC
from enum import Enum
from typing import Optional
from uuid import uuid4
from sqlalchemy import BigInteger, event
from sqlmodel import Field, SQLModel

from ..core.errors import LedgerImmutabilityError


class TransferStatus(str, Enum):
    COMPLETED = "completed"


class Account(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    merchant_code: Optional[str] = Field(default=None, unique=True, index=True)
    email: str = Field(unique=True, index=True)
    display_name: str
    # Whole cents.
    balance_cents: int = Field(default=0, ge=0, sa_type=BigInteger)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TransferRecord(SQLModel, table=True):
    __tablename__ = "credit_transfer"

    transaction_id: str = Field(
        default_factory=lambda: str(uuid4()), primary_key=True, index=True
    )
    sender_id: int = Field(foreign_key="account.id", index=True)
    recipient_id: int = Field(foreign_key="account.id", index=True)
    amount_cents: int = Field(sa_type=BigInteger)
    service_fee_cents: int = Field(default=0, sa_type=BigInteger)
    note: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
    status: str = Field(default=TransferStatus.COMPLETED.value)


@event.listens_for(TransferRecord, "before_update")
def _reject_transfer_update(mapper, connection, target) -> None:
    raise LedgerImmutabilityError(
        f"Transfer {target.transaction_id} is immutable and cannot be updated"
    )


@event.listens_for(TransferRecord, "before_delete")
def _reject_transfer_delete(mapper, connection, target) -> None:
    raise LedgerImmutabilityError(
        f"Transfer {target.transaction_id} is immutable and cannot be deleted"
    )
