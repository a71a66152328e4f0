from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import or_, update
from sqlmodel import Session, select

from ..models import AccountModel, TransferRecordModel, TransferStatus


class CreditLedgerRepository:
    """Thin data access layer around the SQLModel session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # Account operations -------------------------------------------------
    def add_account(
        self,
        *,
        display_name: str,
        email: str,
        merchant_code: Optional[str],
        balance_cents: int,
    ) -> AccountModel:
        account = AccountModel(
            display_name=display_name,
            email=email,
            merchant_code=merchant_code,
            balance_cents=balance_cents,
        )
        self.session.add(account)
        self.session.flush()
        self.session.refresh(account)
        return account

    def get_account(self, account_id: int) -> Optional[AccountModel]:
        return self.session.get(AccountModel, account_id)

    def get_accounts(self, account_ids: Iterable[int]) -> list[AccountModel]:
        ids = list(set(account_ids))
        if not ids:
            return []
        stmt = select(AccountModel).where(AccountModel.id.in_(ids))
        return list(self.session.exec(stmt))

    def find_by_merchant_code(self, merchant_code: str) -> Optional[AccountModel]:
        stmt = select(AccountModel).where(AccountModel.merchant_code == merchant_code)
        return self.session.exec(stmt).first()

    def find_by_email(self, email: str) -> Optional[AccountModel]:
        stmt = select(AccountModel).where(AccountModel.email == email)
        return self.session.exec(stmt).first()

    def debit_if_sufficient(self, account_id: int, amount_cents: int) -> Optional[int]:
        """Decrement the balance in one statement, only when it covers ``amount_cents``.

        Returns the balance as left by this debit, read inside the same
        transaction, or None when no row matched (the account is gone or its
        balance is below ``amount_cents`` at statement time).
        """
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .where(AccountModel.balance_cents >= amount_cents)
            .values(balance_cents=AccountModel.balance_cents - amount_cents)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(stmt)
        if result.rowcount != 1:
            return None
        return self.get_balance_cents(account_id)

    def get_balance_cents(self, account_id: int) -> Optional[int]:
        stmt = select(AccountModel.balance_cents).where(AccountModel.id == account_id)
        return self.session.exec(stmt).first()

    def credit(self, account_id: int, amount_cents: int) -> bool:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(balance_cents=AccountModel.balance_cents + amount_cents)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(stmt)
        return result.rowcount == 1

    # Transfer ledger ----------------------------------------------------
    def add_transfer(
        self,
        *,
        transaction_id: str,
        sender_id: int,
        recipient_id: int,
        amount_cents: int,
        service_fee_cents: int,
        note: Optional[str],
        created_at: datetime,
    ) -> TransferRecordModel:
        record = TransferRecordModel(
            transaction_id=transaction_id,
            sender_id=sender_id,
            recipient_id=recipient_id,
            amount_cents=amount_cents,
            service_fee_cents=service_fee_cents,
            note=note,
            created_at=created_at,
            status=TransferStatus.COMPLETED.value,
        )
        self.session.add(record)
        self.session.flush()
        return record

    def list_transfers(self, account_id: int, limit: int) -> list[TransferRecordModel]:
        stmt = (
            select(TransferRecordModel)
            .where(
                or_(
                    TransferRecordModel.sender_id == account_id,
                    TransferRecordModel.recipient_id == account_id,
                )
            )
            .order_by(TransferRecordModel.created_at.desc())
            .limit(limit)
        )
        return list(self.session.exec(stmt))
