from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Optional, Tuple
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from ..core.errors import (
    AccountNotFoundError,
    CreditLedgerError,
    DuplicateAccountError,
    InsufficientBalanceError,
    InvalidArgumentError,
    SelfTransferError,
    TransferCommitError,
)
from ..core.money import MAX_AMOUNT, from_cents, is_whole_cents, to_cents
from ..models import (
    AccountCreate,
    AccountModel,
    AccountResponse,
    RecipientLookupResponse,
    TransferCreditsRequest,
    TransferData,
    TransferHistoryItem,
    TransferHistoryResponse,
    TransferParty,
    TransferRecordModel,
    TransferResult,
)
from ..notifications import TransferEmailContext, TransferNotifier
from .repository import CreditLedgerRepository


logger = logging.getLogger(__name__)

MIN_IDENTIFIER_LENGTH = 3
MAX_HISTORY_LIMIT = 100


class CreditTransferService:
    def __init__(
        self,
        session: Session,
        repository: Optional[CreditLedgerRepository] = None,
        notifier: Optional[TransferNotifier] = None,
    ) -> None:
        self.session = session
        self.repository = repository or CreditLedgerRepository(session)
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _get_account(self, account_id: int, label: str = "Account") -> AccountModel:
        account = self.repository.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(f"{label} not found")
        return account

    def _resolve_identifier(self, identifier: str) -> Optional[AccountModel]:
        # Merchant codes win over emails when both could match.
        account = self.repository.find_by_merchant_code(identifier)
        if account is None:
            account = self.repository.find_by_email(identifier)
        return account

    def _validate_transfer(self, payload: TransferCreditsRequest) -> Tuple[int, str, Decimal]:
        identifier = (payload.recipient_identifier or "").strip()
        if not payload.sender_id or not identifier or payload.amount is None:
            raise InvalidArgumentError("Missing required parameters")

        amount = payload.amount
        if not amount.is_finite() or amount <= 0:
            raise InvalidArgumentError("Amount must be greater than zero")
        if amount > MAX_AMOUNT:
            raise InvalidArgumentError("Amount is too large")
        if not is_whole_cents(amount):
            raise InvalidArgumentError("Amount supports at most two decimal places")

        fee = payload.service_fee
        if fee > MAX_AMOUNT or not is_whole_cents(fee):
            raise InvalidArgumentError("Service fee must be a whole number of cents")

        return payload.sender_id, identifier, amount

    def _commit_transfer(
        self,
        sender: AccountModel,
        recipient: AccountModel,
        amount: Decimal,
        payload: TransferCreditsRequest,
    ) -> Tuple[TransferRecordModel, int]:
        """Debit, credit and record in one transaction.

        Returns the ledger row and the sender balance left by this debit.
        """
        amount_cents = to_cents(amount)
        transaction_id = str(uuid4())
        timestamp = datetime.now(UTC)
        try:
            new_balance_cents = self.repository.debit_if_sufficient(sender.id, amount_cents)
            if new_balance_cents is None:
                raise InsufficientBalanceError(sender.id, amount, from_cents(sender.balance_cents))
            if not self.repository.credit(recipient.id, amount_cents):
                raise AccountNotFoundError("Recipient not found")
            record = self.repository.add_transfer(
                transaction_id=transaction_id,
                sender_id=sender.id,
                recipient_id=recipient.id,
                amount_cents=amount_cents,
                service_fee_cents=to_cents(payload.service_fee),
                note=payload.note,
                created_at=timestamp,
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return record, new_balance_cents

    def _email_context(
        self,
        sender: AccountModel,
        recipient: AccountModel,
        data: TransferData,
        payload: TransferCreditsRequest,
    ) -> TransferEmailContext:
        return TransferEmailContext(
            sender_name=sender.display_name or sender.email,
            sender_email=sender.email,
            recipient_name=recipient.display_name or recipient.email,
            recipient_email=recipient.email,
            amount=data.amount,
            service_fee=payload.service_fee,
            note=payload.note,
            new_sender_balance=data.new_sender_balance,
            transaction_reference=data.transaction_id,
            date=data.timestamp,
        )

    def _account_to_response(self, account: AccountModel) -> AccountResponse:
        return AccountResponse(
            id=account.id,
            display_name=account.display_name,
            email=account.email,
            merchant_code=account.merchant_code,
            balance=from_cents(account.balance_cents),
            created_at=account.created_at,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def transfer_credits(self, payload: TransferCreditsRequest) -> TransferResult:
        """Move ``amount`` credits from the sender to the resolved recipient.

        Debit, credit and the ledger insert share one database transaction.
        Failures come back as an unsuccessful :class:`TransferResult` rather
        than an exception. Notification emails are sent after the commit and
        only affect ``data.emails_sent``.
        """
        try:
            sender_id, identifier, amount = self._validate_transfer(payload)

            sender = self._get_account(sender_id, "Sender")
            recipient = self._resolve_identifier(identifier)
            if recipient is None:
                raise AccountNotFoundError("Recipient not found")

            if sender.id == recipient.id:
                raise SelfTransferError("Cannot transfer credits to yourself")

            if sender.balance_cents < to_cents(amount):
                raise InsufficientBalanceError(sender.id, amount, from_cents(sender.balance_cents))

            record, new_balance_cents = self._commit_transfer(sender, recipient, amount, payload)
        except CreditLedgerError as exc:
            logger.info(
                "transfer.rejected",
                extra={
                    "sender_id": payload.sender_id,
                    "recipient_identifier": payload.recipient_identifier,
                    "kind": exc.kind.value,
                    "reason": str(exc),
                },
            )
            return TransferResult(success=False, error=str(exc), error_kind=exc.kind)
        except SQLAlchemyError as exc:
            self.session.rollback()
            error = TransferCommitError(str(getattr(exc, "orig", None) or exc))
            logger.error(
                "transfer.failed",
                exc_info=True,
                extra={"sender_id": payload.sender_id, "reason": str(error)},
            )
            return TransferResult(success=False, error=str(error), error_kind=error.kind)

        data = TransferData(
            transaction_id=record.transaction_id,
            amount=amount,
            recipient_id=recipient.id,
            new_sender_balance=from_cents(new_balance_cents),
            timestamp=record.created_at,
        )
        logger.info(
            "transfer.completed",
            extra={
                "transaction_id": data.transaction_id,
                "sender_id": sender.id,
                "recipient_id": recipient.id,
                "amount": str(amount),
                "service_fee": str(payload.service_fee),
            },
        )

        if payload.send_email_notification:
            if self.notifier is None:
                logger.warning(
                    "transfer.notifier_missing",
                    extra={"transaction_id": data.transaction_id},
                )
                data.emails_sent = False
            else:
                context = self._email_context(sender, recipient, data, payload)
                data.emails_sent = self.notifier.notify(context)

        return TransferResult(success=True, data=data)

    def find_recipient(self, identifier: str) -> RecipientLookupResponse:
        identifier = (identifier or "").strip()
        if len(identifier) < MIN_IDENTIFIER_LENGTH:
            raise InvalidArgumentError(
                f"Search term must be at least {MIN_IDENTIFIER_LENGTH} characters"
            )

        account = self._resolve_identifier(identifier)
        if account is None:
            raise AccountNotFoundError("No user found with that merchant code or email")

        return RecipientLookupResponse(
            id=account.id,
            display_name=account.display_name,
            email=account.email,
            merchant_code=account.merchant_code,
        )

    def get_transfer_history(self, account_id: int, limit: int = 10) -> TransferHistoryResponse:
        if limit < 1 or limit > MAX_HISTORY_LIMIT:
            raise InvalidArgumentError(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")

        self._get_account(account_id)
        records = self.repository.list_transfers(account_id, limit)

        party_ids = {r.sender_id for r in records} | {r.recipient_id for r in records}
        names = {
            account.id: account.display_name or f"User #{account.id}"
            for account in self.repository.get_accounts(party_ids)
        }

        def party(party_id: int) -> TransferParty:
            return TransferParty(id=party_id, name=names.get(party_id, f"User #{party_id}"))

        items = [
            TransferHistoryItem(
                transaction_id=record.transaction_id,
                sender_id=record.sender_id,
                recipient_id=record.recipient_id,
                amount=from_cents(record.amount_cents),
                service_fee=from_cents(record.service_fee_cents),
                note=record.note,
                created_at=record.created_at,
                status=record.status,
                sender=party(record.sender_id),
                recipient=party(record.recipient_id),
                is_incoming=record.recipient_id == account_id,
            )
            for record in records
        ]
        return TransferHistoryResponse(items=items)

    def create_account(self, payload: AccountCreate) -> AccountResponse:
        if payload.balance > MAX_AMOUNT or not is_whole_cents(payload.balance):
            raise InvalidArgumentError("Balance must be a whole number of cents")
        if self.repository.find_by_email(payload.email) is not None:
            raise DuplicateAccountError(f"Email {payload.email} is already registered")
        if payload.merchant_code and self.repository.find_by_merchant_code(payload.merchant_code):
            raise DuplicateAccountError(
                f"Merchant code {payload.merchant_code} is already registered"
            )

        try:
            account = self.repository.add_account(
                display_name=payload.display_name,
                email=payload.email,
                merchant_code=payload.merchant_code,
                balance_cents=to_cents(payload.balance),
            )
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateAccountError("Email or merchant code is already registered") from exc

        self.session.refresh(account)
        logger.info(
            "account.created",
            extra={"account_id": account.id, "merchant_code": account.merchant_code},
        )
        return self._account_to_response(account)

    def get_account(self, account_id: int) -> AccountResponse:
        account = self._get_account(account_id)
        return self._account_to_response(account)
