from __future__ import annotations

from enum import Enum


class TransferErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    SELF_TRANSFER_NOT_ALLOWED = "self_transfer_not_allowed"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    TRANSACTION_FAILURE = "transaction_failure"
    NOTIFICATION_FAILURE = "notification_failure"


class CreditLedgerError(Exception):
    """Base class for failures raised by the credit ledger services."""

    kind: TransferErrorKind = TransferErrorKind.TRANSACTION_FAILURE


class InvalidArgumentError(CreditLedgerError):
    """Raised when a request is missing a field or carries an unusable value."""

    kind = TransferErrorKind.INVALID_ARGUMENT


class AccountNotFoundError(CreditLedgerError):
    """Raised when an account id or identifier does not resolve."""

    kind = TransferErrorKind.NOT_FOUND


class SelfTransferError(CreditLedgerError):
    """Raised when sender and recipient resolve to the same account."""

    kind = TransferErrorKind.SELF_TRANSFER_NOT_ALLOWED


class InsufficientBalanceError(CreditLedgerError):
    """Raised when a debit would drop the sender's balance below zero."""

    kind = TransferErrorKind.INSUFFICIENT_BALANCE

    def __init__(self, account_id: int, requested, available) -> None:
        self.account_id = account_id
        self.requested = requested
        self.available = available
        super().__init__("Insufficient credits")


class TransferCommitError(CreditLedgerError):
    """Raised when the debit/credit/ledger unit could not be committed."""

    kind = TransferErrorKind.TRANSACTION_FAILURE


class NotificationError(CreditLedgerError):
    """Raised by a mailer when a message could not be delivered."""

    kind = TransferErrorKind.NOTIFICATION_FAILURE


class DuplicateAccountError(CreditLedgerError):
    """Raised when an email or merchant code is already registered."""

    kind = TransferErrorKind.INVALID_ARGUMENT


class LedgerImmutabilityError(CreditLedgerError):
    """Raised when code tries to update or delete a transfer record."""
