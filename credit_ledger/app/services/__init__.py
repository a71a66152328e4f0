from .repository import CreditLedgerRepository
from .transfers import CreditTransferService

__all__ = ["CreditLedgerRepository", "CreditTransferService"]
