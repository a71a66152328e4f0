from fastapi import Depends
from sqlmodel import Session

from ..notifications import Mailer, SmtpMailer, TransferNotifier
from ..services import CreditLedgerRepository, CreditTransferService
from .config import Settings, get_settings
from .db import get_session


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return SmtpMailer.from_settings(settings)


def get_notifier(
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
) -> TransferNotifier:
    return TransferNotifier(mailer, settings)


def get_transfer_service(
    session: Session = Depends(get_session),
    notifier: TransferNotifier = Depends(get_notifier),
) -> CreditTransferService:
    repository = CreditLedgerRepository(session)
    return CreditTransferService(session, repository, notifier)
