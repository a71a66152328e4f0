from __future__ import annotations

import logging

from ..core.config import Settings
from .mailer import Mailer
from .templates import TransferEmailContext, render_received_email, render_sent_email


logger = logging.getLogger(__name__)


class TransferNotifier:
    """Sends the outgoing and incoming transfer emails, one after the other."""

    def __init__(self, mailer: Mailer, settings: Settings) -> None:
        self.mailer = mailer
        self.settings = settings

    def notify(self, context: TransferEmailContext) -> bool:
        """Return True only if both messages were delivered.

        Delivery errors are logged and never raised; the transfer they
        describe is already committed.
        """
        messages = [
            ("sender", render_sent_email(context, self.settings)),
            ("recipient", render_received_email(context, self.settings)),
        ]

        delivered = True
        for role, message in messages:
            try:
                self.mailer.send(message)
            except Exception:
                delivered = False
                logger.error(
                    "transfer.notification_failed",
                    exc_info=True,
                    extra={
                        "role": role,
                        "to": message.to,
                        "transaction_id": context.transaction_reference,
                    },
                )
        return delivered
