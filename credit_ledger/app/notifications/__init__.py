from .mailer import EmailMessageContent, Mailer, SmtpMailer
from .notifier import TransferNotifier
from .templates import TransferEmailContext, render_received_email, render_sent_email

__all__ = [
    "EmailMessageContent",
    "Mailer",
    "SmtpMailer",
    "TransferEmailContext",
    "TransferNotifier",
    "render_received_email",
    "render_sent_email",
]
