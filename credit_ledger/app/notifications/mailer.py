from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional, Protocol

from ..core.config import Settings
from ..core.errors import NotificationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessageContent:
    """A fully rendered message for a single recipient."""

    to: str
    subject: str
    html: str
    text: str
    headers: dict[str, str] = field(default_factory=dict)


class Mailer(Protocol):
    def send(self, message: EmailMessageContent) -> None:
        """Deliver ``message`` or raise :class:`NotificationError`."""


class SmtpMailer:
    def __init__(
        self,
        *,
        host: str,
        port: int,
        from_address: str,
        from_name: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_address = from_address
        self.from_name = from_name
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpMailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_address=settings.mail_from_address,
            from_name=settings.mail_from_name,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.smtp_timeout,
        )

    def _build(self, message: EmailMessageContent) -> EmailMessage:
        email = EmailMessage()
        email["From"] = formataddr((self.from_name, self.from_address))
        email["To"] = message.to
        email["Subject"] = message.subject
        email["Message-ID"] = make_msgid(domain=self.from_address.rpartition("@")[2] or None)
        for name, value in message.headers.items():
            email[name] = value
        email.set_content(message.text)
        email.add_alternative(message.html, subtype="html")
        return email

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout)

    def send(self, message: EmailMessageContent) -> None:
        if not message.to:
            raise NotificationError("Recipient address is empty")

        email = self._build(message)
        try:
            with self._connect() as smtp:
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"Could not deliver mail to {message.to}: {exc}") from exc

        logger.info(
            "mail.sent",
            extra={"to": message.to, "message_id": email["Message-ID"]},
        )
