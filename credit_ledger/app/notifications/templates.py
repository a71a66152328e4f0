"""Credit transfer notification emails.

Each renderer returns an :class:`EmailMessageContent` with an HTML body and
a plain-text alternative built from the same values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from html import escape
from typing import Optional

from ..core.config import Settings
from .mailer import EmailMessageContent


NO_NOTE = "No note provided"


@dataclass(frozen=True)
class TransferEmailContext:
    sender_name: str
    sender_email: str
    recipient_name: str
    recipient_email: str
    amount: Decimal
    service_fee: Decimal
    note: Optional[str]
    new_sender_balance: Decimal
    transaction_reference: str
    date: datetime


def format_amount(amount: Decimal, currency_symbol: str) -> str:
    return f"{currency_symbol}{amount:,.2f}"


def format_date(value: datetime) -> str:
    return value.strftime("%B %d, %Y %I:%M:%S %p")


def _headers(settings: Settings) -> dict[str, str]:
    if not settings.mail_unsubscribe_address:
        return {}
    return {
        "List-Unsubscribe": f"<mailto:{settings.mail_unsubscribe_address}?subject=Unsubscribe>",
        "List-Unsubscribe-Post": "List-Unsubscribe=One-Click",
    }


def _details_table(rows: list[tuple[str, str]]) -> str:
    cells = "\n".join(
        f"        <tr><th>{escape(label)}</th><td>{escape(value)}</td></tr>"
        for label, value in rows
    )
    return f'      <table class="details-table">\n{cells}\n      </table>'


def _page(title: str, heading: str, body: str, year: int) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
  <style>
    body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; color: #333; background-color: #f5f5f5; }}
    .email-container {{ max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; }}
    .header {{ background-color: #4CAF50; color: #ffffff; padding: 20px; text-align: center; }}
    .content {{ padding: 30px; }}
    .details-table {{ width: 100%; border-collapse: collapse; margin: 20px 0; background-color: #f9f9f9; }}
    .details-table th, .details-table td {{ padding: 12px 15px; text-align: left; border-bottom: 1px solid #e0e0e0; }}
    .note-box {{ background-color: #f8f8f8; border-left: 4px solid #4CAF50; padding: 15px; margin: 20px 0; }}
    .amount-display {{ font-size: 32px; font-weight: bold; color: #4CAF50; text-align: center; margin: 20px 0; }}
    .button {{ display: inline-block; background-color: #4CAF50; color: #ffffff; text-decoration: none; padding: 14px 28px; border-radius: 4px; }}
    .footer {{ background-color: #e8f5e9; padding: 20px; text-align: center; font-size: 14px; }}
  </style>
</head>
<body>
  <div class="email-container">
    <div class="header">
      <h1>{escape(heading)}</h1>
    </div>
    <div class="content">
{body}
    </div>
    <div class="footer">
      <p>&copy; {year} All rights reserved.</p>
      <p>This is an automated message, please do not reply to this email.</p>
    </div>
  </div>
</body>
</html>
"""


def render_sent_email(context: TransferEmailContext, settings: Settings) -> EmailMessageContent:
    symbol = settings.currency_symbol
    amount = format_amount(context.amount, symbol)
    fee = format_amount(context.service_fee, symbol)
    balance = format_amount(context.new_sender_balance, symbol)
    date = format_date(context.date)
    note = context.note or NO_NOTE

    rows = [
        ("Recipient", context.recipient_name),
        ("Amount Sent", amount),
        ("Service Fee", fee),
        ("Transaction Date", date),
        ("Transaction Reference", context.transaction_reference),
        ("New Balance", balance),
    ]
    body = f"""      <p>Dear {escape(context.sender_name)},</p>
      <p>Your credit transfer to <strong>{escape(context.recipient_name)}</strong> was completed successfully.</p>
      <div class="amount-display">{escape(amount)}</div>
{_details_table(rows)}
      <div class="note-box">
        <p><strong>Note:</strong></p>
        <p>{escape(note)}</p>
      </div>
      <p><a href="{escape(settings.dashboard_url)}" class="button">View My Balance</a></p>"""

    text_lines = [
        f"Dear {context.sender_name},",
        "",
        f"Your credit transfer to {context.recipient_name} was completed successfully.",
        "",
        *(f"{label}: {value}" for label, value in rows),
        f"Note: {note}",
        "",
        f"View your balance: {settings.dashboard_url}",
    ]

    return EmailMessageContent(
        to=context.sender_email,
        subject=f"Credit Transfer Confirmation: {amount} Sent to {context.recipient_name}",
        html=_page("Credit Transfer Confirmation", "Credits Sent", body, context.date.year),
        text="\n".join(text_lines),
        headers=_headers(settings),
    )


def render_received_email(context: TransferEmailContext, settings: Settings) -> EmailMessageContent:
    symbol = settings.currency_symbol
    amount = format_amount(context.amount, symbol)
    date = format_date(context.date)
    note = context.note or NO_NOTE

    rows = [
        ("Sent By", context.sender_name),
        ("Amount Received", amount),
        ("Transaction Date", date),
        ("Transaction Reference", context.transaction_reference),
    ]
    body = f"""      <p>Dear {escape(context.recipient_name)},</p>
      <p>Good news! <strong>{escape(context.sender_name)}</strong> has sent credits to your account.</p>
      <div class="amount-display">{escape(amount)}</div>
{_details_table(rows)}
      <div class="note-box">
        <p><strong>Note from {escape(context.sender_name)}:</strong></p>
        <p>{escape(note)}</p>
      </div>
      <p>The credits have been added to your balance and are available for immediate use.</p>
      <p><a href="{escape(settings.dashboard_url)}" class="button">View My Balance</a></p>"""

    text_lines = [
        f"Dear {context.recipient_name},",
        "",
        f"Good news! {context.sender_name} has sent credits to your account.",
        "",
        *(f"{label}: {value}" for label, value in rows),
        f"Note from {context.sender_name}: {note}",
        "",
        f"View your balance: {settings.dashboard_url}",
    ]

    return EmailMessageContent(
        to=context.recipient_email,
        subject=f"You've Received {amount} Credits from {context.sender_name}",
        html=_page("Credits Received", "You've Received Credits!", body, context.date.year),
        text="\n".join(text_lines),
        headers=_headers(settings),
    )
