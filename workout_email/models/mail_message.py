"""
MailMessage — one fetched email ready for extraction.
"""
from dataclasses import dataclass
from datetime import datetime

from workout_email.models.raw_payload import RawPayload


@dataclass(frozen=True)
class MailMessage:
    """Extraction input unit for batch sync, keyed by the external message id."""

    message_id: str
    email_date: datetime
    payload: RawPayload
