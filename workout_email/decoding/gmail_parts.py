"""
Gmail message part selection.

The Gmail API returns a message as a JSON payload tree. The extraction
engine wants one HTML leaf: the top-level body when the message is not
multipart, else the first-level text/html part, else one level of nested
parts (multipart/alternative inside multipart/mixed).
"""
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional

from workout_email.models.raw_payload import TRANSFER_BASE64, RawPayload

logger = logging.getLogger(__name__)

HTML_MIME_TYPE = "text/html"


def _body_data(part: Optional[dict]) -> Optional[str]:
    if not part:
        return None
    return (part.get("body") or {}).get("data") or None


def _find_html_part(parts: List[dict]) -> Optional[dict]:
    for part in parts:
        if part.get("mimeType") == HTML_MIME_TYPE and _body_data(part):
            return part
    return None


def select_html_payload(message: dict) -> Optional[RawPayload]:
    """
    Pick the HTML body of a Gmail API message.

    Args:
        message: Message resource fetched with format="full".

    Returns:
        RawPayload with base64 transfer encoding, or None if the message
        carries no HTML body at the first two levels.
    """
    payload = message.get("payload") or {}

    data = _body_data(payload)
    if data:
        return RawPayload(
            data=data,
            transfer_encoding=TRANSFER_BASE64,
            mime_type=payload.get("mimeType", HTML_MIME_TYPE),
        )

    parts = payload.get("parts") or []
    html_part = _find_html_part(parts)

    if html_part is None:
        for part in parts:
            html_part = _find_html_part(part.get("parts") or [])
            if html_part is not None:
                break

    if html_part is None:
        logger.debug("No text/html part in message %s", message.get("id", "?"))
        return None

    return RawPayload(
        data=_body_data(html_part),
        transfer_encoding=TRANSFER_BASE64,
        mime_type=HTML_MIME_TYPE,
    )


def message_date(message: dict) -> datetime:
    """
    Email timestamp: Date header, else internalDate (epoch ms), else now.

    Always timezone-aware.
    """
    headers = (message.get("payload") or {}).get("headers") or []
    for header in headers:
        if (header.get("name") or "").lower() == "date" and header.get("value"):
            try:
                parsed = parsedate_to_datetime(header["value"])
            except (TypeError, ValueError) as exc:
                logger.debug("Unparseable Date header %r: %s", header["value"], exc)
                break
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed

    internal = message.get("internalDate")
    if internal:
        try:
            return datetime.fromtimestamp(int(internal) / 1000, tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as exc:
            logger.debug("Unparseable internalDate %r: %s", internal, exc)

    return datetime.now(timezone.utc)
