"""
Payload Decoder — raw email payload to a single normalized HTML string.

Steps:
    1. Body to text (base64 transfer decoding when declared)
    2. Quoted-printable decoding (soft line breaks first, then =XX)
    3. HTML root location (doctype, else first blank line, else everything)
    4. Trailing MIME boundary trimming

Every anomaly falls back to a best-effort string. Only a payload that is
not text or bytes at all raises.
"""
import base64
import binascii
import logging
import re
from typing import Union

from workout_email.models.raw_payload import (
    TRANSFER_BASE64,
    TRANSFER_IDENTITY,
    TRANSFER_QUOTED_PRINTABLE,
    RawPayload,
)

logger = logging.getLogger(__name__)

KNOWN_ENCODINGS = {TRANSFER_IDENTITY, TRANSFER_QUOTED_PRINTABLE, TRANSFER_BASE64}

QP_HEADER_RE = re.compile(r"content-transfer-encoding:\s*quoted-printable", re.IGNORECASE)
SOFT_BREAK_RE = re.compile(rb"=\r?\n")
QP_HEX_RE = re.compile(rb"=([0-9A-Fa-f]{2})")
DOCTYPE_RE = re.compile(r"<!doctype", re.IGNORECASE)
TRAILING_BOUNDARY_RE = re.compile(r"\r?\n--[A-Za-z0-9'()+_,./:=?-]+?(?:--)?\s*\Z")


class WorkoutExtractionError(Exception):
    """Base class for failures surfaced to the caller of the engine."""


class PayloadDecodeError(WorkoutExtractionError):
    """Raised when a payload cannot be turned into any string."""


# ======================================================================
# Helpers
# ======================================================================

def _to_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, bytes):
        return data
    return data.encode("utf-8", errors="surrogateescape")


def _to_text(data: Union[bytes, str]) -> str:
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def _decode_base64(data: Union[bytes, str]) -> Union[bytes, str]:
    """Standard or URL-safe alphabet, missing padding tolerated."""
    compact = re.sub(rb"\s+", b"", _to_bytes(data))
    compact += b"=" * (-len(compact) % 4)
    altchars = b"-_" if (b"-" in compact or b"_" in compact) else None
    try:
        return base64.b64decode(compact, altchars=altchars, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.debug("Base64 body not decodable (%s), using raw text", exc)
        return data


def decode_quoted_printable(text: Union[bytes, str]) -> str:
    """
    Decode quoted-printable content.

    Soft line breaks (``=`` at end of line) are removed before ``=XX``
    sequences are decoded, otherwise ``=\\n`` would be miscounted.
    The resulting bytes are read as UTF-8.
    """
    raw = _to_bytes(text)
    raw = SOFT_BREAK_RE.sub(b"", raw)
    raw = QP_HEX_RE.sub(lambda m: bytes([int(m.group(1), 16)]), raw)
    return raw.decode("utf-8", errors="replace")


def locate_html_root(content: str) -> str:
    """Drop MIME headers in front of the document."""
    match = DOCTYPE_RE.search(content)
    if match:
        return content[match.start():]

    for separator in ("\r\n\r\n", "\n\n"):
        index = content.find(separator)
        if index != -1:
            return content[index + len(separator):]

    return content


def strip_trailing_boundary(content: str) -> str:
    """Remove a MIME boundary line anchored at the very end of the content."""
    match = TRAILING_BOUNDARY_RE.search(content)
    if match:
        return content[: match.start()]
    return content


# ======================================================================
# Entry point
# ======================================================================

def decode(raw: RawPayload) -> str:
    """
    Turn a RawPayload into normalized HTML.

    Args:
        raw: Payload as handed over by the mail-fetch collaborator.

    Returns:
        HTML string starting at (or before) the document root. Empty
        payloads yield an empty string.

    Raises:
        PayloadDecodeError: If the payload body is neither bytes nor str.
    """
    data = raw.data
    if not isinstance(data, (bytes, str)):
        raise PayloadDecodeError(
            f"Unreadable payload body of type {type(data).__name__}"
        )
    if not data:
        return ""

    encoding = raw.encoding
    if encoding not in KNOWN_ENCODINGS:
        logger.debug("Unrecognized transfer encoding '%s', treating as identity", encoding)

    if encoding == TRANSFER_BASE64:
        data = _decode_base64(data)

    text = _to_text(data)
    if encoding == TRANSFER_QUOTED_PRINTABLE or QP_HEADER_RE.search(text):
        text = decode_quoted_printable(data)

    html = locate_html_root(text)
    return strip_trailing_boundary(html)
