"""
Value parsers — text fragments to typed numbers and durations.

Every parser returns None on malformed input. A field that fails to parse
stays unset; it is never defaulted to 0.
"""
import re
from typing import Optional

from workout_email.config.constants import NBSP_ARTIFACTS, ZWNJ_ARTIFACTS

DURATION_RE = re.compile(r"^(\d+):(\d{2})$")
INT_RE = re.compile(r"^\s*(\d+)")
FLOAT_RE = re.compile(r"^\s*(\d+\.?\d*|\.\d+)")


def clean_text(text: Optional[str]) -> str:
    """Remove zero-width-joiner and non-breaking-space remnants, trim."""
    if not text:
        return ""
    for artifact in ZWNJ_ARTIFACTS:
        text = text.replace(artifact, "")
    for artifact in NBSP_ARTIFACTS:
        text = text.replace(artifact, " ")
    return text.strip()


def duration_to_seconds(text: Optional[str]) -> Optional[int]:
    """
    Convert ``MM:SS`` (or ``M:SS``) to total seconds.

    >>> duration_to_seconds("16:48")
    1008
    >>> duration_to_seconds("16:8") is None
    True
    """
    match = DURATION_RE.match(clean_text(text))
    if not match:
        return None
    minutes, seconds = int(match.group(1)), int(match.group(2))
    return minutes * 60 + seconds


def parse_int(text: Optional[str]) -> Optional[int]:
    """Leading integer, thousands-separator commas stripped ("4,080" -> 4080)."""
    match = INT_RE.match(clean_text(text).replace(",", ""))
    if not match:
        return None
    return int(match.group(1))


def parse_float(text: Optional[str]) -> Optional[float]:
    """Leading decimal literal ("2.08 miles" -> 2.08)."""
    match = FLOAT_RE.match(clean_text(text))
    if not match:
        return None
    return float(match.group(1))
