"""
Extraction runner for saved summary emails.

Reads:
  - one or more .eml files (or directories containing them)

Produces:
  - a JSON list of persistence payloads (stdout or --output)

Usage:
    python run_extraction.py samples/ --output extracted.json
"""
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import List, Optional

from workout_email.config.constants import PARSER_VERSION
from workout_email.config.settings import LOG_LEVEL
from workout_email.models.mail_message import MailMessage
from workout_email.models.raw_payload import RawPayload
from workout_email.sync.batch_sync import sync_messages

# ---------------------------------------------------------------------------
# Setup logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("run_extraction")


def collect_eml_files(paths: List[str]) -> List[Path]:
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(path.glob("*.eml")))
        elif path.is_file():
            files.append(path)
        else:
            logger.warning("Skipping missing path: %s", path)
    return files


def html_payload(message: EmailMessage, data: bytes) -> RawPayload:
    """
    The text/html body of a parsed email, transfer-decoded.

    Falls back to the whole file as an identity payload when the email has
    no HTML part (e.g. a bare saved HTML page).
    """
    part = message.get_body(preferencelist=("html",))
    if part is None:
        logger.debug("No text/html part, passing the raw file through")
        return RawPayload(data=data)

    body = part.get_payload(decode=True) or b""
    charset = part.get_content_charset() or "utf-8"
    try:
        html = body.decode(charset, errors="replace")
    except LookupError:
        logger.debug("Unknown charset %r, reading as utf-8", charset)
        html = body.decode("utf-8", errors="replace")
    return RawPayload(data=html, mime_type=part.get_content_type())


def load_message(path: Path) -> MailMessage:
    """Read an .eml file; headers give the message id and date."""
    data = path.read_bytes()
    message = BytesParser(policy=policy.default).parsebytes(data)

    message_id = str(message.get("Message-ID") or path.stem).strip()
    try:
        email_date = parsedate_to_datetime(message.get("Date"))
    except (TypeError, ValueError):
        email_date = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)

    return MailMessage(
        message_id=message_id,
        email_date=email_date,
        payload=html_payload(message, data),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract workout metrics from summary emails.")
    parser.add_argument("paths", nargs="+", help=".eml files or directories")
    parser.add_argument("--output", "-o", help="Write JSON here instead of stdout")
    args = parser.parse_args(argv)

    logger.info("Parser version   : %s", PARSER_VERSION)
    files = collect_eml_files(args.paths)
    logger.info("Email files      : %d", len(files))

    messages = [load_message(path) for path in files]
    result = sync_messages(messages)

    logger.info("Extracted        : %d", result.processed)
    logger.info("Failed           : %d", result.failed)
    for error in result.errors:
        logger.warning("  %s", error)

    output = json.dumps(result.payloads, ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        logger.info("Output saved to  : %s", args.output)
    else:
        print(output)

    return 0 if result.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
