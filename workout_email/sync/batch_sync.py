"""
Batch Sync — runs the extraction engine over many emails.

One email's failure never aborts the batch: it is logged, counted in the
Prometheus failure counter and in the BatchResult, and the loop moves on.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from jsonschema import ValidationError

from workout_email.decoding.decoder import WorkoutExtractionError
from workout_email.decoding.gmail_parts import message_date, select_html_payload
from workout_email.extraction.pipeline import extract_workout
from workout_email.models.mail_message import MailMessage
from workout_email.sync.metrics import record_extraction, record_failure, timed_extraction
from workout_email.sync.output_builder import build_persistence_payload

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of one batch sync run."""

    payloads: List[dict] = field(default_factory=list)
    processed: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    def fail(self, message_id: str, error_type: str, reason: str) -> None:
        self.failed += 1
        self.errors.append(f"{message_id}: {reason}")
        record_failure(error_type)


def from_gmail_messages(messages: Iterable[dict], result: BatchResult) -> List[MailMessage]:
    """
    Adapt Gmail API message resources to MailMessage.

    Messages without an HTML body are counted as failures on *result*.
    """
    mail: List[MailMessage] = []
    for message in messages:
        message_id = message.get("id") or "?"
        payload = select_html_payload(message)
        if payload is None:
            logger.warning("Message %s has no HTML body, skipping", message_id)
            result.fail(message_id, "no_html_part", "no text/html part")
            continue
        mail.append(
            MailMessage(
                message_id=message_id,
                email_date=message_date(message),
                payload=payload,
            )
        )
    return mail


def sync_messages(
    messages: Iterable[MailMessage],
    result: Optional[BatchResult] = None,
) -> BatchResult:
    """
    Extract every message, isolating per-item failures.

    Args:
        messages: Emails to process.
        result: Existing result to accumulate into (e.g. after
                from_gmail_messages counted its skips).

    Returns:
        BatchResult with one persistence payload per successful email.
    """
    if result is None:
        result = BatchResult()

    for message in messages:
        try:
            with timed_extraction():
                record = extract_workout(message.payload)
            payload = build_persistence_payload(record, message.message_id, message.email_date)
        except WorkoutExtractionError as exc:
            logger.error("Extraction failed for %s: %s", message.message_id, exc)
            result.fail(message.message_id, "decode", str(exc))
            continue
        except ValidationError as exc:
            logger.error("Payload for %s rejected by schema: %s", message.message_id, exc.message)
            result.fail(message.message_id, "schema_mismatch", exc.message)
            continue
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error extracting %s", message.message_id)
            result.fail(message.message_id, "generic", str(exc))
            continue

        record_extraction(len(record.populated_fields()))
        result.payloads.append(payload)
        result.processed += 1

    logger.info(
        "Batch sync completed: processed=%d failed=%d", result.processed, result.failed
    )
    return result


def sync_gmail_messages(messages: Iterable[dict]) -> BatchResult:
    """Gmail API message resources → BatchResult."""
    result = BatchResult()
    return sync_messages(from_gmail_messages(messages, result), result)
