"""
Persistence payload — WorkoutRecord plus caller-supplied keys.

The engine does no deduplication or timestamping; the caller passes the
message id and email date, and the payload is checked against
WORKOUT_PAYLOAD_SCHEMA before it leaves this layer.
"""
import logging
from datetime import datetime

from jsonschema import validate

from workout_email.config.schemas import WORKOUT_PAYLOAD_SCHEMA
from workout_email.models.workout_record import WorkoutRecord

logger = logging.getLogger(__name__)


def build_persistence_payload(
    record: WorkoutRecord,
    message_id: str,
    email_date: datetime,
) -> dict:
    """
    Build the flat camelCase dict stored by the persistence collaborator.

    Args:
        record: Extracted workout record.
        message_id: External message identifier.
        email_date: Email timestamp.

    Returns:
        Payload conforming to WORKOUT_PAYLOAD_SCHEMA.

    Raises:
        jsonschema.ValidationError: If the payload does not conform.
    """
    payload = {
        "messageId": message_id,
        "emailDate": email_date.isoformat(),
        **record.to_dict(),
    }
    validate(instance=payload, schema=WORKOUT_PAYLOAD_SCHEMA)
    return payload
