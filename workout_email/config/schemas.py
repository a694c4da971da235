"""
JSON Schema for the payload handed to the persistence collaborator.

One flat object: the camelCase workout record plus the external message
identifier and the email timestamp supplied by the caller.
"""
from typing import List

_NULLABLE_STRING = {"type": ["string", "null"]}
_NULLABLE_COUNT = {"type": ["integer", "null"], "minimum": 0}
_NULLABLE_NUMBER = {"type": ["number", "null"], "minimum": 0}

STRING_FIELDS: List[str] = ["classTime", "studioLocation", "classInstructor"]

INTEGER_FIELDS: List[str] = [
    "caloriesBurned",
    "splatPoints",
    "avgHeartRate",
    "peakHeartRate",
    "steps",
    "treadmillTime",
    "treadmillAvgPace",
    "treadmillFastestPace",
    "rowingTime",
    "rowingAvgWattage",
    "rowingMaxWattage",
    "rowing500mSplit",
    "rowingMax500mSplit",
    "activeMinutes",
    "minutesInGrayZone",
    "minutesInBlueZone",
    "minutesInGreenZone",
    "minutesInOrangeZone",
    "minutesInRedZone",
]

NUMBER_FIELDS: List[str] = [
    "treadmillDistance",
    "treadmillAvgSpeed",
    "treadmillMaxSpeed",
    "treadmillAvgIncline",
    "treadmillMaxIncline",
    "treadmillElevation",
    "rowingDistance",
    "rowingAvgSpeed",
    "rowingMaxSpeed",
    "rowingAvgStrokeRate",
]

# =============================================================================
# Persistence payload schema
# =============================================================================
WORKOUT_PAYLOAD_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["messageId", "emailDate"] + STRING_FIELDS + INTEGER_FIELDS + NUMBER_FIELDS,
    "properties": {
        "messageId": {
            "type": "string",
            "minLength": 1,
            "description": "External message identifier, used as the dedup key",
        },
        "emailDate": {
            "type": "string",
            "description": "ISO-8601 email timestamp",
        },
        **{name: _NULLABLE_STRING for name in STRING_FIELDS},
        **{name: _NULLABLE_COUNT for name in INTEGER_FIELDS},
        **{name: _NULLABLE_NUMBER for name in NUMBER_FIELDS},
    },
}
