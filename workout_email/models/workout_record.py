"""
Typed Pydantic model for the extracted workout record.

Every field is independently optional: partial extraction is the normal
outcome, not an error. Attributes are snake_case; the serialized form used
by the persistence collaborator is camelCase (classTime, rowing500mSplit, ...).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from workout_email.config.constants import ZONE_ORDER

logger = logging.getLogger(__name__)


def to_camel(name: str) -> str:
    """minutes_in_gray_zone -> minutesInGrayZone, rowing_500m_split -> rowing500mSplit."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class WorkoutRecord(BaseModel):
    """Immutable result of one extraction run."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # --- Class metadata ---
    class_time: Optional[str] = None
    studio_location: Optional[str] = None
    class_instructor: Optional[str] = None

    # --- Aggregate metrics ---
    calories_burned: Optional[int] = Field(None, ge=0)
    splat_points: Optional[int] = Field(None, ge=0)
    avg_heart_rate: Optional[int] = Field(None, ge=0)
    peak_heart_rate: Optional[int] = Field(None, ge=0)
    steps: Optional[int] = Field(None, ge=0)

    # --- Treadmill ---
    treadmill_distance: Optional[float] = Field(None, description="miles")
    treadmill_time: Optional[int] = Field(None, description="seconds")
    treadmill_avg_speed: Optional[float] = Field(None, description="mph")
    treadmill_max_speed: Optional[float] = Field(None, description="mph")
    treadmill_avg_incline: Optional[float] = Field(None, description="percent")
    treadmill_max_incline: Optional[float] = Field(None, description="percent")
    treadmill_avg_pace: Optional[int] = Field(None, description="seconds per mile")
    treadmill_fastest_pace: Optional[int] = Field(None, description="seconds per mile")
    treadmill_elevation: Optional[float] = Field(None, description="feet")

    # --- Rower ---
    rowing_distance: Optional[float] = Field(None, description="meters")
    rowing_time: Optional[int] = Field(None, description="seconds")
    rowing_avg_wattage: Optional[int] = Field(None, description="watts")
    rowing_max_wattage: Optional[int] = Field(None, description="watts")
    rowing_avg_speed: Optional[float] = Field(None, description="km/h")
    rowing_max_speed: Optional[float] = Field(None, description="km/h")
    rowing_500m_split: Optional[int] = Field(None, description="seconds")
    rowing_max_500m_split: Optional[int] = Field(None, description="seconds (fastest)")
    rowing_avg_stroke_rate: Optional[float] = Field(None, description="strokes per minute")

    # --- Zone minutes ---
    active_minutes: Optional[int] = None
    minutes_in_gray_zone: Optional[int] = None
    minutes_in_blue_zone: Optional[int] = None
    minutes_in_green_zone: Optional[int] = None
    minutes_in_orange_zone: Optional[int] = None
    minutes_in_red_zone: Optional[int] = None

    def populated_fields(self) -> List[str]:
        return [name for name, value in self if value is not None]

    def to_dict(self) -> dict:
        """camelCase dict, unset fields as None."""
        return self.model_dump(by_alias=True)


ZONE_FIELDS: List[str] = [f"minutes_in_{zone}_zone" for zone in ZONE_ORDER]
RECORD_FIELDS: List[str] = list(WorkoutRecord.model_fields)


class RecordBuilder:
    """
    Mutable accumulator for one extraction run.

    Its own values are the only "already set" state: offer() writes a field
    only while it is still None, so the first successful strategy wins.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def offer(self, field_name: str, value: Any, source: str = "") -> bool:
        if field_name not in WorkoutRecord.model_fields:
            raise KeyError(f"Unknown workout field: {field_name}")
        if value is None:
            return False
        if self._values.get(field_name) is not None:
            logger.debug(
                "Field %s already set, ignoring %r from %s", field_name, value, source or "?"
            )
            return False
        self._values[field_name] = value
        return True

    def get(self, field_name: str) -> Any:
        return self._values.get(field_name)

    def is_set(self, field_name: str) -> bool:
        return self._values.get(field_name) is not None

    def build(self) -> WorkoutRecord:
        return WorkoutRecord(**self._values)
