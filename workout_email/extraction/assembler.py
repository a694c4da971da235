"""
Record Assembler — ordered, first-match-wins fold into a WorkoutRecord.

Each field owns an explicit ordered list of strategies. A strategy is
tried only when its predicate holds; the first non-None value is offered
to the RecordBuilder, which refuses to overwrite an already-set field.
Marker/regex strategies come before the table-label fallbacks, so the
fallback only fills what the primary path left unset.
"""
import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Dict, List, Optional

from workout_email.config.constants import (
    LABEL_AVG_HEART_RATE,
    LABEL_CALORIES,
    LABEL_SPLAT_POINTS,
    LABEL_STEPS,
    SECTION_ROWER,
    SECTION_TREADMILL,
    ZONE_ORDER,
)
from workout_email.config.settings import ANCESTOR_WALK_DEPTH
from workout_email.document.tree import DocumentTree
from workout_email.extraction import field_extractors as fx
from workout_email.models.section_scopes import SectionScopes
from workout_email.models.workout_record import (
    ZONE_FIELDS,
    RecordBuilder,
    WorkoutRecord,
)

logger = logging.getLogger(__name__)


class ExtractionContext:
    """Tree + located scopes for one run; section lookups computed once."""

    def __init__(
        self,
        tree: DocumentTree,
        scopes: SectionScopes,
        ancestor_depth: int = ANCESTOR_WALK_DEPTH,
    ):
        self.tree = tree
        self.scopes = scopes
        self.ancestor_depth = ancestor_depth

    @cached_property
    def treadmill_stats(self) -> Dict[str, Any]:
        return fx.treadmill_stats(self.tree, self.scopes.treadmill)

    @cached_property
    def rower_stats(self) -> Dict[str, Any]:
        return fx.rower_stats(self.tree, self.scopes.rower)

    @cached_property
    def zones(self) -> Dict[str, int]:
        return fx.zone_minutes(self.scopes.zone_values)


def _always(_ctx: ExtractionContext) -> bool:
    return True


def _has_header(ctx: ExtractionContext) -> bool:
    return ctx.scopes.header is not None


def _has_treadmill(ctx: ExtractionContext) -> bool:
    return ctx.scopes.treadmill is not None


def _has_rower(ctx: ExtractionContext) -> bool:
    return ctx.scopes.rower is not None


@dataclass(frozen=True)
class Strategy:
    """One way of obtaining a field value."""

    name: str
    extract: Callable[[ExtractionContext], Any]
    applies: Callable[[ExtractionContext], bool] = _always


def _card(label: str) -> List[Strategy]:
    return [Strategy("metric_card", lambda ctx: fx.metric_card(ctx.tree, label))]


def _treadmill_stat(field_name: str) -> List[Strategy]:
    return [
        Strategy(
            "treadmill_stats_regex",
            lambda ctx: ctx.treadmill_stats.get(field_name),
            _has_treadmill,
        )
    ]


def _rower_stat(field_name: str) -> List[Strategy]:
    return [
        Strategy("rower_stats_regex", lambda ctx: ctx.rower_stats.get(field_name), _has_rower)
    ]


def _zone(zone: str) -> List[Strategy]:
    return [Strategy("zone_bar_sequence", lambda ctx: ctx.zones.get(zone))]


# ======================================================================
# Field → ordered strategies
# ======================================================================
FIELD_STRATEGIES: Dict[str, List[Strategy]] = {
    # --- Class metadata ---
    "class_time": [
        Strategy("header_time", lambda ctx: fx.class_time(ctx.tree, ctx.scopes.header), _has_header),
    ],
    "studio_location": [
        Strategy("studio_name_class", lambda ctx: fx.studio_from_name_class(ctx.tree)),
        Strategy(
            "header_city_state",
            lambda ctx: fx.studio_from_header_text(ctx.tree, ctx.scopes.header),
            _has_header,
        ),
    ],
    "class_instructor": [
        Strategy(
            "header_instructor",
            lambda ctx: fx.class_instructor(ctx.tree, ctx.scopes.header),
            _has_header,
        ),
    ],
    # --- Aggregate metrics ---
    "calories_burned": _card(LABEL_CALORIES),
    "splat_points": _card(LABEL_SPLAT_POINTS),
    "avg_heart_rate": _card(LABEL_AVG_HEART_RATE),
    "peak_heart_rate": [Strategy("peak_hr_marker", lambda ctx: fx.peak_heart_rate(ctx.tree))],
    "steps": _card(LABEL_STEPS),
    # --- Treadmill ---
    "treadmill_distance": [
        Strategy(
            "treadmill_span_pair",
            lambda ctx: fx.treadmill_distance(ctx.tree, ctx.scopes.treadmill),
            _has_treadmill,
        ),
        Strategy(
            "total_distance_label",
            lambda ctx: fx.section_total_distance(ctx.tree, SECTION_TREADMILL, ctx.ancestor_depth),
        ),
    ],
    "treadmill_time": [
        Strategy(
            "total_time_label",
            lambda ctx: fx.section_total_time(ctx.tree, SECTION_TREADMILL, ctx.ancestor_depth),
        ),
    ],
    "treadmill_avg_speed": _treadmill_stat("treadmill_avg_speed"),
    "treadmill_max_speed": _treadmill_stat("treadmill_max_speed"),
    "treadmill_avg_incline": _treadmill_stat("treadmill_avg_incline"),
    "treadmill_max_incline": _treadmill_stat("treadmill_max_incline"),
    "treadmill_avg_pace": _treadmill_stat("treadmill_avg_pace"),
    "treadmill_fastest_pace": _treadmill_stat("treadmill_fastest_pace"),
    "treadmill_elevation": _treadmill_stat("treadmill_elevation"),
    # --- Rower ---
    "rowing_distance": [
        Strategy(
            "rower_span_pair",
            lambda ctx: fx.rower_distance(ctx.tree, ctx.scopes.rower),
            _has_rower,
        ),
        Strategy(
            "total_distance_label",
            lambda ctx: fx.section_total_distance(ctx.tree, SECTION_ROWER, ctx.ancestor_depth),
        ),
    ],
    "rowing_time": [
        Strategy(
            "total_time_label",
            lambda ctx: fx.section_total_time(ctx.tree, SECTION_ROWER, ctx.ancestor_depth),
        ),
    ],
    "rowing_avg_wattage": _rower_stat("rowing_avg_wattage"),
    "rowing_max_wattage": _rower_stat("rowing_max_wattage"),
    "rowing_avg_speed": _rower_stat("rowing_avg_speed"),
    "rowing_max_speed": _rower_stat("rowing_max_speed"),
    "rowing_500m_split": _rower_stat("rowing_500m_split"),
    "rowing_max_500m_split": _rower_stat("rowing_max_500m_split"),
    "rowing_avg_stroke_rate": _rower_stat("rowing_avg_stroke_rate"),
    # --- Zone minutes ---
    **{f"minutes_in_{zone}_zone": _zone(zone) for zone in ZONE_ORDER},
}


def first_value(strategies: List[Strategy], ctx: ExtractionContext) -> tuple:
    """(value, strategy name) of the first applicable strategy yielding a value."""
    for strategy in strategies:
        if not strategy.applies(ctx):
            continue
        value = strategy.extract(ctx)
        if value is not None:
            return value, strategy.name
    return None, None


def derive_active_minutes(builder: RecordBuilder) -> Optional[int]:
    """Sum of the five zones, only when every one of them is set."""
    values = [builder.get(name) for name in ZONE_FIELDS]
    if any(v is None for v in values):
        return None
    return sum(values)


def assemble_record(
    tree: DocumentTree,
    scopes: SectionScopes,
    strategies: Optional[Dict[str, List[Strategy]]] = None,
    ancestor_depth: int = ANCESTOR_WALK_DEPTH,
) -> WorkoutRecord:
    """
    Apply every field's strategies and freeze the result.

    Args:
        tree: Parsed document.
        scopes: Output of locate_sections().
        strategies: Field → ordered strategies. Defaults to FIELD_STRATEGIES.
        ancestor_depth: Bound for treadmill/rower disambiguation walks.

    Returns:
        WorkoutRecord with every field that could be extracted.
    """
    if strategies is None:
        strategies = FIELD_STRATEGIES

    ctx = ExtractionContext(tree, scopes, ancestor_depth)
    builder = RecordBuilder()

    for field_name, field_strategies in strategies.items():
        value, source = first_value(field_strategies, ctx)
        if builder.offer(field_name, value, source or ""):
            logger.debug("%s = %r (%s)", field_name, value, source)

    builder.offer("active_minutes", derive_active_minutes(builder), "zone_sum")
    return builder.build()
