"""
Constants used across the extraction engine.
Pinned to the studio summary email layout.
"""
from typing import Dict, List

PARSER_VERSION: str = "workout-email-parser-1.2.0"

# =============================================================================
# Section markers
# =============================================================================
HEADER_MARKER: str = "STUDIO WORKOUT SUMMARY"
TREADMILL_MARKER: str = "TREADMILL PERFORMANCE TOTALS"
ROWER_MARKER: str = "ROWER PERFORMANCE TOTALS"

SECTION_TREADMILL: str = "treadmill"
SECTION_ROWER: str = "rower"

SECTION_MARKERS: Dict[str, str] = {
    SECTION_TREADMILL: TREADMILL_MARKER,
    SECTION_ROWER: ROWER_MARKER,
}

# =============================================================================
# Selectors
# =============================================================================
LABEL_SELECTOR: str = "p.h2.text-gray"
VALUE_SELECTOR: str = "p.h1.text-gray.text-bold"
VALUE_SPAN_SELECTOR: str = "span.h1.text-gray.text-bold"
ZONE_BAR_SELECTOR: str = "p.bar-bumber"
HEADER_TEXT_SELECTOR: str = "p.text-white"
STATS_TABLE_SELECTOR: str = "table.inner-table"
STUDIO_NAME_CLASS: str = "header-studio-name"

# =============================================================================
# Labels
# =============================================================================
LABEL_CALORIES: str = "CALORIES BURNED"
LABEL_SPLAT_POINTS: str = "SPLAT POINTS"
LABEL_AVG_HEART_RATE: str = "AVG. HEART-RATE"
LABEL_STEPS: str = "STEPS"
LABEL_TOTAL_TIME: str = "Total Time"
LABEL_TOTAL_DISTANCE: str = "Total Distance"

# Zone bars render in this order; the email carries no per-bar label we can check.
ZONE_ORDER: List[str] = ["gray", "blue", "green", "orange", "red"]

# Stats-table signatures (both tokens must appear in the table text)
TREADMILL_STATS_SIGNATURE: List[str] = ["mph", "AVG. SPEED"]
ROWER_STATS_SIGNATURE: List[str] = ["watt", "AVG. WATTAGE"]

# =============================================================================
# Text artifacts
# =============================================================================
ZWNJ_ARTIFACTS: List[str] = ["\u200c", "&zwnj;"]
NBSP_ARTIFACTS: List[str] = ["\xa0", "&nbsp;"]
