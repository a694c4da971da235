"""
Field Extractors — directional lookups inside a located scope.

Lookup families:
    - value-above-label: value row precedes its label row (metric cards)
    - labelled totals: "Total Time" / "Total Distance" with section by ancestor walk
    - embedded marker: "Peak HR: 186"
    - ordered class sequence: zone bars
    - span pair: "2.08</span><span>miles" inside a section's HTML
    - label-anchored regex with "Max" lookahead inside a stats table

All functions are pure and return None (or an empty result) on a miss.
"""
import logging
import re
from typing import Callable, Dict, List, Optional, Pattern

from workout_email.config.constants import (
    HEADER_MARKER,
    HEADER_TEXT_SELECTOR,
    LABEL_SELECTOR,
    LABEL_TOTAL_DISTANCE,
    LABEL_TOTAL_TIME,
    ROWER_STATS_SIGNATURE,
    STATS_TABLE_SELECTOR,
    STUDIO_NAME_CLASS,
    TREADMILL_STATS_SIGNATURE,
    VALUE_SELECTOR,
    VALUE_SPAN_SELECTOR,
    ZONE_ORDER,
)
from workout_email.config.settings import ANCESTOR_WALK_DEPTH
from workout_email.document.tree import DocumentTree, Node
from workout_email.extraction.locator import section_for
from workout_email.extraction.values import (
    clean_text,
    duration_to_seconds,
    parse_float,
    parse_int,
)

logger = logging.getLogger(__name__)

PEAK_HR_RE = re.compile(r"Peak HR:\s*(?:&nbsp;)?\s*(\d+)")
CLASS_TIME_RE = re.compile(r"^(\d{1,2}:\d{2}(?::\d{2})?\s*[AP]M)$", re.IGNORECASE)
DATE_RE = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$")
INSTRUCTOR_RE = re.compile(r"^[A-Za-z\s]+$")

# "<span>2.08</span> <span>&nbsp;miles</span>"
TREADMILL_DISTANCE_RE = re.compile(
    r">\s*(\d+\.?\d*)\s*</span>\s*<span[^>]*>(?:&nbsp;|\s)*miles", re.IGNORECASE
)
# "<span>4038</span><span> m </span>", a standalone "m" (not "min" or "miles")
ROWER_DISTANCE_RE = re.compile(
    r">\s*(\d+\.?\d*)\s*</span>\s*<span[^>]*>(?:&nbsp;|\s)*m[\s<]", re.IGNORECASE
)

TREADMILL_PATTERNS: Dict[str, Pattern] = {
    "treadmill_avg_speed": re.compile(r"AVG\.\s*SPEED[\s\S]*?(\d+\.?\d*)\s*mph"),
    "treadmill_max_speed": re.compile(r"AVG\.\s*SPEED[\s\S]*?mph[\s\S]*?Max[:\s]*(\d+\.?\d*)", re.IGNORECASE),
    "treadmill_avg_incline": re.compile(r"AVG\.\s*INCLINE[\s\S]*?(\d+\.?\d*)\s*%"),
    "treadmill_max_incline": re.compile(r"AVG\.\s*INCLINE[\s\S]*?%[\s\S]*?Max[:\s]*(\d+\.?\d*)", re.IGNORECASE),
    "treadmill_avg_pace": re.compile(r"AVG\.\s*PACE[\s\S]*?(\d{1,2}:\d{2})"),
    "treadmill_fastest_pace": re.compile(r"Fastest[:\s]*(\d{1,2}:\d{2})"),
    "treadmill_elevation": re.compile(r"ELEVATION[\s\S]*?(\d+\.?\d*)\s*feet"),
}

ROWER_PATTERNS: Dict[str, Pattern] = {
    "rowing_avg_wattage": re.compile(r"AVG\.\s*WATTAGE[\s\S]*?(\d+)\s*watt"),
    "rowing_max_wattage": re.compile(r"AVG\.\s*WATTAGE[\s\S]*?watt[\s\S]*?Max[:\s]*(\d+)", re.IGNORECASE),
    "rowing_avg_speed": re.compile(r"AVG\.\s*SPEED[\s\S]*?(\d+\.?\d*)\s*km/h"),
    "rowing_max_speed": re.compile(r"AVG\.\s*SPEED[\s\S]*?km/h[\s\S]*?Max[:\s]*(\d+\.?\d*)", re.IGNORECASE),
    "rowing_500m_split": re.compile(r"500M\s*SPLIT[\s\S]*?(\d{1,2}:\d{2})\s*min"),
    "rowing_max_500m_split": re.compile(r"500M\s*SPLIT[\s\S]*?Max[:\s]*(\d{1,2}:\d{2})"),
    "rowing_avg_stroke_rate": re.compile(r"AVG\.\s*STROKE\s*RATE[\s\S]*?(\d+\.?\d*)"),
}

STAT_CONVERTERS: Dict[str, Callable[[Optional[str]], object]] = {
    "treadmill_avg_pace": duration_to_seconds,
    "treadmill_fastest_pace": duration_to_seconds,
    "rowing_avg_wattage": parse_int,
    "rowing_max_wattage": parse_int,
    "rowing_500m_split": duration_to_seconds,
    "rowing_max_500m_split": duration_to_seconds,
}


# ======================================================================
# Header metadata
# ======================================================================

def _header_texts(tree: DocumentTree, scope: Optional[Node]) -> List[tuple]:
    """(text, is_studio_name) for every white header paragraph in scope."""
    if scope is None:
        return []
    items = []
    for el in tree.select(HEADER_TEXT_SELECTOR, scope):
        text = clean_text(tree.text_of(el))
        items.append((text, STUDIO_NAME_CLASS in tree.classes_of(el)))
    return items


def studio_from_name_class(tree: DocumentTree) -> Optional[str]:
    for el in tree.by_class_substring("p", STUDIO_NAME_CLASS):
        text = clean_text(tree.text_of(el))
        if text:
            return text
    return None


def studio_from_header_text(tree: DocumentTree, scope: Optional[Node]) -> Optional[str]:
    """A "City, ST" paragraph in the header block."""
    for text, _ in _header_texts(tree, scope):
        if text and HEADER_MARKER not in text and "," in text:
            return text
    return None


def class_time(tree: DocumentTree, scope: Optional[Node]) -> Optional[str]:
    for text, is_studio in _header_texts(tree, scope):
        if is_studio:
            continue
        match = CLASS_TIME_RE.match(text)
        if match:
            return match.group(1).strip()
    return None


def _looks_like_instructor(text: str) -> bool:
    return (
        len(text) >= 2
        and ":" not in text
        and "," not in text
        and "STUDIO" not in text
        and not text[0].isdigit()
        and not DATE_RE.match(text)
        and INSTRUCTOR_RE.match(text) is not None
    )


def class_instructor(tree: DocumentTree, scope: Optional[Node]) -> Optional[str]:
    for text, is_studio in _header_texts(tree, scope):
        if not is_studio and _looks_like_instructor(text):
            return text
    return None


# ======================================================================
# Aggregate metric cards
# ======================================================================

def labels_named(tree: DocumentTree, label: str, scope: Optional[Node] = None) -> List[Node]:
    """Label paragraphs whose trimmed text is exactly *label*."""
    return [
        el for el in tree.select(LABEL_SELECTOR, scope) if clean_text(tree.text_of(el)) == label
    ]


def value_above_label(tree: DocumentTree, label_el: Node) -> Optional[str]:
    """Text of the value element in the row immediately above the label's row."""
    value_el = tree.first_descendant(tree.previous_sibling_row(label_el), VALUE_SELECTOR)
    if value_el is None:
        return None
    return clean_text(tree.text_of(value_el))


def metric_card(tree: DocumentTree, label: str) -> Optional[int]:
    """First label instance yielding an integer value wins."""
    for label_el in labels_named(tree, label):
        value = parse_int(value_above_label(tree, label_el))
        if value is not None:
            return value
    return None


def peak_heart_rate(tree: DocumentTree) -> Optional[int]:
    match = PEAK_HR_RE.search(tree.text)
    if not match:
        return None
    return parse_int(match.group(1))


# ======================================================================
# Zone minutes
# ======================================================================

def zone_minutes(values: tuple) -> Dict[str, int]:
    """
    Positional zone assignment: gray, blue, green, orange, red.

    The order is a property of the email layout, not derived from labels.
    Fewer than five bars means the layout is not the one we know, so
    nothing is assigned.
    """
    if len(values) < len(ZONE_ORDER):
        return {}
    return {zone: values[i] for i, zone in enumerate(ZONE_ORDER)}


# ======================================================================
# Labelled totals (section resolved by ancestor walk)
# ======================================================================

def _labelled_value_text(tree: DocumentTree, label_el: Node, span_first: bool) -> Optional[str]:
    """
    Value next to a totals label, trying in order:
    the value-classed sibling above it, the value span in its cell,
    the value row above it.
    """
    lookups = [
        lambda: tree.previous_sibling_matching(label_el, VALUE_SELECTOR),
        lambda: tree.first_descendant(tree.closest(label_el, "td"), VALUE_SPAN_SELECTOR),
        lambda: tree.first_descendant(tree.previous_sibling_row(label_el), VALUE_SELECTOR),
    ]
    if span_first:
        lookups[0], lookups[1] = lookups[1], lookups[0]
    for lookup in lookups:
        el = lookup()
        if el is not None:
            return clean_text(tree.text_of(el))
    return None


def section_total_time(
    tree: DocumentTree, section: str, depth: int = ANCESTOR_WALK_DEPTH
) -> Optional[int]:
    for label_el in labels_named(tree, LABEL_TOTAL_TIME):
        seconds = duration_to_seconds(_labelled_value_text(tree, label_el, span_first=False))
        if seconds is None:
            continue
        if section_for(tree, label_el, depth) == section:
            return seconds
    return None


def section_total_distance(
    tree: DocumentTree, section: str, depth: int = ANCESTOR_WALK_DEPTH
) -> Optional[float]:
    for label_el in labels_named(tree, LABEL_TOTAL_DISTANCE):
        distance = parse_float(_labelled_value_text(tree, label_el, span_first=True))
        if distance is None:
            continue
        if section_for(tree, label_el, depth) == section:
            return distance
    return None


# ======================================================================
# Section-scoped regex lookups
# ======================================================================

def span_pair_distance(tree: DocumentTree, scope: Optional[Node], pattern: Pattern) -> Optional[float]:
    """Number in a span immediately followed by a unit-bearing span."""
    if scope is None:
        return None
    match = pattern.search(tree.html_of(scope))
    if not match:
        return None
    return parse_float(match.group(1))


def treadmill_distance(tree: DocumentTree, scope: Optional[Node]) -> Optional[float]:
    return span_pair_distance(tree, scope, TREADMILL_DISTANCE_RE)


def rower_distance(tree: DocumentTree, scope: Optional[Node]) -> Optional[float]:
    return span_pair_distance(tree, scope, ROWER_DISTANCE_RE)


def stats_texts(tree: DocumentTree, scope: Optional[Node], signature: List[str]) -> List[str]:
    """
    Rendered text of the stats tables inside a section.

    Inner tables carrying every signature token come first; the scope
    itself is used when it carries the signature but has no such table.
    """
    if scope is None:
        return []

    def _signed(text: str) -> bool:
        return all(token in text for token in signature)

    texts = [
        clean_text(tree.text_of(table))
        for table in tree.select(STATS_TABLE_SELECTOR, scope)
        if _signed(tree.text_of(table))
    ]
    if not texts:
        scope_text = clean_text(tree.text_of(scope))
        if _signed(scope_text):
            texts.append(scope_text)
    return texts


def section_stats(texts: List[str], patterns: Dict[str, Pattern]) -> Dict[str, object]:
    """First converted match per field across the section's stats texts."""
    found: Dict[str, object] = {}
    for text in texts:
        for field_name, pattern in patterns.items():
            if field_name in found:
                continue
            match = pattern.search(text)
            if not match:
                continue
            convert = STAT_CONVERTERS.get(field_name, parse_float)
            value = convert(match.group(1))
            if value is not None:
                found[field_name] = value
    return found


def treadmill_stats(tree: DocumentTree, scope: Optional[Node]) -> Dict[str, object]:
    return section_stats(stats_texts(tree, scope, TREADMILL_STATS_SIGNATURE), TREADMILL_PATTERNS)


def rower_stats(tree: DocumentTree, scope: Optional[Node]) -> Dict[str, object]:
    return section_stats(stats_texts(tree, scope, ROWER_STATS_SIGNATURE), ROWER_PATTERNS)
