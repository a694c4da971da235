"""
Region Locator — finds the subtree scope of each semantic section.

Signature-then-scope: a section is found by its literal marker text, then
confined to the nearest table enclosing that marker. Treadmill and rower
blocks share labels ("Total Time", "AVG. SPEED"), so scoping is the only
thing keeping their fields apart.
"""
import logging
from typing import List, Optional

from workout_email.config.constants import (
    HEADER_MARKER,
    ROWER_MARKER,
    SECTION_MARKERS,
    TREADMILL_MARKER,
    ZONE_BAR_SELECTOR,
)
from workout_email.config.settings import ANCESTOR_WALK_DEPTH
from workout_email.document.tree import DocumentTree, Node
from workout_email.extraction.values import parse_int
from workout_email.models.section_scopes import SectionScopes

logger = logging.getLogger(__name__)


def locate_table_scope(tree: DocumentTree, marker: str) -> Optional[Node]:
    """Nearest table enclosing the first marker occurrence that sits in a table."""
    return tree.find_text(marker, tag="table")


def collect_zone_values(tree: DocumentTree) -> List[int]:
    """Integer values of every zone bar, in document order."""
    values: List[int] = []
    for el in tree.select(ZONE_BAR_SELECTOR):
        value = parse_int(tree.text_of(el))
        if value is not None:
            values.append(value)
    return values


def locate_sections(tree: DocumentTree) -> SectionScopes:
    """Produce zero-or-one scope per section kind."""
    scopes = SectionScopes(
        header=locate_table_scope(tree, HEADER_MARKER),
        treadmill=locate_table_scope(tree, TREADMILL_MARKER),
        rower=locate_table_scope(tree, ROWER_MARKER),
        zone_values=tuple(collect_zone_values(tree)),
    )
    logger.debug("Located sections: %s", scopes.found())
    return scopes


def section_for(
    tree: DocumentTree,
    node: Optional[Node],
    depth: int = ANCESTOR_WALK_DEPTH,
) -> Optional[str]:
    """
    Which performance section an element belongs to.

    Walks at most *depth* ancestors, nearest first, testing each one's
    rendered text for the section markers. The first marker seen wins;
    None when neither shows up within the bound.
    """
    for ancestor in tree.ancestors(node, depth):
        text = tree.text_of(ancestor)
        for section, marker in SECTION_MARKERS.items():
            if marker in text:
                return section
    return None
