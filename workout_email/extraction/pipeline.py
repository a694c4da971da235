"""
Extraction Pipeline — main entry point of the engine.

Single forward pass, run once per email:
    1. Decode raw payload to normalized HTML
    2. Parse HTML into a DocumentTree
    3. Locate section scopes
    4. Assemble the WorkoutRecord (first-match-wins per field)

Stateless and re-entrant: every call owns its own tree.
"""
import logging
import time
from typing import Optional

from workout_email.config.settings import ANCESTOR_WALK_DEPTH, MAX_BODY_LOG_CHARS
from workout_email.decoding.decoder import decode
from workout_email.document.tree import parse_document
from workout_email.extraction.assembler import assemble_record
from workout_email.extraction.locator import locate_sections
from workout_email.models.raw_payload import RawPayload
from workout_email.models.workout_record import WorkoutRecord

logger = logging.getLogger(__name__)


def extract_workout_from_html(
    html: str,
    parser: Optional[str] = None,
    ancestor_depth: int = ANCESTOR_WALK_DEPTH,
) -> WorkoutRecord:
    """
    Run stages 2–4 on already-normalized HTML.

    Args:
        html: Normalized HTML string.
        parser: BeautifulSoup parser backend. Defaults to settings.HTML_PARSER.
        ancestor_depth: Bound for treadmill/rower disambiguation.

    Returns:
        Best-effort WorkoutRecord; missing data leaves fields unset.
    """
    start_time = time.monotonic()

    tree = parse_document(html, parser)
    scopes = locate_sections(tree)
    record = assemble_record(tree, scopes, ancestor_depth=ancestor_depth)

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    populated = record.populated_fields()
    logger.debug(
        "Extracted %d fields in %d ms (sections=%s)",
        len(populated), elapsed_ms, scopes.found(),
    )
    if not populated:
        logger.debug("No fields extracted from: %s", (html or "")[:MAX_BODY_LOG_CHARS])
    return record


def extract_workout(
    raw: RawPayload,
    parser: Optional[str] = None,
    ancestor_depth: int = ANCESTOR_WALK_DEPTH,
) -> WorkoutRecord:
    """
    Full pipeline: RawPayload → WorkoutRecord.

    Raises:
        PayloadDecodeError: Only when the payload cannot become a string.
    """
    html = decode(raw)
    return extract_workout_from_html(html, parser, ancestor_depth)
