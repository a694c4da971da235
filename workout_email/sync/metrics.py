"""
Prometheus Metrics — extraction observability.

Exposes counters and histograms for:
- Emails extracted successfully
- Emails that failed extraction, by error type
- Number of populated fields per record
- Extraction latency

Usage
-----
    from workout_email.sync.metrics import record_extraction, timed_extraction

    with timed_extraction():
        record = extract_workout(payload)
    record_extraction(len(record.populated_fields()))
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# Emails turned into a record.
EXTRACTIONS: Counter = Counter(
    "workout_extraction_total",
    "Emails successfully turned into a workout record",
)

# Emails isolated from a batch because extraction failed.
EXTRACTION_FAILURES: Counter = Counter(
    "workout_extraction_failures_total",
    "Emails whose extraction failed, by error type",
    ["error_type"],
)

# How complete the records are.
POPULATED_FIELDS: Histogram = Histogram(
    "workout_record_populated_fields",
    "Number of populated fields per extracted record",
    buckets=(0, 5, 10, 15, 20, 25, 30, 35),
)

# Extraction latency (seconds).
EXTRACTION_LATENCY: Histogram = Histogram(
    "workout_extraction_seconds",
    "Time spent extracting one email in seconds",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_extraction(populated_fields: int) -> None:
    """Count one successful extraction and how many fields it produced."""
    EXTRACTIONS.inc()
    POPULATED_FIELDS.observe(populated_fields)


def record_failure(error_type: str = "generic") -> None:
    """Increment the failure counter for *error_type*."""
    EXTRACTION_FAILURES.labels(error_type=error_type).inc()


@contextmanager
def timed_extraction() -> Generator[None, None, None]:
    """
    Context manager that records extraction latency.

    Usage::

        with timed_extraction():
            record = extract_workout(payload)
    """
    with EXTRACTION_LATENCY.time():
        yield
