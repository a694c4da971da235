"""
SectionScopes — search boundaries for each semantic section of the email.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from bs4 import Tag


@dataclass(frozen=True)
class SectionScopes:
    """
    Subtree roots located in one document.

    A missing scope (None) leaves every field of that section unset.
    zone_values is document-wide: the zone bars are not table-scoped.
    """

    header: Optional[Tag] = None
    treadmill: Optional[Tag] = None
    rower: Optional[Tag] = None
    zone_values: Tuple[int, ...] = field(default=())

    def found(self) -> dict:
        return {
            "header": self.header is not None,
            "treadmill": self.treadmill is not None,
            "rower": self.rower is not None,
            "zone_minutes": len(self.zone_values),
        }
