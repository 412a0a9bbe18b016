"""Recruit domain model"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Recruit:
    """Prospective clan member tracked on the shortlist"""

    tag: str
    name: str
    trophies: int = 0
    donations: int = 0
    cards_won: int = 0
    war_score: int = 0
    raw_score: int = 0
    perf_score: int = 0
    found_date: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    invited: bool = False

    @property
    def short_id(self) -> str:
        """Tag without the leading '#'"""
        return self.tag.lstrip("#")
