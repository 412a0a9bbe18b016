"""Blacklist domain models"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class BlacklistEntry:
    """Recently invited player that must not resurface in scans"""

    tag: str
    expiry: datetime
    score: int = 0

    def is_active(self, now: datetime) -> bool:
        return self.expiry > now


@dataclass(frozen=True)
class BlacklistSnapshot:
    """Active blacklist state returned after an update"""

    active_tags: frozenset[str]
    benchmark: float
    entries: list[BlacklistEntry] = field(default_factory=list)
