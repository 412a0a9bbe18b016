"""Blacklist & benchmark store

Invited recruits are parked here with an expiry so scans skip them, and
their best raw scores anchor the performance scale for new candidates.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from loguru import logger

from headhunter.domain.models import BlacklistEntry, BlacklistSnapshot, Recruit
from headhunter.infrastructure.cache import ChunkedProperties
from headhunter.infrastructure.database.mappers import (
    map_entry_to_record,
    map_record_to_entry,
)
from headhunter.shared.constants import BLACKLIST_KEY


def benchmark_of(entries: list[BlacklistEntry], top_n: int = 3) -> float:
    """Mean score of the top_n entries (0 when there are none)"""
    top = sorted((e.score for e in entries), reverse=True)[:top_n]
    if not top:
        return 0.0
    return sum(top) / len(top)


class BlacklistStore:
    """Persisted tag -> (expiry, score) map"""

    def __init__(
        self,
        properties: ChunkedProperties,
        retention_days: int = 14,
        benchmark_top_n: int = 3,
        key: str = BLACKLIST_KEY,
    ):
        """Initialise blacklist store

        Args:
            properties: Durable chunked JSON store
            retention_days: How long an invited tag stays blacklisted
            benchmark_top_n: Entries averaged for the benchmark anchor
            key: Property key holding the map
        """
        self.properties = properties
        self.retention = timedelta(days=retention_days)
        self.benchmark_top_n = benchmark_top_n
        self.key = key

    def load(self) -> dict[str, BlacklistEntry]:
        """Read every stored entry, including expired ones"""
        raw = self.properties.get_chunked(self.key, {})
        if not isinstance(raw, dict):
            logger.warning("Corrupted blacklist, resetting.")
            return {}

        entries = {}
        for tag, record in raw.items():
            entry = map_record_to_entry(tag, record)
            if entry is not None:
                entries[tag] = entry
        return entries

    def save(self, entries: dict[str, BlacklistEntry]) -> None:
        self.properties.set_chunked(
            self.key,
            {tag: map_entry_to_record(e) for tag, e in entries.items()},
        )

    @staticmethod
    def prune(
        entries: dict[str, BlacklistEntry], now: datetime
    ) -> dict[str, BlacklistEntry]:
        return {tag: e for tag, e in entries.items() if e.is_active(now)}

    def update_and_reload(
        self,
        invited: Iterable[Recruit],
        now: datetime | None = None,
    ) -> BlacklistSnapshot:
        """Prune, ingest newly invited recruits, persist and report

        Args:
            invited: Recruits marked invited since the last run
            now: Current time (defaults to UTC now)

        Returns:
            Active tags and the benchmark anchor
        """
        now = now or datetime.now(timezone.utc)
        stored = self.load()
        entries = self.prune(stored, now)
        pruned = len(stored) - len(entries)
        changed = pruned > 0

        for recruit in invited:
            existing = entries.get(recruit.tag)
            if existing is None:
                entries[recruit.tag] = BlacklistEntry(
                    tag=recruit.tag,
                    expiry=now + self.retention,
                    score=recruit.raw_score,
                )
                changed = True
            elif recruit.raw_score > existing.score:
                existing.score = recruit.raw_score
                changed = True

        ordered = dict(
            sorted(entries.items(), key=lambda item: item[1].score, reverse=True)
        )
        benchmark = benchmark_of(list(ordered.values()), self.benchmark_top_n)

        if changed or ordered:
            self.save(ordered)
            logger.info(
                f"Blacklist updated: {len(ordered)} active entries "
                f"(pruned {pruned}). Benchmark: {benchmark:.0f}"
            )

        return BlacklistSnapshot(
            active_tags=frozenset(ordered),
            benchmark=benchmark,
            entries=list(ordered.values()),
        )

    def add_tags(self, tags: Iterable[str], now: datetime | None = None) -> int:
        """Blacklist tags with a fresh expiry, keeping any stored score

        Returns:
            Number of tags that were not already blacklisted
        """
        now = now or datetime.now(timezone.utc)
        entries = self.prune(self.load(), now)
        added = 0
        for tag in tags:
            existing = entries.get(tag)
            if existing is None:
                added += 1
            entries[tag] = BlacklistEntry(
                tag=tag,
                expiry=now + self.retention,
                score=existing.score if existing else 0,
            )
        self.save(entries)
        return added

    def active_tags(self, now: datetime | None = None) -> frozenset[str]:
        """Tags currently blacklisted, without modifying storage"""
        now = now or datetime.now(timezone.utc)
        return frozenset(self.prune(self.load(), now))
