"""Headhunter - recruit scouting orchestrator

Wires the fetch engine, scanner, scoring, pool, blacklist and payload
services together and exposes the operations the CLI runs.
"""

import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx
from loguru import logger

from headhunter.core.config import Config
from headhunter.domain.models import Recruit
from headhunter.infrastructure.api import ApiClient, ExecutionContext
from headhunter.infrastructure.cache import ChunkedCache, ChunkedProperties
from headhunter.infrastructure.database import (
    Database,
    SqliteKeyValueStore,
    SqliteRowStore,
)
from headhunter.infrastructure.database.mappers import (
    INVITED,
    map_recruit_to_row,
    map_row_to_recruit,
    map_rows_to_recruits,
)
from headhunter.infrastructure.locking import OperationLocks
from headhunter.shared.constants import SHORTLIST_SHEET
from headhunter.shared.exceptions import StorageError
from headhunter.validation import ClanMembersResponse, parse_model

from .blacklist import BlacklistStore
from .payload import PayloadService
from .pool import RecruitPoolManager, min_trophy_threshold
from .scanner import TournamentScanner
from .scoring import ScoringEngine

CACHE_VALUE_LIMIT = 100_000
PROPERTY_VALUE_LIMIT = 9_000


@dataclass
class ScoutReport:
    """Summary of one scouting run"""

    baseline: float
    threshold: int
    mode: str
    benchmark: float
    scanned: int
    new_recruits: int
    pool_size: int
    partial: bool = False
    stopped_after: str | None = None
    requests: int = 0


def normalise_tag(tag: str) -> str:
    """Upper-case a player tag and ensure the leading '#'"""
    tag = tag.strip().upper()
    return tag if tag.startswith("#") else f"#{tag}"


class Headhunter:
    """Recruit scouting service

    One instance per process. Each scout() call runs with a fresh
    ExecutionContext, so key evictions and cached responses never leak
    between runs.
    """

    def __init__(
        self,
        config: Config,
        db: Database | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        seed: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialise headhunter with configuration

        Args:
            config: Loaded configuration
            db: Database to use (defaults to one at config.db_path)
            transport: Optional httpx transport (for testing)
            seed: Seed for the per-run RNG (None for nondeterministic)
            clock: Monotonic clock for the scan deadline
        """
        logger.info("Initialising Headhunter...")
        self.config = config
        self.db = db or Database(config.db_path)
        self._transport = transport
        self._seed = seed
        self._clock = clock

        self.cache = ChunkedCache(
            SqliteKeyValueStore(self.db, "cache", CACHE_VALUE_LIMIT)
        )
        self.properties = ChunkedProperties(
            SqliteKeyValueStore(self.db, "properties", PROPERTY_VALUE_LIMIT)
        )
        self.row_store = SqliteRowStore(self.db, SHORTLIST_SHEET)
        self.locks = OperationLocks(config.lock_timeout_seconds)

        pool_cfg = config.pool
        self.scoring = ScoringEngine(config.weights)
        self.blacklist = BlacklistStore(
            self.properties,
            retention_days=pool_cfg.blacklist_days,
            benchmark_top_n=pool_cfg.benchmark_top_n,
        )
        self.pool_manager = RecruitPoolManager(
            self.scoring, target_size=pool_cfg.target_size
        )
        self.payload = PayloadService(
            self.row_store,
            self.blacklist,
            self.cache,
            self.properties,
            self.locks,
        )
        logger.info("Headhunter initialised successfully")

    def new_api_client(self) -> ApiClient:
        """API client bound to a fresh per-run ExecutionContext"""
        context = ExecutionContext.create(self.config.api_keys, seed=self._seed)
        return ApiClient(context, self.config.fetch, transport=self._transport)

    async def fetch_baseline(self, api: ApiClient) -> float:
        """Average trophies of current clan members

        Falls back to the configured default when the roster is unavailable.
        """
        default = self.config.pool.default_baseline
        url = api.endpoints.clan_members(self.config.clan_tag)
        payload = (await api.fetch_batch([url]))[0]

        members = parse_model(ClanMembersResponse, payload)
        average = members.average_trophies() if members else None
        if average is None:
            logger.warning(
                f"Clan roster unavailable for {self.config.clan_tag}; "
                f"using default baseline {default:.0f}"
            )
            return default

        logger.info(f"Clan baseline: {average:.0f} trophies")
        return average

    def load_tracked(self) -> dict[str, Recruit]:
        return map_rows_to_recruits(self.row_store.read_rows())

    async def scout(self, operation: str = "TASK_HH") -> ScoutReport:
        """Run one full scan and rewrite the shortlist

        Args:
            operation: Lock name (TASK_HH for scheduled, MANUAL_HH for manual)

        Returns:
            ScoutReport for the run
        """
        pool_cfg = self.config.pool
        now = datetime.now(timezone.utc)

        async with self.locks.hold(operation):
            async with self.new_api_client() as api:
                baseline = await self.fetch_baseline(api)

                tracked = self.load_tracked()
                invited = [r for r in tracked.values() if r.invited]
                snapshot = self.blacklist.update_and_reload(invited, now)
                active = {
                    tag: r
                    for tag, r in tracked.items()
                    if not r.invited and tag not in snapshot.active_tags
                }

                threshold, mode = min_trophy_threshold(
                    baseline,
                    len(active),
                    target_size=pool_cfg.target_size,
                    filling_ratio=pool_cfg.filling_ratio,
                    floor=pool_cfg.trophy_floor,
                )
                logger.info(
                    f"Scouting in {mode} mode: {len(active)}/"
                    f"{pool_cfg.target_size} active, min trophies {threshold}"
                )

                scanner = TournamentScanner(
                    api, self.config.scanner, self.scoring, clock=self._clock
                )
                result = await scanner.scan(
                    threshold, existing=active, blacklist=snapshot.active_tags
                )

                pool = self.pool_manager.build(
                    result.recruits, active, snapshot.benchmark, now
                )
                new_recruits = sum(1 for r in pool if r.tag not in active)
                self._log_survivors(result.recruits, pool, new_recruits)

                self.row_store.backup()
                self.row_store.write_rows([map_recruit_to_row(r) for r in pool])
                requests = api.request_count

        await self.payload.refresh()

        return ScoutReport(
            baseline=baseline,
            threshold=threshold,
            mode=mode,
            benchmark=snapshot.benchmark,
            scanned=len(result.recruits),
            new_recruits=new_recruits,
            pool_size=len(pool),
            partial=result.partial,
            stopped_after=result.stopped_after,
            requests=requests,
        )

    def _log_survivors(
        self, scanned: list[Recruit], pool: list[Recruit], new_recruits: int
    ) -> None:
        pool_tags = {r.tag for r in pool}
        survived = sum(1 for r in scanned if r.tag in pool_tags)
        logger.info(
            f"Scan results: {survived}/{len(scanned)} scanned recruits made "
            f"the cut ({new_recruits} new)"
        )

    async def mark_invited(self, tags: Iterable[str]) -> int:
        """Mark shortlist rows as invited and blacklist their tags

        Args:
            tags: Player tags, with or without the leading '#'

        Returns:
            Number of shortlist rows updated
        """
        wanted = {normalise_tag(t) for t in tags if t and t.strip()}
        if not wanted:
            return 0

        async with self.locks.hold("WRITE_HH"):
            rows = self.row_store.read_rows()
            updated = 0
            for row in rows:
                recruit = map_row_to_recruit(row)
                if recruit is None or recruit.tag not in wanted:
                    continue
                if not recruit.invited:
                    row[INVITED] = True
                    updated += 1
            if updated:
                self.row_store.write_rows(rows)

            try:
                added = self.blacklist.add_tags(wanted)
            except StorageError as e:
                logger.warning(f"Blacklist sync warning: {e}")
                added = 0

        logger.info(
            f"Dismissed {updated} rows. Synced {len(wanted)} tags to "
            f"blacklist ({added} new)."
        )
        await self.payload.refresh()
        return updated

    def close(self) -> None:
        self.db.close()


async def run_tasks(
    tasks: Iterable[tuple[str, Callable[[], Awaitable[object]]]],
) -> dict[str, bool]:
    """Run independent tasks in order, continuing past failures

    Args:
        tasks: (name, coroutine factory) pairs

    Returns:
        Task name -> whether it succeeded
    """
    outcomes: dict[str, bool] = {}
    for name, task in tasks:
        start = time.monotonic()
        try:
            await task()
        except Exception as e:
            logger.error(f"Task '{name}' failed: {type(e).__name__}: {e}")
            outcomes[name] = False
            continue
        logger.info(f"Task '{name}' finished in {time.monotonic() - start:.1f}s")
        outcomes[name] = True
    return outcomes
