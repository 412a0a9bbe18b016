"""Tournament scanner - finds clanless players in busy tournaments

The scan is a fixed sequence of phases sharing one ScanState:

    search -> select -> details -> extract -> profiles -> activity

A Deadline is checked after the expensive phases only. When it has passed
the scan stops and returns what it has instead of raising.
"""

import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from loguru import logger

from headhunter.core.config import ScannerConfig
from headhunter.domain.models import Recruit, Tournament
from headhunter.infrastructure.api import ApiClient
from headhunter.shared.constants import WAR_BATTLE_TYPES
from headhunter.validation import (
    BattleLogEntry,
    PlayerProfile,
    TournamentDetail,
    TournamentSummary,
    parse_battle_log,
    parse_model,
)

from .scoring import ScoringEngine


class Deadline:
    """Wall-clock budget measured from construction"""

    def __init__(
        self, seconds: float, clock: Callable[[], float] = time.monotonic
    ):
        self._clock = clock
        self._started = clock()
        self.seconds = seconds

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started

    def expired(self) -> bool:
        return self.elapsed > self.seconds


@dataclass
class ScanState:
    """Intermediate results handed from phase to phase"""

    min_trophies: int
    existing: dict[str, Recruit]
    blacklist: frozenset[str]
    found_at: datetime
    raw_hits: int = 0
    unique_tournaments: list[TournamentSummary] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
    tournaments: list[Tournament] = field(default_factory=list)
    candidate_tags: list[str] = field(default_factory=list)
    profiles: list[PlayerProfile] = field(default_factory=list)
    rejected_low_trophies: int = 0
    recruits: list[Recruit] = field(default_factory=list)


@dataclass(frozen=True)
class Phase:
    """One pipeline step; run() returns False to end the scan"""

    name: str
    run: Callable[[ScanState], Awaitable[bool]]
    checkpoint: bool = False


@dataclass
class ScanResult:
    """Recruits found by one scan"""

    recruits: list[Recruit]
    partial: bool = False
    stopped_after: str | None = None


def shuffle_in_place(items: list, rng: random.Random) -> list:
    """Fisher-Yates shuffle driven by an injectable RNG"""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


class TournamentScanner:
    """Scanner for un-clanned talent via tournaments and battle logs"""

    def __init__(
        self,
        api: ApiClient,
        config: ScannerConfig | None = None,
        scoring: ScoringEngine | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialise tournament scanner

        Args:
            api: Fetch engine for the current invocation
            config: Scan sizes, thresholds and time budget
            scoring: Engine used for raw scores
            rng: Randomness for tournament sampling (defaults to the
                invocation's RNG)
            clock: Monotonic clock for the deadline
        """
        self.api = api
        self.config = config or ScannerConfig()
        self.scoring = scoring or ScoringEngine()
        self.rng = rng or api.context.rng
        self._clock = clock

    def phases(self) -> list[Phase]:
        return [
            Phase("search", self._search, checkpoint=True),
            Phase("select", self._select),
            Phase("details", self._fetch_details, checkpoint=True),
            Phase("extract", self._extract_candidates),
            Phase("profiles", self._fetch_profiles, checkpoint=True),
            Phase("activity", self._score_activity),
        ]

    async def scan(
        self,
        min_trophies: int,
        existing: dict[str, Recruit] | None = None,
        blacklist: frozenset[str] | set[str] | None = None,
    ) -> ScanResult:
        """Run the scan pipeline

        Args:
            min_trophies: Profiles below this are rejected
            existing: Tracked recruits by tag (for sticky war scores)
            blacklist: Tags to skip

        Returns:
            ScanResult; partial when the time budget ran out
        """
        state = ScanState(
            min_trophies=min_trophies,
            existing=existing or {},
            blacklist=frozenset(blacklist or ()),
            found_at=datetime.now(timezone.utc),
        )
        deadline = Deadline(self.config.time_limit_seconds, self._clock)

        for phase in self.phases():
            if not await phase.run(state):
                return ScanResult(recruits=state.recruits)

            if phase.checkpoint and deadline.expired():
                recruits = self._degraded_recruits(state)
                logger.warning(
                    f"Time limit reached after '{phase.name}' "
                    f"({deadline.elapsed:.0f}s). Stopping scan early with "
                    f"{len(recruits)} recruits."
                )
                return ScanResult(
                    recruits=recruits, partial=True, stopped_after=phase.name
                )

        logger.info(
            f"Scan complete in {deadline.elapsed:.1f}s: "
            f"{len(state.recruits)} recruits"
        )
        return ScanResult(recruits=state.recruits)

    async def _search(self, state: ScanState) -> bool:
        keywords = list(self.config.keywords)
        logger.info(
            f"Phase A: Broadcasting search for {len(keywords)} keywords"
        )
        results = await self.api.fetch_batch(
            [self.api.endpoints.tournament_search(k) for k in keywords]
        )

        unique: dict[str, TournamentSummary] = {}
        for payload in results:
            if not isinstance(payload, dict):
                continue
            for item in payload.get("items") or []:
                state.raw_hits += 1
                summary = parse_model(TournamentSummary, item)
                if summary is not None:
                    unique[summary.tag] = summary

        state.unique_tournaments = list(unique.values())
        return True

    async def _select(self, state: ScanState) -> bool:
        cfg = self.config
        by_capacity = sorted(
            state.unique_tournaments,
            key=lambda t: t.capacity or 0,
            reverse=True,
        )
        lottery_pool = by_capacity[: cfg.lottery_pool_size]
        shuffle_in_place(lottery_pool, self.rng)
        state.targets = [t.tag for t in lottery_pool[: cfg.scan_size]]

        logger.info(
            f"Phase B: Reduced {state.raw_hits} raw hits to "
            f"{len(state.targets)} target tournaments (random selection "
            f"from top {len(lottery_pool)})"
        )

        if not state.targets:
            if state.raw_hits:
                logger.warning(
                    f"Found {state.raw_hits} tournaments, but none survived "
                    f"deduplication"
                )
            else:
                logger.warning(
                    "Zero tournaments returned. Check API keys/quota."
                )
            return False
        return True

    async def _fetch_details(self, state: ScanState) -> bool:
        logger.info(
            f"Phase C: Fetching details for {len(state.targets)} tournaments..."
        )
        results = await self.api.fetch_batch(
            [self.api.endpoints.tournament(tag) for tag in state.targets]
        )
        for payload in results:
            detail = parse_model(TournamentDetail, payload)
            if detail is not None:
                state.tournaments.append(detail.to_domain())
        return True

    async def _extract_candidates(self, state: ScanState) -> bool:
        min_members = self.config.min_members
        dense = [t for t in state.tournaments if t.member_count >= min_members]

        seen: set[str] = set()
        for tournament in dense:
            for tag in tournament.clanless_tags():
                if tag in state.blacklist or tag in seen:
                    continue
                seen.add(tag)
                state.candidate_tags.append(tag)

        logger.info(
            f"Phase D: {len(state.candidate_tags)} clanless candidates from "
            f"{len(dense)}/{len(state.tournaments)} active rooms "
            f"(>= {min_members} members)"
        )
        return bool(state.candidate_tags)

    async def _fetch_profiles(self, state: ScanState) -> bool:
        tags = state.candidate_tags[: self.config.max_profiles]
        logger.info(
            f"Phase E: Deep analysing {len(tags)} un-clanned players "
            f"(from {len(state.candidate_tags)} potential)..."
        )
        results = await self.api.fetch_batch(
            [self.api.endpoints.player(tag) for tag in tags]
        )

        for payload in results:
            profile = parse_model(PlayerProfile, payload)
            if profile is None:
                continue
            if profile.trophies >= state.min_trophies:
                state.profiles.append(profile)
            else:
                state.rejected_low_trophies += 1

        logger.info(
            f"Filter stats: accepted {len(state.profiles)}, rejected "
            f"{state.rejected_low_trophies} (below {state.min_trophies} trophies)"
        )
        return bool(state.profiles)

    async def _score_activity(self, state: ScanState) -> bool:
        logger.info("Phase F: Scanning battle logs for war activity...")
        logs = await self.api.fetch_batch(
            [self.api.endpoints.battle_log(p.tag) for p in state.profiles]
        )

        for profile, payload in zip(state.profiles, logs):
            battles = parse_battle_log(payload)
            war_score = self._war_score(profile, battles, state.existing)
            state.recruits.append(
                self._build_recruit(profile, war_score, state.found_at)
            )
        return True

    def _degraded_recruits(self, state: ScanState) -> list[Recruit]:
        """Recruits from fetched profiles without battle-log data"""
        return [
            self._build_recruit(
                profile,
                self._war_score(profile, None, state.existing),
                state.found_at,
            )
            for profile in state.profiles
        ]

    def _war_score(
        self,
        profile: PlayerProfile,
        battles: list[BattleLogEntry] | None,
        existing: dict[str, Recruit],
    ) -> int:
        """War wins plus activity bonus, never below the stored score

        Battle logs only keep the latest battles, so a bonus earned in an
        earlier scan is carried forward once the war battles roll off.
        """
        bonus = 0
        if battles and any(b.type in WAR_BATTLE_TYPES for b in battles):
            bonus = self.config.war_bonus

        score = profile.war_day_wins + bonus

        stored = existing.get(profile.tag)
        if stored is not None and stored.war_score > score:
            score = stored.war_score
        return score

    def _build_recruit(
        self, profile: PlayerProfile, war_score: int, found_at: datetime
    ) -> Recruit:
        return Recruit(
            tag=profile.tag,
            name=profile.name,
            trophies=profile.trophies,
            donations=profile.total_donations,
            cards_won=profile.challenge_cards_won,
            war_score=war_score,
            raw_score=self.scoring.raw_score(
                profile.trophies, profile.total_donations, war_score
            ),
            found_date=found_at,
        )
