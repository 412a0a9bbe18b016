"""Recruit pool manager - merges scans into the ranked shortlist"""

from datetime import datetime, timezone

from loguru import logger

from headhunter.domain.models import Recruit

from .scoring import ScoringEngine, round_half_up

FILLING = "filling"
MAINTENANCE = "maintenance"


def min_trophy_threshold(
    baseline: float,
    active_count: int,
    target_size: int = 50,
    filling_ratio: float = 0.75,
    floor: int = 4000,
) -> tuple[int, str]:
    """Minimum trophies for new candidates

    While the pool is below target the bar is lowered to filling_ratio of
    the clan baseline, otherwise it is the full baseline. Never below floor.

    Returns:
        (threshold, mode) where mode is 'filling' or 'maintenance'
    """
    if active_count < target_size:
        threshold, mode = round_half_up(baseline * filling_ratio), FILLING
    else:
        threshold, mode = round_half_up(baseline), MAINTENANCE
    return max(threshold, floor), mode


class RecruitPoolManager:
    """Builds the ranked, truncated pool from scanned and tracked recruits"""

    def __init__(self, scoring: ScoringEngine | None = None, target_size: int = 50):
        self.scoring = scoring or ScoringEngine()
        self.target_size = target_size

    def build(
        self,
        scanned: list[Recruit],
        tracked: dict[str, Recruit],
        benchmark: float,
        now: datetime | None = None,
    ) -> list[Recruit]:
        """Merge, rank and rescore

        Args:
            scanned: Recruits from this run's scan
            tracked: Active (not invited, not blacklisted) shortlist rows by tag
            benchmark: Blacklist benchmark
            now: found_date for recruits seen for the first time

        Returns:
            At most target_size recruits sorted by raw_score descending
        """
        now = now or datetime.now(timezone.utc)

        merged: dict[str, Recruit] = {
            tag: r for tag, r in tracked.items() if not r.invited
        }
        for recruit in scanned:
            previous = tracked.get(recruit.tag)
            if previous is not None:
                recruit.found_date = previous.found_date
                recruit.invited = previous.invited
            else:
                recruit.found_date = now
            merged[recruit.tag] = recruit

        pool = sorted(merged.values(), key=lambda r: r.raw_score, reverse=True)
        dropped = len(pool) - self.target_size
        pool = pool[: self.target_size]

        anchor = self.scoring.apply_perf_scores(pool, benchmark)
        logger.info(
            f"Pool built: {len(pool)} recruits "
            f"({max(dropped, 0)} dropped below cut-off), anchor {anchor:.0f}"
        )
        return pool
