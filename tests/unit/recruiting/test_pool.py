"""Unit tests for the recruit pool manager and trophy threshold."""

from datetime import datetime, timezone

import pytest

from headhunter.recruiting.pool import RecruitPoolManager, min_trophy_threshold
from tests.factories import RecruitFactory

NOW = datetime(2025, 11, 10, tzinfo=timezone.utc)
EARLIER = datetime(2025, 10, 1, tzinfo=timezone.utc)


class TestMinTrophyThreshold:
    def test_filling_mode_lowers_bar(self):
        assert min_trophy_threshold(8000, active_count=10, target_size=50) == (
            6000,
            "filling",
        )

    def test_maintenance_mode_uses_full_baseline(self):
        assert min_trophy_threshold(8000, active_count=50, target_size=50) == (
            8000,
            "maintenance",
        )

    @pytest.mark.parametrize("active", [0, 60])
    def test_floor_always_applies(self, active):
        threshold, _ = min_trophy_threshold(3000, active_count=active)

        assert threshold == 4000

    def test_threshold_rounds_half_up(self):
        # 8002 * 0.75 == 6001.5
        assert min_trophy_threshold(8002, active_count=0)[0] == 6002

    def test_default_baseline_while_filling_hits_floor(self):
        assert min_trophy_threshold(4000, active_count=0)[0] == 4000


class TestRecruitPoolManager:
    def test_truncates_to_target_sorted_descending(self):
        manager = RecruitPoolManager(target_size=5)
        scanned = [
            RecruitFactory.recruit(tag=f"#S{i}", raw_score=1000 + i) for i in range(10)
        ]

        pool = manager.build(scanned, {}, benchmark=0, now=NOW)

        assert len(pool) == 5
        assert [r.raw_score for r in pool] == [1009, 1008, 1007, 1006, 1005]
        assert pool[0].perf_score == 100

    def test_found_date_carried_for_tracked_recruits(self):
        manager = RecruitPoolManager()
        tracked = {"#A": RecruitFactory.recruit(tag="#A", found_date=EARLIER)}
        scanned = [
            RecruitFactory.recruit(tag="#A", raw_score=6000, found_date=NOW),
            RecruitFactory.recruit(tag="#B", raw_score=5000, found_date=EARLIER),
        ]

        pool = {r.tag: r for r in manager.build(scanned, tracked, 0, now=NOW)}

        assert pool["#A"].found_date == EARLIER
        assert pool["#A"].raw_score == 6000
        assert pool["#B"].found_date == NOW

    def test_tracked_recruits_survive_without_rescan(self):
        manager = RecruitPoolManager()
        tracked = {"#OLD": RecruitFactory.recruit(tag="#OLD", raw_score=7000)}

        pool = manager.build([], tracked, benchmark=0, now=NOW)

        assert [r.tag for r in pool] == ["#OLD"]

    def test_invited_tracked_recruits_are_dropped(self):
        manager = RecruitPoolManager()
        tracked = {"#INV": RecruitFactory.recruit(tag="#INV", invited=True)}

        assert manager.build([], tracked, benchmark=0, now=NOW) == []

    def test_perf_scores_use_blacklist_benchmark(self):
        manager = RecruitPoolManager()
        scanned = [RecruitFactory.recruit(raw_score=4500)]

        pool = manager.build(scanned, {}, benchmark=9000, now=NOW)

        assert pool[0].perf_score == 50

    def test_weak_recruits_are_displaced_by_stronger_scan(self):
        manager = RecruitPoolManager(target_size=2)
        tracked = {
            t: RecruitFactory.recruit(tag=t, raw_score=s)
            for t, s in (("#W1", 100), ("#W2", 200))
        }
        scanned = [RecruitFactory.recruit(tag="#S", raw_score=300)]

        pool = manager.build(scanned, tracked, benchmark=0, now=NOW)

        assert [r.tag for r in pool] == ["#S", "#W2"]
