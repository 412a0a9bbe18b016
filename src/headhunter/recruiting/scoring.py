"""Recruit scoring: weighted raw score and benchmark-normalised performance"""

import math
from collections.abc import Iterable

from headhunter.core.config import ScoringWeights
from headhunter.domain.models import Recruit


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives

    Scores with an odd donation count land on .5 and must round up.
    """
    return math.floor(value + 0.5)


class ScoringEngine:
    """Computes raw and performance scores from fixed weights"""

    def __init__(self, weights: ScoringWeights | None = None):
        self.weights = weights or ScoringWeights()

    def raw_score(self, trophies: int, donations: int, war_score: int) -> int:
        w = self.weights
        return round_half_up(
            trophies * w.trophy + donations * w.donations + war_score * w.war
        )

    @staticmethod
    def benchmark_anchor(
        blacklist_benchmark: float, pool: Iterable[Recruit]
    ) -> float:
        """Normalisation denominator: best of history and live pool, at least 1

        The top live recruit scores exactly 100 whenever it beats the
        historical benchmark.
        """
        pool_top = max((r.raw_score for r in pool), default=0)
        return max(blacklist_benchmark, pool_top, 1)

    @staticmethod
    def perf_score(raw_score: int, anchor: float) -> int:
        return round_half_up(raw_score / max(anchor, 1) * 100)

    def apply_perf_scores(
        self, pool: list[Recruit], blacklist_benchmark: float
    ) -> float:
        """Set perf_score on every recruit; returns the anchor used"""
        anchor = self.benchmark_anchor(blacklist_benchmark, pool)
        for recruit in pool:
            recruit.perf_score = self.perf_score(recruit.raw_score, anchor)
        return anchor
