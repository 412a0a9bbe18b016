"""Test data factories for recruits, API payloads and shortlist rows"""

import random
from datetime import datetime, timezone
from typing import Any

import httpx

from headhunter.domain.models import BlacklistEntry, Recruit
from headhunter.infrastructure.database.mappers import map_recruit_to_row
from headhunter.recruiting.scoring import round_half_up

API_BASE = "https://api.test/v1"
FOUND = datetime(2025, 11, 3, tzinfo=timezone.utc)


class FirstChoiceRandom(random.Random):
    """RNG whose choice() always returns the first live item"""

    def choice(self, seq):
        return seq[0]


class RecruitFactory:
    """Factory for creating test recruits"""

    @staticmethod
    def recruit(
        tag: str = "#ABC123",
        name: str = "Scout",
        trophies: int = 5000,
        donations: int = 400,
        cards_won: int = 120,
        war_score: int = 0,
        raw_score: int | None = None,
        perf_score: int = 0,
        found_date: datetime | None = None,
        invited: bool = False,
    ) -> Recruit:
        if raw_score is None:
            raw_score = round_half_up(trophies + donations * 0.5 + war_score * 20)
        return Recruit(
            tag=tag,
            name=name,
            trophies=trophies,
            donations=donations,
            cards_won=cards_won,
            war_score=war_score,
            raw_score=raw_score,
            perf_score=perf_score,
            found_date=found_date or FOUND,
            invited=invited,
        )

    @staticmethod
    def row(**kwargs) -> list:
        return map_recruit_to_row(RecruitFactory.recruit(**kwargs))


class BlacklistFactory:
    """Factory for creating blacklist entries"""

    @staticmethod
    def entry(
        tag: str = "#BL1",
        expiry: datetime | None = None,
        score: int = 0,
    ) -> BlacklistEntry:
        return BlacklistEntry(
            tag=tag,
            expiry=expiry or datetime(2030, 1, 1, tzinfo=timezone.utc),
            score=score,
        )


class PayloadFactory:
    """Factory for raw API JSON payloads"""

    @staticmethod
    def clan_members(*trophies: int) -> dict:
        return {
            "items": [
                {"tag": f"#M{i}", "trophies": t} for i, t in enumerate(trophies)
            ]
        }

    @staticmethod
    def search(*tournaments: tuple[str, int]) -> dict:
        return {"items": [{"tag": tag, "capacity": cap} for tag, cap in tournaments]}

    @staticmethod
    def tournament(tag: str, members: list[tuple[str, str | None]]) -> dict:
        roster = []
        for player_tag, clan_tag in members:
            entry = {"tag": player_tag, "name": player_tag}
            if clan_tag:
                entry["clan"] = {"tag": clan_tag}
            roster.append(entry)
        return {"tag": tag, "capacity": len(members), "membersList": roster}

    @staticmethod
    def player(
        tag: str,
        trophies: int = 5000,
        donations: int = 400,
        cards_won: int = 120,
        war_day_wins: int = 0,
        name: str | None = None,
    ) -> dict:
        return {
            "tag": tag,
            "name": name or f"Player {tag}",
            "trophies": trophies,
            "totalDonations": donations,
            "challengeCardsWon": cards_won,
            "warDayWins": war_day_wins,
        }

    @staticmethod
    def battle_log(*types: str) -> list[dict]:
        return [{"type": t} for t in types]


class ApiRouter:
    """httpx.MockTransport handler serving canned JSON by request path

    Routes map a raw path (query included, tags percent-encoded) to either
    a JSON body or an int status code. Unknown paths return 404.
    """

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes = dict(routes or {})
        self.requested: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode()
        self.requested.append(path)
        if path not in self.routes:
            return httpx.Response(404)
        body = self.routes[path]
        if isinstance(body, int):
            return httpx.Response(body)
        return httpx.Response(200, json=body)

    def was_requested(self, fragment: str) -> bool:
        return any(fragment in path for path in self.requested)


class StepClock:
    """Monotonic clock returning scripted readings, then repeating the last"""

    def __init__(self, *readings: float):
        self.readings = list(readings)

    def __call__(self) -> float:
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


def scan_routes() -> dict[str, Any]:
    """Two keywords, three rooms: one busy, one sparse, one gone

    Only #P1 qualifies at 4000+ trophies; it has war activity in its log.
    """
    filler = [(f"#F{i}", "#CLAN") for i in range(7)]
    return {
        "/v1/tournaments?name=a": PayloadFactory.search(("#T1", 50), ("#T2", 20)),
        "/v1/tournaments?name=b": PayloadFactory.search(("#T1", 50), ("#T3", 5)),
        "/v1/tournaments/%23T1": PayloadFactory.tournament(
            "#T1", [("#P1", None), ("#P2", None), ("#P3", "#OTHER")] + filler
        ),
        "/v1/tournaments/%23T2": PayloadFactory.tournament(
            "#T2", [("#P9", None), ("#F0", "#CLAN"), ("#F1", "#CLAN")]
        ),
        "/v1/players/%23P1": PayloadFactory.player(
            "#P1", trophies=6000, donations=300, war_day_wins=2
        ),
        "/v1/players/%23P2": PayloadFactory.player("#P2", trophies=3000),
        "/v1/players/%23P1/battlelog": PayloadFactory.battle_log(
            "PvP", "riverRacePvP"
        ),
    }
