"""Pydantic models for game API responses

Every payload returned by the fetch engine passes through these models
before it reaches the recruiting pipeline, so malformed items are rejected
at one boundary instead of deep inside the scan.
"""

from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from headhunter.domain.models import Tournament, TournamentMember

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiModel(BaseModel):
    """Base model: camelCase aliases, unknown fields ignored"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ClanMember(ApiModel):
    """Member entry from /clans/{tag}/members"""

    tag: str = ""
    trophies: int = Field(default=0, ge=0)


class ClanMembersResponse(ApiModel):
    items: list[ClanMember] = Field(default_factory=list)

    def average_trophies(self) -> float | None:
        if not self.items:
            return None
        return sum(m.trophies for m in self.items) / len(self.items)


class TournamentSummary(ApiModel):
    """Search hit from /tournaments?name="""

    tag: str = Field(..., min_length=1)
    capacity: int | None = 0


class ClanRef(ApiModel):
    tag: str = ""


class TournamentRosterEntry(ApiModel):
    tag: str = Field(..., min_length=1)
    clan: ClanRef | None = None


class TournamentDetail(ApiModel):
    """Full tournament from /tournaments/{tag}"""

    tag: str = ""
    capacity: int | None = 0
    members_list: list[TournamentRosterEntry] = Field(
        default_factory=list, alias="membersList"
    )

    def to_domain(self) -> Tournament:
        return Tournament(
            tag=self.tag,
            capacity=self.capacity or 0,
            members=[
                TournamentMember(
                    tag=m.tag, clan_tag=m.clan.tag if m.clan else None
                )
                for m in self.members_list
            ],
        )


class PlayerProfile(ApiModel):
    """Player from /players/{tag}"""

    tag: str = Field(..., min_length=1)
    name: str = ""
    trophies: int = 0
    total_donations: int = Field(default=0, alias="totalDonations")
    challenge_cards_won: int = Field(default=0, alias="challengeCardsWon")
    war_day_wins: int = Field(default=0, alias="warDayWins")


class BattleLogEntry(ApiModel):
    """Battle from /players/{tag}/battlelog"""

    type: str = ""


def parse_model(model: type[ModelT], payload: Any) -> ModelT | None:
    """Validate a payload, returning None when it is missing or malformed

    Args:
        model: Pydantic model class to validate against
        payload: Parsed JSON (None for unresolved fetches)

    Returns:
        Model instance or None
    """
    if payload is None:
        return None
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning(
            f"Invalid {model.__name__} payload: {e.error_count()} error(s)"
        )
        return None


def parse_battle_log(payload: Any) -> list[BattleLogEntry] | None:
    """Validate a battle log (a JSON array), skipping malformed battles"""
    if payload is None:
        return None
    if not isinstance(payload, list):
        logger.warning("Battle log payload is not a list")
        return None

    battles = []
    for item in payload:
        battle = parse_model(BattleLogEntry, item)
        if battle is not None:
            battles.append(battle)
    return battles
