"""Pydantic models for API payload validation"""

from .api import (
    BattleLogEntry,
    ClanMember,
    ClanMembersResponse,
    PlayerProfile,
    TournamentDetail,
    TournamentRosterEntry,
    TournamentSummary,
    parse_battle_log,
    parse_model,
)

__all__ = [
    "BattleLogEntry",
    "ClanMember",
    "ClanMembersResponse",
    "PlayerProfile",
    "TournamentDetail",
    "TournamentRosterEntry",
    "TournamentSummary",
    "parse_battle_log",
    "parse_model",
]
