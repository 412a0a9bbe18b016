"""Domain models"""

from .api_key import ApiKey
from .blacklist import BlacklistEntry, BlacklistSnapshot
from .recruit import Recruit
from .tournament import Tournament, TournamentMember

__all__ = [
    "ApiKey",
    "BlacklistEntry",
    "BlacklistSnapshot",
    "Recruit",
    "Tournament",
    "TournamentMember",
]
