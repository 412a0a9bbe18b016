"""Tournament domain model"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TournamentMember:
    """Player listed in a tournament roster"""

    tag: str
    clan_tag: str | None = None

    @property
    def is_clanless(self) -> bool:
        return not self.clan_tag


@dataclass
class Tournament:
    """Tournament seen during one scan"""

    tag: str
    capacity: int = 0
    members: list[TournamentMember] | None = field(default=None)

    @property
    def member_count(self) -> int:
        return len(self.members) if self.members else 0

    def clanless_tags(self) -> list[str]:
        """Tags of roster members without a clan, in roster order"""
        if not self.members:
            return []
        return [m.tag for m in self.members if m.is_clanless]
