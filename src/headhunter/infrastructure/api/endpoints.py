"""URL builders for the game API"""

from urllib.parse import quote, urlencode


def encode_tag(tag: str) -> str:
    """Percent-encode a player/clan/tournament tag ('#' included)"""
    return quote(tag, safe="")


class Endpoints:
    """Builds absolute URLs against one API base"""

    def __init__(self, api_base: str):
        self.api_base = api_base.rstrip("/")

    def clan_members(self, clan_tag: str) -> str:
        return f"{self.api_base}/clans/{encode_tag(clan_tag)}/members"

    def tournament_search(self, keyword: str) -> str:
        return f"{self.api_base}/tournaments?{urlencode({'name': keyword})}"

    def tournament(self, tag: str) -> str:
        return f"{self.api_base}/tournaments/{encode_tag(tag)}"

    def player(self, tag: str) -> str:
        return f"{self.api_base}/players/{encode_tag(tag)}"

    def battle_log(self, tag: str) -> str:
        return f"{self.api_base}/players/{encode_tag(tag)}/battlelog"
