"""Shared constants for the game API and recruit storage."""

DEFAULT_API_BASE = "https://proxy.royaleapi.dev/v1"
USER_AGENT = "headhunter/1.0"

# Battle log types that count as clan war participation
WAR_BATTLE_TYPES = frozenset({"riverRacePvP", "boatBattle", "riverRaceDuel"})

# Single characters give the broadest tournament name coverage
DEFAULT_KEYWORDS = tuple("abcdefghijklmnopqrstuvwxyz0123456789")

BLACKLIST_KEY = "HH_BLACKLIST"
JSON_STORE_KEY = "HH_WEB_PAYLOAD"
LAST_PAYLOAD_TIMESTAMP_KEY = "LAST_PAYLOAD_TIMESTAMP"
SHORTLIST_SHEET = "Headhunter"

MAX_BACKUPS = 5
PAYLOAD_TTL_SECONDS = 21600
