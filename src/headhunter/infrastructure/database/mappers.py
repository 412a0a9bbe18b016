"""Mappers between Recruit/BlacklistEntry and their stored forms"""

from datetime import datetime, timezone
from typing import Any

from loguru import logger

from headhunter.domain.models import BlacklistEntry, Recruit

SHORTLIST_HEADERS = [
    "Tag",
    "Invited",
    "Name",
    "Trophies",
    "Donations",
    "Cards Won",
    "War Wins",
    "Found",
    "Raw Score",
    "Performance Score",
]

TAG, INVITED, NAME, TROPHIES, DONATIONS, CARDS, WAR, FOUND, RAW, PERF = range(
    len(SHORTLIST_HEADERS)
)


def _to_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_bool(value: Any) -> bool:
    """Broad truthy check: True, 'TRUE', 'true', 1, '1'"""
    if isinstance(value, bool):
        return value
    return str(value).strip().upper() in ("TRUE", "1")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def map_recruit_to_row(recruit: Recruit) -> list[Any]:
    """Map a Recruit to a shortlist row"""
    return [
        recruit.tag,
        recruit.invited,
        recruit.name,
        recruit.trophies,
        recruit.donations,
        recruit.cards_won,
        recruit.war_score,
        recruit.found_date.isoformat(),
        recruit.raw_score,
        recruit.perf_score,
    ]


def map_row_to_recruit(row: list[Any]) -> Recruit | None:
    """Map a shortlist row to a Recruit

    Returns:
        Recruit, or None for blank or malformed rows
    """
    if not row or len(row) < len(SHORTLIST_HEADERS):
        return None
    tag = str(row[TAG] or "").strip()
    if not tag.startswith("#"):
        return None

    return Recruit(
        tag=tag,
        name=str(row[NAME] or ""),
        trophies=_to_int(row[TROPHIES]),
        donations=_to_int(row[DONATIONS]),
        cards_won=_to_int(row[CARDS]),
        war_score=_to_int(row[WAR]),
        raw_score=_to_int(row[RAW]),
        perf_score=_to_int(row[PERF]),
        found_date=_to_datetime(row[FOUND]) if row[FOUND] else datetime.now(
            timezone.utc
        ),
        invited=_to_bool(row[INVITED]),
    )


def map_rows_to_recruits(rows: list[list[Any]]) -> dict[str, Recruit]:
    """Map shortlist rows to a tag -> Recruit map, skipping bad rows"""
    recruits: dict[str, Recruit] = {}
    for row in rows:
        recruit = map_row_to_recruit(row)
        if recruit is not None:
            recruits[recruit.tag] = recruit
    return recruits


def map_entry_to_record(entry: BlacklistEntry) -> dict[str, int]:
    """Map a BlacklistEntry to its persisted {'e': epoch_ms, 's': score} form"""
    return {"e": int(entry.expiry.timestamp() * 1000), "s": entry.score}


def map_record_to_entry(tag: str, record: Any) -> BlacklistEntry | None:
    """Map a persisted record to a BlacklistEntry

    Accepts the current {'e', 's'} form and the legacy bare expiry
    timestamp (score 0).
    """
    try:
        if isinstance(record, dict):
            expiry_ms = float(record["e"])
            score = _to_int(record.get("s", 0))
        else:
            expiry_ms = float(record)
            score = 0
        expiry = datetime.fromtimestamp(expiry_ms / 1000, tz=timezone.utc)
    except (KeyError, TypeError, ValueError, OverflowError, OSError):
        logger.warning(f"Skipping malformed blacklist record for {tag}")
        return None

    return BlacklistEntry(tag=tag, expiry=expiry, score=score)
