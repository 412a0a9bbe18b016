"""Unit tests for domain models."""

from datetime import datetime, timedelta, timezone

from headhunter.domain.models import Tournament, TournamentMember
from tests.factories import BlacklistFactory, RecruitFactory

NOW = datetime(2025, 11, 3, tzinfo=timezone.utc)


def test_recruit_short_id_strips_hash():
    assert RecruitFactory.recruit(tag="#ABC").short_id == "ABC"


def test_blacklist_entry_active_until_expiry():
    entry = BlacklistFactory.entry(expiry=NOW + timedelta(seconds=1))

    assert entry.is_active(NOW)
    assert not entry.is_active(NOW + timedelta(seconds=1))


def test_tournament_member_clan_flags():
    assert TournamentMember(tag="#A").is_clanless
    assert TournamentMember(tag="#A", clan_tag="").is_clanless
    assert not TournamentMember(tag="#A", clan_tag="#C").is_clanless


def test_tournament_before_detail_fetch_has_no_roster():
    tournament = Tournament(tag="#T", capacity=100)

    assert tournament.member_count == 0
    assert tournament.clanless_tags() == []
