"""Unit tests for configuration loading."""

from pathlib import Path

import pytest

from headhunter.core.config import Config, get_db_path, load_api_keys
from headhunter.shared.constants import DEFAULT_API_BASE
from headhunter.shared.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable Config.from_env() reads"""
    for i in range(1, 11):
        monkeypatch.delenv(f"ROYALE_API_KEY_{i}", raising=False)
    for name in (
        "ROYALE_API_KEYS",
        "ROYALE_API_BASE",
        "CLAN_TAG",
        "HEADHUNTER_DB_PATH",
        "HEADHUNTER_TARGET",
        "HEADHUNTER_BLACKLIST_DAYS",
        "WEB_APP_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_load_api_keys_merges_numbered_and_list(clean_env):
    clean_env.setenv("ROYALE_API_KEY_1", "one")
    clean_env.setenv("ROYALE_API_KEY_3", "three")
    clean_env.setenv("ROYALE_API_KEYS", "four, one ,,five")

    keys = load_api_keys()

    assert [k.value for k in keys] == ["one", "three", "four", "five"]
    assert keys[0].name == "ROYALE_API_KEY_1"


def test_from_env_with_defaults(clean_env, tmp_path):
    clean_env.setenv("CLAN_TAG", "ABC123")
    clean_env.setenv("ROYALE_API_KEY_1", "k1")
    clean_env.setenv("HEADHUNTER_DB_PATH", str(tmp_path / "hh.db"))

    config = Config.from_env()

    assert config.clan_tag == "#ABC123"
    assert config.db_path == str(tmp_path / "hh.db")
    assert config.fetch.api_base == DEFAULT_API_BASE
    assert config.fetch.max_fetch_per_execution == 400
    assert config.pool.target_size == 50
    assert config.pool.blacklist_days == 14
    assert config.scanner.time_limit_seconds == 240
    assert len(config.scanner.keywords) == 36


def test_from_env_overrides(clean_env, tmp_path):
    clean_env.setenv("CLAN_TAG", "#XYZ")
    clean_env.setenv("ROYALE_API_KEYS", "a,b")
    clean_env.setenv("ROYALE_API_BASE", "https://api.example/v1/")
    clean_env.setenv("HEADHUNTER_DB_PATH", str(tmp_path / "hh.db"))
    clean_env.setenv("HEADHUNTER_TARGET", "30")
    clean_env.setenv("HEADHUNTER_BLACKLIST_DAYS", "7")

    config = Config.from_env()

    assert config.clan_tag == "#XYZ"
    assert len(config.api_keys) == 2
    assert config.fetch.api_base == "https://api.example/v1"
    assert config.pool.target_size == 30
    assert config.pool.blacklist_days == 7


def test_missing_clan_tag_raises(clean_env):
    clean_env.setenv("ROYALE_API_KEY_1", "k1")

    with pytest.raises(ConfigurationError, match="CLAN_TAG"):
        Config.from_env()


def test_missing_api_keys_raise(clean_env):
    clean_env.setenv("CLAN_TAG", "#ABC")

    with pytest.raises(ConfigurationError, match="API keys"):
        Config.from_env()


def test_invalid_pool_setting_raises(clean_env, tmp_path):
    clean_env.setenv("CLAN_TAG", "#ABC")
    clean_env.setenv("ROYALE_API_KEY_1", "k1")
    clean_env.setenv("HEADHUNTER_DB_PATH", str(tmp_path / "hh.db"))
    clean_env.setenv("HEADHUNTER_TARGET", "fifty")

    with pytest.raises(ConfigurationError):
        Config.from_env()


def test_db_path_env_override(clean_env):
    clean_env.setenv("HEADHUNTER_DB_PATH", "/tmp/custom.db")

    assert get_db_path() == Path("/tmp/custom.db")
