"""Configuration management for Headhunter"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from headhunter.domain.models import ApiKey
from headhunter.shared.constants import DEFAULT_API_BASE, DEFAULT_KEYWORDS
from headhunter.shared.exceptions import ConfigurationError

MAX_NUMBERED_KEYS = 10


@dataclass
class FetchConfig:
    """Configuration for the batched API fetch engine"""

    api_base: str = DEFAULT_API_BASE

    # Requests issued concurrently per chunk
    batch_size: int = 10

    # Attempts per chunk before unresolved URLs give up
    retry_max: int = 3

    # Backoff between attempts is attempt * this (seconds)
    backoff_base_seconds: float = 1.0

    # Pause between sequential chunks (seconds)
    chunk_delay_seconds: float = 0.2

    # Total URLs one invocation may request before fetches are refused
    max_fetch_per_execution: int = 400

    timeout_seconds: float = 20.0


@dataclass
class ScannerConfig:
    """Configuration for the tournament scan"""

    keywords: tuple[str, ...] = DEFAULT_KEYWORDS

    # Top tournaments by capacity kept before shuffling
    lottery_pool_size: int = 200

    # Tournaments actually scanned after shuffling
    scan_size: int = 75

    # Rooms with fewer members are ignored
    min_members: int = 10

    # Player profiles fetched per run
    max_profiles: int = 50

    # War wins credited when the battle log shows war activity
    war_bonus: int = 500

    # Wall-clock budget for one scan (seconds)
    time_limit_seconds: float = 240.0


@dataclass
class ScoringWeights:
    """Weights for the raw recruit score"""

    trophy: float = 1.0
    donations: float = 0.5
    war: float = 20.0


@dataclass
class PoolConfig:
    """Configuration for the shortlist and blacklist"""

    target_size: int = 50
    blacklist_days: int = 14
    benchmark_top_n: int = 3

    # Threshold while the pool is below target, as a share of clan average
    filling_ratio: float = 0.75
    trophy_floor: int = 4000
    default_baseline: float = 4000.0


def get_db_path() -> Path:
    """Get database path that works both locally and in production.

    Priority order:
    1. HEADHUNTER_DB_PATH environment variable
    2. Production path: /opt/headhunter/data/headhunter.db
    3. Local development path: project_root/data/headhunter.db

    Returns:
        Path object for the database file
    """
    env_path = os.getenv("HEADHUNTER_DB_PATH")
    if env_path:
        return Path(env_path)

    production_path = Path("/opt/headhunter/data/headhunter.db")
    if production_path.parent.exists():
        logger.debug(f"Using production database path: {production_path}")
        return production_path

    project_root = Path(__file__).parent.parent.parent.parent
    local_path = project_root / "data" / "headhunter.db"
    local_path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Using local database path: {local_path}")
    return local_path


def load_api_keys() -> list[ApiKey]:
    """Collect API keys from the environment.

    Numbered variables ROYALE_API_KEY_1..10 are read first; a comma-separated
    ROYALE_API_KEYS list is appended. Duplicate values are dropped.
    """
    keys: list[ApiKey] = []
    seen: set[str] = set()

    for i in range(1, MAX_NUMBERED_KEYS + 1):
        name = f"ROYALE_API_KEY_{i}"
        value = os.getenv(name, "").strip()
        if value and value not in seen:
            keys.append(ApiKey(name=name, value=value))
            seen.add(value)

    for i, value in enumerate(os.getenv("ROYALE_API_KEYS", "").split(",")):
        value = value.strip()
        if value and value not in seen:
            keys.append(ApiKey(name=f"ROYALE_API_KEYS[{i}]", value=value))
            seen.add(value)

    return keys


@dataclass
class Config:
    """Configuration for Headhunter loaded from environment variables"""

    clan_tag: str
    api_keys: list[ApiKey]
    db_path: str = "/opt/headhunter/data/headhunter.db"
    web_app_url: str = ""
    lock_timeout_seconds: float = 30.0
    fetch: FetchConfig = field(default_factory=FetchConfig)
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    pool: PoolConfig = field(default_factory=PoolConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables

        Returns:
            Config instance with values from environment

        Raises:
            ConfigurationError: If required variables are missing or invalid
        """
        clan_tag = os.getenv("CLAN_TAG", "").strip()
        if not clan_tag:
            raise ConfigurationError("CLAN_TAG must be set")
        if not clan_tag.startswith("#"):
            clan_tag = f"#{clan_tag}"

        api_keys = load_api_keys()
        if not api_keys:
            raise ConfigurationError(
                "No API keys configured. Set ROYALE_API_KEY_1..10 "
                "or ROYALE_API_KEYS"
            )

        fetch = FetchConfig(
            api_base=os.getenv("ROYALE_API_BASE", DEFAULT_API_BASE).rstrip("/")
        )
        pool = PoolConfig()
        try:
            pool.target_size = int(
                os.getenv("HEADHUNTER_TARGET", pool.target_size)
            )
            pool.blacklist_days = int(
                os.getenv("HEADHUNTER_BLACKLIST_DAYS", pool.blacklist_days)
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid pool setting: {e}") from e

        config = cls(
            clan_tag=clan_tag,
            api_keys=api_keys,
            db_path=str(get_db_path()),
            web_app_url=os.getenv("WEB_APP_URL", ""),
            fetch=fetch,
            pool=pool,
        )

        logger.info("Configuration loaded:")
        logger.info(f"  Clan: {config.clan_tag}")
        logger.info(f"  API Keys: {len(config.api_keys)}")
        logger.info(f"  API Base: {config.fetch.api_base}")
        logger.info(f"  Database: {config.db_path}")
        logger.info(f"  Target Pool Size: {config.pool.target_size}")
        logger.info(f"  Blacklist Days: {config.pool.blacklist_days}")
        logger.info(
            f"  Fetch Budget: {config.fetch.max_fetch_per_execution} requests"
        )
        logger.info(
            f"  Scan Budget: {config.scanner.time_limit_seconds:.0f}s, "
            f"{config.scanner.scan_size} tournaments"
        )

        return config
