"""Pytest fixtures for Headhunter tests"""

import random
import sys
from pathlib import Path

import httpx
import pytest
from dotenv import load_dotenv

# =============================================================================
# Global Test Setup
# =============================================================================

# Add src to Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Load environment variables from .env file for all tests
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from headhunter.core.config import FetchConfig  # noqa: E402
from headhunter.domain.models import ApiKey  # noqa: E402
from headhunter.infrastructure.api import ApiClient, ExecutionContext  # noqa: E402
from headhunter.infrastructure.cache import (  # noqa: E402
    ChunkedCache,
    ChunkedProperties,
)
from headhunter.infrastructure.database import (  # noqa: E402
    Database,
    SqliteKeyValueStore,
    SqliteRowStore,
)
from headhunter.infrastructure.locking import OperationLocks  # noqa: E402
from tests.factories import API_BASE  # noqa: E402

@pytest.fixture
def test_db():
    """In-memory SQLite database for testing"""
    db = Database(":memory:")
    yield db
    db.close()


@pytest.fixture
def cache_store(test_db) -> SqliteKeyValueStore:
    return SqliteKeyValueStore(test_db, "cache", max_value_size=100_000)


@pytest.fixture
def property_store(test_db) -> SqliteKeyValueStore:
    return SqliteKeyValueStore(test_db, "properties", max_value_size=9_000)


@pytest.fixture
def chunked_cache(cache_store) -> ChunkedCache:
    return ChunkedCache(cache_store)


@pytest.fixture
def properties(property_store) -> ChunkedProperties:
    return ChunkedProperties(property_store)


@pytest.fixture
def row_store(test_db) -> SqliteRowStore:
    return SqliteRowStore(test_db, "Headhunter")


@pytest.fixture
def locks() -> OperationLocks:
    return OperationLocks(timeout_seconds=0.05)


@pytest.fixture
def api_keys() -> list[ApiKey]:
    return [ApiKey(name="KEY_A", value="A"), ApiKey(name="KEY_B", value="B")]


@pytest.fixture
def fast_fetch_config() -> FetchConfig:
    """Fetch settings with no sleeping between chunks or retries"""
    return FetchConfig(
        api_base=API_BASE,
        backoff_base_seconds=0.0,
        chunk_delay_seconds=0.0,
    )


@pytest.fixture
def make_api(api_keys, fast_fetch_config):
    """Build an ApiClient whose requests are answered by handler

    Usage:
        async with make_api(handler) as api:
            ...
    """

    def _make(handler, keys=None, rng=None, config=None) -> ApiClient:
        context = ExecutionContext(
            key_pool=list(keys if keys is not None else api_keys),
            rng=rng or random.Random(7),
        )
        return ApiClient(
            context,
            config or fast_fetch_config,
            transport=httpx.MockTransport(handler),
        )

    return _make
