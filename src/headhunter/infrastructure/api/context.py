"""Per-invocation fetch state"""

import random
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from headhunter.domain.models import ApiKey
from headhunter.shared.exceptions import CredentialsExhaustedError


@dataclass
class ExecutionContext:
    """State shared by every fetch within one invocation.

    Holds the live key pool, the URL -> response cache and the fetch
    counter. Create a fresh context at the start of each run; never reset
    one mid-run.
    """

    key_pool: list[ApiKey]
    rng: random.Random = field(default_factory=random.Random)
    response_cache: dict[str, Any] = field(default_factory=dict)
    fetch_count: int = 0
    evicted: list[ApiKey] = field(default_factory=list)

    @classmethod
    def create(
        cls, api_keys: list[ApiKey], seed: int | None = None
    ) -> "ExecutionContext":
        """Start a run with a private copy of the configured keys

        Raises:
            CredentialsExhaustedError: If no keys are configured
        """
        if not api_keys:
            raise CredentialsExhaustedError("No API keys configured")
        return cls(key_pool=list(api_keys), rng=random.Random(seed))

    def pick_key(self) -> ApiKey:
        """Pick a live key uniformly at random

        Raises:
            CredentialsExhaustedError: If every key has been evicted
        """
        if not self.key_pool:
            raise CredentialsExhaustedError("All API keys exhausted")
        return self.rng.choice(self.key_pool)

    def evict(self, key: ApiKey, status_code: int) -> None:
        """Remove a rejected key for the rest of the run"""
        if key not in self.key_pool:
            return
        self.key_pool.remove(key)
        self.evicted.append(key)
        logger.warning(
            f"API {status_code} on key {key.name}. Removing "
            f"({len(self.key_pool)} keys left)"
        )
