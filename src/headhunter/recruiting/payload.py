"""Web payload cache

The shortlist is published as a compact JSON matrix for web clients. Rows
that are invited or actively blacklisted are hidden even when the shortlist
has not been rewritten yet.
"""

import json
import time
from typing import Any

from loguru import logger

from headhunter.domain.models import Recruit
from headhunter.domain.repositories import RowStore
from headhunter.infrastructure.cache import ChunkedCache, ChunkedProperties
from headhunter.infrastructure.database.mappers import map_row_to_recruit
from headhunter.infrastructure.locking import OperationLocks
from headhunter.shared.constants import (
    JSON_STORE_KEY,
    LAST_PAYLOAD_TIMESTAMP_KEY,
    PAYLOAD_TTL_SECONDS,
)

from .blacklist import BlacklistStore

PAYLOAD_SCHEMA = {"hh": ["id", "n", "t", "s", "don", "war", "ago", "cards"]}


def recruit_to_matrix_row(recruit: Recruit) -> list[Any]:
    return [
        recruit.short_id,
        recruit.name,
        recruit.trophies,
        recruit.perf_score,
        recruit.donations,
        recruit.war_score,
        recruit.found_date.isoformat(),
        recruit.cards_won,
    ]


def error_envelope(code: str, message: str) -> str:
    return json.dumps(
        {
            "success": False,
            "data": None,
            "error": {"code": code, "message": message},
        }
    )


class PayloadService:
    """Builds, caches and serves the shortlist payload"""

    def __init__(
        self,
        row_store: RowStore,
        blacklist: BlacklistStore,
        cache: ChunkedCache,
        properties: ChunkedProperties,
        locks: OperationLocks,
        ttl_seconds: int = PAYLOAD_TTL_SECONDS,
    ):
        self.row_store = row_store
        self.blacklist = blacklist
        self.cache = cache
        self.properties = properties
        self.locks = locks
        self.ttl_seconds = ttl_seconds

    def visible_rows(self) -> list[list[Any]]:
        """Matrix rows for every recruit that is neither invited nor blacklisted"""
        hidden = self.blacklist.active_tags()
        rows = []
        for raw in self.row_store.read_rows():
            recruit = map_row_to_recruit(raw)
            if recruit is None or recruit.invited or recruit.tag in hidden:
                continue
            if len(recruit.short_id) < 3:
                continue
            rows.append(recruit_to_matrix_row(recruit))
        return rows

    def build(self) -> dict[str, Any]:
        return {
            "success": True,
            "data": {
                "format": "matrix",
                "schema": PAYLOAD_SCHEMA,
                "hh": self.visible_rows(),
                "timestamp": int(time.time() * 1000),
            },
            "error": None,
        }

    async def refresh(self) -> str:
        """Regenerate and cache the payload

        Returns:
            The payload JSON, or an error envelope if generation failed
        """
        async with self.locks.hold("PAYLOAD_GEN"):
            try:
                payload = self.build()
                payload_str = json.dumps(payload)
                self.cache.put_large(JSON_STORE_KEY, payload_str, self.ttl_seconds)
                self.properties.set(
                    LAST_PAYLOAD_TIMESTAMP_KEY, str(payload["data"]["timestamp"])
                )
            except Exception as e:
                logger.error(f"Payload generation failed: {e}")
                return error_envelope(
                    "PAYLOAD_GENERATION_FAILED",
                    f"Failed to generate data from storage: {e}",
                )

        logger.info(
            f"Web payload generated ({round(len(payload_str) / 1024)} KB, "
            f"{len(payload['data']['hh'])} recruits)"
        )
        return payload_str

    async def get(self, force_refresh: bool = False) -> str:
        """Serve the cached payload, regenerating on a miss or when forced"""
        if not force_refresh:
            cached = self.cache.get_large(JSON_STORE_KEY)
            if cached is not None:
                return cached
            logger.info("Payload cache miss, regenerating")
        else:
            logger.info("Force-refreshing payload")
        return await self.refresh()
