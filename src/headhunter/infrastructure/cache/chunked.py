"""Chunked storage for payloads larger than a backend's per-key limit

Layout for a key K holding a value that does not fit in one slot:

    K_0 .. K_{n-1}   fixed-size substrings, in order
    K_meta           {"count": n}

K itself is removed so a reader never sees a stale unchunked value.
"""

import json
import math
from typing import Any

from loguru import logger

from headhunter.domain.repositories import KeyValueStore
from headhunter.shared.constants import PAYLOAD_TTL_SECONDS

CACHE_CHUNK_SIZE = 90_000
PROPERTY_CHUNK_SIZE = 8_000


def meta_key(key: str) -> str:
    return f"{key}_meta"


def chunk_key(key: str, index: int) -> str:
    return f"{key}_{index}"


def split_chunks(value: str, size: int) -> list[str]:
    return [value[i : i + size] for i in range(0, len(value), size)]


class ChunkedCache:
    """putLarge/getLarge over an expiring key/value store"""

    def __init__(self, backend: KeyValueStore, chunk_size: int = CACHE_CHUNK_SIZE):
        self.backend = backend
        self.chunk_size = chunk_size

    def put_large(
        self, key: str, value: str, ttl_seconds: int | None = PAYLOAD_TTL_SECONDS
    ) -> None:
        """Store value under key, chunking when it exceeds chunk_size"""
        if len(value) <= self.chunk_size:
            self.backend.put(key, value, ttl_seconds)
            self.backend.remove(meta_key(key))
            return

        chunks = split_chunks(value, self.chunk_size)
        for index, chunk in enumerate(chunks):
            self.backend.put(chunk_key(key, index), chunk, ttl_seconds)

        self.backend.put(
            meta_key(key), json.dumps({"count": len(chunks)}), ttl_seconds
        )
        self.backend.remove(key)
        logger.debug(
            f"Cache: split {math.ceil(len(value) / 1024)}KB "
            f"into {len(chunks)} chunks for '{key}'"
        )

    def get_large(self, key: str) -> str | None:
        """Reassemble a value; None if absent or any chunk is missing"""
        standard = self.backend.get(key)
        if standard is not None:
            return standard

        meta = self.backend.get(meta_key(key))
        if meta is None:
            return None

        try:
            count = int(json.loads(meta)["count"])
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Cache reassembly failed for '{key}': bad meta ({e})")
            return None

        keys = [chunk_key(key, i) for i in range(count)]
        parts = self.backend.get_all(keys)
        if any(k not in parts for k in keys):
            logger.warning(
                f"Cache reassembly failed for '{key}': "
                f"{count - len(parts)} of {count} chunks missing"
            )
            return None
        return "".join(parts[k] for k in keys)

    def remove_large(self, key: str) -> None:
        self.backend.remove(key)
        self.backend.remove(meta_key(key))


class ChunkedProperties:
    """getChunked/setChunked: JSON objects over a durable key/value store"""

    def __init__(
        self, backend: KeyValueStore, chunk_size: int = PROPERTY_CHUNK_SIZE
    ):
        self._chunks = ChunkedCache(backend, chunk_size=chunk_size)

    def get_chunked(self, key: str, default: Any = None) -> Any:
        """Load a JSON object; corrupt or missing data yields default"""
        raw = self._chunks.get_large(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Corrupted property '{key}', resetting to default")
            return default

    def set_chunked(self, key: str, value: Any) -> None:
        self._chunks.put_large(key, json.dumps(value), ttl_seconds=None)

    def get(self, key: str) -> str | None:
        return self._chunks.backend.get(key)

    def set(self, key: str, value: str) -> None:
        self._chunks.backend.put(key, value)
