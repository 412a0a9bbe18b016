"""ApiClient - batched, deduplicated game API fetches with key rotation"""

import asyncio
import logging
from typing import Any

import httpx
from loguru import logger

from headhunter.core.config import FetchConfig
from headhunter.domain.models import ApiKey
from headhunter.shared.constants import USER_AGENT
from headhunter.shared.exceptions import ApiClientError

from .context import ExecutionContext
from .endpoints import Endpoints
from .retry import RetryPolicy

REJECTED_KEY_CODES = (403, 429)


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


class ApiClient:
    """Batched HTTP client for the read-only game API

    Responsibilities:
    - Execution-cache lookups and URL deduplication
    - Fetch budget enforcement
    - Chunked concurrent requests
    - Key rotation and eviction on 403/429
    - Retry with backoff on 5xx, bad JSON and network errors

    Every failure short of losing all keys resolves to None in the
    returned list.
    """

    _logging_bridge_installed = False

    def __init__(
        self,
        context: ExecutionContext,
        config: FetchConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise API client

        Args:
            context: Per-invocation key pool, cache and counter
            config: Fetch engine settings
            transport: Optional httpx transport (for testing)
        """
        self.context = context
        self.config = config or FetchConfig()
        self.endpoints = Endpoints(self.config.api_base)
        self.retry_policy = RetryPolicy(
            max_attempts=self.config.retry_max,
            base_delay=self.config.backoff_base_seconds,
        )
        self.request_count = 0
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None
        self.install_logging_bridge()

    @classmethod
    def install_logging_bridge(cls) -> None:
        """Bridge stdlib logging used by httpx into loguru once."""
        if cls._logging_bridge_installed:
            return

        handler = _LoguruHandler()
        std_logger = logging.getLogger("httpx")
        std_logger.setLevel(logging.WARNING)
        std_logger.addHandler(handler)
        std_logger.propagate = False

        cls._logging_bridge_installed = True

    def _build_http_client(self) -> httpx.AsyncClient:
        """Create an AsyncClient with request/response logging hooks."""
        return httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            transport=self._transport,
            event_hooks={
                "request": [self._log_httpx_request],
                "response": [self._log_httpx_response],
            },
        )

    async def _log_httpx_request(self, request: httpx.Request) -> None:
        """Log outbound requests (auth masked)."""
        headers = {
            k: ("***" if k.lower() == "authorization" else v)
            for k, v in request.headers.items()
        }
        logger.debug(f"HTTPX request: {request.method} {request.url} {headers}")

    async def _log_httpx_response(self, response: httpx.Response) -> None:
        """Log response status and size."""
        logger.debug(
            f"HTTPX response: status={response.status_code} url={response.url} "
            f"bytes={response.headers.get('Content-Length', '?')}"
        )

    async def __aenter__(self) -> "ApiClient":
        self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def open(self) -> None:
        if self._http_client is None:
            self._http_client = self._build_http_client()

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_batch(self, urls: list[str]) -> list[Any]:
        """Resolve URLs to parsed JSON, preserving input order

        Args:
            urls: Absolute URLs; duplicates are fetched once

        Returns:
            One entry per input URL: parsed JSON or None

        Raises:
            CredentialsExhaustedError: If the key pool empties
        """
        if not urls:
            return []

        ctx = self.context
        limit = self.config.max_fetch_per_execution
        if ctx.fetch_count > limit:
            logger.error(
                f"API budget exceeded ({ctx.fetch_count}/{limit}). "
                f"Refusing {len(urls)} fetches"
            )
            return [None] * len(urls)
        ctx.fetch_count += len(urls)

        results: list[Any] = [None] * len(urls)
        positions: dict[str, list[int]] = {}
        for index, url in enumerate(urls):
            if url in ctx.response_cache:
                results[index] = ctx.response_cache[url]
            else:
                positions.setdefault(url, []).append(index)

        pending = list(positions)
        if not pending:
            return results

        size = self.config.batch_size
        for start in range(0, len(pending), size):
            chunk = pending[start : start + size]
            await self._fetch_chunk(chunk)

            for url in chunk:
                if url in ctx.response_cache:
                    for index in positions[url]:
                        results[index] = ctx.response_cache[url]

            if start + size < len(pending) and self.config.chunk_delay_seconds:
                await asyncio.sleep(self.config.chunk_delay_seconds)

        return results

    async def _fetch_chunk(self, chunk: list[str]) -> None:
        """Fetch one chunk concurrently, retrying unresolved URLs

        Resolved URLs (200 and 404) land in the execution cache.
        """
        ctx = self.context
        remaining = list(chunk)
        attempt = 0

        while remaining:
            attempt += 1
            assignments = [(url, ctx.pick_key()) for url in remaining]

            outcomes = await asyncio.gather(
                *(self._get(url, key) for url, key in assignments),
                return_exceptions=True,
            )

            retry: list[str] = []
            for (url, key), outcome in zip(assignments, outcomes):
                if isinstance(outcome, httpx.RequestError):
                    logger.warning(
                        f"Network error (attempt {attempt}) for {url}: {outcome}"
                    )
                    retry.append(url)
                    continue
                if isinstance(outcome, BaseException):
                    raise outcome

                if self._handle_response(url, key, outcome):
                    retry.append(url)

            remaining = retry
            if not remaining:
                break

            if not self.retry_policy.should_retry(attempt):
                logger.warning(
                    f"Giving up on {len(remaining)} URL(s) after {attempt} attempts"
                )
                break

            delay = self.retry_policy.delay_for(attempt)
            if delay:
                logger.info(
                    f"Retrying {len(remaining)} URL(s) in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)

    def _handle_response(
        self, url: str, key: ApiKey, response: httpx.Response
    ) -> bool:
        """Cache a resolved response

        Returns:
            True if the URL should be retried
        """
        code = response.status_code

        if code == 200:
            try:
                self.context.response_cache[url] = response.json()
            except ValueError:
                logger.warning(f"JSON parse error: {url}")
                return True
            return False

        if code == 404:
            self.context.response_cache[url] = None
            return False

        if code in REJECTED_KEY_CODES:
            self.context.evict(key, code)
            return True

        logger.warning(f"API {code} for {url}")
        return code >= 500

    async def _get(self, url: str, key: ApiKey) -> httpx.Response:
        if self._http_client is None:
            raise ApiClientError("HTTP client not initialized")

        headers = {
            "Authorization": f"Bearer {key.value}",
            "User-Agent": USER_AGENT,
            "Accept-Encoding": "gzip",
        }
        self.request_count += 1
        return await self._http_client.get(url, headers=headers)
