"""Single-shot HTTP fetcher for feed payloads."""

import asyncio
import time
from typing import Optional

import httpx
import structlog

from ..config import IngestionConfig
from ..errors import FeedFetchError, FeedTimeoutError
from .models import FetchResult

logger = structlog.get_logger(__name__)


class FeedFetcher:
    """Fetch raw RSS/Atom payloads.

    One GET per call, no retries. Timeouts are reported as
    ``FeedTimeoutError`` so callers can tell them apart from HTTP and
    transport failures (``FeedFetchError``).
    """

    def __init__(
        self,
        config: Optional[IngestionConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize feed fetcher."""
        self.config = config or IngestionConfig()
        self.transport = transport

    @property
    def timeout(self) -> float:
        return self.config.timeout_seconds

    @property
    def headers(self) -> dict:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": self.config.accept,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=self.headers,
            transport=self.transport,
        )

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a feed URL and return its body, or the error that prevented it."""
        logger.info("feed_fetch_started", url=url)
        start = time.monotonic()

        def elapsed_ms() -> float:
            return round((time.monotonic() - start) * 1000, 1)

        try:
            async with self._client() as client:
                # httpx timeouts are per phase; wait_for bounds the whole request.
                response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            error = FeedTimeoutError(url, self.timeout)
            logger.warning("feed_fetch_failed", url=url, elapsed_ms=elapsed_ms(), error=str(error))
            return FetchResult(url=url, success=False, elapsed_ms=elapsed_ms(), error=error)
        except httpx.HTTPError as e:
            error = FeedFetchError(url, None, f"{type(e).__name__}: {e}")
            logger.warning("feed_fetch_failed", url=url, elapsed_ms=elapsed_ms(), error=str(error))
            return FetchResult(url=url, success=False, elapsed_ms=elapsed_ms(), error=error)

        if not response.is_success:
            error = FeedFetchError(url, response.status_code, response.reason_phrase)
            logger.warning(
                "feed_fetch_failed",
                url=url,
                status=response.status_code,
                elapsed_ms=elapsed_ms(),
                error=str(error),
            )
            return FetchResult(
                url=url,
                success=False,
                status_code=response.status_code,
                elapsed_ms=elapsed_ms(),
                error=error,
            )

        body = response.text
        result = FetchResult(
            url=url,
            success=True,
            body=body,
            status_code=response.status_code,
            elapsed_ms=elapsed_ms(),
        )
        logger.info(
            "feed_fetch_finished",
            url=url,
            status=response.status_code,
            elapsed_ms=result.elapsed_ms,
            size=result.size,
        )
        return result

    def fetch_sync(self, url: str) -> FetchResult:
        """Synchronous wrapper for fetch."""
        return asyncio.run(self.fetch(url))
