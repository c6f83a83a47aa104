"""Base source defining the fetch contract and the shared HTTP retry loop."""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx

from model_catalog.consts import (
    SOURCE_MAX_RETRIES,
    SOURCE_MAX_RETRY_DELAY,
    SOURCE_RETRY_DELAY_MS,
    SOURCE_TIMEOUT_SECONDS,
)
from model_catalog.errors import SourceFetchError
from model_catalog.models.model_catalog import CatalogModel, SourceType
from model_catalog.normalization.normalizer import normalize_source_response
from model_catalog.sources.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


def _retry_delay_from_env() -> int:
    raw = os.getenv("API_RETRY_MS", "").strip()
    if not raw:
        return SOURCE_RETRY_DELAY_MS
    try:
        return max(int(raw), 0)
    except ValueError:
        logger.warning(f"Ignoring invalid API_RETRY_MS={raw!r}")
        return SOURCE_RETRY_DELAY_MS


class BaseSource(ABC):
    """Abstract base class for model metadata sources.

    Subclasses set ``source_type`` and ``url`` and decode the response body in
    ``parse_response``. Fetching, retries and normalization are shared.
    """

    source_type: SourceType
    url: str
    params: dict[str, Any] | None = None

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        max_retries: int = SOURCE_MAX_RETRIES,
        retry_delay_ms: int | None = None,
        timeout: float = SOURCE_TIMEOUT_SECONDS,
    ):
        """Initialize source.

        Args:
            client: Shared HTTP client. When omitted the source creates and
                owns its own client.
            max_retries: Retries after the first attempt for retryable failures.
            retry_delay_ms: Initial retry delay. None = read from env (API_RETRY_MS).
            timeout: Request timeout in seconds for an owned client.
        """
        self.max_retries = max_retries
        self.timeout = timeout

        # Retry delay resolution: explicit param > env var > default
        if retry_delay_ms is None:
            retry_delay_ms = _retry_delay_from_env()
        self.retry_delay_ms = retry_delay_ms

        self._rate_limiter = RateLimiter(
            initial_delay=retry_delay_ms / 1000,
            max_delay=SOURCE_MAX_RETRY_DELAY,
        )
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        """Return the source identifier (e.g., 'models.dev')."""
        return self.source_type.value

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "BaseSource":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _retry(self, reason: str) -> bool:
        """Sleep before the next attempt, or return False when retries are exhausted."""
        if self._rate_limiter.attempts >= self.max_retries:
            return False
        delay = self._rate_limiter.backoff()
        logger.warning(f"{self.name}: {reason}, retrying in {delay:.1f}s")
        await asyncio.sleep(delay)
        return True

    async def _request(self) -> httpx.Response:
        """GET the source URL, retrying rate limits, server and network errors.

        Returns:
            Successful HTTP response.

        Raises:
            SourceFetchError: On non-retryable HTTP errors or once retries
                are exhausted.
        """
        client = await self._get_client()
        self._rate_limiter.reset()

        while True:
            try:
                response = await client.get(self.url, params=self.params)
            except httpx.TransportError as e:
                if await self._retry(f"network error ({e.__class__.__name__})"):
                    continue
                raise SourceFetchError(self.name, str(e) or "Network error") from e

            if response.status_code in RETRYABLE_STATUS_CODES:
                if await self._retry(f"HTTP {response.status_code}"):
                    continue
                raise SourceFetchError(
                    self.name,
                    f"HTTP {response.status_code} after {self.max_retries} retries",
                )

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise SourceFetchError(self.name, f"HTTP {response.status_code}") from e

            return response

    @abstractmethod
    def parse_response(self, response: httpx.Response) -> Any:
        """Decode a successful response into the raw payload for normalization."""
        ...

    async def fetch_raw(self) -> Any:
        """Fetch and decode the raw payload.

        Raises:
            SourceFetchError: If the request fails or the body cannot be decoded.
        """
        response = await self._request()
        try:
            payload = self.parse_response(response)
        except ValueError as e:
            raise SourceFetchError(self.name, f"Invalid response body: {e}") from e
        logger.debug(f"{self.name}: fetched {len(response.content)} bytes")
        return payload

    async def fetch_models(self, now: datetime | None = None) -> list[CatalogModel]:
        """Fetch the source and normalize it into CatalogModels.

        Args:
            now: Evaluation time for the ``new`` flag.

        Returns:
            Normalized models, in source order.
        """
        payload = await self.fetch_raw()
        models = normalize_source_response(self.source_type, payload, now=now)
        logger.info(f"Fetched {len(models)} models from {self.name}")
        return models
