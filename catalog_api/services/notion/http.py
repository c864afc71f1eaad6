"""
HTTP client with per-attempt timeout and exponential backoff.

Retries on HTTP 429, HTTP >= 500 and transport failures. Any other
non-2xx response is returned untouched so the caller can inspect it.

Usage:
    async with RetryingHttpClient() as http:
        response = await http.request("GET", url, headers=headers)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Final

import httpx

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import NetworkError

logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================


DEFAULT_TIMEOUT_SECONDS: Final[float] = 5.0
DEFAULT_MAX_RETRIES: Final[int] = 3
DEFAULT_BACKOFF_BASE: Final[float] = 2.0
DEFAULT_INITIAL_DELAY: Final[float] = 1.0


@dataclass(frozen=True, slots=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        timeout: Per-attempt timeout in seconds (default: 5.0).
        max_retries: Total number of attempts (default: 3).
        initial_delay: Delay before the second attempt, in seconds.
        backoff_base: Exponential backoff multiplier (default: 2.0).
    """

    timeout: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = DEFAULT_INITIAL_DELAY
    backoff_base: float = DEFAULT_BACKOFF_BASE

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.initial_delay < 0:
            raise ValueError("initial_delay must be >= 0")

    @classmethod
    def from_settings(cls) -> RetryConfig:
        return cls(
            timeout=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
        )


def calculate_backoff(attempt: int, config: RetryConfig | None = None) -> float:
    """
    Delay before retrying after ``attempt`` (0-indexed) failed.

        >>> [calculate_backoff(a) for a in range(3)]
        [1.0, 2.0, 4.0]
    """
    if config is None:
        config = RetryConfig()
    return config.initial_delay * (config.backoff_base ** attempt)


def is_retryable_status(status_code: int) -> bool:
    """429 (rate limited) and every 5xx are worth another attempt."""
    return status_code == 429 or status_code >= 500


class RetryingHttpClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` adding retry with backoff.

    The wrapped client may be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise one is created and owned here.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config or RetryConfig.from_settings()
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None
        self._sleep = sleep

    async def __aenter__(self) -> RetryingHttpClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        max_retries: int | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send a request, retrying transient failures.

        Args:
            method: HTTP method.
            url: Absolute URL.
            max_retries: Overrides the configured number of attempts.
            **kwargs: Forwarded to ``httpx.AsyncClient.request``.

        Returns:
            The first 2xx response, or the first non-retryable error response.

        Raises:
            NetworkError: Every attempt failed with a transport error, a
                timeout, 429 or 5xx.
        """
        attempts = max_retries if max_retries is not None else self.config.max_retries
        last_error: Exception | None = None
        last_status: int | None = None

        for attempt in range(attempts):
            is_last = attempt == attempts - 1
            try:
                response = await asyncio.wait_for(
                    self._client.request(method, url, timeout=self.config.timeout, **kwargs),
                    timeout=self.config.timeout,
                )
            except (httpx.HTTPError, asyncio.TimeoutError) as e:
                last_error = e
                logger.warning(
                    "HTTP attempt failed",
                    method=method,
                    url=url,
                    attempt=attempt,
                    error=repr(e),
                )
                if not is_last:
                    await self._sleep(calculate_backoff(attempt, self.config))
                continue

            if response.is_success or not is_retryable_status(response.status_code):
                return response

            last_status = response.status_code
            logger.warning(
                "HTTP attempt got retryable status",
                method=method,
                url=url,
                attempt=attempt,
                status_code=response.status_code,
            )
            if not is_last:
                await self._sleep(calculate_backoff(attempt, self.config))

        if last_error is not None:
            raise NetworkError(f"{method} {url} failed: {last_error!r}") from last_error
        raise NetworkError(f"Max retries exceeded (last status {last_status})")
