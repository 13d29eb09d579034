"""HTTP client service used to fetch remote catalog documents."""

import asyncio
from typing import Any

import httpx
import structlog

from .. import __version__

log = structlog.stdlib.get_logger()


class HttpClientService:
    """Async HTTP client with retries and exponential backoff."""

    def __init__(
        self,
        timeout: float = 10.0,
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 8.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            base_delay: Base delay for exponential backoff in seconds
            max_delay: Maximum delay between retries in seconds
            transport: Optional transport, e.g. httpx.MockTransport in tests
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={
                "User-Agent": f"foundry-handhelds/{__version__}",
                "Accept": "application/json",
            },
            follow_redirects=True,
            transport=transport,
        )

        log.info("HTTP client service initialized", timeout=timeout, max_retries=max_retries)

    async def get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        """Make a GET request, retrying transient failures.

        Client errors (4xx) are not retried.

        Raises:
            httpx.HTTPStatusError: On an error status after all attempts
            httpx.RequestError: On a transport failure after all attempts
        """
        for attempt in range(self.max_retries + 1):
            try:
                log.debug("Making HTTP GET request", url=url, attempt=attempt + 1)

                response = await self._client.get(url, headers=headers)
                response.raise_for_status()

                log.info(
                    "HTTP GET request successful",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.content),
                )
                return response

            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                log.warning(
                    "HTTP GET request failed",
                    url=url,
                    attempt=attempt + 1,
                    error=str(e),
                    error_type=type(e).__name__,
                )

                if isinstance(e, httpx.HTTPStatusError) and 400 <= e.response.status_code < 500:
                    log.error("Client error, not retrying", status_code=e.response.status_code)
                    raise

                if attempt == self.max_retries:
                    log.error("HTTP GET request failed after all retries", url=url,
                              total_attempts=self.max_retries + 1)
                    raise

                delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                log.info("Retrying after delay", delay=delay)
                await asyncio.sleep(delay)

        raise RuntimeError("Unexpected end of retry loop")

    async def get_json(self, url: str) -> Any:
        """GET a URL and decode the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON
        """
        response = await self.get(url)
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.info("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        await self.close()
