"""External API client for the greeting server."""

import asyncio
import logging
import httpx
from pydantic import ValidationError

from greeter.config import get_settings
from greeter.models.greeting import GreetingPayload

logger = logging.getLogger(__name__)


class GreetingError(Exception):
    """Base error for greeting requests."""


class GreetingTimeoutError(GreetingError):
    """No response arrived within the configured bound."""


class GreetingTransportError(GreetingError):
    """Network-level failure, or a body that could not be decoded."""


class GreetingServerError(GreetingError):
    """The server answered with a status other than 200."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Greeting server returned HTTP {status_code}")


class GreetingClient:
    """Client for the greeting server.

    Issues a plain ``GET /saludo`` (no headers, body or query) bounded by a
    total timeout measured from the start of the request.
    """

    def __init__(
        self,
        base_url: str | None = None,
        path: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.greeting_base_url
        self.path = path or settings.greeting_path
        self.timeout = timeout if timeout is not None else settings.greeting_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_greeting(self) -> GreetingPayload:
        """Fetch the greeting.

        Raises GreetingTimeoutError, GreetingServerError or
        GreetingTransportError. Retries are never attempted.
        """
        client = await self._get_client()
        try:
            response = await asyncio.wait_for(
                client.get(self.path),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Greeting request timed out after {self.timeout}s")
            raise GreetingTimeoutError(f"No response within {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error(f"Greeting request failed: {e}")
            raise GreetingTransportError(str(e) or type(e).__name__) from e

        if response.status_code != 200:
            logger.warning(f"Greeting server returned HTTP {response.status_code}")
            raise GreetingServerError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise GreetingTransportError(f"Invalid JSON body: {e}") from e

        if not isinstance(data, dict):
            raise GreetingTransportError("Greeting body is not a JSON object")

        try:
            return GreetingPayload.model_validate(data)
        except ValidationError as e:
            raise GreetingTransportError(f"Invalid greeting body: {e}") from e
