"""Identity provider clients for anonymous sign-in."""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator
import httpx

from greeter.config import get_settings
from greeter.models.auth import Session
from greeter.utils.helpers import QueueStream, latest_value_queue, put_latest

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Base error raised by identity providers."""


class SignInError(IdentityProviderError):
    """The provider rejected an anonymous sign-in."""


class SignOutError(IdentityProviderError):
    """The provider rejected a sign-out."""


class IdentityProvider(ABC):
    """Owns the current session and broadcasts every change of it.

    Subclasses implement the sign-in and sign-out calls and report the
    resulting session through ``_publish``.
    """

    def __init__(self):
        self._current: Session | None = None
        self._subscribers: set[asyncio.Queue[Session | None]] = set()

    @property
    def current_session(self) -> Session | None:
        return self._current

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @asynccontextmanager
    async def session_changes(self) -> AsyncIterator[QueueStream[Session | None]]:
        """Subscribe to session changes.

        The stream first yields the current session (or None), then changes
        in publish order. A change not yet consumed is replaced by a newer
        one. The subscription is released on exit.
        """
        queue: asyncio.Queue[Session | None] = latest_value_queue()
        put_latest(queue, self._current)
        self._subscribers.add(queue)
        logger.debug(f"Session subscriber added ({len(self._subscribers)} active)")
        try:
            yield QueueStream(queue)
        finally:
            self._subscribers.discard(queue)
            logger.debug(f"Session subscriber released ({len(self._subscribers)} active)")

    def _publish(self, session: Session | None) -> None:
        self._current = session
        for queue in list(self._subscribers):
            put_latest(queue, session)

    @abstractmethod
    async def sign_in_anonymously(self) -> Session:
        """Create an anonymous session. Raises SignInError on rejection."""

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session. Raises SignOutError on rejection."""

    async def close(self) -> None:
        """Release any resources held by the provider."""


class InMemoryIdentityProvider(IdentityProvider):
    """Provider that issues anonymous sessions locally."""

    async def sign_in_anonymously(self) -> Session:
        if self._current is not None:
            return self._current
        session = Session(uid=uuid.uuid4().hex[:28], is_anonymous=True)
        logger.info(f"Issued anonymous session {session.uid}")
        self._publish(session)
        return session

    async def sign_out(self) -> None:
        if self._current is not None:
            logger.info(f"Ended session {self._current.uid}")
        self._publish(None)


class FirebaseIdentityProvider(IdentityProvider):
    """Client for the Firebase Identity Toolkit REST API.

    Sign-in creates an anonymous account through ``accounts:signUp``.
    Sign-out only drops the local session, as the Firebase client SDKs do.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__()
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.firebase_api_key
        self.base_url = base_url or settings.identity_base_url
        self.timeout = timeout if timeout is not None else settings.identity_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                params={"key": self.api_key},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def sign_in_anonymously(self) -> Session:
        if not self.api_key:
            raise SignInError("Firebase API key not configured")

        try:
            client = await self._get_client()
            response = await client.post(
                "/accounts:signUp",
                json={"returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            logger.error(f"Firebase sign-up request failed: {e}")
            raise SignInError(str(e)) from e

        if response.status_code != 200:
            raise SignInError(self._error_reason(response))

        try:
            data = response.json()
        except ValueError as e:
            raise SignInError(f"Invalid Firebase response: {e}") from e

        local_id = data.get("localId") if isinstance(data, dict) else None
        if not local_id:
            raise SignInError("Firebase response missing localId")

        session = Session(
            uid=local_id,
            is_anonymous=True,
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
        )
        logger.info(f"Firebase anonymous sign-in succeeded for {session.uid}")
        self._publish(session)
        return session

    async def sign_out(self) -> None:
        self._publish(None)

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        """Extract the Identity Toolkit error code from a failed response."""
        try:
            error = response.json().get("error", {})
            reason = error.get("message")
        except (ValueError, AttributeError):
            reason = None
        return reason or f"HTTP {response.status_code}"
