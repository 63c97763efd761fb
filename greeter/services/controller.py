"""Controller composing the auth session and the greeting fetcher."""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import AsyncContextManager

from greeter.config import Settings, get_settings
from greeter.models.state import AppState, StateSnapshot
from greeter.models.view import ScreenView
from greeter.services.auth import AuthSession
from greeter.services.external_api import GreetingClient
from greeter.services.greeting import GreetingFetcher
from greeter.services.identity import (
    FirebaseIdentityProvider,
    IdentityProvider,
    InMemoryIdentityProvider,
)
from greeter.services.presenter import build_screen_view, build_snapshot
from greeter.services.store import StateStore
from greeter.utils.helpers import QueueStream

logger = logging.getLogger(__name__)


class AppController:
    """Authentication/request state controller.

    ``start`` acquires the provider's session subscription and ``stop``
    releases it; use the controller as an async context manager so the
    subscription never outlives it.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        greeting_client: GreetingClient,
        store: StateStore | None = None,
    ):
        self.identity = identity
        self.greeting_client = greeting_client
        self.store = store or StateStore()
        self.auth = AuthSession(identity, self.store)
        self.fetcher = GreetingFetcher(greeting_client, self.store)
        self._stack: AsyncExitStack | None = None
        self._listener: asyncio.Task | None = None

    @property
    def state(self) -> AppState:
        return self.store.state

    @property
    def is_running(self) -> bool:
        return self._listener is not None and not self._listener.done()

    async def start(self) -> None:
        """Subscribe to session changes and start applying them."""
        if self._stack is not None:
            return

        stack = AsyncExitStack()
        changes = await stack.enter_async_context(self.identity.session_changes())
        self._stack = stack
        self._listener = asyncio.create_task(self.auth.run(changes))
        logger.info("Controller started")

    async def stop(self) -> None:
        """Stop listening and release the subscription and HTTP clients."""
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            self._listener = None

        if self._stack is not None:
            await self._stack.aclose()
            self._stack = None

        await self.greeting_client.close()
        await self.identity.close()
        logger.info("Controller stopped")

    async def __aenter__(self) -> "AppController":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def request_sign_in(self) -> AppState:
        return await self.auth.request_sign_in()

    async def request_sign_out(self) -> AppState:
        return await self.auth.request_sign_out()

    async def fetch(self) -> AppState:
        return await self.fetcher.fetch()

    def view(self) -> ScreenView:
        return build_screen_view(self.store.state)

    def snapshot(self) -> StateSnapshot:
        """Read-only projection of the current state."""
        return build_snapshot(self.store.state)

    def subscribe(self) -> AsyncContextManager[QueueStream[AppState]]:
        """Subscribe to state changes."""
        return self.store.subscribe()


def build_identity_provider(settings: Settings) -> IdentityProvider:
    """Create the identity provider selected in settings."""
    if settings.identity_backend == "firebase":
        return FirebaseIdentityProvider(
            api_key=settings.firebase_api_key,
            base_url=settings.identity_base_url,
            timeout=settings.identity_timeout_seconds,
        )
    return InMemoryIdentityProvider()


def build_controller(settings: Settings | None = None) -> AppController:
    """Create a controller wired from settings."""
    settings = settings or get_settings()
    return AppController(
        identity=build_identity_provider(settings),
        greeting_client=GreetingClient(
            base_url=settings.greeting_base_url,
            path=settings.greeting_path,
            timeout=settings.greeting_timeout_seconds,
        ),
    )
