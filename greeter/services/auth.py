"""Authentication session tracking and sign-in/sign-out mediation."""

import asyncio
import logging
from typing import AsyncIterable

from greeter.models.auth import AuthState, Session
from greeter.models.state import AppState
from greeter.services.identity import IdentityProvider, SignInError, SignOutError
from greeter.services.store import StateStore
from greeter.services.transitions import (
    SessionChanged,
    SignInFailed,
    SignInReaffirmed,
    SignInSucceeded,
    SignOutFailed,
    SignOutSucceeded,
)

logger = logging.getLogger(__name__)


class AuthSession:
    """Reflects the provider's session in the store.

    Provider failures are converted into state and never re-raised.
    """

    def __init__(self, provider: IdentityProvider, store: StateStore):
        self.provider = provider
        self.store = store
        self._pending_sign_in: asyncio.Future | None = None

    @property
    def state(self) -> AuthState:
        return self.store.state.auth

    def on_session_changed(self, session: Session | None) -> AppState:
        """Apply a session-change notification from the provider."""
        if session is not None:
            logger.info(f"Session active for {session.uid}")
        else:
            logger.info("No active session")
        return self.store.dispatch(SessionChanged(session))

    async def run(self, changes: AsyncIterable[Session | None]) -> None:
        """Apply notifications in delivery order until cancelled."""
        async for session in changes:
            self.on_session_changed(session)

    async def request_sign_in(self) -> AppState:
        """Sign in anonymously unless a session is already active.

        Calls made while a sign-in is in flight share its result.
        """
        if self.state.is_signed_in:
            return self.store.dispatch(SignInReaffirmed())

        if self._pending_sign_in is None:
            self._pending_sign_in = asyncio.ensure_future(self._sign_in())
            self._pending_sign_in.add_done_callback(self._clear_pending_sign_in)
        else:
            logger.info("Sign-in already in flight, waiting for it")
        return await asyncio.shield(self._pending_sign_in)

    def _clear_pending_sign_in(self, task: asyncio.Future) -> None:
        if self._pending_sign_in is task:
            self._pending_sign_in = None

    async def _sign_in(self) -> AppState:
        try:
            session = await self.provider.sign_in_anonymously()
        except SignInError as e:
            logger.warning(f"Anonymous sign-in failed: {e}")
            return self.store.dispatch(SignInFailed(str(e)))
        except Exception as e:
            logger.exception(f"Unexpected sign-in failure: {e!r}")
            return self.store.dispatch(SignInFailed(str(e) or type(e).__name__))

        return self.store.dispatch(SignInSucceeded(session))

    async def request_sign_out(self) -> AppState:
        """Sign out. A failure only surfaces a message."""
        try:
            await self.provider.sign_out()
        except SignOutError as e:
            logger.warning(f"Sign-out failed: {e}")
            return self.store.dispatch(SignOutFailed(str(e)))
        except Exception as e:
            logger.exception(f"Unexpected sign-out failure: {e!r}")
            return self.store.dispatch(SignOutFailed(str(e) or type(e).__name__))

        return self.store.dispatch(SignOutSucceeded())
