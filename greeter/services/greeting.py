"""Greeting fetch lifecycle."""

import logging

from greeter.models.greeting import RequestState, RequestStatus
from greeter.models.state import AppState
from greeter.services.external_api import (
    GreetingClient,
    GreetingServerError,
    GreetingTimeoutError,
    GreetingTransportError,
)
from greeter.services.store import StateStore
from greeter.services.transitions import FetchCompleted, FetchRejected, FetchStarted

logger = logging.getLogger(__name__)

DEFAULT_GREETING_MESSAGE = "Saludo recibido (sin mensaje específico)."
TIMEOUT_MESSAGE = "Tiempo de espera agotado. Servidor no responde."


def server_error_message(status_code: int) -> str:
    return f"Error en el servidor: Código {status_code}"


def transport_error_message(detail: str) -> str:
    return f"Error de conexión: {detail}"


class GreetingFetcher:
    """Runs one greeting request at a time and classifies its outcome."""

    def __init__(self, client: GreetingClient, store: StateStore):
        self.client = client
        self.store = store

    @property
    def state(self) -> RequestState:
        return self.store.state.request

    async def fetch(self) -> AppState:
        """Fetch the greeting if a session is active.

        Without a session no request is made. A call arriving while a
        request is already loading is ignored.
        """
        current = self.store.state
        if not current.auth.is_signed_in:
            logger.info("Greeting requested without an active session")
            return self.store.dispatch(FetchRejected())

        if current.request.status == RequestStatus.LOADING:
            logger.info("Greeting request already in flight, ignoring")
            return current

        started = self.store.dispatch(FetchStarted())
        outcome = await self._request()
        return self.store.dispatch(FetchCompleted(started.auth_epoch, outcome))

    async def _request(self) -> RequestState:
        try:
            payload = await self.client.get_greeting()
        except GreetingTimeoutError:
            return RequestState.failure(TIMEOUT_MESSAGE)
        except GreetingServerError as e:
            return RequestState.failure(server_error_message(e.status_code))
        except GreetingTransportError as e:
            return RequestState.failure(transport_error_message(str(e)))
        except Exception as e:
            logger.exception(f"Unexpected greeting request failure: {e!r}")
            return RequestState.failure(transport_error_message(str(e) or type(e).__name__))

        if payload.message is None:
            return RequestState.success(DEFAULT_GREETING_MESSAGE)
        return RequestState.success(payload.message)
