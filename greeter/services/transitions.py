"""Events and pure transition functions for the application state."""

from dataclasses import dataclass
from typing import Callable, Union

from greeter.models.auth import AuthState, Session
from greeter.models.greeting import RequestState, RequestStatus
from greeter.models.state import AppState

SIGN_IN_SUCCESS_MESSAGE = "¡Autenticación anónima exitosa!"
SIGN_IN_FAILURE_PREFIX = "Error al iniciar sesión"
SIGN_OUT_FAILURE_PREFIX = "Error al cerrar sesión"
REQUIRES_AUTH_MESSAGE = "Por favor, inicia sesión para obtener el saludo."
LOADING_MESSAGE = "Conectando al servidor..."


@dataclass(frozen=True)
class SessionChanged:
    """The identity provider reported a session (or its absence)."""
    session: Session | None


@dataclass(frozen=True)
class SignInReaffirmed:
    """Sign-in requested while a session was already active."""


@dataclass(frozen=True)
class SignInSucceeded:
    session: Session


@dataclass(frozen=True)
class SignInFailed:
    detail: str


@dataclass(frozen=True)
class SignOutSucceeded:
    pass


@dataclass(frozen=True)
class SignOutFailed:
    detail: str


@dataclass(frozen=True)
class FetchRejected:
    """Fetch requested without an active session."""


@dataclass(frozen=True)
class FetchStarted:
    pass


@dataclass(frozen=True)
class FetchCompleted:
    """Outcome of a fetch started while ``auth_epoch`` was current."""
    auth_epoch: int
    outcome: RequestState


Event = Union[
    SessionChanged,
    SignInReaffirmed,
    SignInSucceeded,
    SignInFailed,
    SignOutSucceeded,
    SignOutFailed,
    FetchRejected,
    FetchStarted,
    FetchCompleted,
]


def _auth_transition(state: AppState, auth: AuthState, message: str = "") -> AppState:
    """Move to a new auth state, resetting the request and the message."""
    return state.model_copy(update={
        "auth": auth,
        "request": RequestState.idle(),
        "message": message,
        "auth_epoch": state.auth_epoch + 1,
    })


def _request_update(state: AppState, request: RequestState) -> AppState:
    return state.model_copy(update={"request": request, "message": request.message})


def on_session_changed(state: AppState, event: SessionChanged) -> AppState:
    if event.session is not None:
        return _auth_transition(state, AuthState.signed_in(event.session))
    return _auth_transition(state, AuthState.not_signed_in())


def on_sign_in_reaffirmed(state: AppState, event: SignInReaffirmed) -> AppState:
    # Not a transition: nothing is reset.
    return state


def on_sign_in_succeeded(state: AppState, event: SignInSucceeded) -> AppState:
    return _auth_transition(state, AuthState.signed_in(event.session), SIGN_IN_SUCCESS_MESSAGE)


def on_sign_in_failed(state: AppState, event: SignInFailed) -> AppState:
    message = f"{SIGN_IN_FAILURE_PREFIX}: {event.detail}"
    return _auth_transition(state, AuthState.failed(message), message)


def on_sign_out_succeeded(state: AppState, event: SignOutSucceeded) -> AppState:
    return _auth_transition(state, AuthState.not_signed_in())


def on_sign_out_failed(state: AppState, event: SignOutFailed) -> AppState:
    # Auth and request state stay as they were.
    return state.model_copy(update={"message": f"{SIGN_OUT_FAILURE_PREFIX}: {event.detail}"})


def on_fetch_rejected(state: AppState, event: FetchRejected) -> AppState:
    return _request_update(state, RequestState.requires_auth(REQUIRES_AUTH_MESSAGE))


def on_fetch_started(state: AppState, event: FetchStarted) -> AppState:
    if not state.auth.is_signed_in:
        return on_fetch_rejected(state, FetchRejected())
    return _request_update(state, RequestState.loading(LOADING_MESSAGE))


def on_fetch_completed(state: AppState, event: FetchCompleted) -> AppState:
    # Stale: an auth transition happened while the request was in flight.
    if event.auth_epoch != state.auth_epoch:
        return state
    if state.request.status != RequestStatus.LOADING:
        return state
    return _request_update(state, event.outcome)


HANDLERS: dict[type, Callable[[AppState, Event], AppState]] = {
    SessionChanged: on_session_changed,
    SignInReaffirmed: on_sign_in_reaffirmed,
    SignInSucceeded: on_sign_in_succeeded,
    SignInFailed: on_sign_in_failed,
    SignOutSucceeded: on_sign_out_succeeded,
    SignOutFailed: on_sign_out_failed,
    FetchRejected: on_fetch_rejected,
    FetchStarted: on_fetch_started,
    FetchCompleted: on_fetch_completed,
}


def reduce(state: AppState, event: Event) -> AppState:
    """Apply ``event`` to ``state`` and return the resulting state.

    Raises TypeError for an unknown event type.
    """
    handler = HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown event: {type(event).__name__}")
    return handler(state, event)
