"""Projection of the application state onto the single screen."""

from greeter.models.auth import AuthStatus
from greeter.models.greeting import RequestStatus
from greeter.models.state import AppState, StateSnapshot
from greeter.models.view import ScreenView, ViewTone

MESSAGE_PLACEHOLDER = "Aquí aparecerán los mensajes."

AUTH_LABELS: dict[AuthStatus, str] = {
    AuthStatus.INITIAL: "Verificando estado...",
    AuthStatus.SIGNED_IN: "Sesión activa",
    AuthStatus.NOT_SIGNED_IN: "Sin sesión iniciada",
    AuthStatus.ERROR: "Error de autenticación",
}

REQUEST_TONES: dict[RequestStatus, ViewTone] = {
    RequestStatus.SUCCESS: ViewTone.SUCCESS,
    RequestStatus.FAILURE: ViewTone.DANGER,
    RequestStatus.REQUIRES_AUTH: ViewTone.DANGER,
    RequestStatus.LOADING: ViewTone.INFO,
    RequestStatus.IDLE: ViewTone.NEUTRAL,
}


def build_screen_view(state: AppState) -> ScreenView:
    """Build the screen view for a state."""
    session = state.auth.session if state.auth.is_signed_in else None
    return ScreenView(
        auth_label=AUTH_LABELS[state.auth.status],
        uid=session.uid if session else None,
        can_sign_out=session is not None,
        is_loading=state.request.status == RequestStatus.LOADING,
        message=state.message or MESSAGE_PLACEHOLDER,
        tone=REQUEST_TONES[state.request.status],
    )


def build_snapshot(state: AppState) -> StateSnapshot:
    """Build the read-only snapshot sent to clients."""
    return StateSnapshot(
        auth=state.auth,
        request=state.request,
        message=state.message,
        view=build_screen_view(state),
    )
