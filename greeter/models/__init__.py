"""Pydantic models for Greeter."""

from greeter.models.auth import (
    Session,
    AuthStatus,
    AuthState,
)
from greeter.models.greeting import (
    GreetingPayload,
    RequestStatus,
    RequestState,
)
from greeter.models.view import (
    ViewTone,
    ScreenView,
)
from greeter.models.state import (
    AppState,
    StateSnapshot,
)

__all__ = [
    # Auth models
    "Session",
    "AuthStatus",
    "AuthState",
    # Greeting models
    "GreetingPayload",
    "RequestStatus",
    "RequestState",
    # View models
    "ViewTone",
    "ScreenView",
    # State models
    "AppState",
    "StateSnapshot",
]
