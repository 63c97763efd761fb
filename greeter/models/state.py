"""Combined application state models."""

from pydantic import BaseModel, Field

from greeter.models.auth import AuthState
from greeter.models.greeting import RequestState
from greeter.models.view import ScreenView


class AppState(BaseModel):
    """Value held by the state store.

    ``auth_epoch`` grows by one on every auth transition so that late fetch
    results can be recognised and dropped.
    """
    auth: AuthState = Field(default_factory=AuthState.initial)
    request: RequestState = Field(default_factory=RequestState.idle)
    message: str = ""
    auth_epoch: int = 0

    model_config = {"frozen": True}


class StateSnapshot(BaseModel):
    """Read-only projection handed to the presentation layer."""
    auth: AuthState
    request: RequestState
    message: str
    view: ScreenView
