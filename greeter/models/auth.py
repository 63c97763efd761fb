"""Authentication models."""

from enum import Enum
from pydantic import BaseModel, Field


class Session(BaseModel):
    """Identity session issued by the identity provider."""
    uid: str = Field(..., min_length=1, max_length=128)
    is_anonymous: bool = True
    id_token: str | None = Field(default=None, exclude=True, repr=False)
    refresh_token: str | None = Field(default=None, exclude=True, repr=False)

    model_config = {"frozen": True}


class AuthStatus(str, Enum):
    """Sign-in status of the current user."""
    INITIAL = "initial"
    SIGNED_IN = "signed_in"
    NOT_SIGNED_IN = "not_signed_in"
    ERROR = "error"


class AuthState(BaseModel):
    """Current authentication state.

    ``session`` is only set for ``SIGNED_IN`` and ``error`` only for ``ERROR``.
    """
    status: AuthStatus = AuthStatus.INITIAL
    session: Session | None = None
    error: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def initial(cls) -> "AuthState":
        return cls(status=AuthStatus.INITIAL)

    @classmethod
    def signed_in(cls, session: Session) -> "AuthState":
        return cls(status=AuthStatus.SIGNED_IN, session=session)

    @classmethod
    def not_signed_in(cls) -> "AuthState":
        return cls(status=AuthStatus.NOT_SIGNED_IN)

    @classmethod
    def failed(cls, message: str) -> "AuthState":
        return cls(status=AuthStatus.ERROR, error=message)

    @property
    def is_signed_in(self) -> bool:
        return self.status == AuthStatus.SIGNED_IN and self.session is not None
