"""Greeting request models."""

from enum import Enum
from pydantic import BaseModel, Field


class GreetingPayload(BaseModel):
    """Body returned by the greeting server.

    The server names the field ``mensaje``.
    """
    message: str | None = Field(default=None, alias="mensaje")

    model_config = {"populate_by_name": True}


class RequestStatus(str, Enum):
    """Lifecycle of the greeting request."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"
    REQUIRES_AUTH = "requires_auth"


class RequestState(BaseModel):
    """Current greeting request state and its message."""
    status: RequestStatus = RequestStatus.IDLE
    message: str = ""

    model_config = {"frozen": True}

    @classmethod
    def idle(cls) -> "RequestState":
        return cls()

    @classmethod
    def loading(cls, message: str) -> "RequestState":
        return cls(status=RequestStatus.LOADING, message=message)

    @classmethod
    def success(cls, message: str) -> "RequestState":
        return cls(status=RequestStatus.SUCCESS, message=message)

    @classmethod
    def failure(cls, message: str) -> "RequestState":
        return cls(status=RequestStatus.FAILURE, message=message)

    @classmethod
    def requires_auth(cls, message: str) -> "RequestState":
        return cls(status=RequestStatus.REQUIRES_AUTH, message=message)
