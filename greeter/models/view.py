"""Screen projection models."""

from enum import Enum
from pydantic import BaseModel


class ViewTone(str, Enum):
    """Semantic styling of the message box."""
    SUCCESS = "success"
    DANGER = "danger"
    INFO = "info"
    NEUTRAL = "neutral"


class ScreenView(BaseModel):
    """What the single screen shows for a given state."""
    auth_label: str
    uid: str | None = None
    can_sign_out: bool = False
    is_loading: bool = False
    message: str
    tone: ViewTone = ViewTone.NEUTRAL
