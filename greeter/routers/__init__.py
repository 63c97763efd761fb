"""API routers for Greeter."""

from greeter.routers.auth import router as auth_router
from greeter.routers.greeting import router as greeting_router
from greeter.routers.sse import router as state_router

__all__ = [
    "auth_router",
    "greeting_router",
    "state_router",
]
