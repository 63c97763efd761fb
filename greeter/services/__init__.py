"""Services for Greeter."""

from greeter.services.identity import (
    IdentityProvider,
    InMemoryIdentityProvider,
    FirebaseIdentityProvider,
)
from greeter.services.external_api import GreetingClient
from greeter.services.store import StateStore
from greeter.services.auth import AuthSession
from greeter.services.greeting import GreetingFetcher
from greeter.services.controller import AppController, build_controller

__all__ = [
    "IdentityProvider",
    "InMemoryIdentityProvider",
    "FirebaseIdentityProvider",
    "GreetingClient",
    "StateStore",
    "AuthSession",
    "GreetingFetcher",
    "AppController",
    "build_controller",
]
