"""Pytest configuration and fixtures for Greeter tests."""

import asyncio
import os
from typing import AsyncGenerator, Awaitable, Callable
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test environment before importing app modules
os.environ["GREETING_BASE_URL"] = "http://greeting.test"
os.environ["IDENTITY_BACKEND"] = "memory"

from greeter.main import create_app
from greeter.services.controller import AppController
from greeter.services.external_api import GreetingClient
from greeter.services.identity import InMemoryIdentityProvider

GREETING_URL = "http://greeting.test/saludo"


async def _settle() -> None:
    """Let pending session notifications reach the controller."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def settle() -> Callable[[], Awaitable[None]]:
    """Await pending notifications."""
    return _settle


@pytest.fixture
def identity() -> InMemoryIdentityProvider:
    """Create an in-memory identity provider."""
    return InMemoryIdentityProvider()


@pytest.fixture
def greeting_client() -> GreetingClient:
    """Create a greeting client pointed at the mocked server."""
    return GreetingClient(base_url="http://greeting.test", timeout=7.0)


@pytest_asyncio.fixture
async def controller(
    identity: InMemoryIdentityProvider,
    greeting_client: GreetingClient,
) -> AsyncGenerator[AppController, None]:
    """Create a started controller; the first notification is applied."""
    async with AppController(identity, greeting_client) as ctrl:
        await _settle()
        yield ctrl


@pytest_asyncio.fixture
async def signed_in_controller(controller: AppController) -> AppController:
    """Controller with an active anonymous session."""
    await controller.request_sign_in()
    await _settle()
    return controller


@pytest_asyncio.fixture
async def client(controller: AppController) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app()
    app.state.controller = controller
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
