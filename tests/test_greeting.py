"""Tests for the greeting client and fetcher."""

import asyncio
import httpx
import pytest
import respx
from httpx import Response

from greeter.config import Settings
from greeter.models.greeting import RequestState, RequestStatus
from greeter.services.controller import AppController, build_controller
from greeter.services.external_api import (
    GreetingClient,
    GreetingServerError,
    GreetingTimeoutError,
    GreetingTransportError,
)
from greeter.services.greeting import DEFAULT_GREETING_MESSAGE, TIMEOUT_MESSAGE
from greeter.services.identity import FirebaseIdentityProvider, InMemoryIdentityProvider
from greeter.services.transitions import LOADING_MESSAGE, REQUIRES_AUTH_MESSAGE

GREETING_URL = "http://greeting.test/saludo"


class TestGreetingClient:
    """Tests for the greeting HTTP client."""

    @respx.mock
    async def test_get_greeting(self):
        """The wire field mensaje becomes message."""
        route = respx.get(GREETING_URL).mock(
            return_value=Response(200, json={"mensaje": "hola"})
        )

        client = GreetingClient(base_url="http://greeting.test")
        try:
            payload = await client.get_greeting()

            assert payload.message == "hola"
            request = route.calls.last.request
            assert request.method == "GET"
            assert request.url.query == b""
            assert request.content == b""
        finally:
            await client.close()

    @respx.mock
    async def test_missing_field(self):
        respx.get(GREETING_URL).mock(return_value=Response(200, json={}))

        client = GreetingClient(base_url="http://greeting.test")
        try:
            payload = await client.get_greeting()
            assert payload.message is None
        finally:
            await client.close()

    @respx.mock
    async def test_server_error(self):
        respx.get(GREETING_URL).mock(return_value=Response(503))

        client = GreetingClient(base_url="http://greeting.test")
        try:
            with pytest.raises(GreetingServerError) as exc_info:
                await client.get_greeting()
            assert exc_info.value.status_code == 503
        finally:
            await client.close()

    @respx.mock
    async def test_invalid_json(self):
        respx.get(GREETING_URL).mock(return_value=Response(200, text="<html>"))

        client = GreetingClient(base_url="http://greeting.test")
        try:
            with pytest.raises(GreetingTransportError):
                await client.get_greeting()
        finally:
            await client.close()

    @respx.mock
    async def test_json_array_body(self):
        respx.get(GREETING_URL).mock(return_value=Response(200, json=["hola"]))

        client = GreetingClient(base_url="http://greeting.test")
        try:
            with pytest.raises(GreetingTransportError):
                await client.get_greeting()
        finally:
            await client.close()

    async def test_total_bound(self):
        """A response slower than the bound is a timeout."""
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={"mensaje": "too late"})

        client = GreetingClient(
            base_url="http://greeting.test",
            timeout=0.05,
            transport=httpx.MockTransport(slow),
        )
        try:
            with pytest.raises(GreetingTimeoutError):
                await client.get_greeting()
        finally:
            await client.close()


class TestGreetingFetcher:
    """Tests for fetch classification through the controller."""

    @respx.mock
    async def test_success(self, signed_in_controller: AppController):
        respx.get(GREETING_URL).mock(
            return_value=Response(200, json={"mensaje": "hola"})
        )

        state = await signed_in_controller.fetch()

        assert state.request.status == RequestStatus.SUCCESS
        assert state.request.message == "hola"
        assert state.message == "hola"

    @respx.mock
    async def test_success_without_message(self, signed_in_controller: AppController):
        respx.get(GREETING_URL).mock(return_value=Response(200, json={}))

        state = await signed_in_controller.fetch()

        assert state.request.status == RequestStatus.SUCCESS
        assert state.request.message == DEFAULT_GREETING_MESSAGE

    @respx.mock
    async def test_null_message_uses_default(self, signed_in_controller: AppController):
        respx.get(GREETING_URL).mock(
            return_value=Response(200, json={"mensaje": None})
        )

        state = await signed_in_controller.fetch()
        assert state.request.message == DEFAULT_GREETING_MESSAGE

    @respx.mock
    async def test_server_error(self, signed_in_controller: AppController):
        respx.get(GREETING_URL).mock(return_value=Response(500))

        state = await signed_in_controller.fetch()

        assert state.request.status == RequestStatus.FAILURE
        assert "500" in state.request.message

    @respx.mock
    async def test_http_timeout(self, signed_in_controller: AppController):
        respx.get(GREETING_URL).mock(side_effect=httpx.ReadTimeout)

        state = await signed_in_controller.fetch()

        assert state.request.status == RequestStatus.FAILURE
        assert state.request.message == TIMEOUT_MESSAGE

    @respx.mock
    async def test_connection_error(self, signed_in_controller: AppController):
        respx.get(GREETING_URL).mock(side_effect=httpx.ConnectError)

        state = await signed_in_controller.fetch()

        assert state.request.status == RequestStatus.FAILURE
        assert state.request.message.startswith("Error de conexión:")

    @respx.mock(assert_all_called=False)
    async def test_requires_auth_makes_no_request(self, controller: AppController):
        route = respx.get(GREETING_URL).mock(
            return_value=Response(200, json={"mensaje": "hola"})
        )

        state = await controller.fetch()

        assert not route.called
        assert state.request.status == RequestStatus.REQUIRES_AUTH
        assert state.message == REQUIRES_AUTH_MESSAGE

    async def test_never_responding_server_times_out(self, settle):
        async def never(request: httpx.Request) -> httpx.Response:
            await asyncio.Event().wait()

        client = GreetingClient(
            base_url="http://greeting.test",
            timeout=0.05,
            transport=httpx.MockTransport(never),
        )
        async with AppController(InMemoryIdentityProvider(), client) as ctrl:
            await ctrl.request_sign_in()
            await settle()

            state = await ctrl.fetch()

        assert state.request.status == RequestStatus.FAILURE
        assert state.request.message == TIMEOUT_MESSAGE


class TestFetchConcurrency:
    """In-flight fetch interactions with other triggers."""

    async def test_reentry_while_loading_is_ignored(self, settle):
        release = asyncio.Event()
        calls = []

        async def gated(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            await release.wait()
            return httpx.Response(200, json={"mensaje": "hola"})

        client = GreetingClient(
            base_url="http://greeting.test",
            transport=httpx.MockTransport(gated),
        )
        async with AppController(InMemoryIdentityProvider(), client) as ctrl:
            await ctrl.request_sign_in()
            await settle()

            first = asyncio.create_task(ctrl.fetch())
            await settle()
            assert ctrl.state.request.status == RequestStatus.LOADING
            assert ctrl.state.message == LOADING_MESSAGE

            second = await ctrl.fetch()
            assert second.request.status == RequestStatus.LOADING

            release.set()
            result = await first

        assert len(calls) == 1
        assert result.request.message == "hola"

    async def test_sign_out_during_fetch_wins(self, settle):
        release = asyncio.Event()

        async def gated(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json={"mensaje": "hola"})

        client = GreetingClient(
            base_url="http://greeting.test",
            transport=httpx.MockTransport(gated),
        )
        async with AppController(InMemoryIdentityProvider(), client) as ctrl:
            await ctrl.request_sign_in()
            await settle()

            pending = asyncio.create_task(ctrl.fetch())
            await settle()
            await ctrl.request_sign_out()
            await settle()

            release.set()
            await pending

            assert not ctrl.state.auth.is_signed_in
            assert ctrl.state.request.status == RequestStatus.IDLE
            assert ctrl.state.message == ""


class TestUnexpectedFailures:
    """Failures outside the greeting error types still end the request."""

    @pytest.mark.parametrize(
        "error",
        [httpx.InvalidURL("bad url"), RuntimeError("transport exploded")],
    )
    async def test_unexpected_error_becomes_failure(self, error, settle):
        calls = []

        async def flaky(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise error
            return httpx.Response(200, json={"mensaje": "hola"})

        client = GreetingClient(
            base_url="http://greeting.test",
            transport=httpx.MockTransport(flaky),
        )
        async with AppController(InMemoryIdentityProvider(), client) as ctrl:
            await ctrl.request_sign_in()
            await settle()

            failed = await ctrl.fetch()
            assert failed.request.status == RequestStatus.FAILURE
            assert failed.request.message == f"Error de conexión: {error}"

            retried = await ctrl.fetch()

        assert len(calls) == 2
        assert retried.request == RequestState.success("hola")


class TestClientConfiguration:
    """Timeout wiring from settings."""

    def test_build_controller_uses_default_bound(self):
        controller = build_controller(Settings())
        assert controller.greeting_client.timeout == 7.0
        assert controller.greeting_client.path == "/saludo"

    def test_explicit_zero_timeout_is_kept(self):
        assert GreetingClient(base_url="http://greeting.test", timeout=0).timeout == 0
        assert FirebaseIdentityProvider(api_key="k", timeout=0).timeout == 0
