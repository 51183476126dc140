"""Unit tests for the OAuth server client."""

import json

import httpx
import pytest

from fxa_oauth.core.auth.client import FxaOAuthClient
from fxa_oauth.core.auth.constants import CliClient
from fxa_oauth.core.auth.exceptions import (
    OAuthError,
    RequiredError,
    TokenCleanupError,
    UnexpectedError,
)
from fxa_oauth.core.auth.http_client import HttpError
from tests.config import AUTH_URL, OAUTH_URL, TEST_EMAIL, TEST_PASSWORD
from tests.fixtures.fakes import BUNDLE, StubAuthenticator
from tests.fixtures.mock_servers import create_oauth_error


@pytest.fixture
def authenticator():
    return StubAuthenticator()


@pytest.fixture
def client(authenticator):
    return FxaOAuthClient(
        TEST_EMAIL, TEST_PASSWORD, OAUTH_URL, AUTH_URL, authenticator=authenticator
    )


@pytest.mark.unit
class TestConstruction:
    @pytest.mark.parametrize(
        "kwargs, missing",
        [
            ({"fxa_url": None}, "--fxa"),
            ({"email": None}, "-u or --user"),
            ({"password": ""}, "password cannot be blank"),
            ({"oauth_url": None}, "--url"),
        ],
    )
    def test_required_parameters(self, kwargs, missing):
        params = {
            "email": TEST_EMAIL,
            "password": TEST_PASSWORD,
            "oauth_url": OAUTH_URL,
            "fxa_url": AUTH_URL,
            **kwargs,
        }
        with pytest.raises(RequiredError) as exc_info:
            FxaOAuthClient(**params)
        assert exc_info.value.message == missing
        assert exc_info.value.code == "EREQUIRED"

    def test_trailing_slash_stripped(self):
        client = FxaOAuthClient(TEST_EMAIL, TEST_PASSWORD, f"{OAUTH_URL}/", AUTH_URL)
        assert client.base_url == OAUTH_URL


@pytest.mark.unit
class TestGetToken:
    @pytest.mark.asyncio
    async def test_exchanges_assertion_for_token(
        self, client, authenticator, mock_oauth_server, token_response
    ):
        result = await client.get_token("5901bd09376fadaa", "profile")

        assert result == token_response
        body = json.loads(mock_oauth_server.routes["authorization"].calls.last.request.content)
        assert body["assertion"] == BUNDLE
        assert body["client_id"] == "5901bd09376fadaa"
        assert body["scope"] == "profile"
        assert body["response_type"] == "token"
        assert len(body["state"]) == 16
        int(body["state"], 16)
        assert authenticator.calls == [(TEST_EMAIL, OAUTH_URL, None)]

    @pytest.mark.asyncio
    async def test_state_is_random(self, client, mock_oauth_server):
        await client.get_token("abc", "profile")
        await client.get_token("abc", "profile")
        calls = mock_oauth_server.routes["authorization"].calls
        states = {json.loads(call.request.content)["state"] for call in calls}
        assert len(states) == 2

    @pytest.mark.asyncio
    async def test_oauth_error_translated(self, client, mock_oauth_server):
        mock_oauth_server.routes["authorization"].return_value = create_oauth_error(
            400, 101, "Unknown client"
        )

        with pytest.raises(OAuthError) as exc_info:
            await client.get_token("abc", "profile")

        assert exc_info.value.message == "Unknown client"
        assert exc_info.value.errno == 101

    @pytest.mark.asyncio
    async def test_unknown_error_body(self, client, mock_oauth_server):
        mock_oauth_server.routes["authorization"].return_value = httpx.Response(
            500, json={"message": "boom"}
        )
        with pytest.raises(UnexpectedError, match="boom"):
            await client.get_token("abc", "profile")

    @pytest.mark.asyncio
    async def test_non_json_error_stays_http_error(self, client, mock_oauth_server):
        mock_oauth_server.routes["authorization"].return_value = httpx.Response(
            502, text="<html>Bad Gateway</html>"
        )
        with pytest.raises(HttpError) as exc_info:
            await client.get_token("abc", "profile")
        assert exc_info.value.status_code == 502


@pytest.mark.unit
class TestTemporaryToken:
    @pytest.mark.asyncio
    async def test_destroyed_after_use(self, client, mock_oauth_server, token_response):
        async with client.temporary_token() as token:
            assert token == token_response["access_token"]
            assert not mock_oauth_server.routes["destroy"].called

        body = json.loads(mock_oauth_server.routes["authorization"].calls.last.request.content)
        assert body["client_id"] == CliClient.CLIENT_ID
        assert body["scope"] == "oauth"
        destroy = json.loads(mock_oauth_server.routes["destroy"].calls.last.request.content)
        assert destroy == {"token": token_response["access_token"]}

    @pytest.mark.asyncio
    async def test_destroyed_on_error(self, client, mock_oauth_server):
        with pytest.raises(RuntimeError):
            async with client.temporary_token():
                raise RuntimeError("command failed")

        assert mock_oauth_server.routes["destroy"].call_count == 1

    @pytest.mark.asyncio
    async def test_cleanup_failure(self, client, mock_oauth_server, token_response, caplog):
        mock_oauth_server.routes["destroy"].return_value = create_oauth_error(
            503, 999, "Service unavailable"
        )

        with pytest.raises(TokenCleanupError) as exc_info:
            async with client.temporary_token():
                pass

        token = token_response["access_token"]
        assert exc_info.value.token == token
        assert exc_info.value.code == "ETOKEN"
        assert "temporary token was not cleaned up!" in caplog.text
        assert token in caplog.text

    @pytest.mark.asyncio
    async def test_missing_access_token(self, client, mock_oauth_server):
        mock_oauth_server.routes["authorization"].return_value = httpx.Response(200, json={})

        with pytest.raises(UnexpectedError):
            async with client.temporary_token():
                pass
        assert not mock_oauth_server.routes["destroy"].called


@pytest.mark.unit
class TestClientAdministration:
    @pytest.mark.asyncio
    async def test_list_clients(self, client, mock_oauth_server, oauth_client):
        clients = await client.list_clients("dev-token")

        assert clients == [oauth_client]
        request = mock_oauth_server.routes["clients"].calls.last.request
        assert request.headers["Authorization"] == "Bearer dev-token"

    @pytest.mark.asyncio
    async def test_get_client(self, client, mock_oauth_server, oauth_client):
        route = mock_oauth_server.get("/v1/client/5901bd09376fadaa").mock(
            return_value=httpx.Response(200, json=oauth_client)
        )
        assert await client.get_client("dev-token", "5901bd09376fadaa") == oauth_client
        assert route.calls.last.request.headers["Authorization"] == "Bearer dev-token"

    @pytest.mark.asyncio
    async def test_register_client(self, client, mock_oauth_server, oauth_client):
        route = mock_oauth_server.post("/v1/client/register").mock(
            return_value=httpx.Response(201, json=oauth_client)
        )
        details = {"name": "Example", "redirect_uri": "https://example.com", "whitelisted": True}

        assert await client.register_client("dev-token", details) == oauth_client
        assert json.loads(route.calls.last.request.content) == details

    @pytest.mark.asyncio
    async def test_update_client(self, client, mock_oauth_server):
        route = mock_oauth_server.post("/v1/client/5901bd09376fadaa").mock(
            return_value=httpx.Response(200, json={})
        )
        await client.update_client("dev-token", "5901bd09376fadaa", {"can_grant": True})
        assert json.loads(route.calls.last.request.content) == {"can_grant": True}

    @pytest.mark.asyncio
    async def test_delete_client(self, client, mock_oauth_server):
        route = mock_oauth_server.delete("/v1/client/5901bd09376fadaa").mock(
            return_value=httpx.Response(204)
        )
        assert await client.delete_client("dev-token", "5901bd09376fadaa") == {}
        assert route.called

    @pytest.mark.asyncio
    async def test_unauthorized(self, client, mock_oauth_server):
        mock_oauth_server.routes["clients"].return_value = create_oauth_error(
            401, 108, "Invalid token"
        )
        with pytest.raises(OAuthError, match="Invalid token"):
            await client.list_clients("expired")
