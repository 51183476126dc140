"""RESPX-based HTTP mocking fixtures for testing.

This module provides reusable fixtures for mocking the auth server and
the OAuth server using RESPX.
"""

import httpx
import pytest
import respx

from fxa_oauth.core.auth.constants import IdentityProtocol, OAuthProtocol
from tests.config import AUTH_URL, OAUTH_URL, TEST_CERT, TEST_SESSION_TOKEN

# === Auth Server Response Fixtures ===


@pytest.fixture
def login_response():
    """Successful /v1/account/login response."""
    return {
        "uid": "4c352927cd4f4a4aa03d7d1893d950b8",
        "sessionToken": TEST_SESSION_TOKEN,
        "verified": True,
        "authAt": 1392144866,
    }


@pytest.fixture
def certificate_response():
    """Successful /v1/certificate/sign response."""
    return {"cert": TEST_CERT}


# === OAuth Server Response Fixtures ===


@pytest.fixture
def token_response():
    """Implicit grant authorization response."""
    return {
        "access_token": "558f9980ad5a9c279beb52123653967342f702e84d3ab34c7f80427a6a37e2c0",
        "token_type": "bearer",
        "scope": "profile",
        "auth_at": 1392144866,
    }


@pytest.fixture
def oauth_client():
    """A registered OAuth client."""
    return {
        "id": "5901bd09376fadaa",
        "name": "Example",
        "redirect_uri": "https://example.com/oauth/callback",
        "image_uri": "https://example.com/logo.png",
        "whitelisted": True,
        "can_grant": False,
    }


# === Mock Fixtures ===


@pytest.fixture
def mock_auth_server(login_response, certificate_response):
    """Mock the auth server with successful login and certificate routes.

    Usage:
        async def test_login(mock_auth_server):
            mock_auth_server.routes["login"]  # inspect calls
    """
    with respx.mock(base_url=AUTH_URL, assert_all_called=False) as respx_mock:
        respx_mock.post(IdentityProtocol.LOGIN_PATH, name="login").mock(
            return_value=httpx.Response(200, json=login_response)
        )
        respx_mock.post(IdentityProtocol.CERTIFICATE_SIGN_PATH, name="certificate").mock(
            return_value=httpx.Response(200, json=certificate_response)
        )
        yield respx_mock


@pytest.fixture
def mock_oauth_server(token_response, oauth_client):
    """Mock the OAuth server with successful token and client routes."""
    with respx.mock(base_url=OAUTH_URL, assert_all_called=False) as respx_mock:
        respx_mock.post(OAuthProtocol.AUTHORIZATION_PATH, name="authorization").mock(
            return_value=httpx.Response(200, json=token_response)
        )
        respx_mock.post(OAuthProtocol.DESTROY_PATH, name="destroy").mock(
            return_value=httpx.Response(200, json={})
        )
        respx_mock.get(OAuthProtocol.CLIENTS_PATH, name="clients").mock(
            return_value=httpx.Response(200, json={"clients": [oauth_client]})
        )
        yield respx_mock


# === Error Helpers ===


def create_auth_error(status_code: int, errno: int, message: str, **extra) -> httpx.Response:
    """Create an auth server error response."""
    body = {
        "code": status_code,
        "errno": errno,
        "error": "Bad Request",
        "message": message,
        "info": IdentityProtocol.ERROR_INFO,
        **extra,
    }
    return httpx.Response(status_code, json=body)


def create_oauth_error(status_code: int, errno: int, message: str) -> httpx.Response:
    """Create an OAuth server error response."""
    body = {
        "code": status_code,
        "errno": errno,
        "error": "Bad Request",
        "message": message,
        "info": OAuthProtocol.ERROR_INFO,
    }
    return httpx.Response(status_code, json=body)
