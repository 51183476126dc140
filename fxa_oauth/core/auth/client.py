"""OAuth server client.

Exchanges assertion bundles for tokens and wraps the client
administration endpoints of the OAuth server.
"""

from __future__ import annotations

import logging
import secrets
import typing
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from .assertion import AssertionAuthenticator, Credentials
from .constants import CliClient, OAuthProtocol
from .exceptions import FxaError, TokenCleanupError, translate_error
from .http_client import HttpClient, HttpError, HttpxHttpClient
from .identity import IdentityServiceClient
from .validation import require, validate_string, validate_url

_logger = logging.getLogger(__name__)

JsonDict = dict[str, typing.Any]


class FxaOAuthClient:
    """Client for one account against one OAuth server.

    Holds the account credentials so that each token request can sign in
    again; no session, key or assertion outlives the call that made it.

    Example:
        >>> client = FxaOAuthClient(
        ...     email="user@example.com",
        ...     password="secret",
        ...     oauth_url="https://oauth.example.com",
        ...     fxa_url="https://api.accounts.example.com",
        ... )
        >>> async with client.temporary_token() as token:
        ...     clients = await client.list_clients(token)
    """

    def __init__(
        self,
        email: str | None,
        password: str | None,
        oauth_url: str | None,
        fxa_url: str | None,
        http_client: HttpClient | None = None,
        authenticator: AssertionAuthenticator | None = None,
        deadline: float | None = None,
        cli_client_id: str = CliClient.CLIENT_ID,
    ) -> None:
        """Initialize the client.

        Raises:
            RequiredError: If a server URL, the email or the password is missing
            ValidationError: If a URL is malformed
        """
        _logger.debug("client email %s", email)
        _logger.debug("client oauthUrl %s", oauth_url)
        _logger.debug("client fxaUrl %s", fxa_url)

        fxa_url = require(fxa_url, "--fxa")
        self.credentials = Credentials(
            email=require(email, "-u or --user"),
            password=require(password, "password cannot be blank"),
        )
        self.base_url = validate_url(require(oauth_url, "--url"), "oauth_url").rstrip("/")
        self.http_client = http_client or HttpxHttpClient()
        self.authenticator = authenticator or AssertionAuthenticator(
            IdentityServiceClient(fxa_url, http_client=self.http_client)
        )
        self.deadline = deadline
        self.cli_client_id = cli_client_id

    async def __aenter__(self) -> FxaOAuthClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    # -- tokens ---------------------------------------------------------------

    async def get_token(self, client_id: str, scope: str) -> JsonDict:
        """Get an implicit-grant token for client_id with scope.

        Returns:
            The authorization response (``access_token``, ``scope``, ...)
        """
        validate_string(client_id, "client_id")
        validate_string(scope, "scope")
        _logger.debug("clientId %s", client_id)
        _logger.debug("scope %s", scope)

        assertion = await self.authenticator.authenticate(
            self.credentials, self.base_url, deadline=self.deadline
        )
        _logger.debug("assertion %s", assertion)
        return await self._request(
            "POST",
            OAuthProtocol.AUTHORIZATION_PATH,
            json={
                "assertion": assertion,
                "client_id": client_id,
                "scope": scope,
                "response_type": OAuthProtocol.RESPONSE_TYPE_TOKEN,
                "state": secrets.token_hex(OAuthProtocol.STATE_BYTES),
            },
        )

    async def destroy_token(self, token: str) -> JsonDict:
        return await self._request("POST", OAuthProtocol.DESTROY_PATH, json={"token": token})

    @asynccontextmanager
    async def temporary_token(self, scope: str = CliClient.SCOPE) -> AsyncIterator[str]:
        """Yield a short-lived developer token, destroyed on every exit path.

        Raises:
            TokenCleanupError: If the token could not be destroyed. The
                token is logged so that it can be deleted by hand.
        """
        response = await self.get_token(self.cli_client_id, scope)
        token = response.get("access_token")
        if not token:
            raise translate_error(response)
        _logger.debug("temp token stored")

        try:
            yield token
        finally:
            _logger.debug("temp token found, deleting")
            try:
                await self.destroy_token(token)
            except FxaError as e:
                _logger.error("temporary token was not cleaned up!")
                _logger.error("%s", token)
                _logger.error("Make sure the above token is deleted from the server")
                raise TokenCleanupError(token, f"Temporary token was not cleaned up: {e}") from e
            _logger.debug("deleted temporary token")

    # -- client administration --------------------------------------------------

    async def list_clients(self, token: str) -> list[JsonDict]:
        response = await self._request("GET", OAuthProtocol.CLIENTS_PATH, token=token)
        return list(response.get("clients", []))

    async def get_client(self, token: str, client_id: str) -> JsonDict:
        validate_string(client_id, "client_id")
        return await self._request("GET", self._client_path(client_id), token=token)

    async def register_client(self, token: str, client: JsonDict) -> JsonDict:
        return await self._request("POST", OAuthProtocol.REGISTER_PATH, json=client, token=token)

    async def update_client(self, token: str, client_id: str, changes: JsonDict) -> JsonDict:
        validate_string(client_id, "client_id")
        return await self._request(
            "POST", self._client_path(client_id), json=changes, token=token
        )

    async def delete_client(self, token: str, client_id: str) -> JsonDict:
        validate_string(client_id, "client_id")
        return await self._request("DELETE", self._client_path(client_id), token=token)

    # -- internals ------------------------------------------------------------

    @staticmethod
    def _client_path(client_id: str) -> str:
        return OAuthProtocol.CLIENT_PATH.format(client_id=client_id)

    async def _request(
        self,
        method: str,
        path: str,
        json: JsonDict | None = None,
        token: str | None = None,
    ) -> JsonDict:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            response = await self.http_client.request(
                method, f"{self.base_url}{path}", json=json, headers=headers
            )
        except HttpError as e:
            if e.payload is None:
                raise
            raise translate_error(e.payload) from e

        payload = response.json()
        return payload if isinstance(payload, dict) else {"result": payload}


__all__ = ["FxaOAuthClient"]
