"""Identity service (auth server) client.

Implements the two auth server calls the assertion flow needs:

- sign_in: password login using the onepw key-stretching scheme
- certificate_sign: Hawk-authenticated certificate signing request

Errors are raised as HttpError; the caller decides which category they
belong to.
"""

from __future__ import annotations

import json
import logging
import typing
from dataclasses import dataclass, field

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from mohawk import Sender

from .constants import IdentityProtocol
from .http_client import HttpClient, HttpError, HttpResponse, HttpxHttpClient
from .validation import validate_string, validate_url

_logger = logging.getLogger(__name__)


def kw(name: str) -> bytes:
    """Return the namespaced key-derivation label for name."""
    return f"{IdentityProtocol.KW_PREFIX}{name}".encode("utf-8")


def kwe(name: str, email: str) -> bytes:
    """Return the namespaced label for name, bound to an email address."""
    return f"{IdentityProtocol.KW_PREFIX}{name}:{email}".encode("utf-8")


def hkdf(secret: bytes, info: bytes, length: int) -> bytes:
    """HKDF-SHA256 with an all-zero salt."""
    return HKDF(algorithm=hashes.SHA256(), length=length, salt=None, info=info).derive(secret)


def derive_auth_pw(email: str, password: str) -> str:
    """Derive the hex ``authPW`` the login endpoint expects.

    The password is stretched with PBKDF2-SHA256 salted by the email,
    then expanded with HKDF. The raw password never leaves the process.
    """
    quick_stretched = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=IdentityProtocol.DERIVED_KEY_LENGTH,
        salt=kwe("quickStretch", email),
        iterations=IdentityProtocol.QUICK_STRETCH_ROUNDS,
    ).derive(password.encode("utf-8"))
    return hkdf(quick_stretched, kw("authPW"), IdentityProtocol.DERIVED_KEY_LENGTH).hex()


def derive_hawk_credentials(session_token: str) -> dict[str, typing.Any]:
    """Derive Hawk credentials (id, key) from a hex session token."""
    key_material = hkdf(
        bytes.fromhex(session_token),
        kw(IdentityProtocol.SESSION_TOKEN_INFO),
        2 * IdentityProtocol.DERIVED_KEY_LENGTH,
    )
    return {
        "id": key_material[: IdentityProtocol.DERIVED_KEY_LENGTH].hex(),
        "key": key_material[IdentityProtocol.DERIVED_KEY_LENGTH :],
        "algorithm": IdentityProtocol.HAWK_ALGORITHM,
    }


@dataclass
class SessionToken:
    """Proof of a successful sign-in."""

    token: str = field(repr=False)
    uid: str | None = None
    verified: bool | None = None


class IdentityServiceClient:
    """Client for the auth server endpoints used by the assertion flow.

    Example:
        >>> identity = IdentityServiceClient("https://api.accounts.example.com")
        >>> session = await identity.sign_in("user@example.com", "secret")
        >>> cert = await identity.certificate_sign(session, public_key, 600_000)
    """

    def __init__(self, server_url: str, http_client: HttpClient | None = None) -> None:
        validate_url(server_url, "server_url")
        self.server_url = server_url.rstrip("/")
        self.http_client = http_client or HttpxHttpClient()

    async def sign_in(self, email: str, password: str) -> SessionToken:
        """Sign in with email and password.

        Raises:
            HttpError: If the server rejects the credentials or is unreachable
        """
        validate_string(email, "email")
        validate_string(password, "password")
        try:
            return await self._login(email, password)
        except HttpError as e:
            payload = e.payload if isinstance(e.payload, dict) else {}
            canonical = payload.get("email")
            if (
                payload.get("errno") == IdentityProtocol.ERRNO_INCORRECT_EMAIL_CASE
                and isinstance(canonical, str)
                and canonical != email
            ):
                # The password was stretched with the email as first registered
                _logger.debug("login: retrying with canonical email %s", canonical)
                return await self._login(canonical, password)
            raise

    async def certificate_sign(
        self,
        session_token: SessionToken,
        public_key: dict[str, str],
        duration_ms: int,
    ) -> str:
        """Ask the server to sign a certificate for public_key.

        Returns:
            The signed certificate

        Raises:
            HttpError: If the request is rejected or fails
        """
        url = f"{self.server_url}{IdentityProtocol.CERTIFICATE_SIGN_PATH}"
        body = json.dumps({"publicKey": public_key, "duration": duration_ms}).encode("utf-8")
        content_type = "application/json"

        sender = Sender(
            derive_hawk_credentials(session_token.token),
            url,
            "POST",
            content=body,
            content_type=content_type,
        )
        response = await self.http_client.request(
            "POST",
            url,
            content=body,
            headers={"Authorization": sender.request_header, "Content-Type": content_type},
        )
        payload = _json_object(response, url)
        cert = payload.get("cert")
        if not cert:
            raise HttpError(
                status_code=response.status_code,
                reason="response missing cert",
                body=response.text,
                url=url,
            )
        return str(cert)

    async def _login(self, email: str, password: str) -> SessionToken:
        url = f"{self.server_url}{IdentityProtocol.LOGIN_PATH}"
        response = await self.http_client.request(
            "POST",
            url,
            json={"email": email, "authPW": derive_auth_pw(email, password)},
        )
        payload = _json_object(response, url)
        _logger.debug("signIn uid=%s", payload.get("uid"))
        token = payload.get("sessionToken")
        if not token:
            raise HttpError(
                status_code=response.status_code,
                reason="response missing sessionToken",
                body=response.text,
                url=url,
            )
        return SessionToken(token=token, uid=payload.get("uid"), verified=payload.get("verified"))


def _json_object(response: HttpResponse, url: str) -> dict[str, typing.Any]:
    """Return the response body, which must be a JSON object.

    Raises:
        HttpError: If the body is not JSON or not an object
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise HttpError(
            status_code=response.status_code,
            reason="invalid JSON response",
            body=response.text,
            url=url,
        )
    return payload


__all__ = [
    "SessionToken",
    "IdentityServiceClient",
    "derive_auth_pw",
    "derive_hawk_credentials",
]
