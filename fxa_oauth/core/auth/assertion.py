"""Assertion-based authentication.

Turns an email and password into a BrowserID bundle
(``certificate~assertion``) that the OAuth server accepts as the
``assertion`` parameter of an authorization request.

The sequence is fixed by the identity service:

1. sign in                      } run concurrently
2. generate an ephemeral key    }
3. get the public key certified } run concurrently
4. sign an assertion            }
5. bundle certificate and assertion
"""

from __future__ import annotations

import asyncio
import logging
import time
import typing
import urllib.parse
from dataclasses import dataclass, field

from .constants import AssertionDefaults, ValidationLimits
from .exceptions import (
    AuthError,
    CertificateError,
    DeadlineError,
    FxaError,
    SigningError,
    ValidationError,
)
from .http_client import HttpError
from .identity import IdentityServiceClient, SessionToken
from .signing import KeyPair, SigningProvider, get_key_algorithm
from .validation import validate_range, validate_string, validate_url

_logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def derive_audience(url: str) -> str:
    """Return ``scheme://host[:port]`` of url.

    Path, query, fragment and user info are dropped.

    Example:
        >>> derive_audience("https://oauth.example.com/v1/authorization?x=1")
        'https://oauth.example.com'
    """
    validate_url(url, "audience_url")
    parsed = urllib.parse.urlsplit(url)
    host = parsed.hostname
    if not host:
        raise ValidationError("audience_url", url, "URL must have a host")
    try:
        port = parsed.port
    except ValueError as e:
        raise ValidationError("audience_url", url, f"invalid port: {e}") from None
    if ":" in host:
        host = f"[{host}]"
    if port is not None:
        host = f"{host}:{port}"
    return f"{parsed.scheme}://{host}"


@dataclass
class Credentials:
    """User login material. The password is kept out of repr()."""

    email: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        validate_string(self.email, "email")
        validate_string(self.password, "password")


@dataclass
class AssertionConfig:
    """Tunables for assertion generation.

    Attributes:
        algorithm: Key family ("DS" or "RS")
        key_size: BrowserID key size
        certificate_duration_ms: Requested certificate lifetime
        assertion_duration_ms: Assertion lifetime

    Raises:
        ValidationError: If a value is out of range, the algorithm is
            unsupported, or the certificate would expire before the assertion
    """

    algorithm: str = AssertionDefaults.ALGORITHM
    key_size: int = AssertionDefaults.KEY_SIZE
    certificate_duration_ms: int = AssertionDefaults.CERTIFICATE_DURATION_MS
    assertion_duration_ms: int = AssertionDefaults.ASSERTION_DURATION_MS

    def __post_init__(self) -> None:
        try:
            get_key_algorithm(self.algorithm, self.key_size)
        except SigningError as e:
            raise ValidationError(
                "algorithm", f"{self.algorithm}/{self.key_size}", e.message
            ) from None
        for name in ("certificate_duration_ms", "assertion_duration_ms"):
            validate_range(
                getattr(self, name),
                name,
                min_value=ValidationLimits.MIN_DURATION_MS,
                max_value=ValidationLimits.MAX_DURATION_MS,
            )
        if self.certificate_duration_ms <= self.assertion_duration_ms:
            raise ValidationError(
                "certificate_duration_ms",
                self.certificate_duration_ms,
                f"must exceed assertion_duration_ms ({self.assertion_duration_ms})",
            )


class AssertionAuthenticator:
    """Signs in and produces a single-use assertion bundle.

    Nothing is cached: every call signs in again and uses a fresh key
    pair.

    Example:
        >>> authenticator = AssertionAuthenticator(IdentityServiceClient(auth_url))
        >>> bundle = await authenticator.authenticate(
        ...     Credentials("user@example.com", "secret"), oauth_url, deadline=30
        ... )
    """

    def __init__(
        self,
        identity: IdentityServiceClient,
        signer: SigningProvider | None = None,
        config: AssertionConfig | None = None,
        clock: typing.Callable[[], int] = now_ms,
    ) -> None:
        self.identity = identity
        self.signer = signer or SigningProvider()
        self.config = config or AssertionConfig()
        self.clock = clock

    async def authenticate(
        self,
        credentials: Credentials,
        audience_url: str,
        deadline: float | None = None,
    ) -> str:
        """Sign in and return a ``certificate~assertion`` bundle.

        Args:
            credentials: Email and password
            audience_url: URL of the server that will consume the bundle
            deadline: Seconds allowed for the whole sequence (None = unlimited)

        Raises:
            AuthError: Sign-in was rejected
            CertificateError: Certificate signing was rejected
            SigningError: Key generation or assertion signing failed
            DeadlineError: The deadline elapsed first
        """
        audience = derive_audience(audience_url)
        if deadline is None:
            return await self._authenticate(credentials, audience)
        try:
            return await asyncio.wait_for(self._authenticate(credentials, audience), deadline)
        except asyncio.TimeoutError:
            raise DeadlineError(f"Authentication did not complete within {deadline}s") from None

    async def _authenticate(self, credentials: Credentials, audience: str) -> str:
        session_token, keypair = await asyncio.gather(
            self._sign_in(credentials),
            self._generate_keypair(),
        )
        _logger.debug("keypair generated")

        try:
            cert, assertion = await asyncio.gather(
                self._certificate_sign(session_token, keypair),
                self._sign_assertion(keypair, audience),
            )
        finally:
            keypair.discard()

        _logger.debug("cert and assertion")
        return self.signer.bundle([cert], assertion)

    async def _sign_in(self, credentials: Credentials) -> SessionToken:
        try:
            return await self.identity.sign_in(credentials.email, credentials.password)
        except HttpError as e:
            raise _wrap(AuthError, e) from e

    async def _generate_keypair(self) -> KeyPair:
        try:
            return await asyncio.to_thread(
                self.signer.generate_keypair, self.config.algorithm, self.config.key_size
            )
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(f"Key generation failed: {e}") from e

    async def _certificate_sign(self, session_token: SessionToken, keypair: KeyPair) -> str:
        try:
            return await self.identity.certificate_sign(
                session_token,
                keypair.to_simple_object(),
                self.config.certificate_duration_ms,
            )
        except HttpError as e:
            raise _wrap(CertificateError, e) from e

    async def _sign_assertion(self, keypair: KeyPair, audience: str) -> str:
        _logger.debug("audience %s", audience)
        expires_at = self.clock() + self.config.assertion_duration_ms
        try:
            return await asyncio.to_thread(
                self.signer.sign_assertion, {}, audience, expires_at, keypair.secret_key
            )
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(f"Assertion signing failed: {e}") from e


def _wrap(error_class: type[FxaError], error: HttpError) -> FxaError:
    """Re-type an HTTP failure, keeping the server's code and errno."""
    if isinstance(error.payload, dict) and error.payload.get("message"):
        return error_class.from_payload(error.payload)
    return error_class(error.reason or error.message, code=error.code, errno=error.errno)


__all__ = [
    "Credentials",
    "AssertionConfig",
    "AssertionAuthenticator",
    "derive_audience",
    "now_ms",
]
