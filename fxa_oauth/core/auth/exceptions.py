"""
Exception hierarchy for the auth library.

Every error carries a ``name`` (its category), a machine-readable
``code``, a numeric ``errno`` and a human-readable ``message``. Errors
reported by the servers keep the code and errno the server sent.

All exceptions inherit from FxaError, allowing callers to catch all
library-specific errors with a single except clause.

Example:
    >>> try:
    ...     bundle = await authenticator.authenticate(credentials, oauth_url)
    ... except FxaError as e:
    ...     print(f"{e.name} error: {e.message}")
"""

from __future__ import annotations

import logging
import typing

from .constants import IdentityProtocol, OAuthProtocol

_logger = logging.getLogger(__name__)


class FxaError(Exception):
    """Base exception for all fxa-oauth errors."""

    name: typing.ClassVar[str] = "Fxa"
    default_code: typing.ClassVar[str | None] = None
    default_errno: typing.ClassVar[int | None] = None

    def __init__(
        self,
        message: str,
        code: str | int | None = None,
        errno: int | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.errno = errno if errno is not None else self.default_errno
        super().__init__(message)

    @classmethod
    def from_payload(cls, payload: typing.Mapping[str, typing.Any]) -> FxaError:
        """Build an error from a server error body."""
        message = payload.get("message") or payload.get("error") or "Unknown error"
        return cls(str(message), code=payload.get("code"), errno=payload.get("errno"))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"code={self.code!r}, errno={self.errno!r})"
        )


class AuthError(FxaError):
    """Raised when the identity service rejects a sign-in or a session request.

    Example:
        >>> await identity.sign_in("user@example.com", "wrong")
        AuthError: Incorrect password
    """

    name = "Auth"


class CertificateError(FxaError):
    """Raised when the identity service refuses to sign a certificate.

    This typically means the session expired or the public key was
    malformed.
    """

    name = "Certificate"


class SigningError(FxaError):
    """Raised when local key generation or assertion signing fails."""

    name = "Signing"
    default_code = "ESIGNING"
    default_errno = 998


class DeadlineError(FxaError, TimeoutError):
    """Raised when a caller-supplied deadline elapses before completion."""

    name = "Timeout"
    default_code = "ETIMEDOUT"
    default_errno = 997


class OAuthError(FxaError):
    """Raised when the OAuth server rejects a request."""

    name = "OAuth"


class RequiredError(FxaError):
    """Raised when a required parameter was not provided."""

    name = "Required"
    default_code = "EREQUIRED"
    default_errno = 100


class TokenCleanupError(FxaError):
    """Raised when a temporary token could not be destroyed.

    The token is still valid on the server and must be deleted by hand.
    """

    name = "Token"
    default_code = "ETOKEN"
    default_errno = 101

    def __init__(self, token: str, message: str) -> None:
        self.token = token
        super().__init__(message)


class UnexpectedError(FxaError):
    """Raised for errors that match no known category."""

    name = "Weird"
    default_code = "EWEIRD"
    default_errno = 999


class ValidationError(FxaError):
    """Raised when input validation fails.

    Attributes:
        field: Name of the field that failed validation
        value: The invalid value that was provided
        reason: Human-readable explanation of the validation error

    Example:
        >>> AssertionConfig(certificate_duration_ms=1000)
        ValidationError: Invalid 'certificate_duration_ms': must exceed ...
    """

    name = "Validation"
    default_code = "EINVALID"
    default_errno = 102

    def __init__(self, field: str, value: object, message: str) -> None:
        self.field = field
        self.value = value
        self.reason = message
        super().__init__(f"Invalid {field!r}: {message} (got {value!r})")


def translate_error(payload: object) -> FxaError:
    """Translate a server error body into a typed error.

    The auth server and the OAuth server both link their error bodies to
    their API docs through the ``info`` field; that link decides the
    category. Anything else becomes an UnexpectedError.
    """
    if isinstance(payload, FxaError):
        return payload

    if not isinstance(payload, dict):
        _logger.debug("weird error %r", payload)
        return UnexpectedError(str(payload) if payload else "Error undefined")

    info = payload.get("info")
    if info == IdentityProtocol.ERROR_INFO:
        _logger.debug("auth error %s", payload)
        return AuthError.from_payload(payload)
    if info == OAuthProtocol.ERROR_INFO:
        _logger.debug("oauth error %s", payload)
        return OAuthError.from_payload(payload)

    _logger.debug("weird error %s", payload)
    return UnexpectedError(str(payload.get("message") or payload))


__all__ = [
    "FxaError",
    "AuthError",
    "CertificateError",
    "SigningError",
    "DeadlineError",
    "OAuthError",
    "RequiredError",
    "TokenCleanupError",
    "UnexpectedError",
    "ValidationError",
    "translate_error",
]
