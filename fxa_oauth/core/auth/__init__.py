"""
FxA Auth Library

Assertion-based authentication against a Firefox Accounts style identity
service, and a client for the OAuth server that consumes the assertions.

This library provides:
- Password sign-in and certificate signing (IdentityServiceClient)
- Ephemeral key pairs and BrowserID assertions (SigningProvider)
- The assertion sequence itself (AssertionAuthenticator)
- Token exchange and client administration (FxaOAuthClient)

Basic Usage:
    >>> from fxa_oauth.core.auth import FxaOAuthClient
    >>>
    >>> async with FxaOAuthClient(email, password, oauth_url, fxa_url) as client:
    ...     token = await client.get_token(client_id, "profile")
    ...     async with client.temporary_token() as dev_token:
    ...         clients = await client.list_clients(dev_token)
"""

from .assertion import AssertionAuthenticator, AssertionConfig, Credentials, derive_audience
from .client import FxaOAuthClient

# Exceptions
from .exceptions import (
    AuthError,
    CertificateError,
    DeadlineError,
    FxaError,
    OAuthError,
    RequiredError,
    SigningError,
    TokenCleanupError,
    UnexpectedError,
    ValidationError,
    translate_error,
)

# HTTP client
from .http_client import (
    HttpClient,
    HttpClientConfig,
    HttpError,
    HttpResponse,
    HttpxHttpClient,
)
from .identity import IdentityServiceClient, SessionToken

# Utilities
from .jws import decode_jws, unbundle
from .signing import KeyPair, SigningProvider

__all__ = [
    # Assertion flow
    "AssertionAuthenticator",
    "AssertionConfig",
    "Credentials",
    "derive_audience",
    # Collaborators
    "IdentityServiceClient",
    "SessionToken",
    "SigningProvider",
    "KeyPair",
    # OAuth
    "FxaOAuthClient",
    # Utilities
    "decode_jws",
    "unbundle",
    # HTTP client
    "HttpClient",
    "HttpClientConfig",
    "HttpResponse",
    "HttpError",
    "HttpxHttpClient",
    # Exceptions
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
