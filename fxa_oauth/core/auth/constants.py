"""
Centralized constants for the auth library.

Constants are grouped by:
- Configurable defaults: Values users may want to override
- Protocol constants: Fixed by the identity and OAuth servers
- Validation limits: Valid ranges for parameters
"""

from __future__ import annotations

# =============================================================================
# CONFIGURABLE DEFAULTS
# =============================================================================
# These values can be overridden via AssertionConfig or environment variables.


class CliClient:
    """OAuth client used by the CLI to mint temporary developer tokens.

    The client id must be registered in every server environment.
    """

    CLIENT_ID = "66041b7ec3991ec0"
    SCOPE = "oauth"


class AssertionDefaults:
    """Default values for assertion generation.

    The certificate must outlive the assertion, so that the bundle is
    valid for the whole of the assertion's lifetime.

    DS/128 is a 1024-bit DSA key. It is small by modern standards but it
    is what the identity service expects from this client.
    """

    ALGORITHM = "DS"
    KEY_SIZE = 128

    CERTIFICATE_DURATION_MS = 1000 * 60 * 10  # 10 minutes
    ASSERTION_DURATION_MS = 1000 * 60 * 5  # 5 minutes


class HttpDefaults:
    """Default values for HTTP requests."""

    REQUEST_TIMEOUT = 30  # seconds


class Environments:
    """Known server environments as (oauth_url, auth_url) pairs."""

    DEFAULT = "stable"

    URLS: dict[str, tuple[str, str]] = {
        "prod": (
            "https://oauth.accounts.firefox.com",
            "https://api.accounts.firefox.com",
        ),
        "stage": (
            "https://oauth.stage.mozaws.net",
            "https://api-accounts.stage.mozaws.net",
        ),
        "stable": (
            "https://oauth-stable.dev.lcip.org",
            "https://stable.dev.lcip.org/auth",
        ),
        "latest": (
            "https://oauth-latest.dev.lcip.org",
            "https://latest.dev.lcip.org/auth",
        ),
    }


# =============================================================================
# PROTOCOL CONSTANTS
# =============================================================================
# Defined by the auth server (onepw protocol) and the OAuth server APIs.
# Changing them would break compatibility with the servers.


class IdentityProtocol:
    """Constants of the auth server API and its key-stretching scheme."""

    LOGIN_PATH = "/v1/account/login"
    CERTIFICATE_SIGN_PATH = "/v1/certificate/sign"

    # onepw key derivation
    KW_PREFIX = "identity.mozilla.com/picl/v1/"
    QUICK_STRETCH_ROUNDS = 1000
    DERIVED_KEY_LENGTH = 32

    # Hawk credentials are derived from the session token (id, then key)
    SESSION_TOKEN_INFO = "sessionToken"
    HAWK_ALGORITHM = "sha256"

    ERRNO_INCORRECT_EMAIL_CASE = 120

    # Error bodies link to the API docs of the server that produced them
    ERROR_INFO = "https://github.com/mozilla/fxa-auth-server/blob/master/docs/api.md#response-format"


class OAuthProtocol:
    """Constants of the OAuth server API."""

    AUTHORIZATION_PATH = "/v1/authorization"
    DESTROY_PATH = "/v1/destroy"
    CLIENTS_PATH = "/v1/clients"
    CLIENT_PATH = "/v1/client/{client_id}"
    REGISTER_PATH = "/v1/client/register"

    # Implicit grant: the authorization response carries the token itself
    RESPONSE_TYPE_TOKEN = "token"

    STATE_BYTES = 8

    ERROR_INFO = "https://github.com/mozilla/fxa-oauth-server/blob/master/docs/api.md#errors"


class JwsProtocol:
    """Constants of the compact JWS / BrowserID bundle formats."""

    JWS_PART_COUNT = 3
    BASE64_PADDING_LENGTH = 4
    BUNDLE_SEPARATOR = "~"


# =============================================================================
# VALIDATION RANGES
# =============================================================================


class ValidationLimits:
    """Valid ranges for user-configurable parameters."""

    MIN_DURATION_MS = 1000
    MAX_DURATION_MS = 1000 * 60 * 60 * 24  # 1 day

    MIN_TIMEOUT_SECONDS = 1
    MAX_TIMEOUT_SECONDS = 3600


__all__ = [
    "CliClient",
    "AssertionDefaults",
    "HttpDefaults",
    "Environments",
    "IdentityProtocol",
    "OAuthProtocol",
    "JwsProtocol",
    "ValidationLimits",
]
