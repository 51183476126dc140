"""Declarative schema for environment variable configuration.

This module provides a single source of truth for all environment variables,
including automatic type coercion, validation, and documentation generation.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fxa_oauth.core.auth.constants import CliClient, Environments, HttpDefaults, ValidationLimits


def _timeout_in_range(seconds: float) -> bool:
    return (
        ValidationLimits.MIN_TIMEOUT_SECONDS <= seconds <= ValidationLimits.MAX_TIMEOUT_SECONDS
    )


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "FXA_USER", "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None


class ConfigSchema:
    """Registry of all configuration environment variables."""

    # === Server Selection ===

    FXA_ENV = EnvVarSpec(
        name="FXA_ENV",
        default=Environments.DEFAULT,
        type_hint=str,
        description="Server environment: " + ", ".join(Environments.URLS),
        validator=lambda x: x in Environments.URLS,
        coerce=lambda x: x.strip().lower(),
    )

    FXA_OAUTH_URL = EnvVarSpec(
        name="FXA_OAUTH_URL",
        default=None,
        type_hint=str,
        description="Base URL of the OAuth server (overrides FXA_ENV)",
    )

    FXA_AUTH_URL = EnvVarSpec(
        name="FXA_AUTH_URL",
        default=None,
        type_hint=str,
        description="Base URL of the auth server (overrides FXA_ENV)",
    )

    FXA_CLIENT_ID = EnvVarSpec(
        name="FXA_CLIENT_ID",
        default=CliClient.CLIENT_ID,
        type_hint=str,
        description="OAuth client id used for temporary developer tokens",
        validator=lambda x: bool(x),
    )

    # === Account ===

    FXA_USER = EnvVarSpec(
        name="FXA_USER",
        default=None,
        type_hint=str,
        description="Account email address",
    )

    FXA_PASSWORD = EnvVarSpec(
        name="FXA_PASSWORD",
        default=None,
        type_hint=str,
        description="Account password (prompted for when unset)",
    )

    # === Logging ===

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: x.upper() in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        # Extract just the first word to handle trailing comments
        coerce=lambda x: x.split()[0].upper() if x.strip() else "INFO",
    )

    FXA_DEBUG_LOG = EnvVarSpec(
        name="FXA_DEBUG_LOG",
        default="fxa-debug.log",
        type_hint=str,
        description="Debug log written when a command fails",
        validator=lambda x: bool(x),
    )

    # === Timeouts ===

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=float(HttpDefaults.REQUEST_TIMEOUT),
        type_hint=float,
        description="Per-request HTTP timeout in seconds (1-3600)",
        validator=_timeout_in_range,
    )

    FXA_AUTH_DEADLINE = EnvVarSpec(
        name="FXA_AUTH_DEADLINE",
        default=None,
        type_hint=float,
        description="Deadline in seconds for sign-in and assertion signing, 1-3600 (unset = none)",
        validator=_timeout_in_range,
    )

    @classmethod
    def all_specs(cls) -> list[EnvVarSpec]:
        return [value for value in vars(cls).values() if isinstance(value, EnvVarSpec)]
