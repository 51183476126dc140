"""
Validation utilities for the auth library.

All validation functions raise ValidationError (or RequiredError for
missing values) with descriptive messages when validation fails.

Example:
    >>> validate_url("oauth.example.com", "oauth_url")
    ValidationError: Invalid 'oauth_url': URL must have scheme and netloc ...
"""

from __future__ import annotations

import urllib.parse
from typing import TypeVar

from .exceptions import RequiredError, ValidationError

T = TypeVar("T")

# =============================================================================
# PRESENCE
# =============================================================================


def require(value: T | None, description: str) -> T:
    """Return value if it is truthy, else raise RequiredError.

    Args:
        value: The value to check
        description: What the caller should provide (e.g. "-u or --user")

    Raises:
        RequiredError: If value is missing or empty
    """
    if not value:
        raise RequiredError(description)
    return value


# =============================================================================
# TYPE VALIDATION
# =============================================================================


def validate_type(value: object, expected_type: type | tuple[type, ...], field_name: str) -> None:
    """Validate that value is of expected type.

    Raises:
        ValidationError: If value is not of expected type

    Example:
        >>> validate_type(123, str, "email")
        ValidationError: Invalid 'email': must be str, got int (got 123)
    """
    if not isinstance(value, expected_type):
        type_names = (
            expected_type.__name__
            if isinstance(expected_type, type)
            else " or ".join(t.__name__ for t in expected_type)
        )
        raise ValidationError(
            field_name, value, f"must be {type_names}, got {type(value).__name__}"
        )


def validate_string(value: object, field_name: str, allow_empty: bool = False) -> str:
    """Validate that value is a string (optionally non-empty).

    Returns:
        The validated string

    Raises:
        ValidationError: If value is not a string or is empty when not allowed
    """
    validate_type(value, str, field_name)
    assert isinstance(value, str)  # for type narrowing

    if not allow_empty and not value:
        raise ValidationError(field_name, value, "must be a non-empty string")

    return value


# =============================================================================
# RANGE VALIDATION
# =============================================================================


def validate_range(
    value: int | float,
    field_name: str,
    min_value: int | float | None = None,
    max_value: int | float | None = None,
) -> None:
    """Validate that a number is within specified range (inclusive).

    Raises:
        ValidationError: If value is outside range
    """
    if isinstance(value, bool):
        raise ValidationError(field_name, value, "must be a number, got bool")
    validate_type(value, (int, float), field_name)

    if min_value is not None and value < min_value:
        raise ValidationError(field_name, value, f"must be at least {min_value}")

    if max_value is not None and value > max_value:
        raise ValidationError(field_name, value, f"must be at most {max_value}")


# =============================================================================
# FORMAT VALIDATION
# =============================================================================


def validate_url(value: str, field_name: str, require_https: bool = False) -> str:
    """Validate that value is a well-formed http(s) URL.

    Returns:
        The validated URL string

    Raises:
        ValidationError: If URL is malformed or has wrong scheme
    """
    validate_string(value, field_name)

    try:
        parsed = urllib.parse.urlsplit(value)
    except ValueError as e:
        raise ValidationError(field_name, value, f"malformed URL: {e}") from e

    if not parsed.scheme or not parsed.netloc:
        raise ValidationError(field_name, value, "URL must have scheme and netloc")

    if parsed.scheme not in ("http", "https"):
        raise ValidationError(field_name, value, "URL must use http or https scheme")

    if require_https and parsed.scheme != "https":
        raise ValidationError(field_name, value, "URL must use HTTPS scheme")

    return value


__all__ = [
    "require",
    "validate_type",
    "validate_string",
    "validate_range",
    "validate_url",
]
