"""Unit tests for input validators."""

import pytest

from fxa_oauth.core.auth.exceptions import RequiredError, ValidationError
from fxa_oauth.core.auth.validation import (
    require,
    validate_range,
    validate_string,
    validate_type,
    validate_url,
)


@pytest.mark.unit
class TestRequire:
    def test_returns_value(self):
        assert require("user@example.com", "-u or --user") == "user@example.com"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        with pytest.raises(RequiredError, match="--url"):
            require(value, "--url")


@pytest.mark.unit
class TestValidators:
    def test_type_mismatch(self):
        with pytest.raises(ValidationError, match="must be str, got int"):
            validate_type(123, str, "email")

    def test_type_tuple(self):
        with pytest.raises(ValidationError, match="must be int or float"):
            validate_type("1", (int, float), "timeout")

    def test_empty_string(self):
        with pytest.raises(ValidationError, match="non-empty"):
            validate_string("", "scope")
        assert validate_string("", "scope", allow_empty=True) == ""

    def test_range_bounds(self):
        validate_range(5, "n", min_value=1, max_value=5)
        with pytest.raises(ValidationError, match="at least 1"):
            validate_range(0, "n", min_value=1)
        with pytest.raises(ValidationError, match="at most 5"):
            validate_range(5.5, "n", max_value=5)

    def test_range_rejects_bool(self):
        with pytest.raises(ValidationError, match="got bool"):
            validate_range(True, "n")

    @pytest.mark.parametrize(
        "url", ["oauth.example.com", "ftp://oauth.example.com", "https://", ""]
    )
    def test_bad_urls(self, url):
        with pytest.raises(ValidationError):
            validate_url(url, "oauth_url")

    def test_https_required(self):
        assert validate_url("http://localhost:9010", "url") == "http://localhost:9010"
        with pytest.raises(ValidationError, match="HTTPS"):
            validate_url("http://localhost:9010", "url", require_https=True)
