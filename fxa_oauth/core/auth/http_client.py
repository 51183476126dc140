"""
HTTP client abstraction for the auth library.

Provides a testable, observable interface for JSON requests using
httpx as the default implementation. Requests are never retried: a
failed call fails the operation that made it.
"""

from __future__ import annotations

import abc
import json
import logging
import typing
from dataclasses import dataclass, field

import httpx

from .constants import HttpDefaults
from .exceptions import FxaError

_logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class HttpClientConfig:
    """Configuration for HTTP client behavior.

    Attributes:
        timeout: Request timeout in seconds
        enable_logging: Trace requests and responses at DEBUG level
    """

    timeout: float = HttpDefaults.REQUEST_TIMEOUT
    enable_logging: bool = True


# =============================================================================
# Response
# =============================================================================


@dataclass
class HttpResponse:
    """HTTP response wrapper adapting httpx.Response to our interface."""

    _raw: httpx.Response
    _text: str | None = field(init=False, default=None)

    @property
    def status_code(self) -> int:
        return self._raw.status_code

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self._raw.text
        return self._text

    def json(self) -> typing.Any:
        if not self._raw.content:
            return {}
        return self._raw.json()


# =============================================================================
# Exceptions
# =============================================================================


class HttpError(FxaError):
    """HTTP request failed.

    Attributes:
        status_code: HTTP status code (0 for network errors)
        reason: Human-readable reason
        body: Raw response body
        url: Request URL
        payload: Parsed JSON body, or None if the body was not JSON
    """

    name = "Http"
    default_code = "EHTTP"

    def __init__(
        self,
        status_code: int,
        reason: str,
        body: str,
        url: str,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        self.url = url
        self.payload: typing.Any = None
        if body:
            try:
                self.payload = json.loads(body)
            except ValueError:
                pass

        body_preview = body[:200] if body else "(empty)"
        if len(body) > 200:
            body_preview += "..."

        super().__init__(
            f"HTTP {status_code} - {reason} for {url}\nResponse: {body_preview}",
            errno=status_code,
        )

    @property
    def is_network_error(self) -> bool:
        return self.status_code == 0


# =============================================================================
# Abstract Client
# =============================================================================


class HttpClient(abc.ABC):
    """Abstract asynchronous HTTP client.

    Implementations must provide request() and aclose().
    """

    @abc.abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        json: typing.Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """Make an HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            json: JSON-serializable body (mutually exclusive with content)
            content: Raw request body
            headers: Request headers

        Returns:
            HttpResponse for any status in the 200-399 range

        Raises:
            HttpError: If the request fails or the status is 400 or above
        """

    @abc.abstractmethod
    async def aclose(self) -> None:
        """Release pooled connections."""

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


# =============================================================================
# httpx Implementation
# =============================================================================


class HttpxHttpClient(HttpClient):
    """Default HTTP client using httpx.AsyncClient.

    Example:
        >>> async with HttpxHttpClient() as client:
        ...     response = await client.request("GET", "https://example.com/v1/clients")
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or HttpClientConfig()
        self._client = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(self.config.timeout),
        )

    async def request(
        self,
        method: str,
        url: str,
        json: typing.Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        method = method.upper()
        if self.config.enable_logging:
            _logger.debug("HTTP %s %s", method, url)

        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                content=content,
                headers=headers,
            )
        except httpx.TransportError as e:
            raise HttpError(
                status_code=0,
                reason=str(e) or type(e).__name__,
                body="",
                url=url,
            ) from e

        if self.config.enable_logging:
            _logger.debug("HTTP %s %s", response.status_code, url)

        if response.status_code >= 400:
            raise HttpError(
                status_code=response.status_code,
                reason=str(response.reason_phrase),
                body=response.text,
                url=url,
            )

        return HttpResponse(response)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "HttpResponse",
    "HttpError",
    "HttpxHttpClient",
]
