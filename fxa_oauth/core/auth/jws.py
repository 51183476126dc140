"""
Compact JWS encoding utilities for BrowserID assertions.

Assertions and certificates travel as compact JWS strings
(``header.payload.signature``, each part base64url-encoded without
padding). Signing itself lives in signing.py; this module only deals
with the wire encoding.

Note: decode_jws() does NOT verify signatures. It is meant for
inspecting tokens this process produced or received from a trusted
server.
"""

import base64
import binascii
import json
from typing import Any

from .constants import JwsProtocol


def b64url_encode(data: bytes) -> str:
    """Base64url-encode bytes without trailing padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    """Decode base64url text, restoring any padding it omits.

    Raises:
        ValueError: If the text is not valid base64url
    """
    padded = data + "=" * (-len(data) % JwsProtocol.BASE64_PADDING_LENGTH)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64url data: {e}") from e


def _encode_segment(obj: dict[str, Any]) -> str:
    return b64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


def signing_input(header: dict[str, Any], payload: dict[str, Any]) -> str:
    """Return the ``header.payload`` string a JWS signature covers."""
    return f"{_encode_segment(header)}.{_encode_segment(payload)}"


def split_jws(token: str) -> tuple[str, str, str]:
    """Split a compact JWS into its three encoded parts.

    Raises:
        ValueError: If token is empty or does not have three parts
    """
    if not token:
        raise ValueError("Token is empty")

    parts = token.split(".")
    if len(parts) != JwsProtocol.JWS_PART_COUNT:
        raise ValueError(f"Invalid JWS format: expected 3 parts, got {len(parts)}")
    header, payload, signature = parts
    return header, payload, signature


def decode_jws(token: str) -> tuple[dict[str, Any], dict[str, Any]]:
    """Decode header and payload of a compact JWS without verification.

    Args:
        token: Compact JWS string (format: header.payload.signature)

    Returns:
        (header, payload) dictionaries

    Raises:
        ValueError: If token is malformed

    Example:
        >>> header, payload = decode_jws(assertion)
        >>> header["alg"], payload["aud"]
        ('DS128', 'https://oauth.example.com')
    """
    header_part, payload_part, _ = split_jws(token)

    try:
        header = json.loads(b64url_decode(header_part).decode("utf-8"))
        payload = json.loads(b64url_decode(payload_part).decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ValueError(f"Failed to decode JWS segment: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse JWS segment as JSON: {e}") from e

    if not isinstance(header, dict) or not isinstance(payload, dict):
        raise ValueError("JWS header and payload must be JSON objects")
    return header, payload


def unbundle(bundle: str) -> tuple[list[str], str]:
    """Split a BrowserID bundle into its certificates and assertion.

    Raises:
        ValueError: If the bundle does not hold at least one certificate
    """
    parts = bundle.split(JwsProtocol.BUNDLE_SEPARATOR)
    if len(parts) < 2 or not all(parts):
        raise ValueError("Bundle must contain at least one certificate and an assertion")
    return parts[:-1], parts[-1]


__all__ = [
    "b64url_encode",
    "b64url_decode",
    "signing_input",
    "split_jws",
    "decode_jws",
    "unbundle",
]
