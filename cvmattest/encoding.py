"""Base64 and base64url helpers used for attestation payloads."""

from __future__ import annotations

import base64
import binascii

__all__ = [
    "base64_to_binary",
    "binary_to_base64",
    "binary_to_base64url",
    "base64url_to_binary",
    "base64_encode",
    "base64_decode",
]

_TEXT_ENCODING = "utf-8"
_TEXT_ERRORS = "surrogateescape"


def _decode_lenient(data: str) -> bytes:
    """Decode standard base64, tolerating missing padding."""
    stripped = data.rstrip("=")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"invalid base64 data: {exc}") from exc


def base64_to_binary(data: str) -> bytes:
    """Decode a base64 string to bytes, keeping zero bytes that belong to the data."""
    return _decode_lenient(data)


def binary_to_base64(data: bytes) -> str:
    """Encode bytes as padded standard base64."""
    return base64.b64encode(bytes(data)).decode("ascii")


def binary_to_base64url(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(bytes(data)).decode("ascii").rstrip("=")


def base64url_to_binary(data: str) -> bytes:
    """Decode a base64url string, padded or not, to bytes."""
    return base64_to_binary(data.replace("-", "+").replace("_", "/"))


def base64_encode(data: str | bytes) -> str:
    """Encode text (or raw bytes) as padded standard base64."""
    raw = data.encode(_TEXT_ENCODING, _TEXT_ERRORS) if isinstance(data, str) else bytes(data)
    return binary_to_base64(raw)


def base64_decode(data: str) -> str:
    """Decode base64 to text, dropping any trailing NUL characters."""
    raw = _decode_lenient(data).rstrip(b"\0")
    return raw.decode(_TEXT_ENCODING, _TEXT_ERRORS)