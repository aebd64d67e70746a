"""Error codes and the exception raised by the attestation client."""

from __future__ import annotations

import enum

__all__ = ["ErrorCode", "AttestationError"]


class ErrorCode(enum.Enum):
    """Reasons an attestation operation can fail."""

    ERROR_CURL_INITIALIZATION = enum.auto()
    ERROR_ATTESTATION_FAILED = enum.auto()
    ERROR_HTTP_REQUEST_EXCEEDED_RETRIES = enum.auto()
    ERROR_HTTP_REQUEST_FAILED = enum.auto()
    ERROR_SENDING_CURL_REQUEST_FAILED = enum.auto()
    ERROR_INVALID_INPUT_PARAMETER = enum.auto()
    ERROR_EVP_PKEY_ENCRYPT_INIT_FAILED = enum.auto()
    ERROR_EVP_PKEY_ENCRYPT_FAILED = enum.auto()
    ERROR_CONVERTING_JWK_TO_RSA_PUB = enum.auto()
    ERROR_PARSING_DNS_INFO = enum.auto()
    ERROR_EMPTY_REQUEST_BODY = enum.auto()
    ERROR_EMPTY_RESPONSE = enum.auto()
    ERROR_INVALID_JSON_RESPONSE = enum.auto()
    ERROR_EMPTY_VCEK_CERT = enum.auto()
    ERROR_HCL_REPORT_EMPTY = enum.auto()
    ERROR_HCL_REPORT_PARSING_FAILURE = enum.auto()


class AttestationError(Exception):
    """Raised when an attestation operation fails; carries a code and description."""

    def __init__(self, code: ErrorCode, description: str = "") -> None:
        super().__init__(description)
        self.code = code
        self.description = description

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"AttestationError({self.code.name}, {self.description!r})"