"""Fetching the VCek certificate chain from the metadata service."""

from __future__ import annotations

import json
from typing import Any

from .diagnostics import EventLevel, get_logger, report_event
from .encoding import base64_encode
from .errors import AttestationError, ErrorCode
from .imds_http import HttpClient, HttpVerb

__all__ = ["VCEK_CERT_URL", "get_vcek_cert"]

VCEK_CERT_URL = "http://169.254.169.254/metadata/THIM/amd/certification"


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def get_vcek_cert(http_client: HttpClient | None = None) -> str:
    """Return the VCek certificate followed by its chain, base64 encoded.

    Raises AttestationError when the request fails, the reply is not JSON,
    or either part of the chain is missing.
    """
    logger = get_logger()
    client = http_client if http_client is not None else HttpClient()

    try:
        body = client.invoke_imds_request(VCEK_CERT_URL, HttpVerb.GET)
    except AttestationError as exc:
        logger.error("Failed to retrieve VCek certificate from IMDS: %s", exc.description)
        report_event(
            "Get VCekCert",
            "Failed to retrive VCek certificate from IMDS",
            EventLevel.IMDS_QUERY_VCEK_CERT,
        )
        raise

    try:
        root = json.loads(body)
    except ValueError as exc:
        logger.error("Invalid JSON reponse from IMDS")
        raise AttestationError(
            ErrorCode.ERROR_INVALID_JSON_RESPONSE, "Invalid JSON reponse from IMDS"
        ) from exc

    fields = root if isinstance(root, dict) else {}
    cert = _as_string(fields.get("vcekCert"))
    chain = _as_string(fields.get("certificateChain"))
    if not cert or not chain:
        logger.error("Empty VCek cert received from THIM")
        raise AttestationError(ErrorCode.ERROR_EMPTY_VCEK_CERT, "Empty VCek cert received from THIM")

    logger.debug("VCek cert received from IMDS successfully")
    return base64_encode(cert + chain)