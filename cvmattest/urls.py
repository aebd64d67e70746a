"""Splitting attestation endpoint URLs into their parts."""

from __future__ import annotations

from dataclasses import dataclass

from .diagnostics import get_logger
from .errors import AttestationError, ErrorCode

__all__ = ["ParsedUrl", "split_url", "parse_url"]

_WHITESPACE = " \t\n\v\f\r"


@dataclass(frozen=True)
class ParsedUrl:
    """The pieces of a URL: scheme, host, port, path and query."""

    protocol: str
    domain: str
    port: str
    path: str
    query: str


def _fail(code: ErrorCode, description: str) -> AttestationError:
    get_logger().error("Error code:%s description:%s", code.name, description)
    return AttestationError(code, description)


def split_url(url: str) -> ParsedUrl:
    """Split ``url`` into its parts.

    Raises AttestationError when the URL is empty or has no host.
    """
    if not url:
        raise _fail(ErrorCode.ERROR_INVALID_INPUT_PARAMETER, "Invalid input parameter")

    sanitized = url.strip(_WHITESPACE)

    if sanitized.startswith("https://"):
        offset = 8
    elif sanitized.startswith("http://"):
        offset = 7
    else:
        offset = 0

    path_idx = sanitized.find("/", offset + 1)
    if path_idx == -1:
        path = ""
        host = sanitized[offset:]
    else:
        path = sanitized[path_idx:]
        host = sanitized[offset:path_idx]

    port_idx = host.find(":")
    if port_idx == -1:
        port = ""
    else:
        port = host[port_idx + 1:]
        host = host[:port_idx]

    protocol = sanitized[: offset - 3] if offset > 0 else ""

    query_idx = path.find("?")
    if query_idx == -1:
        query = ""
    else:
        query = path[query_idx + 1:]
        path = path[:query_idx]

    if not host:
        raise _fail(ErrorCode.ERROR_PARSING_DNS_INFO, "Error extracting DNS info from URL")

    get_logger().info("Attestation URL info - protocol {%s}, domain {%s}", protocol, host)
    return ParsedUrl(protocol=protocol, domain=host, port=port, path=path, query=query)


def parse_url(url: str) -> str:
    """Return the domain name of ``url``."""
    return split_url(url).domain