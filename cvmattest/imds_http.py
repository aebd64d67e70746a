"""HTTP client for the instance metadata service."""

from __future__ import annotations

import contextlib
import enum
import time
from collections.abc import Iterator

import requests

from .diagnostics import get_logger
from .errors import AttestationError, ErrorCode

__all__ = ["HttpVerb", "HttpClient", "MAX_RETRIES", "BACK_OFF_TIME_SECONDS", "REQUEST_TIMEOUT_SECONDS"]

MAX_RETRIES = 3
BACK_OFF_TIME_SECONDS = 30
REQUEST_TIMEOUT_SECONDS = 300

_HTTP_STATUS_OK = 200
_HTTP_STATUS_RESOURCE_NOT_FOUND = 404
_HTTP_STATUS_TOO_MANY_REQUESTS = 429
_HTTP_STATUS_INTERNAL_SERVER_ERROR = 500


class HttpVerb(enum.Enum):
    """HTTP methods used against the metadata service."""

    GET = "GET"
    POST = "POST"


def _content_type_header(content_type: str) -> tuple[str, str]:
    """Turn ``"Name: value"`` into a header pair; a bare value is a Content-Type."""
    name, sep, value = content_type.partition(":")
    if sep:
        return name.strip(), value.strip()
    return "Content-Type", content_type.strip()


class HttpClient:
    """Sends requests to the metadata service, retrying transient failures."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session

    @contextlib.contextmanager
    def _session_scope(self) -> Iterator[requests.Session]:
        if self._session is not None:
            yield self._session
            return
        with requests.Session() as owned:
            yield owned

    def invoke_imds_request(
        self,
        url: str,
        verb: HttpVerb = HttpVerb.GET,
        request_body: str = "",
        content_type: str = "",
    ) -> str:
        """Send a request to ``url`` and return the non-empty response body.

        404, 429 and server errors are retried with a 30, 60, 120 second
        backoff. Failures raise AttestationError.
        """
        logger = get_logger()
        headers = {"Metadata": "true"}
        if content_type:
            name, value = _content_type_header(content_type)
            headers[name] = value

        data: bytes | None = None
        if verb is HttpVerb.POST:
            if not request_body:
                logger.error("Request body missing for POST request")
                raise AttestationError(
                    ErrorCode.ERROR_EMPTY_REQUEST_BODY, "Request body missing for POST request"
                )
            data = request_body.encode("utf-8")

        with self._session_scope() as http:
            retries = 0
            while True:
                try:
                    response = http.request(
                        verb.value,
                        url,
                        headers=headers,
                        data=data,
                        timeout=REQUEST_TIMEOUT_SECONDS,
                    )
                except requests.RequestException as exc:
                    logger.error("HTTP request failed:%s", exc)
                    raise AttestationError(
                        ErrorCode.ERROR_SENDING_CURL_REQUEST_FAILED,
                        f"Failed sending request with error:{exc}",
                    ) from exc

                status = response.status_code
                text = response.text

                if status == _HTTP_STATUS_OK:
                    if not text:
                        logger.error("Empty response received")
                        raise AttestationError(ErrorCode.ERROR_EMPTY_RESPONSE, "Empty response received")
                    return text

                if status in (_HTTP_STATUS_RESOURCE_NOT_FOUND, _HTTP_STATUS_TOO_MANY_REQUESTS) or (
                    status >= _HTTP_STATUS_INTERNAL_SERVER_ERROR
                ):
                    if retries == MAX_RETRIES:
                        logger.error("Http Request failed with error:%d description:%s", status, text)
                        raise AttestationError(ErrorCode.ERROR_HTTP_REQUEST_EXCEEDED_RETRIES, text)
                    logger.error(
                        "HTTP request failed with response code:%d description:%s", status, text
                    )
                    logger.info("Retrying HTTP request:%d", retries)
                    time.sleep(BACK_OFF_TIME_SECONDS * 2**retries)
                    retries += 1
                    continue

                logger.error("HTTP request failed with response code:%d description:%s", status, text)
                raise AttestationError(ErrorCode.ERROR_HTTP_REQUEST_FAILED, text)