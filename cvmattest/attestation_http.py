"""Sending attestation requests to the attestation service over HTTP."""

from __future__ import annotations

import contextlib
import email.utils
import random
import time
from collections.abc import Iterator
from datetime import datetime, timezone

import requests

from .diagnostics import get_logger
from .errors import AttestationError, ErrorCode

__all__ = [
    "MAX_RETRIES",
    "BACK_OFF_TIME_SECONDS",
    "MAX_JITTER_MILLISECONDS",
    "generate_random_jitter",
    "send_request",
]

MAX_RETRIES = 3
BACK_OFF_TIME_SECONDS = 5
MAX_JITTER_MILLISECONDS = 5000

_HTTP_STATUS_OK = 200
_HTTP_STATUS_ATTESTATION_FAILURE = 400
_HTTP_STATUS_REQUEST_TIMEOUT = 408
_HTTP_STATUS_TOO_MANY_REQUESTS = 429
_HTTP_STATUS_SERVER_ERROR = 500

_RANDOM = random.SystemRandom()


def generate_random_jitter() -> int:
    """Return a random delay between 0 and 5000 milliseconds inclusive."""
    jitter = _RANDOM.randint(0, MAX_JITTER_MILLISECONDS)
    get_logger().info("Adding additional random jitter of %d milliseconds", jitter)
    return jitter


@contextlib.contextmanager
def _session_scope(session: requests.Session | None) -> Iterator[requests.Session]:
    if session is not None:
        yield session
        return
    with requests.Session() as owned:
        yield owned


def _retry_after_seconds(response: requests.Response) -> int:
    """Seconds the server asked us to wait, from a Retry-After header; 0 if none."""
    value = response.headers.get("Retry-After", "").strip()
    if not value:
        return 0
    if value.isdigit():
        return int(value)
    try:
        when = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return 0
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    delta = (when - datetime.now(timezone.utc)).total_seconds()
    return max(0, int(delta))


def _is_retryable(status: int) -> bool:
    return status in (_HTTP_STATUS_TOO_MANY_REQUESTS, _HTTP_STATUS_REQUEST_TIMEOUT) or (
        status >= _HTTP_STATUS_SERVER_ERROR
    )


def send_request(
    url: str,
    payload: str | bytes,
    session: requests.Session | None = None,
) -> str:
    """POST a JSON ``payload`` to ``url`` and return the response body.

    Throttling, timeouts and server errors are retried with exponential
    backoff plus random jitter, up to MAX_RETRIES times. Failures raise
    AttestationError.
    """
    logger = get_logger()
    body = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
    headers = {"Content-Type": "application/json"}

    with _session_scope(session) as http:
        retries = 0
        while True:
            try:
                response = http.post(url, data=body, headers=headers)
            except requests.RequestException as exc:
                logger.error("Failed sending request with error:%s", exc)
                raise AttestationError(
                    ErrorCode.ERROR_SENDING_CURL_REQUEST_FAILED,
                    f"Failed sending request with error:{exc}",
                ) from exc

            status = response.status_code
            text = response.text

            if status == _HTTP_STATUS_OK:
                return text

            if status == _HTTP_STATUS_ATTESTATION_FAILURE:
                logger.error(
                    "Attestation failed with error code:%d description:%s", status, text
                )
                raise AttestationError(ErrorCode.ERROR_ATTESTATION_FAILED, text)

            if _is_retryable(status):
                logger.error("Http Request failed with error:%d description:%s", status, text)
                if retries == MAX_RETRIES:
                    logger.error("Maximum retries exceeded.")
                    raise AttestationError(ErrorCode.ERROR_HTTP_REQUEST_EXCEEDED_RETRIES, text)
                logger.info("Retrying")

                retry_after = _retry_after_seconds(response)
                if retry_after:
                    logger.info("Http Request throttled, retry-after: %d", retry_after)

                backoff = BACK_OFF_TIME_SECONDS * 2**retries
                retries += 1
                wait_ms = max(backoff, retry_after) * 1000 + generate_random_jitter()
                logger.info("Http Request wait time: %d", wait_ms)
                time.sleep(wait_ms / 1000)
                continue

            logger.error("Http Request failed with error:%d description:%s", status, text)
            raise AttestationError(ErrorCode.ERROR_HTTP_REQUEST_FAILED, text)