from unittest import mock

import pytest
import requests
import responses

from cvmattest.attestation_http import (
    BACK_OFF_TIME_SECONDS,
    MAX_JITTER_MILLISECONDS,
    MAX_RETRIES,
    generate_random_jitter,
    send_request,
)
from cvmattest.errors import AttestationError, ErrorCode

URL = "https://attest.example.com/attest/AzureGuest"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mocked:
        yield mocked


def test_jitter_stays_in_range():
    values = [generate_random_jitter() for _ in range(200)]
    assert all(0 <= v <= MAX_JITTER_MILLISECONDS for v in values)


def test_success_returns_body_and_sends_json(rsps):
    rsps.add(responses.POST, URL, body='{"token":"token"}', status=200)
    result = send_request(URL, '{"a":1}')
    assert result == '{"token":"token"}'
    request = rsps.calls[0].request
    assert request.headers["Content-Type"] == "application/json"
    assert request.body == b'{"a":1}'


def test_uses_given_session(rsps):
    rsps.add(responses.POST, URL, body="ok", status=200)
    with requests.Session() as session:
        assert send_request(URL, b"{}", session) == "ok"
    assert len(rsps.calls) == 1


def test_bad_request_is_attestation_failure(rsps):
    rsps.add(responses.POST, URL, body="bad evidence", status=400)
    with pytest.raises(AttestationError) as info:
        send_request(URL, "{}")
    assert info.value.code is ErrorCode.ERROR_ATTESTATION_FAILED
    assert info.value.description == "bad evidence"
    assert len(rsps.calls) == 1


def test_other_status_is_request_failed(rsps):
    rsps.add(responses.POST, URL, body="forbidden", status=403)
    with pytest.raises(AttestationError) as info:
        send_request(URL, "{}")
    assert info.value.code is ErrorCode.ERROR_HTTP_REQUEST_FAILED
    assert info.value.description == "forbidden"


def test_server_error_then_success_retries(rsps):
    rsps.add(responses.POST, URL, body="busy", status=503)
    rsps.add(responses.POST, URL, body="done", status=200)
    with mock.patch("time.sleep") as sleep:
        assert send_request(URL, "{}") == "done"
    assert len(rsps.calls) == 2
    assert sleep.call_count == 1
    waited = sleep.call_args[0][0]
    assert BACK_OFF_TIME_SECONDS <= waited <= BACK_OFF_TIME_SECONDS + MAX_JITTER_MILLISECONDS / 1000


@pytest.mark.parametrize("status", [408, 429, 500])
def test_retries_exceeded(rsps, status):
    rsps.add(responses.POST, URL, body="try later", status=status)
    with mock.patch("time.sleep") as sleep:
        with pytest.raises(AttestationError) as info:
            send_request(URL, "{}")
    assert info.value.code is ErrorCode.ERROR_HTTP_REQUEST_EXCEEDED_RETRIES
    assert info.value.description == "try later"
    assert len(rsps.calls) == MAX_RETRIES + 1
    assert sleep.call_count == MAX_RETRIES
    waits = [c[0][0] for c in sleep.call_args_list]
    assert all(w >= BACK_OFF_TIME_SECONDS for w in waits)


def test_retry_after_header_extends_wait(rsps):
    rsps.add(responses.POST, URL, body="slow down", status=429, headers={"Retry-After": "60"})
    rsps.add(responses.POST, URL, body="ok", status=200)
    with mock.patch("time.sleep") as sleep:
        assert send_request(URL, "{}") == "ok"
    assert sleep.call_args[0][0] >= 60


def test_connection_error_raises(rsps):
    rsps.add(responses.POST, URL, body=requests.exceptions.ConnectionError("unreachable"))
    with pytest.raises(AttestationError) as info:
        send_request(URL, "{}")
    assert info.value.code is ErrorCode.ERROR_SENDING_CURL_REQUEST_FAILED
    assert "unreachable" in info.value.description