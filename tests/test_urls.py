import pytest

from cvmattest.errors import AttestationError, ErrorCode
from cvmattest.urls import ParsedUrl, parse_url, split_url


def test_split_full_url():
    parsed = split_url("https://example.com:443/attest/x?api-version=1")
    assert parsed == ParsedUrl(
        protocol="https",
        domain="example.com",
        port="443",
        path="/attest/x",
        query="api-version=1",
    )


def test_split_http_without_path():
    parsed = split_url("http://example.com")
    assert parsed.protocol == "http"
    assert parsed.domain == "example.com"
    assert parsed.path == ""
    assert parsed.port == ""
    assert parsed.query == ""


def test_split_without_scheme():
    parsed = split_url("example.com/attest")
    assert parsed.protocol == ""
    assert parsed.domain == "example.com"
    assert parsed.path == "/attest"


def test_surrounding_whitespace_is_trimmed():
    assert parse_url("  https://example.com/path \t\n") == "example.com"


def test_parse_url_returns_domain():
    assert parse_url("https://attest.example.com:8443/") == "attest.example.com"


def test_empty_url_is_invalid_input():
    with pytest.raises(AttestationError) as info:
        parse_url("")
    assert info.value.code is ErrorCode.ERROR_INVALID_INPUT_PARAMETER


@pytest.mark.parametrize("url", ["   ", "https://:8080/x", "http://"])
def test_url_without_host(url):
    with pytest.raises(AttestationError) as info:
        split_url(url)
    assert info.value.code is ErrorCode.ERROR_PARSING_DNS_INFO


def test_scheme_is_case_sensitive():
    parsed = split_url("HTTPS://example.com")
    assert parsed.protocol == ""
    assert parsed.domain == "HTTPS"