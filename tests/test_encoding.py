import pytest

from cvmattest.encoding import (
    base64_decode,
    base64_encode,
    base64_to_binary,
    base64url_to_binary,
    binary_to_base64,
    binary_to_base64url,
)

SAMPLES = [
    b"",
    b"M",
    b"Ma",
    b"Man",
    b"\x00",
    b"abc\x00\x00",
    bytes(range(256)),
    b"\xfb\xff\xfe\x3e\x3f",
]


def test_known_encoding():
    assert binary_to_base64(b"Man") == "TWFu"


def test_padding_added():
    assert binary_to_base64(b"M") == "TQ=="


@pytest.mark.parametrize("data", SAMPLES)
def test_base64_round_trip(data):
    encoded = binary_to_base64(data)
    assert len(encoded) % 4 == 0
    assert base64_to_binary(encoded) == data


@pytest.mark.parametrize("data", SAMPLES)
def test_base64url_round_trip(data):
    encoded = binary_to_base64url(data)
    assert "=" not in encoded
    assert "+" not in encoded
    assert "/" not in encoded
    assert base64url_to_binary(encoded) == data


def test_base64url_uses_url_alphabet():
    data = b"\xfb\xff\xfe"
    standard = binary_to_base64(data)
    url = binary_to_base64url(data)
    assert url == standard.replace("+", "-").replace("/", "_").rstrip("=")


def test_base64url_accepts_padded_input():
    data = b"Ma"
    padded = binary_to_base64(data)
    assert base64url_to_binary(padded) == data


def test_base64_to_binary_accepts_unpadded_input():
    data = b"Ma"
    unpadded = binary_to_base64(data).rstrip("=")
    assert base64_to_binary(unpadded) == data


def test_trailing_zero_bytes_preserved():
    data = b"abc\x00\x00"
    assert base64_to_binary(binary_to_base64(data)) == data


@pytest.mark.parametrize("text", ["", "hello", '{"a": 1}', "caf\u00e9", "ab"])
def test_text_round_trip(text):
    assert base64_decode(base64_encode(text)) == text


def test_text_encode_matches_binary_encode():
    text = "attestation"
    assert base64_encode(text) == binary_to_base64(text.encode("utf-8"))


def test_decode_strips_trailing_nuls():
    assert base64_decode(binary_to_base64(b"abc\x00\x00")) == "abc"


def test_decode_unpadded_text():
    encoded = base64_encode("json").rstrip("=")
    assert base64_decode(encoded) == "json"


@pytest.mark.parametrize("bad", ["@@@@", "QQ!=", "\u00e9abc"])
def test_invalid_characters_raise(bad):
    with pytest.raises(ValueError):
        base64_to_binary(bad)


def test_invalid_text_decode_raises():
    with pytest.raises(ValueError):
        base64_decode("a*bc")