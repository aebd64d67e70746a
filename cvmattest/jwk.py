"""RSA key handling for attestation tokens: JWK extraction, conversion and encryption."""

from __future__ import annotations

import enum
import json
from typing import Any, NamedTuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .diagnostics import get_logger
from .encoding import base64_decode, base64url_to_binary
from .errors import AttestationError, ErrorCode

__all__ = [
    "RsaScheme",
    "RsaHashAlg",
    "JwkInfo",
    "extract_jwk_from_jwt",
    "jwk_to_rsa_public_key_pem",
    "encrypt_with_rsa_public_key",
]


class RsaScheme(enum.Enum):
    """RSA padding schemes used to wrap data."""

    RSA_ES = "RsaEs"
    RSA_OAEP = "RsaOaep"
    RSA_NULL = "RsaNull"


class RsaHashAlg(enum.Enum):
    """Digest algorithms used with RSA-OAEP."""

    SHA1 = "RsaSha1"
    SHA256 = "RsaSha256"
    SHA384 = "RsaSha384"
    SHA512 = "RsaSha512"


_HASHES: dict[RsaHashAlg, type[hashes.HashAlgorithm]] = {
    RsaHashAlg.SHA1: hashes.SHA1,
    RsaHashAlg.SHA256: hashes.SHA256,
    RsaHashAlg.SHA384: hashes.SHA384,
    RsaHashAlg.SHA512: hashes.SHA512,
}


class JwkInfo(NamedTuple):
    """Base64url modulus and exponent of an RSA public key."""

    n: str
    e: str


def _fail(code: ErrorCode, description: str) -> AttestationError:
    get_logger().error("Error code:%s description:%s", code.name, description)
    return AttestationError(code, description)


def _member(value: Any, key: str) -> Any:
    if value is None:
        return None
    if isinstance(value, dict):
        return value.get(key)
    raise ValueError(f"cannot look up {key!r} in a non-object value")


def _element(value: Any, index: int) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return value[index] if index < len(value) else None
    raise ValueError("cannot index a non-array value")


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(value, ".17g")
    raise ValueError("value cannot be converted to a string")


def extract_jwk_from_jwt(jwt: str) -> JwkInfo:
    """Return the runtime RSA key (``n`` and ``e``) carried in an attestation JWT.

    Absent claims give empty strings; a malformed token raises ValueError.
    """
    if not jwt:
        get_logger().error("Invalid input argument")
        raise ValueError("JWT must not be empty")

    tokens = jwt.split(".")
    if len(tokens) < 3:
        get_logger().error("Invalid JWT token")
        raise ValueError("invalid JWT token")

    try:
        claims = json.loads(base64_decode(tokens[1]))
    except ValueError as exc:
        get_logger().error("Error parsing the JWT claims")
        raise ValueError("error parsing the JWT claims") from exc

    try:
        runtime = _member(claims, "x-ms-runtime")
        key = _element(_member(runtime, "keys"), 0)
        return JwkInfo(_as_string(_member(key, "n")), _as_string(_member(key, "e")))
    except ValueError as exc:
        get_logger().error("Unexpected error while extracting JWK info from JWT")
        raise ValueError("unexpected JWT claims layout") from exc


def jwk_to_rsa_public_key_pem(n: str, e: str) -> bytes:
    """Build a PEM SubjectPublicKeyInfo RSA public key from base64url ``n`` and ``e``."""
    if not n or not e:
        raise _fail(ErrorCode.ERROR_INVALID_INPUT_PARAMETER, "Invalid input parameter")

    try:
        modulus = int.from_bytes(base64url_to_binary(n), "big")
        exponent = int.from_bytes(base64url_to_binary(e), "big")
        key = rsa.RSAPublicNumbers(exponent, modulus).public_key()
    except ValueError as exc:
        raise _fail(
            ErrorCode.ERROR_CONVERTING_JWK_TO_RSA_PUB,
            "Error while converting JWK to RSA public key",
        ) from exc

    return key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def _raw_encrypt(key: rsa.RSAPublicKey, data: bytes) -> bytes:
    numbers = key.public_numbers()
    size = (key.key_size + 7) // 8
    if len(data) != size:
        raise _fail(ErrorCode.ERROR_EVP_PKEY_ENCRYPT_FAILED, "EVP_PKEY_encrypt failed")
    message = int.from_bytes(data, "big")
    if message >= numbers.n:
        raise _fail(ErrorCode.ERROR_EVP_PKEY_ENCRYPT_FAILED, "EVP_PKEY_encrypt failed")
    return pow(message, numbers.e, numbers.n).to_bytes(size, "big")


def encrypt_with_rsa_public_key(
    public_key_pem: bytes | str,
    scheme: RsaScheme,
    hash_alg: RsaHashAlg,
    data: bytes,
) -> bytes:
    """Encrypt ``data`` with a PEM RSA public key using the given scheme.

    The digest applies to OAEP only; raw (``RSA_NULL``) encryption needs data
    exactly as long as the key.
    """
    if not public_key_pem or not data:
        raise _fail(ErrorCode.ERROR_INVALID_INPUT_PARAMETER, "Invalid input parameter")

    hash_cls = _HASHES.get(hash_alg) if isinstance(hash_alg, RsaHashAlg) else None
    if hash_cls is None:
        raise _fail(
            ErrorCode.ERROR_EVP_PKEY_ENCRYPT_INIT_FAILED,
            "EncryptDataWithRSAPubKey failed; called with unknown message digest algorithm",
        )
    if not isinstance(scheme, RsaScheme):
        raise _fail(
            ErrorCode.ERROR_EVP_PKEY_ENCRYPT_INIT_FAILED,
            "EncryptDataWithRSAPubKey failed; called with unknown RSA padding algorithm",
        )

    pem = public_key_pem.encode("ascii", "replace") if isinstance(public_key_pem, str) else bytes(public_key_pem)
    try:
        key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise _fail(ErrorCode.ERROR_EVP_PKEY_ENCRYPT_INIT_FAILED, "EVP_PKEY_encrypt_init failed") from exc

    if not isinstance(key, rsa.RSAPublicKey):
        raise _fail(
            ErrorCode.ERROR_EVP_PKEY_ENCRYPT_INIT_FAILED,
            "EVP_PKEY_CTX_set_rsa_padding failed",
        )

    payload = bytes(data)
    if scheme is RsaScheme.RSA_NULL:
        return _raw_encrypt(key, payload)

    if scheme is RsaScheme.RSA_OAEP:
        pad: padding.AsymmetricPadding = padding.OAEP(
            mgf=padding.MGF1(algorithm=hash_cls()),
            algorithm=hash_cls(),
            label=None,
        )
    else:
        pad = padding.PKCS1v15()

    try:
        return key.encrypt(payload, pad)
    except ValueError as exc:
        raise _fail(ErrorCode.ERROR_EVP_PKEY_ENCRYPT_FAILED, "EVP_PKEY_encrypt failed") from exc