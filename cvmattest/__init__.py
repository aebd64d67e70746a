"""Guest attestation helpers: encoding, RSA key handling, and attestation and IMDS HTTP clients."""

__version__ = "1.0.5"

__all__ = [
    "attestation_http",
    "diagnostics",
    "encoding",
    "errors",
    "imds",
    "imds_http",
    "jwk",
    "osinfo",
    "runtime",
    "urls",
    "vcek",
]