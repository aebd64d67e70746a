# cvmattest

Client-side building blocks for guest attestation on confidential virtual
machines: encoding helpers, RSA key handling for attestation tokens, and HTTP
clients for an attestation service and for the instance metadata service
(IMDS).

## Modules

- `cvmattest.encoding` – base64 and base64url conversion.
  `binary_to_base64` / `base64_to_binary` work on padded standard base64,
  `binary_to_base64url` produces unpadded base64url and `base64url_to_binary`
  accepts it padded or not. `base64_encode` encodes text (or bytes) and
  `base64_decode` returns text with trailing NUL characters removed. Invalid
  input raises `ValueError`.
- `cvmattest.runtime` – `new_uuid()` (random UUID string),
  `current_utc_time()` (`YYYY-MM-DDTHH:MM:SSZ` timestamp taken from the
  machine's local clock), `time_since_epoch_millisec()` and `get_pid()`.
- `cvmattest.diagnostics` – a process-wide logger and telemetry reporter.
  `set_logger` installs any object with `logging`-style `error`, `info` and
  `debug` methods; until one is installed, `get_logger` returns the quiet
  `cvmattest` standard-library logger. `set_telemetry_reporting` installs a
  `TelemetryReporter`; `report_event(name, value, level)` forwards an event to
  it and returns whether one was installed. Both setters only take effect on
  their first call. The default `TelemetryReporter` keeps events in its
  `events` list as `TelemetryEvent` tuples; subclass it and override
  `update_event` to send them elsewhere. `EventLevel` names the event kinds.
- `cvmattest.errors` – `ErrorCode` and the `AttestationError` exception, which
  carries `code` (an `ErrorCode` member) and `description`.
- `cvmattest.osinfo` – `attestation_pcr_list()` (PCRs 0–7, plus 11–14 on
  Windows), `parse_os_release_file(path, delim)` returning a `dict` of
  key/value pairs with double quotes stripped, `parse_version_string(text)`
  returning an `OsVersion(major, minor)`, and `windows_version()` returning
  `WindowsVersion(10, 0, "NotApplicable")`.
- `cvmattest.urls` – `split_url(url)` returns a `ParsedUrl` with `protocol`,
  `domain`, `port`, `path` and `query`; `parse_url(url)` returns just the
  domain. An empty URL or one without a host raises `AttestationError`.
- `cvmattest.jwk` – `extract_jwk_from_jwt(jwt)` reads the first key under the
  `x-ms-runtime` claim and returns a `JwkInfo(n, e)`;
  `jwk_to_rsa_public_key_pem(n, e)` builds a PEM public key;
  `encrypt_with_rsa_public_key(pem, scheme, hash_alg, data)` encrypts with
  `RsaScheme.RSA_ES` (PKCS#1 v1.5), `RsaScheme.RSA_OAEP` (using the
  `RsaHashAlg` digest) or `RsaScheme.RSA_NULL` (raw RSA; data must be exactly
  as long as the key).
- `cvmattest.attestation_http` – `send_request(url, payload, session=None)`
  POSTs a JSON payload and returns the response body. Status 400 raises
  `AttestationError` with `ERROR_ATTESTATION_FAILED`; 408, 429 and 5xx are
  retried up to `MAX_RETRIES` (3) times, waiting
  `BACK_OFF_TIME_SECONDS * 2**n` seconds or the server's `Retry-After`,
  whichever is longer, plus 0–5000 ms of jitter (`generate_random_jitter()`).
- `cvmattest.imds_http` – `HttpClient(session=None)` with
  `invoke_imds_request(url, verb=HttpVerb.GET, request_body="", content_type="")`.
  Requests carry `Metadata: true` and a 300-second timeout; a POST needs a
  body; 404, 429 and 5xx are retried with 30, 60 and 120 second waits; an
  empty 200 response raises `AttestationError`.
- `cvmattest.imds` – `ImdsClient(session=None)` with `get_vm_id()`,
  `renew_ak_cert(cert, vm_id, request_id, api_version)` and
  `query_ak_cert(cert_query_guid, vm_id, request_id)`, plus the URL builders
  `vm_id_query_endpoint()`, `thim_ak_renew_endpoint(...)`,
  `thim_query_ak_endpoint(...)` and `url_encode(data)`. Empty arguments raise
  `ValueError`.
- `cvmattest.vcek` – `get_vcek_cert(http_client=None)` fetches the VCEK
  certificate and chain from IMDS and returns them concatenated and base64
  encoded.

Every HTTP helper accepts an optional `requests.Session`; without one, a
session is opened and closed for the call.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Encoding:

```python
from cvmattest.encoding import base64_to_binary, binary_to_base64

text = binary_to_base64(b"hello")
assert text == "aGVsbG8="
assert base64_to_binary(text) == b"hello"
```

Splitting a URL:

```python
from cvmattest.urls import split_url

parts = split_url("https://attest.example.com:443/attest/Tpm?api-version=2020")
assert parts.domain == "attest.example.com"
assert parts.port == "443"
```

Wrapping a symmetric key with the RSA key carried in an attestation token:

```python
from cvmattest.jwk import (
    RsaHashAlg,
    RsaScheme,
    encrypt_with_rsa_public_key,
    extract_jwk_from_jwt,
    jwk_to_rsa_public_key_pem,
)

jwk = extract_jwk_from_jwt(attestation_jwt)
pem = jwk_to_rsa_public_key_pem(jwk.n, jwk.e)
wrapped = encrypt_with_rsa_public_key(pem, RsaScheme.RSA_OAEP, RsaHashAlg.SHA256, symmetric_key)
```

Fetching the VCEK certificate chain from IMDS:

```python
from cvmattest.imds_http import HttpClient
from cvmattest.vcek import get_vcek_cert

chain_b64 = get_vcek_cert(HttpClient())
```

Collecting telemetry:

```python
from cvmattest.diagnostics import TelemetryReporter, set_telemetry_reporting

reporter = TelemetryReporter()
set_telemetry_reporting(reporter)
# ... later, reporter.events holds the recorded TelemetryEvent tuples
```

## What this package does not do

It does not read from or talk to a TPM, does not collect measurement logs or
parse hardware isolation reports, and does not decrypt attestation tokens.
There is no single call that runs a whole attestation; the pieces above have
to be put together by the caller. The package has no command-line program.