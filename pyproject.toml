[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cvmattest"
version = "1.0.5"
description = "Client-side helpers for confidential VM guest attestation: encoding, JWK handling, attestation and IMDS HTTP clients"
requires-python = ">=3.10"
keywords = ["attestation", "confidential-computing", "sev-snp", "imds", "jwt", "jwk", "rsa"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "requests",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["cvmattest"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
