"""Fuzz harness for request signing.

Targets: sign() over arbitrary paths and form bodies. The nonce is always
present, so sign() must return a 64-byte base64 MAC and never raise.
"""
from __future__ import annotations
import atheris
import base64
import sys
from urllib.parse import urlencode

with atheris.instrument_imports():
    from kraken_api.crypto import sign


def TestOneInput(data: bytes):  # noqa: N802 (Atheris signature)
    fdp = atheris.FuzzedDataProvider(data)
    secret = fdp.ConsumeBytes(64)
    path = "/0/private/" + fdp.ConsumeUnicodeNoSurrogates(32)
    fields = [("nonce", str(fdp.ConsumeIntInRange(1, 2**63 - 1)))]
    while fdp.remaining_bytes() > 0:
        fields.append((fdp.ConsumeUnicodeNoSurrogates(8), fdp.ConsumeUnicodeNoSurrogates(16)))
    sig = sign(path, urlencode(fields), secret)
    assert len(base64.b64decode(sig)) == 64


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
