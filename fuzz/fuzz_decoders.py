"""Fuzz harness for the tolerant field decoders.

Targets: decode() with every strategy over arbitrary bytes.

Anything other than a clean result or DecodeError (a TypeError leaking out of
a strategy, say) is a crash.
"""
from __future__ import annotations
import atheris
import sys

with atheris.instrument_imports():
    from kraken_api.decoders import (
        bool_default_false,
        bool_default_true,
        decode,
        limit_or_empty,
        minimal_amounts,
        numeric_string,
        one_or_many_strings,
        pair_keyed,
    )
    from kraken_api.errors import DecodeError

STRATEGIES = [
    limit_or_empty,
    bool_default_true,
    bool_default_false,
    one_or_many_strings,
    minimal_amounts,
    numeric_string,
    pair_keyed,
]


def TestOneInput(data: bytes):  # noqa: N802 (Atheris signature)
    if not data:
        return
    strategy = STRATEGIES[data[0] % len(STRATEGIES)]
    try:
        first = decode(data[1:], strategy, "fuzz")
    except DecodeError:
        return
    # pure: a second pass must agree
    assert decode(data[1:], strategy, "fuzz") == first


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
