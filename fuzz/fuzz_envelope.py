"""Fuzz harness for response envelopes.

Targets: decode_response() for the market-data and batch result models, which
carry the positional and pair-keyed decoders.
"""
from __future__ import annotations
import atheris
import sys

with atheris.instrument_imports():
    from kraken_api.errors import APIError, DecodeError
    from kraken_api.models import (
        AddOrderBatchResult,
        OHLCData,
        OrderBook,
        RecentTrades,
        StakeableAsset,
        decode_response,
    )

RESULT_TYPES = [AddOrderBatchResult, OHLCData, OrderBook, RecentTrades, StakeableAsset]


def TestOneInput(data: bytes):  # noqa: N802 (Atheris signature)
    if not data:
        return
    result_type = RESULT_TYPES[data[0] % len(RESULT_TYPES)]
    try:
        env = decode_response(data[1:], result_type)
    except DecodeError:
        return
    try:
        env.raise_for_error()
    except APIError as e:
        assert e.errors == env.error


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
