import json
from typing import Dict, List

import pytest

from kraken_api.errors import APIError, DecodeError
from kraken_api.models import (
    AddOrderBatchResult,
    DepositMethod,
    Envelope,
    OHLCData,
    OrderBook,
    RecentSpreads,
    RecentTrades,
    ServerTime,
    StakeableAsset,
    TickerInfo,
    TradeVolume,
    WithdrawalInformation,
    decode_response,
)


def _raw(result=None, error=None) -> bytes:
    return json.dumps({"error": error or [], "result": result}).encode()


def test_envelope_ok_and_error():
    env = decode_response(_raw({"unixtime": 1}))
    assert env.ok
    env.raise_for_error()

    env = decode_response(_raw(None, ["EGeneral:Invalid arguments"]))
    assert not env.ok
    with pytest.raises(APIError) as ei:
        env.raise_for_error()
    assert ei.value.errors == ["EGeneral:Invalid arguments"]
    assert ei.value.code == "EGeneral:Invalid arguments"
    assert ei.value.result is None


def test_envelope_single_string_error():
    env = decode_response(b'{"error": "EAPI:Invalid nonce"}')
    assert env.error == ["EAPI:Invalid nonce"]
    assert env.result is None


def test_envelope_invalid_json():
    with pytest.raises(DecodeError):
        decode_response(b"<html>bad gateway</html>")


def test_decode_error_names_field():
    raw = _raw([{"method": "Bitcoin", "limit": True}])
    with pytest.raises(DecodeError) as ei:
        decode_response(raw, List[DepositMethod])
    assert ei.value.field.endswith("limit")
    assert "Bitcoin" in ei.value.raw


def test_deposit_method_limit_variants():
    raw = _raw(
        [
            {"method": "A", "limit": False, "fee": "0.0", "gen-address": True},
            {"method": "B", "limit": "342.42", "address-setup-fee": "0.0"},
            {"method": "C", "limit": 4, "minimum": 0.0001},
        ]
    )
    methods = decode_response(raw, List[DepositMethod]).result
    assert [m.limit for m in methods] == ["", "342.42", "4"]
    assert methods[0].gen_address is True
    assert methods[1].gen_address is False
    assert methods[1].address_setup_fee == "0.0"
    assert methods[2].minimum == "0.0001"


def test_withdrawal_information_limit():
    info = decode_response(_raw({"method": "Bitcoin", "limit": "false", "amount": 1, "fee": "0.0005"}), WithdrawalInformation).result
    assert info.limit == ""
    assert info.amount == "1"


def test_stakeable_asset_defaults():
    raw = _raw(
        [
            {"method": "dot-staked", "asset": "DOT", "minimum_amount": {"staking": "0.1"}},
            {
                "method": "eth2",
                "asset": "ETH",
                "on_chain": False,
                "can_stake": False,
                "can_unstake": False,
                "enabled_for_user": False,
                "minimum_amount": {"unstaking": 1},
            },
        ]
    )
    first, second = decode_response(raw, List[StakeableAsset]).result
    assert (first.on_chain, first.can_stake, first.can_unstake, first.enabled_for_user) == (True, True, True, True)
    assert (second.on_chain, second.can_stake, second.can_unstake, second.enabled_for_user) == (False, False, False, False)
    assert first.minimum_amount.staking == "0.1"
    assert first.minimum_amount.unstaking == "0"
    assert second.minimum_amount.staking == "0"
    assert second.minimum_amount.unstaking == "1"


def test_stakeable_asset_without_minimum_amount():
    asset = StakeableAsset.model_validate({"asset": "ADA"})
    assert asset.minimum_amount.staking == "0"
    assert asset.on_chain is True


BATCH = {
    "orders": [
        {"error": "EOrder:Insufficient funds"},
        {
            "descr": {"order": "buy 1.0 XBTUSD @ limit 1.0"},
            "error": ["EOrder:Unknown position", "EGeneral:Invalid arguments"],
            "txid": ["OABCDE-12345-FGHIJK", "OABCDE-12345-LMNOPQ"],
        },
        {"descr": {"order": "sell 1.0 XBTUSD @ limit 2.0"}, "txid": "OUF4EM-FRGI2-MQMWZD"},
    ]
}


def test_batch_entries_keep_errors_and_txids_apart():
    result = decode_response(_raw(BATCH), AddOrderBatchResult).result
    first, second, third = result.orders
    assert first.error == ["EOrder:Insufficient funds"]
    assert first.txid == []
    assert len(second.error) == 2
    assert len(second.txid) == 2
    # an array of errors lands in the error list, never among the txids
    assert not any(t.startswith("E") for t in second.txid)
    assert third.txid == ["OUF4EM-FRGI2-MQMWZD"]
    assert third.ok
    assert result.failed() == [0, 1]
    assert result.succeeded() == [2]


def test_batch_top_level_error_carries_partial_result():
    env = decode_response(_raw(BATCH, ["EGeneral:Invalid arguments"]), AddOrderBatchResult)
    with pytest.raises(APIError) as ei:
        env.raise_for_error()
    assert isinstance(ei.value.result, AddOrderBatchResult)
    assert len(ei.value.result.orders) == 3


def test_ticker_one_letter_keys():
    raw = _raw(
        {
            "XXBTZUSD": {
                "a": ["30300.10000", "1", "1.000"],
                "b": ["30300.00000", "1", "1.000"],
                "c": ["30303.20000", "0.00067643"],
                "v": ["4083.67001100", "4412.73601799"],
                "p": ["30706.77771", "30689.13205"],
                "t": [34619, 38907],
                "l": ["29868.30000", "29868.30000"],
                "h": ["31631.00000", "31631.00000"],
                "o": "30502.80000",
            }
        }
    )
    ticker = decode_response(raw, Dict[str, TickerInfo]).result["XXBTZUSD"]
    assert ticker.ask[0] == "30300.10000"
    assert ticker.trades == [34619, 38907]
    assert ticker.opening == "30502.80000"


def test_ohlc_pair_keyed_positional():
    raw = _raw(
        {
            "XXBTZUSD": [
                [1688671200, "30306.1", "30306.2", "30305.7", "30305.7", "30306.1", "3.39243896", 23],
                [1688671260, "30304.5", "30304.5", "30300.0", "30300.0", "30300.7", "4.42996871", 18],
            ],
            "last": 1688672160,
        }
    )
    ohlc = decode_response(raw, OHLCData).result
    assert ohlc.pair == "XXBTZUSD"
    assert ohlc.last == 1688672160
    assert len(ohlc.data) == 2
    assert ohlc.data[0].time == 1688671200
    assert ohlc.data[0].close == "30305.7"
    assert ohlc.data[1].count == 18


def test_order_book():
    raw = _raw(
        {
            "XXBTZUSD": {
                "asks": [["30384.10000", "2.059", 1688671659]],
                "bids": [["30297.00000", "0.115", 1688671656], ["30296.90000", "0.5", 1688671650]],
            }
        }
    )
    book = decode_response(raw, OrderBook).result
    assert book.pair == "XXBTZUSD"
    assert book.asks[0].price == "30384.10000"
    assert book.bids[1].timestamp == 1688671650


def test_recent_trades_with_and_without_trade_id():
    raw = _raw(
        {
            "XXBTZUSD": [
                ["30243.40000", "0.34507674", 1688669597.8277369, "b", "m", "", 61044952],
                ["30243.30000", "0.00376960", 1688669598.2804112, "s", "l", ""],
            ],
            "last": "1688671969993150842",
        }
    )
    trades = decode_response(raw, RecentTrades).result
    assert trades.last == "1688671969993150842"
    assert trades.data[0].trade_id == 61044952
    assert trades.data[1].trade_id is None
    assert trades.data[1].side == "s"


def test_recent_spreads():
    raw = _raw({"XXBTZUSD": [[1688671834, "30292.10000", "30297.50000"]], "last": 1688672106})
    spreads = decode_response(raw, RecentSpreads).result
    assert spreads.data[0].ask == "30297.50000"


def test_short_positional_row_is_decode_error():
    raw = _raw({"XXBTZUSD": [[1688671834, "30292.1"]], "last": 1})
    with pytest.raises(DecodeError):
        decode_response(raw, RecentSpreads)


def test_trade_volume_null_fees():
    vol = decode_response(_raw({"currency": "ZUSD", "volume": "200709587.4223", "fees": None}), TradeVolume).result
    assert vol.fees == {}
    assert vol.volume == "200709587.4223"


def test_unknown_fields_are_kept():
    env = Envelope[TickerInfo].model_validate({"error": [], "result": {"o": "1", "z": "new"}})
    assert env.result.model_extra == {"z": "new"}


def test_error_envelope_with_unfit_result_is_api_error():
    raw = b'{"error":["EGeneral:Temporary lockout"],"result":{}}'
    with pytest.raises(APIError) as ei:
        decode_response(raw, ServerTime)
    assert ei.value.errors == ["EGeneral:Temporary lockout"]
    assert ei.value.result == {}
    assert isinstance(ei.value.__cause__, DecodeError)


def test_unfit_result_without_errors_is_still_decode_error():
    with pytest.raises(DecodeError):
        decode_response(b'{"error":[],"result":{}}', ServerTime)


def test_ticker_null_arrays_are_empty():
    raw = _raw({"XXBTZUSD": {"a": None, "t": None, "o": "30502.80000"}})
    ticker = decode_response(raw, Dict[str, TickerInfo]).result["XXBTZUSD"]
    assert ticker.ask == []
    assert ticker.trades == []
