import pytest

from kraken_api.decoders import (
    bool_default_false,
    bool_default_true,
    decode,
    limit_or_empty,
    minimal_amounts,
    numeric_string,
    one_or_many_strings,
    pair_keyed,
    positional,
    stringify,
)
from kraken_api.errors import DecodeError


@pytest.mark.parametrize(
    "raw,expected",
    [(b"false", ""), (b'"342.42"', "342.42"), (b"4", "4"), (b"null", ""), (b'"false"', ""), (b"0.5", "0.5")],
)
def test_limit(raw, expected):
    assert decode(raw, limit_or_empty, "limit") == expected


def test_limit_rejects_true_and_objects():
    with pytest.raises(DecodeError) as ei:
        decode(b"true", limit_or_empty, "limit")
    assert ei.value.field == "limit"
    with pytest.raises(DecodeError):
        decode(b'{"a": 1}', limit_or_empty, "limit")


def test_bool_default_true():
    assert decode(b"null", bool_default_true) is True
    assert decode(b"false", bool_default_true) is False
    assert decode(b"true", bool_default_true) is True
    with pytest.raises(DecodeError):
        decode(b'"yes"', bool_default_true, "on_chain")


def test_bool_default_false():
    assert bool_default_false(None) is False
    assert bool_default_false(True) is True
    with pytest.raises(ValueError):
        bool_default_false(1)


def test_one_or_many_strings():
    assert decode(b'"X"', one_or_many_strings) == ["X"]
    assert decode(b'["X","Y"]', one_or_many_strings) == ["X", "Y"]
    assert decode(b"null", one_or_many_strings) == []
    with pytest.raises(DecodeError):
        decode(b"[1]", one_or_many_strings, "txid")
    with pytest.raises(DecodeError):
        decode(b"7", one_or_many_strings, "txid")


def test_numeric_string():
    assert numeric_string(1.5) == "1.5"
    assert numeric_string(4.0) == "4"
    assert numeric_string("0.00010000") == "0.00010000"
    assert numeric_string(None) == ""
    with pytest.raises(ValueError):
        numeric_string(True)
    with pytest.raises(ValueError):
        numeric_string([1])


def test_stringify():
    assert stringify(True) == "true"
    assert stringify(12) == "12"
    assert stringify(None) == ""


def test_minimal_amounts_defaults_missing_fields():
    assert decode(b'{"staking": 0.5}', minimal_amounts) == {"staking": "0.5", "unstaking": "0"}
    assert decode(b"{}", minimal_amounts) == {"staking": "0", "unstaking": "0"}
    assert decode(b'{"unstaking": "1", "extra": "x"}', minimal_amounts) == {
        "staking": "0",
        "unstaking": "1",
        "extra": "x",
    }
    with pytest.raises(DecodeError):
        decode(b"[]", minimal_amounts, "minimum_amount")


def test_pair_keyed():
    out = pair_keyed({"XXBTZUSD": [1], "last": 42})
    assert out == {"pair": "XXBTZUSD", "data": [1], "last": 42}
    assert pair_keyed({"XXBTZUSD": {}}, cursor=None) == {"pair": "XXBTZUSD", "data": {}}
    with pytest.raises(ValueError):
        pair_keyed({"A": 1, "B": 2, "last": 3})
    with pytest.raises(ValueError):
        pair_keyed({"last": 3})


def test_positional():
    assert positional(["1", "2", 3, "extra"], ("a", "b", "c")) == {"a": "1", "b": "2", "c": 3}
    assert positional({"a": 1}, ("a",)) == {"a": 1}
    assert positional([1, 2], ("a", "b", "c"), required=2) == {"a": 1, "b": 2}
    with pytest.raises(ValueError):
        positional([1], ("a", "b"))


def test_invalid_json_names_field_and_snippet():
    raw = b"{not json" + b"x" * 500
    with pytest.raises(DecodeError) as ei:
        decode(raw, one_or_many_strings, "txid")
    err = ei.value
    assert err.field == "txid"
    assert err.raw.startswith("{not json")
    assert err.raw.endswith("...")
    assert "txid" in str(err)


def test_decode_is_repeatable():
    raw = b'["a","b"]'
    assert decode(raw, one_or_many_strings) == decode(raw, one_or_many_strings)
