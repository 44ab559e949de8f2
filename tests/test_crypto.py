import base64

import pytest

from _helpers import GOLDEN_BODY, GOLDEN_PATH, GOLDEN_SECRET, GOLDEN_SIGNATURE
from kraken_api.crypto import B64D, decode_secret, sign
from kraken_api.errors import ConstructionError


def test_golden_vector():
    assert sign(GOLDEN_PATH, GOLDEN_BODY, decode_secret(GOLDEN_SECRET)) == GOLDEN_SIGNATURE


def test_bytes_and_str_body_agree():
    secret = decode_secret(GOLDEN_SECRET)
    assert sign(GOLDEN_PATH, GOLDEN_BODY.encode(), secret) == sign(GOLDEN_PATH, GOLDEN_BODY, secret)


def test_deterministic():
    secret = decode_secret(GOLDEN_SECRET)
    assert len({sign(GOLDEN_PATH, GOLDEN_BODY, secret) for _ in range(5)}) == 1


def _flip(s: str, i: int) -> str:
    c = "1" if s[i] != "1" else "2"
    return s[:i] + c + s[i + 1 :]


@pytest.mark.parametrize("i", [0, 5, len(GOLDEN_PATH) - 1])
def test_path_change_changes_signature(i):
    secret = decode_secret(GOLDEN_SECRET)
    assert sign(_flip(GOLDEN_PATH, i), GOLDEN_BODY, secret) != GOLDEN_SIGNATURE


@pytest.mark.parametrize("i", [8, 30, len(GOLDEN_BODY) - 1])
def test_body_change_changes_signature(i):
    secret = decode_secret(GOLDEN_SECRET)
    assert sign(GOLDEN_PATH, _flip(GOLDEN_BODY, i), secret) != GOLDEN_SIGNATURE


def test_nonce_change_changes_signature():
    secret = decode_secret(GOLDEN_SECRET)
    body = GOLDEN_BODY.replace("1616492376594", "1616492376595")
    assert sign(GOLDEN_PATH, body, secret) != GOLDEN_SIGNATURE


def test_secret_change_changes_signature():
    secret = bytearray(decode_secret(GOLDEN_SECRET))
    secret[0] ^= 0x01
    assert sign(GOLDEN_PATH, GOLDEN_BODY, bytes(secret)) != GOLDEN_SIGNATURE


def test_body_without_nonce_is_rejected():
    with pytest.raises(ValueError):
        sign(GOLDEN_PATH, "ordertype=limit&pair=XBTUSD", decode_secret(GOLDEN_SECRET))


@pytest.mark.parametrize("bad", ["not base64!", "abc", "ä"])
def test_bad_secret_fails_construction(bad):
    with pytest.raises(ConstructionError):
        decode_secret(bad)


def test_b64d_strict():
    assert B64D(base64.b64encode(b"xyz").decode()) == b"xyz"
    with pytest.raises(ValueError):
        B64D("@@@")
