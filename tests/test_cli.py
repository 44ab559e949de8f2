from typer.testing import CliRunner

import kraken_cli.__main__ as cli
from _helpers import GOLDEN_BODY, GOLDEN_PATH, GOLDEN_SECRET, GOLDEN_SIGNATURE, FakeTransport, json_response
from kraken_api.client import KrakenSpotClient

runner = CliRunner()


def test_sign_reproduces_reference_signature():
    r = runner.invoke(cli.app, ["sign", GOLDEN_PATH, GOLDEN_BODY, "--secret", GOLDEN_SECRET])
    assert r.exit_code == 0, r.output
    assert r.output.strip() == GOLDEN_SIGNATURE


def test_sign_rejects_bad_secret():
    r = runner.invoke(cli.app, ["sign", GOLDEN_PATH, GOLDEN_BODY, "--secret", "%%%"])
    assert r.exit_code == 1


def test_nonce_prints_increasing_values():
    r = runner.invoke(cli.app, ["nonce", "--kind", "hf", "--count", "3"])
    assert r.exit_code == 0, r.output
    values = [int(line) for line in r.output.split()]
    assert values == sorted(values) and len(set(values)) == 3


def test_ticker_uses_client(monkeypatch):
    transport = FakeTransport(json_response({"XXBTZUSD": {"o": "30502.8"}}))
    monkeypatch.setattr(cli, "_client", lambda: KrakenSpotClient(transport=transport))
    r = runner.invoke(cli.app, ["ticker", "XBTUSD"])
    assert r.exit_code == 0, r.output
    assert "30502.8" in r.output
    assert transport.last[1].endswith("/0/public/Ticker?pair=XBTUSD")


def test_api_error_exit_code(monkeypatch):
    transport = FakeTransport(json_response(None, ["EAPI:Invalid key"]))
    monkeypatch.setattr(cli, "_client", lambda: KrakenSpotClient("k", GOLDEN_SECRET, transport=transport))
    r = runner.invoke(cli.app, ["balance"])
    assert r.exit_code == 1
    assert "EAPI:Invalid key" in r.output
