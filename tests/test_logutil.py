import logging

from kraken_api.logutil import RedactingFilter, redact


def test_redacts_headers_and_fields():
    msg = redact("headers={'API-Key': 'abc123', 'API-Sign': 'c2lnbmF0dXJl'} body=nonce=1&otp=654321")
    assert "abc123" not in msg
    assert "c2lnbmF0dXJl" not in msg
    assert "654321" not in msg
    assert "nonce=1" in msg


def test_redacts_secret_assignment():
    assert redact("api_secret=kQH5HW/8p1u rest") == "api_secret=*** rest"


def test_filter_rewrites_record():
    record = logging.LogRecord("kraken_api.client", logging.INFO, __file__, 1, "API-Sign: %s", ("zzz",), None)
    assert RedactingFilter().filter(record) is True
    assert record.getMessage() == "API-Sign: ***"
