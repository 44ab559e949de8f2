import pytest
import requests

from kraken_api.errors import TransportError
from kraken_api.transport import HTTPResponse, RequestsTransport


class _Resp:
    status_code = 200
    headers = {"Content-Type": "application/json"}
    content = b'{"error":[],"result":{}}'


class RecordingSession(requests.Session):
    def __init__(self, fail=False):
        super().__init__()
        self.fail = fail
        self.seen = []

    def request(self, method, url, **kwargs):
        self.seen.append((method, url, kwargs))
        if self.fail:
            raise requests.ConnectionError("connection refused")
        return _Resp()


def test_do_maps_response():
    session = RecordingSession()
    t = RequestsTransport(timeout=3.5, session=session)
    resp = t.do("POST", "https://mock.local/0/private/Balance", {"API-Key": "k"}, b"nonce=1")
    assert resp == HTTPResponse(200, {"Content-Type": "application/json"}, b'{"error":[],"result":{}}')
    method, url, kwargs = session.seen[0]
    assert kwargs["timeout"] == 3.5
    assert kwargs["data"] == b"nonce=1"


def test_request_exception_becomes_transport_error():
    t = RequestsTransport(session=RecordingSession(fail=True))
    with pytest.raises(TransportError) as ei:
        t.do("GET", "https://mock.local/0/public/Time", {})
    assert isinstance(ei.value.__cause__, requests.ConnectionError)
    assert ei.value.status is None


def test_retry_policy_covers_get_only():
    t = RequestsTransport(max_retries=4, session=RecordingSession())
    retry = t.session.get_adapter("https://api.kraken.com").max_retries
    assert retry.total == 3
    assert retry.allowed_methods == frozenset({"GET"})
    assert 429 in retry.status_forcelist


def test_content_type_strips_parameters():
    assert HTTPResponse(200, {"content-type": "Application/JSON; charset=utf-8"}).content_type == "application/json"
    assert HTTPResponse(200).content_type == ""
