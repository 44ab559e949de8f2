import inspect

import pytest

from kraken_api.client import KrakenSpotClient
from kraken_api.interfaces import AccountData, Funding, MarketData, Staking, Trading

CAPABILITIES = [MarketData, AccountData, Trading, Funding, Staking]


def test_client_implements_every_capability(client):
    assert not KrakenSpotClient.__abstractmethods__
    for cap in CAPABILITIES:
        assert isinstance(client, cap)


@pytest.mark.parametrize("cap", CAPABILITIES)
def test_signatures_match_interface(cap):
    for name in cap.__abstractmethods__:
        declared = inspect.signature(getattr(cap, name))
        implemented = inspect.signature(getattr(KrakenSpotClient, name))
        assert list(declared.parameters) == list(implemented.parameters), name


def test_capability_counts():
    counts = {cap.__name__: len(cap.__abstractmethods__) for cap in CAPABILITIES}
    assert counts == {"MarketData": 9, "AccountData": 13, "Trading": 7, "Funding": 10, "Staking": 5}


def test_partial_implementation_is_abstract():
    class OnlyTime(MarketData):
        def get_server_time(self):
            return None

    with pytest.raises(TypeError):
        OnlyTime()
