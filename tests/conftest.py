import os
import sys
from pathlib import Path

import pytest

# Ensure the 'src' directory is on sys.path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Keep a developer's real credentials and .env out of the test run
for _name in ("KRAKEN_API_KEY", "KRAKEN_API_SECRET", "KRAKEN_BASE_URL"):
    os.environ.pop(_name, None)

from _helpers import GOLDEN_SECRET, FakeTransport, FixedNonce  # noqa: E402


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    from kraken_api.client import KrakenSpotClient

    return KrakenSpotClient(
        "test-key",
        GOLDEN_SECRET,
        base_url="https://mock.local",
        transport=transport,
        nonce_generator=FixedNonce(1616492376594),
    )
