from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class HTTPResponse:
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def content_type(self) -> str:
        """Media type without parameters, lower-cased ("" if missing)."""
        for k, v in self.headers.items():
            if k.lower() == "content-type":
                return v.split(";", 1)[0].strip().lower()
        return ""


class Transport(ABC):
    """Sends one HTTP request. Retries, timeouts and proxies live here."""

    @abstractmethod
    def do(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> HTTPResponse: ...


class RequestsTransport(Transport):
    """requests.Session with a urllib3 retry policy mounted on both schemes.

    Only GET is retried by default: a replayed private POST would reuse a
    nonce the exchange has already seen.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        retry_methods: Iterable[str] = ("GET",),
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        retries = max(max_retries - 1, 0)
        retry = Retry(
            total=retries,
            connect=retries,
            read=retries,
            status=retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset(m.upper() for m in retry_methods),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def do(self, method, url, headers, body=None):
        try:
            resp = self.session.request(
                method, url, headers=headers, data=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url.split("?", 1)[0], type(e).__name__)
            raise TransportError(f"request failed: {e}") from e
        return HTTPResponse(status=resp.status_code, headers=dict(resp.headers), body=resp.content)

    def close(self) -> None:
        self.session.close()
