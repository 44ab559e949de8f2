from __future__ import annotations
import threading
import time
from abc import ABC, abstractmethod


class NonceGenerator(ABC):
    """Source of strictly increasing nonces for one credential set."""

    @abstractmethod
    def generate(self) -> int: ...


class UnixMillisNonceGenerator(NonceGenerator):
    """UNIX millisecond timestamps, bumped by one when the clock has not moved.

    Two calls inside the same millisecond (or after a backwards clock step)
    still yield increasing values.
    """

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def generate(self) -> int:
        with self._lock:
            nonce = max(time.time_ns() // 1_000_000, self._last + 1)
            self._last = nonce
            return nonce


class HFNonceGenerator(NonceGenerator):
    """Construction-time UNIX nanoseconds plus a counter.

    Suited to high request rates from a single process. Several processes
    sharing one API key will collide; give each its own key.
    """

    def __init__(self):
        self.base = time.time_ns()
        self.inc = 0
        self._lock = threading.Lock()

    def generate(self) -> int:
        with self._lock:
            nonce = self.base + self.inc
            self.inc += 1
            return nonce


def make_nonce_generator(kind: str) -> NonceGenerator:
    kind = (kind or "millis").lower()
    if kind == "millis":
        return UnixMillisNonceGenerator()
    if kind == "hf":
        return HFNonceGenerator()
    raise ValueError(f"unknown nonce generator: {kind}")
