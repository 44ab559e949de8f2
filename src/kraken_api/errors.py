from __future__ import annotations
from typing import Any, List, Optional


class KrakenError(Exception):
    """Root of every error raised by the client."""


class ConstructionError(KrakenError, ValueError):
    """Client could not be built (e.g. the API secret is not valid base64)."""


class RequestValidationError(KrakenError, ValueError):
    """Request rejected by a pre-flight check; nothing was sent."""


class TransportError(KrakenError):
    """Network failure, timeout or unexpected HTTP status / content type."""

    def __init__(self, message: str, status: Optional[int] = None, body: bytes = b""):
        super().__init__(message)
        self.status = status
        self.body = body


class DecodeError(KrakenError, ValueError):
    """Response bytes matched none of the accepted shapes."""

    def __init__(self, message: str, field: str = "", raw: str = ""):
        detail = message
        if field:
            detail = f"{field}: {detail}"
        if raw:
            detail = f"{detail} (raw: {raw})"
        super().__init__(detail)
        self.field = field
        self.raw = raw


class APIError(KrakenError):
    """The response envelope carried a non-empty error list.

    `result` holds whatever part of the payload was returned alongside the
    errors (possibly None).
    """

    def __init__(self, errors: List[str], result: Any = None):
        super().__init__(", ".join(errors))
        self.errors = list(errors)
        self.result = result

    @property
    def code(self) -> str:
        return self.errors[0] if self.errors else ""
