from __future__ import annotations
import base64
import hashlib
import hmac
from typing import Union
from urllib.parse import parse_qs

from .errors import ConstructionError


def B64(b: bytes) -> str:
    """Base64-encode bytes to ASCII string."""
    return base64.b64encode(b).decode("ascii")


def B64D(s: str) -> bytes:
    """Decode base64 ASCII string to bytes with strict validation."""
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except Exception as e:
        raise ValueError("invalid base64") from e


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def decode_secret(secret_b64: str) -> bytes:
    """Decode the API secret shown by the exchange when the key was created.

    Raises ConstructionError so a bad secret fails at client build time,
    before any request is attempted.
    """
    try:
        return B64D(secret_b64)
    except (ValueError, UnicodeEncodeError) as e:
        raise ConstructionError("could not base64 decode the API secret") from e


def _nonce_from_body(body: bytes) -> bytes:
    values = parse_qs(body.decode("ascii"), keep_blank_values=True).get("nonce")
    if not values or not values[0]:
        raise ValueError("form body has no nonce field")
    return values[0].encode("ascii")


def sign(url_path: str, body: Union[str, bytes], secret: bytes) -> str:
    """Compute the API-Sign header value for a private request.

    API-Sign = base64(HMAC-SHA512(secret, url_path + SHA256(nonce + body)))

    `body` must be the exact form-encoded bytes sent on the wire and must
    already carry the nonce. `secret` is the decoded secret, see decode_secret.
    """
    if isinstance(body, str):
        body = body.encode("ascii")
    digest = sha256(_nonce_from_body(body) + body)
    mac = hmac.new(secret, url_path.encode("utf-8") + digest, hashlib.sha512)
    return B64(mac.digest())
