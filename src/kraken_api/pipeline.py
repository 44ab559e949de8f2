from __future__ import annotations
import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple
from urllib.parse import urlencode

from .consts import MAX_CANCEL_BATCH, MAX_ORDER_BATCH
from .errors import RequestValidationError

"""Request pipeline: turn typed call parameters into a form-encoded body.

Guardrails:
- Deterministic; insertion order is kept so the nonce stays first.
- Policy checks run before a nonce is drawn or anything is sent.
"""


def sanitize(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop unset parameters (None) so the exchange applies its defaults."""
    return {k: v for k, v in params.items() if v is not None}


def _scalar(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _flatten(prefix: str, value: Any, out: List[Tuple[str, str]]) -> None:
    if hasattr(value, "model_dump"):
        value = value.model_dump(exclude_none=True)
    if isinstance(value, Mapping):
        for k, v in value.items():
            if v is not None:
                _flatten(f"{prefix}[{k}]", v, out)
    elif isinstance(value, (list, tuple)) and any(
        isinstance(v, Mapping) or hasattr(v, "model_dump") for v in value
    ):
        for i, v in enumerate(value):
            _flatten(f"{prefix}[{i}]", v, out)
    elif isinstance(value, (list, tuple, set, frozenset)):
        out.append((prefix, ",".join(_scalar(v) for v in value)))
    else:
        out.append((prefix, _scalar(value)))


def normalize(params: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Render values as the strings the exchange expects.

    Lists of scalars become comma separated, lists of objects (batch orders)
    use bracket notation: orders[0][ordertype]=limit.
    """
    out: List[Tuple[str, str]] = []
    for k, v in params.items():
        _flatten(k, v, out)
    return out


def encode_form(params: Mapping[str, Any]) -> str:
    """Form body (or query string) for the given parameters."""
    return urlencode(normalize(sanitize(params)))


def check_order_batch(orders: Sequence[Any]) -> None:
    if not orders:
        raise RequestValidationError("order batch is empty")
    if len(orders) > MAX_ORDER_BATCH:
        raise RequestValidationError(
            f"order batch holds {len(orders)} orders, maximum is {MAX_ORDER_BATCH}"
        )


def check_cancel_batch(ids: Sequence[Any]) -> None:
    if not ids:
        raise RequestValidationError("no order ids to cancel")
    if len(ids) > MAX_CANCEL_BATCH:
        raise RequestValidationError(
            f"cancel batch holds {len(ids)} ids, maximum is {MAX_CANCEL_BATCH}"
        )
    if any(not str(i).strip() for i in ids):
        raise RequestValidationError("cancel batch holds an empty order id")
