from __future__ import annotations
import json
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from .errors import DecodeError

"""Decode strategies for fields whose wire type varies between responses.

Each strategy takes the already parsed JSON value of one field and returns its
canonical form, or raises ValueError when the value is outside the variants
the strategy accepts. ValueError (not TypeError) is what pydantic turns into a
validation error, so the same functions back the model validators.
"""

T = TypeVar("T")

SNIPPET_LEN = 120


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def stringify(value: Any) -> str:
    """Render a JSON scalar the way it appeared on the wire."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        # 4.0 came in as 4 from some JSON encoders
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def numeric_string(value: Any) -> str:
    """number | string | null -> str ("" for null)."""
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        raise ValueError(f"expected number or string, got {_type_name(value)}")
    return stringify(value)


def limit_or_empty(value: Any) -> str:
    """Deposit/withdrawal limit: a number, a string, or false for "no limit"."""
    if value is None or value is False:
        return ""
    if isinstance(value, str) and value.strip().lower() == "false":
        return ""
    if value is True:
        raise ValueError("limit cannot be true")
    return numeric_string(value)


def bool_default_true(value: Any) -> bool:
    """Optional flag whose documented default is true."""
    if value is None:
        return True
    if not isinstance(value, bool):
        raise ValueError(f"expected boolean, got {_type_name(value)}")
    return value


def bool_default_false(value: Any) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"expected boolean, got {_type_name(value)}")
    return value


def one_or_many_strings(value: Any) -> List[str]:
    """A lone string or an array of strings, always returned as a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        out = []
        for i, item in enumerate(value):
            if not isinstance(item, str):
                raise ValueError(f"item {i}: expected string, got {_type_name(item)}")
            out.append(item)
        return out
    raise ValueError(f"expected string or array of strings, got {_type_name(value)}")


MINIMAL_AMOUNT_FIELDS = ("staking", "unstaking")


def minimal_amounts(value: Any, fields: Sequence[str] = MINIMAL_AMOUNT_FIELDS) -> Dict[str, str]:
    """Minimal-amount object; every missing or null sub-field becomes "0"."""
    if value is None:
        value = {}
    if not isinstance(value, dict):
        raise ValueError(f"expected object, got {_type_name(value)}")
    out = dict(value)
    for name in fields:
        raw = value.get(name)
        out[name] = "0" if raw is None else numeric_string(raw)
    return out


def pair_keyed(value: Any, cursor: Optional[str] = "last") -> Dict[str, Any]:
    """Unwrap {"<PAIR>": data, "last": cursor} into named fields.

    Market data endpoints key their payload by the pair name the exchange
    resolved, which is not always the name the caller sent.
    """
    if not isinstance(value, dict):
        raise ValueError(f"expected object, got {_type_name(value)}")
    keys = [k for k in value if k != cursor]
    if len(keys) != 1:
        raise ValueError(f"expected exactly one pair key, got {sorted(keys)}")
    out = {"pair": keys[0], "data": value[keys[0]]}
    if cursor is not None and cursor in value:
        out[cursor] = value[cursor]
    return out


def positional(value: Any, names: Sequence[str], required: Optional[int] = None) -> Dict[str, Any]:
    """Map a JSON array onto field names; extra trailing items are ignored."""
    if isinstance(value, dict):
        return value
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"expected array, got {_type_name(value)}")
    need = len(names) if required is None else required
    if len(value) < need:
        raise ValueError(f"expected at least {need} items, got {len(value)}")
    return dict(zip(names, value))


def snippet(raw: Union[bytes, str]) -> str:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, (bytes, bytearray)) else raw
    return text if len(text) <= SNIPPET_LEN else text[:SNIPPET_LEN] + "..."


def decode(raw: Union[bytes, str], strategy: Callable[[Any], T], field: str = "") -> T:
    """Parse raw JSON bytes and run one strategy over the parsed value.

    Pure and repeatable; raises DecodeError naming `field` with a snippet of
    the raw payload when the bytes are not JSON or the strategy rejects them.
    """
    try:
        value = json.loads(raw)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"invalid JSON: {e}", field, snippet(raw)) from e
    try:
        return strategy(value)
    except ValueError as e:
        raise DecodeError(str(e), field, snippet(raw)) from e
