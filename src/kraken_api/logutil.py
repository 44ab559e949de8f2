import logging
import re
from typing import Iterable


_HEADER = re.compile(r"(API-Sign|API-Key)(['\"]?\s*[:=]\s*['\"]?)[^\s'\",}]+", re.IGNORECASE)
_FIELD = re.compile(r"\b(secret|api_secret|otp|password)=[^\s&'\"]+", re.IGNORECASE)


def redact(msg: str) -> str:
    msg = _HEADER.sub(r"\1\2***", msg)
    return _FIELD.sub(r"\1=***", msg)


class RedactingFilter(logging.Filter):
    """Mask API-Sign / API-Key header values and secret-bearing form fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            record.msg = redact(str(record.getMessage()))
            record.args = None
        except (TypeError, ValueError):
            # unformattable; the handler reports it
            pass
        return True


def setup_logging(
    level: int = logging.INFO, loggers: Iterable[str] = ("kraken_api", "kraken_cli")
) -> None:
    logging.basicConfig(level=level)
    f = RedactingFilter()
    for name in loggers:
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.addFilter(f)
    # child loggers (kraken_api.client) skip parent filters but reach root handlers
    for h in logging.getLogger().handlers:
        h.addFilter(f)
