from __future__ import annotations
from typing import Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode, Tracer, TracerProvider

from .transport import HTTPResponse

"""OpenTelemetry helpers for the client.

Spans carry the URL path, HTTP method, status code and the exchange's
x-trace-id response header. Headers, form bodies, otp values, the secret and
the signature are never recorded.
"""

INSTRUMENTATION_NAME = "kraken_api"
INSTRUMENTATION_VERSION = "0.1.0"
TRACES_NAMESPACE = "kraken.spot.rest"
RESPONSE_TRACING_HEADER = "x-trace-id"


def get_tracer(tracer_provider: Optional[TracerProvider] = None) -> Tracer:
    """Tracer from the given provider, else the global one (a no-op unless an SDK is configured)."""
    return trace.get_tracer(
        INSTRUMENTATION_NAME, INSTRUMENTATION_VERSION, tracer_provider=tracer_provider
    )


def trace_response(span: Span, resp: HTTPResponse) -> None:
    trace_id = ""
    for k, v in resp.headers.items():
        if k.lower() == RESPONSE_TRACING_HEADER:
            trace_id = v
    span.add_event(
        f"{TRACES_NAMESPACE}.http.response",
        {
            "http.response.status_code": resp.status,
            f"http.response.header.{RESPONSE_TRACING_HEADER}": trace_id,
        },
    )


def trace_outcome(span: Span, error: Optional[BaseException] = None) -> None:
    """Record the error (if any) and set the span status accordingly."""
    if error is not None:
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, type(error).__name__))
    else:
        span.set_status(Status(StatusCode.OK))
