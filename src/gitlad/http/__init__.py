"""HTTP layer exports."""

from .client import (
    WATCHDOG_GRACE_SECONDS,
    HttpClient,
    RequestHandle,
    ResponseCallback,
    build_command,
    parse_response,
    resolve_outcome,
)
from .exceptions import HttpError, MalformedResponseError, RequestTimeoutError, TransportError
from .models import DEFAULT_TIMEOUT_SECONDS, HttpRequestSpec, HttpResponse

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "WATCHDOG_GRACE_SECONDS",
    "HttpClient",
    "HttpError",
    "HttpRequestSpec",
    "HttpResponse",
    "MalformedResponseError",
    "RequestHandle",
    "RequestTimeoutError",
    "ResponseCallback",
    "TransportError",
    "build_command",
    "parse_response",
    "resolve_outcome",
]
