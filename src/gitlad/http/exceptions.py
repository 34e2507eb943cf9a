"""HTTP layer exceptions."""

from __future__ import annotations

from gitlad.exceptions import GitladError


class HttpError(GitladError):
    """Base class for failures performing an HTTP request."""


class RequestTimeoutError(HttpError):
    """Raised when the HTTP process was terminated for exceeding its deadline."""


class TransportError(HttpError):
    """Raised when the HTTP process exited non-zero for a reason other than timeout."""


class MalformedResponseError(HttpError):
    """Raised when process output does not end with a numeric status line."""


__all__ = ["HttpError", "MalformedResponseError", "RequestTimeoutError", "TransportError"]
