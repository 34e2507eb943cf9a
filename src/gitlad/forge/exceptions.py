"""Forge integration exceptions."""

from __future__ import annotations

from gitlad.exceptions import GitladError


class ForgeError(GitladError):
    """Base class for forge detection and API failures."""


class RemoteNotFoundError(ForgeError):
    """Raised when the repository has no ``origin`` remote."""


class RemoteParseError(ForgeError):
    """Raised when the origin URL matches no recognised forge remote shape."""


class UnsupportedProviderError(ForgeError):
    """Raised when a forge is recognised but no provider implements it."""


class AuthenticationError(ForgeError):
    """Raised when an auth token cannot be obtained."""


class ForgeApiError(ForgeError):
    """Raised when the forge API rejects a request or returns unusable data."""


__all__ = [
    "AuthenticationError",
    "ForgeApiError",
    "ForgeError",
    "RemoteNotFoundError",
    "RemoteParseError",
    "UnsupportedProviderError",
]
