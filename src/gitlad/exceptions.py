"""Root of the gitlad exception hierarchy."""

from __future__ import annotations


class GitladError(RuntimeError):
    """Base class for failures whose message is safe to show to an end user."""


__all__ = ["GitladError"]
