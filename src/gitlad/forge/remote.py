"""Parsing of git remote URLs into forge coordinates."""

from __future__ import annotations

import re

from gitlad.domain import ForgeKind

from .models import ForgeRemoteInfo

# Tried in order; the first match wins.
_REMOTE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^https?://(?P<host>[^/]+)/(?P<owner>[^/]+)/(?P<repo>[^/]+)$"),
    re.compile(r"^[^@]+@(?P<host>[^:]+):(?P<owner>[^/]+)/(?P<repo>[^/]+)$"),
    re.compile(r"^ssh://[^@]+@(?P<host>[^/]+)/(?P<owner>[^/]+)/(?P<repo>[^/]+)$"),
    re.compile(r"^ssh://(?P<host>[^/]+)/(?P<owner>[^/]+)/(?P<repo>[^/]+)$"),
)


def classify_host(host: str) -> ForgeKind | None:
    """Return the forge kind served by ``host``; only GitHub hosts are recognised."""

    if "github" in host:
        return ForgeKind.GITHUB
    return None


def parse_remote_url(url: str | None) -> ForgeRemoteInfo | None:
    """Parse HTTPS, SCP-style SSH and ``ssh://`` remotes.

    Returns ``None`` when the URL has none of the supported shapes or when the
    host is not a recognised forge.
    """

    if not url:
        return None

    url = url.removesuffix(".git").rstrip()

    for pattern in _REMOTE_PATTERNS:
        match = pattern.match(url)
        if match is None:
            continue
        host, owner, repo = match.group("host", "owner", "repo")
        kind = classify_host(host)
        if kind is None:
            return None
        return ForgeRemoteInfo(provider=kind, owner=owner, repo=repo, host=host)
    return None


__all__ = ["classify_host", "parse_remote_url"]
