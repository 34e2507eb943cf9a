"""Forge plugin wiring for GitHub."""

from __future__ import annotations

from gitlad.domain import ForgeKind
from gitlad.http import HttpClient

from ..base import ForgeProviderPlugin
from .provider import GitHubProvider

PUBLIC_HOST = "github.com"
PUBLIC_API_URL = "https://api.github.com"


def github_api_url(host: str) -> str:
    """REST API base URL for ``host``; Enterprise hosts serve it under ``/api/v3``."""

    if host == PUBLIC_HOST:
        return PUBLIC_API_URL
    return f"https://{host}/api/v3"


def _create_provider(
    owner: str, repo: str, api_url: str, token: str, http: HttpClient
) -> GitHubProvider:
    return GitHubProvider(owner, repo, api_url, token, http=http)


def build_github_plugin() -> ForgeProviderPlugin:
    return ForgeProviderPlugin(
        kind=ForgeKind.GITHUB,
        display_name="GitHub",
        api_base_url=github_api_url,
        factory=_create_provider,
    )


GITHUB_PLUGIN = build_github_plugin()

__all__ = ["GITHUB_PLUGIN", "PUBLIC_API_URL", "build_github_plugin", "github_api_url"]
