"""Provider detection, authentication and process-wide caching."""

from __future__ import annotations

import asyncio
import logging

from gitlad.git import GitCli
from gitlad.http import HttpClient

from .auth import AuthTokenSource, GhCliTokenSource
from .base import ForgeProvider
from .exceptions import AuthenticationError, RemoteNotFoundError, RemoteParseError
from .registry import ForgeProviderRegistry
from .remote import parse_remote_url


class ForgeSession:
    """Detects forge providers for repositories and caches them for the session.

    One session is meant to be built at startup and shared by reference. It
    caches providers per repository root plus a single auth token and viewer
    login, on the assumption that one identity is used for the whole process.
    Failed detections are not cached. Concurrent detections for the same root
    share one in-flight attempt, and so do concurrent token lookups.
    """

    def __init__(
        self,
        *,
        git: GitCli,
        registry: ForgeProviderRegistry,
        http: HttpClient,
        auth: AuthTokenSource | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._git = git
        self._registry = registry
        self._http = http
        self._auth = auth or GhCliTokenSource()
        self._logger = logger or logging.getLogger(__name__)
        self._providers: dict[str, ForgeProvider] = {}
        self._auth_token: str | None = None
        self._viewer_login: str | None = None
        self._detecting: dict[str, asyncio.Task[ForgeProvider]] = {}
        self._token_task: asyncio.Task[str] | None = None

    def get(self, repo_root: str) -> ForgeProvider | None:
        """Return the cached provider for ``repo_root`` without detecting."""

        return self._providers.get(repo_root)

    async def detect(self, repo_root: str) -> ForgeProvider:
        """Return the provider for ``repo_root``, detecting it on first use.

        Chain: ``git remote get-url origin`` -> parse URL -> auth token ->
        provider. Raises a ``ForgeError`` (or ``HttpError``) whose message can be
        shown to the user as-is.
        """

        cached = self._providers.get(repo_root)
        if cached is not None:
            return cached

        task = self._detecting.get(repo_root)
        if task is None:
            task = asyncio.ensure_future(self._detect_uncached(repo_root))
            self._detecting[repo_root] = task
            task.add_done_callback(lambda done: self._forget_detection(repo_root, done))
        else:
            self._logger.debug("Joining in-flight detection for %s", repo_root)
        return await asyncio.shield(task)

    async def get_auth_token(self) -> str:
        """Return the session auth token, fetching it once."""

        if self._auth_token is not None:
            return self._auth_token

        task = self._token_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._fetch_token())
            self._token_task = task
        return await asyncio.shield(task)

    async def get_viewer_login(self, provider: ForgeProvider) -> str:
        """Return the authenticated user's login, asking ``provider`` once per session."""

        if self._viewer_login is not None:
            return self._viewer_login
        login = await provider.get_viewer()
        self._viewer_login = login
        return login

    def clear_cache(self) -> None:
        """Forget providers, the auth token and the viewer login."""

        self._providers.clear()
        self._auth_token = None
        self._viewer_login = None
        self._token_task = None

    async def _detect_uncached(self, repo_root: str) -> ForgeProvider:
        result = await self._git.remote_url(repo_root)
        if result.exit_code != 0:
            raise RemoteNotFoundError("No 'origin' remote found")

        url = (result.stdout[0] if result.stdout else "").rstrip()
        remote = parse_remote_url(url)
        if remote is None:
            msg = f"Could not parse remote URL: {url}"
            raise RemoteParseError(msg)

        plugin = self._registry.require(remote.provider)
        token = await self.get_auth_token()

        provider = plugin.create(remote.owner, remote.repo, remote.host, token, self._http)
        self._providers[repo_root] = provider
        self._logger.info(
            "Detected %s provider for %s: %s/%s via %s",
            plugin.display_name,
            repo_root,
            remote.owner,
            remote.repo,
            provider.api_base_url,
        )
        return provider

    async def _fetch_token(self) -> str:
        token = await self._auth.fetch_token()
        if not token:
            raise AuthenticationError("Failed to get auth token")
        self._auth_token = token
        return token

    def _forget_detection(self, repo_root: str, task: asyncio.Task[ForgeProvider]) -> None:
        if self._detecting.get(repo_root) is task:
            del self._detecting[repo_root]


__all__ = ["ForgeSession"]
