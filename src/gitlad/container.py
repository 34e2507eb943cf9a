"""Service container wiring application components."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gitlad.config import AppSettings
from gitlad.forge import (
    AuthTokenSource,
    ForgeProviderRegistry,
    ForgeSession,
    GhCliTokenSource,
    StaticTokenSource,
)
from gitlad.forge.github import GITHUB_PLUGIN
from gitlad.git import GitCli
from gitlad.http import HttpClient
from gitlad.process import AsyncioProcessRunner, CommandHistory, ProcessRunner

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Shared services for one process; the forge session is built exactly once."""

    settings: AppSettings
    runner: ProcessRunner
    history: CommandHistory
    git: GitCli
    http: HttpClient
    provider_registry: ForgeProviderRegistry
    auth: AuthTokenSource
    forge_session: ForgeSession


def _build_auth(settings: AppSettings, runner: ProcessRunner) -> AuthTokenSource:
    if settings.github_token:
        logger.debug("Using auth token from GITLAD_GITHUB_TOKEN")
        return StaticTokenSource(settings.github_token)
    return GhCliTokenSource(runner=runner, binary=settings.gh_binary)


def build_container(
    settings: AppSettings | None = None,
    *,
    runner: ProcessRunner | None = None,
) -> ServiceContainer:
    """Construct the primary service container."""

    resolved_settings = settings or AppSettings.from_env()
    resolved_runner = runner or AsyncioProcessRunner()

    history = CommandHistory(max_size=resolved_settings.history_size)
    git = GitCli(runner=resolved_runner, binary=resolved_settings.git_binary, history=history)
    http = HttpClient(
        runner=resolved_runner,
        binary=resolved_settings.curl_binary,
        default_timeout=resolved_settings.http_timeout,
    )

    registry = ForgeProviderRegistry()
    registry.register(GITHUB_PLUGIN, override=True)

    auth = _build_auth(resolved_settings, resolved_runner)
    session = ForgeSession(git=git, registry=registry, http=http, auth=auth)

    return ServiceContainer(
        settings=resolved_settings,
        runner=resolved_runner,
        history=history,
        git=git,
        http=http,
        provider_registry=registry,
        auth=auth,
        forge_session=session,
    )


__all__ = ["ServiceContainer", "build_container"]
