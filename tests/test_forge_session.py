from __future__ import annotations

import asyncio
from typing import Any

import pytest
from fakes import FakeProcessRunner, ScriptedProcess

from gitlad.callbacks import deliver
from gitlad.forge import (
    AuthenticationError,
    ForgeProviderRegistry,
    ForgeSession,
    RemoteNotFoundError,
    RemoteParseError,
    UnsupportedProviderError,
)
from gitlad.forge.github import GITHUB_PLUGIN, GitHubProvider
from gitlad.git import GitCli
from gitlad.http import HttpClient

REPO_ROOT = "/work/widgets"


class ScriptedTokenSource:
    def __init__(self, *results: str | Exception) -> None:
        self.calls = 0
        self._results = list(results)

    async def fetch_token(self) -> str:
        self.calls += 1
        await asyncio.sleep(0.01)
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        return result


def _origin(url: str = "git@github.com:acme/widgets.git", delay: float = 0.0) -> ScriptedProcess:
    return ScriptedProcess(stdout=[url, ""], delay=delay)


def _session(
    runner: FakeProcessRunner,
    auth: ScriptedTokenSource,
    *,
    with_github: bool = True,
) -> ForgeSession:
    registry = ForgeProviderRegistry()
    if with_github:
        registry.register(GITHUB_PLUGIN)
    return ForgeSession(
        git=GitCli(runner=runner),
        registry=registry,
        http=HttpClient(runner=runner),
        auth=auth,
    )


def test_detect_builds_github_provider_and_caches_it() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin())
    auth = ScriptedTokenSource("tok_123")
    session = _session(runner, auth)

    async def _run() -> tuple[Any, Any]:
        first = await session.detect(REPO_ROOT)
        second = await session.detect(REPO_ROOT)
        return first, second

    first, second = asyncio.run(_run())

    assert isinstance(first, GitHubProvider)
    assert first is second
    assert session.get(REPO_ROOT) is first
    assert (first.owner, first.repo, first.host) == ("acme", "widgets", "api.github.com")
    assert first.api_base_url == "https://api.github.com"
    assert first.auth_token == "tok_123"
    git_calls = runner.calls_for("git")
    assert len(git_calls) == 1
    assert git_calls[0].argv == ["git", "remote", "get-url", "origin"]
    assert git_calls[0].cwd == REPO_ROOT
    assert auth.calls == 1


def test_detect_enterprise_host_uses_api_v3() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin("https://github.mycorp.io/platform/api.git"))
    session = _session(runner, ScriptedTokenSource("tok"))

    provider = asyncio.run(session.detect(REPO_ROOT))

    assert provider.api_base_url == "https://github.mycorp.io/api/v3"
    assert provider.host == "github.mycorp.io"


def test_missing_origin_is_reported_and_not_cached() -> None:
    runner = FakeProcessRunner()
    runner.script(
        "git",
        ScriptedProcess(stderr=["error: No such remote 'origin'", ""], exit_code=2),
        _origin(),
    )
    session = _session(runner, ScriptedTokenSource("tok"))

    with pytest.raises(RemoteNotFoundError, match="^No 'origin' remote found$"):
        asyncio.run(session.detect(REPO_ROOT))
    assert session.get(REPO_ROOT) is None

    provider = asyncio.run(session.detect(REPO_ROOT))
    assert provider.repo == "widgets"


def test_unparseable_remote_skips_authentication() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin("https://git.corp.internal/acme/widgets.git"))
    auth = ScriptedTokenSource("tok")
    session = _session(runner, auth)

    with pytest.raises(RemoteParseError) as excinfo:
        asyncio.run(session.detect(REPO_ROOT))

    assert str(excinfo.value) == (
        "Could not parse remote URL: https://git.corp.internal/acme/widgets.git"
    )
    assert auth.calls == 0


def test_unregistered_provider_is_unsupported() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin())
    session = _session(runner, ScriptedTokenSource("tok"), with_github=False)

    with pytest.raises(UnsupportedProviderError, match="^Unsupported forge provider: github$"):
        asyncio.run(session.detect(REPO_ROOT))


def test_auth_failure_propagates_and_is_retried() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin(), _origin())
    auth = ScriptedTokenSource(AuthenticationError("gh auth token failed (exit 1)."), "tok")
    session = _session(runner, auth)

    with pytest.raises(AuthenticationError):
        asyncio.run(session.detect(REPO_ROOT))
    assert session.get(REPO_ROOT) is None

    provider = asyncio.run(session.detect(REPO_ROOT))
    assert provider.auth_token == "tok"
    assert auth.calls == 2


def test_empty_token_is_rejected() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin())
    session = _session(runner, ScriptedTokenSource(""))

    with pytest.raises(AuthenticationError, match="^Failed to get auth token$"):
        asyncio.run(session.detect(REPO_ROOT))


def test_concurrent_detections_share_one_attempt() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin(delay=0.05))
    auth = ScriptedTokenSource("tok")
    session = _session(runner, auth)

    async def _run() -> list[object]:
        return list(await asyncio.gather(*(session.detect(REPO_ROOT) for _ in range(3))))

    providers = asyncio.run(_run())

    assert providers[0] is providers[1] is providers[2]
    assert len(runner.calls_for("git")) == 1
    assert auth.calls == 1


def test_concurrent_token_requests_share_one_fetch() -> None:
    auth = ScriptedTokenSource("tok")
    session = _session(FakeProcessRunner(), auth)

    async def _run() -> list[str]:
        return list(await asyncio.gather(*(session.get_auth_token() for _ in range(4))))

    assert asyncio.run(_run()) == ["tok"] * 4
    assert auth.calls == 1


def test_clear_cache_forces_new_detection_and_token() -> None:
    runner = FakeProcessRunner()
    runner.script("git", _origin(), _origin("git@github.com:acme/gadgets.git"))
    auth = ScriptedTokenSource("tok_one", "tok_two")
    session = _session(runner, auth)

    first = asyncio.run(session.detect(REPO_ROOT))
    session.clear_cache()
    assert session.get(REPO_ROOT) is None
    second = asyncio.run(session.detect(REPO_ROOT))

    assert first.repo == "widgets"
    assert second.repo == "gadgets"
    assert second.auth_token == "tok_two"
    assert auth.calls == 2


class _ViewerProvider:
    def __init__(self) -> None:
        self.calls = 0

    async def get_viewer(self) -> str:
        self.calls += 1
        return "octocat"


def test_viewer_login_is_cached_until_cleared() -> None:
    session = _session(FakeProcessRunner(), ScriptedTokenSource("tok"))
    provider = _ViewerProvider()

    async def _run() -> list[str]:
        return [
            await session.get_viewer_login(provider),  # type: ignore[arg-type]
            await session.get_viewer_login(provider),  # type: ignore[arg-type]
        ]

    assert asyncio.run(_run()) == ["octocat", "octocat"]
    assert provider.calls == 1

    session.clear_cache()
    asyncio.run(session.get_viewer_login(provider))  # type: ignore[arg-type]
    assert provider.calls == 2


def test_deliver_reports_results_and_error_messages() -> None:
    results: list[tuple[object, str | None]] = []

    async def _ok() -> int:
        return 42

    async def _fail() -> int:
        raise RemoteNotFoundError("No 'origin' remote found")

    async def _run() -> None:
        first = deliver(_ok(), lambda value, error: results.append((value, error)))
        second = deliver(_fail(), lambda value, error: results.append((value, error)))
        assert results == []
        await asyncio.gather(first, second)

    asyncio.run(_run())

    assert results == [(42, None), (None, "No 'origin' remote found")]


def test_deliver_reports_unexpected_exceptions_once() -> None:
    results: list[tuple[object, str | None]] = []

    async def _broken() -> int:
        raise ValueError("timeout_seconds must be positive")

    async def _run() -> None:
        await deliver(_broken(), lambda value, error: results.append((value, error)))

    asyncio.run(_run())

    assert results == [(None, "timeout_seconds must be positive")]
