from __future__ import annotations

import pytest

from gitlad.domain import ForgeKind
from gitlad.forge import classify_host, parse_remote_url
from gitlad.forge.github import github_api_url, graphql_endpoint


@pytest.mark.parametrize(
    ("url", "host"),
    [
        ("https://github.com/acme/widgets.git", "github.com"),
        ("http://github.com/acme/widgets", "github.com"),
        ("git@github.com:acme/widgets.git", "github.com"),
        ("ssh://git@github.com/acme/widgets.git", "github.com"),
        ("ssh://github.example.com/acme/widgets", "github.example.com"),
        ("git@github.com:acme/widgets\n", "github.com"),
    ],
)
def test_parse_remote_url_supported_shapes(url: str, host: str) -> None:
    info = parse_remote_url(url)

    assert info is not None
    assert info.provider is ForgeKind.GITHUB
    assert (info.owner, info.repo, info.host) == ("acme", "widgets", host)


def test_git_suffix_is_stripped_before_trailing_whitespace() -> None:
    info = parse_remote_url("git@github.com:acme/widgets.git\n")

    assert info is not None
    assert info.repo == "widgets.git"


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "not a url",
        "https://github.com/acme",
        "https://github.com/acme/widgets/tree/main",
        "git@gitlab.com:acme/widgets.git",
        "https://git.corp.internal/acme/widgets.git",
    ],
)
def test_parse_remote_url_rejects_unknown_input(url: str | None) -> None:
    assert parse_remote_url(url) is None


def test_classify_host() -> None:
    assert classify_host("github.com") is ForgeKind.GITHUB
    assert classify_host("github.mycorp.io") is ForgeKind.GITHUB
    assert classify_host("gitlab.com") is None


def test_github_api_urls() -> None:
    assert github_api_url("github.com") == "https://api.github.com"
    assert github_api_url("github.mycorp.io") == "https://github.mycorp.io/api/v3"
    assert graphql_endpoint("https://api.github.com") == "https://api.github.com/graphql"
    assert (
        graphql_endpoint("https://github.mycorp.io/api/v3")
        == "https://github.mycorp.io/api/graphql"
    )
