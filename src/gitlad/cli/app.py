"""Typer CLI wiring gitlad services."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from gitlad.domain import CheckTone, PullRequestStateFilter
from gitlad.exceptions import GitladError
from gitlad.forge import (
    ForgeProvider,
    ForgePullRequest,
    ListPullRequestsOptions,
    ReviewThreads,
    parse_remote_url,
)
from gitlad.forge.formatting import (
    check_tone,
    format_check_duration,
    format_checks_compact,
    format_diff_stat,
    format_pr_state,
    format_review_decision,
    relative_time,
)

from .deps import get_container

T = TypeVar("T")

app = typer.Typer(help="gitlad forge command-line interface")
console = Console()

_TONE_STYLES = {
    CheckTone.SUCCESS: "green",
    CheckTone.FAILURE: "red",
    CheckTone.PENDING: "yellow",
    CheckTone.NEUTRAL: "dim",
    CheckTone.NONE: "",
}

_REPO_OPTION = typer.Option(".", "--repo", "-C", help="Path inside the git repository")


def _configure_logging(level: str) -> None:
    root = logging.getLogger("gitlad")
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    root.setLevel(level)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Inspect pull requests of the forge hosting the current repository."""

    settings = get_container().settings
    _configure_logging("DEBUG" if verbose else settings.log_level)


async def _detect(repo: str) -> ForgeProvider:
    container = get_container()
    root = await container.git.toplevel(os.path.abspath(repo))
    return await container.forge_session.detect(root)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except GitladError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc


def _styled(text: str, tone: CheckTone) -> str:
    style = _TONE_STYLES[tone]
    return f"[{style}]{text}[/{style}]" if style and text else text


def _checks_cell(pr: ForgePullRequest) -> str:
    if pr.checks_summary is None:
        return ""
    text, tone = format_checks_compact(pr.checks_summary)
    return _styled(text, tone)


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved application settings."""

    settings = get_container().settings
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Git binary:\t" + settings.git_binary)
    typer.echo("gh binary:\t" + settings.gh_binary)
    typer.echo("curl binary:\t" + settings.curl_binary)
    typer.echo(f"HTTP timeout:\t{settings.http_timeout}s")
    typer.echo(f"History size:\t{settings.history_size}")
    typer.echo("Auth token:\t" + ("configured" if settings.github_token else "gh auth token"))
    typer.echo("Log level:\t" + settings.log_level)


@app.command("parse-remote")
def parse_remote(url: str) -> None:
    """Show the forge coordinates encoded in a git remote URL."""

    info = parse_remote_url(url)
    if info is None:
        typer.echo(f"Could not parse remote URL: {url}")
        raise typer.Exit(code=1)

    typer.echo(f"Provider:\t{info.provider}")
    typer.echo(f"Host:\t{info.host}")
    typer.echo(f"Owner:\t{info.owner}")
    typer.echo(f"Repo:\t{info.repo}")
    plugin = get_container().provider_registry.get(info.provider)
    if plugin is not None:
        typer.echo(f"API URL:\t{plugin.api_base_url(info.host)}")


@app.command("detect")
def detect(repo: str = _REPO_OPTION) -> None:
    """Detect the forge provider for a repository."""

    provider = _run(_detect(repo))
    typer.echo(
        f"{provider.provider_type}\t{provider.owner}/{provider.repo}\t{provider.api_base_url}"
    )


@app.command("whoami")
def whoami(repo: str = _REPO_OPTION) -> None:
    """Print the login of the authenticated forge user."""

    async def _viewer() -> str:
        provider = await _detect(repo)
        return await get_container().forge_session.get_viewer_login(provider)

    typer.echo(_run(_viewer()))


@app.command("prs")
def list_prs(
    repo: str = _REPO_OPTION,
    state: PullRequestStateFilter = typer.Option(
        PullRequestStateFilter.OPEN, "--state", help="Pull request state filter"
    ),
    limit: int = typer.Option(30, min=1, max=100),
    author: str | None = typer.Option(None, help="Only show pull requests by this login"),
    search: str | None = typer.Option(None, help="GitHub search query instead of a state list"),
) -> None:
    """List pull requests."""

    async def _list() -> list[ForgePullRequest]:
        provider = await _detect(repo)
        if search:
            return await provider.search_prs(search, limit)
        options = ListPullRequestsOptions(state=state, limit=limit, author=author)
        return await provider.list_prs(options)

    prs = _run(_list())
    if not prs:
        typer.echo("No pull requests found")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("State")
    table.add_column("Checks")
    table.add_column("Diff")
    table.add_column("Updated")
    for pr in prs:
        table.add_row(
            str(pr.number),
            escape(pr.title),
            escape(pr.author.login),
            format_pr_state(pr.state, pr.draft),
            _checks_cell(pr),
            format_diff_stat(pr.additions, pr.deletions),
            relative_time(pr.updated_at),
        )
    console.print(table)


@app.command("pr")
def show_pr(number: int, repo: str = _REPO_OPTION) -> None:
    """Show a pull request with its checks and conversation."""

    async def _get() -> ForgePullRequest:
        provider = await _detect(repo)
        return await provider.get_pr(number)

    pr = _run(_get())
    console.print(f"[bold]#{pr.number} {escape(pr.title)}[/bold]", highlight=False)
    console.print(
        f"{format_pr_state(pr.state, pr.draft)}  {escape(pr.author.login)}  "
        f"{escape(pr.head_ref)} -> {escape(pr.base_ref)}  "
        f"{format_diff_stat(pr.additions, pr.deletions)}",
        highlight=False,
    )
    decision = format_review_decision(pr.review_decision)
    if decision:
        console.print(f"Review: {decision}", highlight=False)
    if pr.labels:
        console.print("Labels: " + escape(", ".join(pr.labels)), highlight=False)
    if pr.body:
        console.print()
        console.print(pr.body, markup=False, highlight=False)

    summary = pr.checks_summary
    if summary is not None and summary.checks:
        text, tone = format_checks_compact(summary)
        table = Table(title=f"Checks {text}", title_style=_TONE_STYLES[tone] or None)
        table.add_column("Check")
        table.add_column("Result")
        table.add_column("Duration", justify="right")
        for check in summary.checks:
            result = check.conclusion or check.status
            table.add_row(
                escape(check.name),
                _styled(result, check_tone(check)),
                format_check_duration(check.started_at, check.completed_at),
            )
        console.print(table)

    for item in pr.timeline:
        console.print()
        if item.comment is not None:
            comment = item.comment
            console.print(
                f"[bold]{escape(comment.author.login)}[/bold] commented "
                f"{relative_time(comment.created_at)}",
                highlight=False,
            )
            console.print(comment.body, markup=False, highlight=False)
        elif item.review is not None:
            review = item.review
            console.print(
                f"[bold]{escape(review.author.login)}[/bold] reviewed {review.state} "
                f"{relative_time(review.submitted_at)}",
                highlight=False,
            )
            if review.body:
                console.print(review.body, markup=False, highlight=False)


@app.command("threads")
def show_threads(
    number: int,
    repo: str = _REPO_OPTION,
    unresolved: bool = typer.Option(False, help="Hide resolved threads"),
) -> None:
    """List review threads of a pull request."""

    async def _get() -> ReviewThreads:
        provider = await _detect(repo)
        return await provider.get_review_threads(number)

    result = _run(_get())
    threads = [t for t in result.threads if not (unresolved and t.is_resolved)]
    if not threads:
        typer.echo("No review threads")
        return

    for thread in threads:
        flags = []
        if thread.is_resolved:
            flags.append("resolved")
        if thread.is_outdated:
            flags.append("outdated")
        location = f"{thread.path}:{thread.line or thread.original_line or '?'}"
        suffix = f" ({', '.join(flags)})" if flags else ""
        console.print(f"[bold]{escape(location)}[/bold]{suffix}", highlight=False)
        for comment in thread.comments:
            console.print(
                f"  {comment.author.login}: {comment.body}", markup=False, highlight=False
            )


__all__ = ["app"]
