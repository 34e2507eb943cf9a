"""Thin async wrapper around the git executable."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from gitlad.process import (
    AsyncioProcessRunner,
    CommandHistory,
    CommandRecord,
    CommandResult,
    ProcessRunner,
    run_command,
)
from gitlad.utils import utc_now

from .exceptions import RepositoryNotFoundError

DEFAULT_REMOTE = "origin"


class GitCli:
    """Runs git subcommands through a :class:`ProcessRunner` and records them."""

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        binary: str = "git",
        history: CommandHistory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner or AsyncioProcessRunner()
        self._binary = binary
        self._history = history
        self._logger = logger or logging.getLogger(__name__)

    @property
    def history(self) -> CommandHistory | None:
        return self._history

    async def run(self, args: Sequence[str], *, cwd: str | None = None) -> CommandResult:
        """Run ``git <args>`` in ``cwd``."""

        started_at = utc_now()
        started = time.monotonic()
        result = await run_command(self._runner, [self._binary, *args], cwd=cwd)
        duration_ms = (time.monotonic() - started) * 1000
        self._logger.debug(
            "git %s exited with %s in %.1fms", " ".join(args), result.exit_code, duration_ms
        )
        if self._history is not None:
            self._history.add(
                CommandRecord(
                    program=self._binary,
                    args=tuple(args),
                    cwd=cwd,
                    exit_code=result.exit_code,
                    stdout=result.stdout,
                    stderr=result.stderr,
                    started_at=started_at,
                    duration_ms=duration_ms,
                )
            )
        return result

    async def remote_url(self, repo_root: str, remote: str = DEFAULT_REMOTE) -> CommandResult:
        """Return the configured URL of ``remote``; a non-zero exit means no such remote."""

        return await self.run(["remote", "get-url", remote], cwd=repo_root)

    async def toplevel(self, path: str) -> str:
        """Resolve the work tree root containing ``path``."""

        result = await self.run(["rev-parse", "--show-toplevel"], cwd=path)
        if not result.ok or not result.stdout:
            msg = f"Not a git repository: {path}"
            raise RepositoryNotFoundError(msg)
        return result.stdout[0].rstrip()


__all__ = ["DEFAULT_REMOTE", "GitCli"]
