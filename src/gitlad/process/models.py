"""Records describing finished external commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from gitlad.utils import utc_now


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Collected output of a process that ran to completion."""

    exit_code: int
    stdout: tuple[str, ...] = ()
    stderr: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class CommandRecord:
    """Entry kept in the command history for transparency and debugging."""

    program: str
    args: Sequence[str]
    cwd: str | None
    exit_code: int
    stdout: tuple[str, ...] = ()
    stderr: tuple[str, ...] = ()
    started_at: datetime = field(default_factory=utc_now)
    duration_ms: float = 0.0


__all__ = ["CommandRecord", "CommandResult"]
