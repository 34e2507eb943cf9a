"""Process execution layer exports."""

from .history import CommandHistory
from .models import CommandRecord, CommandResult
from .runner import (
    SPAWN_FAILURE_EXIT_CODE,
    TIMEOUT_EXIT_CODE,
    AsyncioProcessRunner,
    ExitHandler,
    OutputHandler,
    ProcessHandle,
    ProcessRunner,
    run_command,
    split_output,
    strip_trailing_blank,
)

__all__ = [
    "SPAWN_FAILURE_EXIT_CODE",
    "TIMEOUT_EXIT_CODE",
    "AsyncioProcessRunner",
    "CommandHistory",
    "CommandRecord",
    "CommandResult",
    "ExitHandler",
    "OutputHandler",
    "ProcessHandle",
    "ProcessRunner",
    "run_command",
    "split_output",
    "strip_trailing_blank",
]
