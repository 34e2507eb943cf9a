"""Asynchronous process spawning primitive shared by git, gh and curl invocations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from contextlib import suppress
from typing import Protocol, runtime_checkable

from .models import CommandResult

OutputHandler = Callable[[list[str]], None]
ExitHandler = Callable[[int], None]

TIMEOUT_EXIT_CODE = -1
SPAWN_FAILURE_EXIT_CODE = 127

logger = logging.getLogger(__name__)


@runtime_checkable
class ProcessHandle(Protocol):
    """Handle on a spawned process."""

    def terminate(self) -> None: ...


@runtime_checkable
class ProcessRunner(Protocol):
    """Spawns a process and reports its output through three callbacks.

    ``on_stdout`` and ``on_stderr`` receive the captured stream split on newlines
    (a trailing ``""`` may be present when the stream ended with a newline).
    ``on_exit`` receives the exit code and is the last callback to fire.
    """

    def start(
        self,
        argv: Sequence[str],
        *,
        on_stdout: OutputHandler,
        on_stderr: OutputHandler,
        on_exit: ExitHandler,
        cwd: str | None = None,
        timeout: float | None = None,
    ) -> ProcessHandle: ...


def split_output(data: bytes | None) -> list[str]:
    if not data:
        return [""]
    return data.decode("utf-8", errors="replace").split("\n")


def strip_trailing_blank(lines: Sequence[str]) -> list[str]:
    """Drop the single empty element newline splitting leaves at the end of a stream."""

    result = list(lines)
    if result and result[-1] == "":
        result.pop()
    return result


class _AsyncioProcessHandle:
    def __init__(self) -> None:
        self._process: asyncio.subprocess.Process | None = None
        self._terminate_requested = False
        self.task: asyncio.Task[None] | None = None

    def attach(self, process: asyncio.subprocess.Process) -> None:
        self._process = process
        if self._terminate_requested:
            self._signal()

    def terminate(self) -> None:
        self._terminate_requested = True
        self._signal()

    def _signal(self) -> None:
        process = self._process
        if process is None or process.returncode is not None:
            return
        with suppress(ProcessLookupError):
            process.terminate()


class AsyncioProcessRunner(ProcessRunner):
    """Run processes with ``asyncio.create_subprocess_exec`` on the running loop."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    def start(
        self,
        argv: Sequence[str],
        *,
        on_stdout: OutputHandler,
        on_stderr: OutputHandler,
        on_exit: ExitHandler,
        cwd: str | None = None,
        timeout: float | None = None,
    ) -> ProcessHandle:
        handle = _AsyncioProcessHandle()
        loop = asyncio.get_running_loop()
        handle.task = loop.create_task(
            self._run(list(argv), handle, on_stdout, on_stderr, on_exit, cwd, timeout)
        )
        self._tasks.add(handle.task)
        handle.task.add_done_callback(self._tasks.discard)
        return handle

    async def _run(
        self,
        argv: list[str],
        handle: _AsyncioProcessHandle,
        on_stdout: OutputHandler,
        on_stderr: OutputHandler,
        on_exit: ExitHandler,
        cwd: str | None,
        timeout: float | None,
    ) -> None:
        logger.debug("Spawning %s (cwd=%s)", argv[0], cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as exc:
            logger.warning("Unable to start %s: %s", argv[0], exc)
            on_stdout([])
            on_stderr([str(exc)])
            on_exit(SPAWN_FAILURE_EXIT_CODE)
            return

        handle.attach(process)
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
        except TimeoutError:
            logger.warning("%s exceeded %ss; killing", argv[0], timeout)
            with suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            on_exit(TIMEOUT_EXIT_CODE)
            return

        exit_code = process.returncode if process.returncode is not None else 0
        if exit_code < 0:
            # Killed by a signal; keep clear of the timeout sentinel.
            exit_code = 128 - exit_code
        logger.debug("%s exited with %s", argv[0], exit_code)
        on_stdout(split_output(stdout))
        on_stderr(split_output(stderr))
        on_exit(exit_code)


async def run_command(
    runner: ProcessRunner,
    argv: Sequence[str],
    *,
    cwd: str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run ``argv`` to completion and collect its output."""

    loop = asyncio.get_running_loop()
    future: asyncio.Future[CommandResult] = loop.create_future()
    stdout: list[str] = []
    stderr: list[str] = []

    def _on_exit(code: int) -> None:
        if future.done():
            return
        future.set_result(CommandResult(exit_code=code, stdout=tuple(stdout), stderr=tuple(stderr)))

    runner.start(
        argv,
        on_stdout=lambda lines: stdout.extend(strip_trailing_blank(lines)),
        on_stderr=lambda lines: stderr.extend(strip_trailing_blank(lines)),
        on_exit=_on_exit,
        cwd=cwd,
        timeout=timeout,
    )
    return await future


__all__ = [
    "SPAWN_FAILURE_EXIT_CODE",
    "TIMEOUT_EXIT_CODE",
    "AsyncioProcessRunner",
    "ExitHandler",
    "OutputHandler",
    "ProcessHandle",
    "ProcessRunner",
    "run_command",
    "split_output",
    "strip_trailing_blank",
]
