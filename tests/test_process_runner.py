from __future__ import annotations

import asyncio
import signal
import sys

import pytest

from gitlad.process import (
    SPAWN_FAILURE_EXIT_CODE,
    TIMEOUT_EXIT_CODE,
    AsyncioProcessRunner,
    CommandHistory,
    CommandRecord,
    run_command,
    split_output,
    strip_trailing_blank,
)


def _collect(argv: list[str], timeout: float | None = None) -> dict[str, object]:
    events: list[str] = []
    captured: dict[str, object] = {"events": events}

    async def _run() -> None:
        loop = asyncio.get_running_loop()
        done = loop.create_future()

        def _on_stdout(lines: list[str]) -> None:
            events.append("stdout")
            captured["stdout"] = lines

        def _on_stderr(lines: list[str]) -> None:
            events.append("stderr")
            captured["stderr"] = lines

        def _on_exit(code: int) -> None:
            events.append("exit")
            captured["exit"] = code
            done.set_result(None)

        AsyncioProcessRunner().start(
            argv,
            on_stdout=_on_stdout,
            on_stderr=_on_stderr,
            on_exit=_on_exit,
            timeout=timeout,
        )
        await asyncio.wait_for(done, 10)

    asyncio.run(_run())
    return captured


def test_runner_reports_streams_then_exit_code() -> None:
    script = "import sys; print('hello'); print('oops', file=sys.stderr); sys.exit(3)"
    captured = _collect([sys.executable, "-c", script])

    assert captured["stdout"] == ["hello", ""]
    assert captured["stderr"] == ["oops", ""]
    assert captured["exit"] == 3
    assert captured["events"][-1] == "exit"


def test_runner_reports_spawn_failure() -> None:
    captured = _collect(["/nonexistent/gitlad-missing-binary"])

    assert captured["exit"] == SPAWN_FAILURE_EXIT_CODE
    assert captured["stdout"] == []
    assert captured["stderr"]


def test_runner_watchdog_kills_slow_process() -> None:
    captured = _collect([sys.executable, "-c", "import time; time.sleep(10)"], timeout=0.2)

    assert captured["exit"] == TIMEOUT_EXIT_CODE
    assert captured["events"] == ["exit"]


def test_terminate_stops_running_process() -> None:
    async def _run() -> int:
        loop = asyncio.get_running_loop()
        done: asyncio.Future[int] = loop.create_future()
        handle = AsyncioProcessRunner().start(
            [sys.executable, "-c", "import time; time.sleep(10)"],
            on_stdout=lambda lines: None,
            on_stderr=lambda lines: None,
            on_exit=done.set_result,
        )
        handle.terminate()
        return await asyncio.wait_for(done, 10)

    assert asyncio.run(_run()) != 0


def test_run_command_collects_output_without_trailing_blank(tmp_path) -> None:
    async def _run():
        return await run_command(
            AsyncioProcessRunner(),
            [sys.executable, "-c", "import os; print(os.getcwd()); print('second')"],
            cwd=str(tmp_path),
        )

    result = asyncio.run(_run())

    assert result.ok
    assert result.stdout == (str(tmp_path), "second")
    assert result.stderr == ()


def test_split_output_helpers() -> None:
    assert split_output(b"") == [""]
    assert split_output(b"a\nb\n") == ["a", "b", ""]
    assert strip_trailing_blank(["a", ""]) == ["a"]
    assert strip_trailing_blank(["a", "", ""]) == ["a", ""]
    assert strip_trailing_blank([]) == []


def _record(args: tuple[str, ...]) -> CommandRecord:
    return CommandRecord(program="git", args=args, cwd="/repo", exit_code=0)


def test_command_history_keeps_newest_entries() -> None:
    history = CommandHistory(max_size=2)
    for name in ("status", "fetch", "log"):
        history.add(_record((name,)))

    assert len(history) == 2
    assert [entry.args for entry in history.entries()] == [("log",), ("fetch",)]
    latest = history.latest()
    assert latest is not None and latest.args == ("log",)

    history.clear()
    assert history.latest() is None
    assert history.entries() == []


def test_command_history_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        CommandHistory(max_size=0)


def test_runner_maps_signal_deaths_away_from_timeout_sentinel() -> None:
    script = "import os, signal; os.kill(os.getpid(), signal.SIGHUP)"
    captured = _collect([sys.executable, "-c", script])

    assert captured["exit"] == 128 + signal.SIGHUP
    assert captured["exit"] != TIMEOUT_EXIT_CODE
