from __future__ import annotations

import asyncio

import pytest
from fakes import FakeProcessRunner, InlineProcessRunner, ScriptedProcess, http_reply

from gitlad.http import (
    WATCHDOG_GRACE_SECONDS,
    HttpClient,
    HttpRequestSpec,
    HttpResponse,
    MalformedResponseError,
    RequestTimeoutError,
    TransportError,
    build_command,
    parse_response,
    resolve_outcome,
)


def test_build_command_places_url_last() -> None:
    spec = HttpRequestSpec(
        url="https://api.github.com/graphql",
        method="POST",
        headers={"Authorization": "Bearer tok"},
        body='{"query": "{}"}',
        timeout_seconds=12,
    )

    command = build_command(spec)

    assert command[:9] == [
        "curl", "-s", "-S", "-w", "\n%{http_code}", "-X", "POST", "--max-time", "12",
    ]
    assert command[9:11] == ["-H", "Authorization: Bearer tok"]
    assert command[11:13] == ["-d", '{"query": "{}"}']
    assert command[-1] == "https://api.github.com/graphql"


def test_build_command_omits_body_when_absent() -> None:
    command = build_command(HttpRequestSpec(url="https://example.com/x"), binary="/usr/bin/curl")

    assert command[0] == "/usr/bin/curl"
    assert "-d" not in command
    assert command[-1] == "https://example.com/x"


def test_request_spec_validation() -> None:
    with pytest.raises(ValueError):
        HttpRequestSpec(url="/relative/path")
    with pytest.raises(ValueError):
        HttpRequestSpec(url="https://example.com", timeout_seconds=0)


def test_parse_response_splits_body_and_status() -> None:
    response = parse_response(['{"a":', ' 1}', "200"])

    assert response.status == 200
    assert response.body == '{"a":\n 1}'
    assert response.json == {"a": 1}
    assert response.ok


def test_parse_response_keeps_non_json_body() -> None:
    response = parse_response(["<html>oops</html>", "502"])

    assert response.status == 502
    assert response.json is None
    assert not response.ok


def test_parse_response_errors() -> None:
    with pytest.raises(MalformedResponseError, match="^Empty response$"):
        parse_response([])
    with pytest.raises(MalformedResponseError, match="^Failed to parse HTTP status code: abc$"):
        parse_response(["body", "abc"])


def test_resolve_outcome_maps_exit_codes() -> None:
    with pytest.raises(RequestTimeoutError, match="^Request timed out$"):
        resolve_outcome(-1, [], [])
    with pytest.raises(TransportError) as excinfo:
        resolve_outcome(6, [], ["Could not resolve host", "second line"])
    assert str(excinfo.value) == "curl failed (exit 6): Could not resolve host\nsecond line"


def test_request_callback_fires_once_and_never_inline() -> None:
    runner = InlineProcessRunner(stdout=['{"ok": true}', "200", ""])
    client = HttpClient(runner=runner)
    calls: list[tuple[HttpResponse | None, str | None]] = []

    async def _run() -> None:
        handle = client.request(HttpRequestSpec(url="https://example.com"), _record)
        assert calls == []
        assert handle.completed
        for _ in range(5):
            await asyncio.sleep(0)

    def _record(response: HttpResponse | None, error: str | None) -> None:
        calls.append((response, error))

    asyncio.run(_run())

    assert len(calls) == 1
    response, error = calls[0]
    assert error is None
    assert response is not None and response.status == 200
    assert response.json == {"ok": True}


def test_request_callback_reports_transport_error() -> None:
    runner = FakeProcessRunner()
    runner.script("curl", ScriptedProcess(stderr=["Connection refused", ""], exit_code=7))
    client = HttpClient(runner=runner)

    async def _run() -> tuple[HttpResponse | None, str | None]:
        loop = asyncio.get_running_loop()
        done: asyncio.Future[tuple[HttpResponse | None, str | None]] = loop.create_future()
        client.request(
            HttpRequestSpec(url="https://example.com"),
            lambda response, error: done.set_result((response, error)),
        )
        return await asyncio.wait_for(done, 5)

    response, error = asyncio.run(_run())

    assert response is None
    assert error == "curl failed (exit 7): Connection refused"


def test_fetch_passes_watchdog_timeout_to_runner() -> None:
    runner = FakeProcessRunner()
    runner.script("curl", http_reply(204))
    client = HttpClient(runner=runner)

    spec = HttpRequestSpec(url="https://example.com", timeout_seconds=7)
    response = asyncio.run(client.fetch(spec))

    assert response.status == 204
    assert response.body == ""
    assert runner.calls[0].timeout == 7 + WATCHDOG_GRACE_SECONDS


def test_fetch_raises_timeout_for_watchdog_exit() -> None:
    runner = FakeProcessRunner()
    runner.script("curl", ScriptedProcess(exit_code=-1))
    client = HttpClient(runner=runner)

    with pytest.raises(RequestTimeoutError):
        asyncio.run(client.fetch(HttpRequestSpec(url="https://example.com")))


def test_cancelled_fetch_terminates_process() -> None:
    runner = FakeProcessRunner()
    runner.script("curl", ScriptedProcess(stdout=["{}", "200"], delay=5))
    client = HttpClient(runner=runner)

    async def _run() -> None:
        task = asyncio.ensure_future(client.fetch(HttpRequestSpec(url="https://example.com")))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(_run())

    assert runner.handles[0].terminated


def test_cancel_is_silent_after_completion() -> None:
    runner = FakeProcessRunner()
    runner.script("curl", http_reply(200, {"ok": True}))
    client = HttpClient(runner=runner)

    async def _run() -> None:
        loop = asyncio.get_running_loop()
        done = loop.create_future()
        handle = client.request(
            HttpRequestSpec(url="https://example.com"),
            lambda response, error: done.set_result(response),
        )
        await asyncio.wait_for(done, 5)
        client.cancel(handle)
        client.cancel(None)

    asyncio.run(_run())

    assert runner.handles[0].terminated is False


def test_parse_response_keeps_deeply_nested_body_as_text() -> None:
    body = "[" * 100000 + "]" * 100000

    response = parse_response([body, "200"])

    assert response.status == 200
    assert response.json is None
    assert response.body == body


def test_request_callback_fires_for_undecodable_nested_body() -> None:
    runner = FakeProcessRunner()
    runner.script("curl", http_reply(200, body="[" * 100000 + "]" * 100000))
    client = HttpClient(runner=runner)

    async def _run() -> tuple[HttpResponse | None, str | None]:
        loop = asyncio.get_running_loop()
        done: asyncio.Future[tuple[HttpResponse | None, str | None]] = loop.create_future()
        client.request(
            HttpRequestSpec(url="https://example.com"),
            lambda response, error: done.set_result((response, error)),
        )
        return await asyncio.wait_for(done, 5)

    response, error = asyncio.run(_run())

    assert error is None
    assert response is not None and response.status == 200
    assert response.json is None


def test_watchdog_exit_ignores_process_output() -> None:
    runner = FakeProcessRunner()
    runner.script(
        "curl",
        ScriptedProcess(stdout=['{"ok": true}', "200", ""], stderr=["partial", ""], exit_code=-1),
    )
    client = HttpClient(runner=runner)

    with pytest.raises(RequestTimeoutError, match="^Request timed out$"):
        asyncio.run(client.fetch(HttpRequestSpec(url="https://example.com")))
    with pytest.raises(RequestTimeoutError, match="^Request timed out$"):
        resolve_outcome(-1, ["body", "200"], ["curl: (28) Operation timed out"])
