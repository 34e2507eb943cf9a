"""Non-blocking HTTP client performing each request through an external curl process."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Sequence
from contextlib import suppress
from dataclasses import dataclass

from gitlad.process import (
    TIMEOUT_EXIT_CODE,
    AsyncioProcessRunner,
    ProcessHandle,
    ProcessRunner,
    strip_trailing_blank,
)

from .exceptions import HttpError, MalformedResponseError, RequestTimeoutError, TransportError
from .models import DEFAULT_TIMEOUT_SECONDS, HttpRequestSpec, HttpResponse

ResponseCallback = Callable[[HttpResponse | None, str | None], None]
_Completion = Callable[[HttpResponse | None, HttpError | None], None]

# Extra seconds the runner waits beyond curl's own --max-time before killing it.
WATCHDOG_GRACE_SECONDS = 5.0


def build_command(request: HttpRequestSpec, binary: str = "curl") -> list[str]:
    """Return the curl argument vector for ``request``; the URL is always last."""

    command = [
        binary,
        "-s",
        "-S",
        "-w",
        "\n%{http_code}",
        "-X",
        request.method,
        "--max-time",
        str(request.timeout_seconds),
    ]
    for name, value in request.headers.items():
        command.extend(("-H", f"{name}: {value}"))
    if request.body is not None:
        command.extend(("-d", request.body))
    command.append(request.url)
    return command


def parse_response(stdout: Sequence[str]) -> HttpResponse:
    """Split curl output into body lines and the trailing status code line."""

    if not stdout:
        raise MalformedResponseError("Empty response")

    status_line = stdout[-1]
    try:
        status = int(status_line.strip())
    except ValueError as exc:
        msg = f"Failed to parse HTTP status code: {status_line}"
        raise MalformedResponseError(msg) from exc

    body = "\n".join(stdout[:-1])
    payload = None
    if body:
        with suppress(ValueError, RecursionError):
            payload = json.loads(body)
    return HttpResponse(status=status, body=body, json=payload)


def resolve_outcome(
    exit_code: int,
    stdout: Sequence[str],
    stderr: Sequence[str],
    *,
    label: str = "curl",
) -> HttpResponse:
    """Map a finished process to a response, raising the matching ``HttpError``."""

    if exit_code == TIMEOUT_EXIT_CODE:
        raise RequestTimeoutError("Request timed out")
    if exit_code != 0:
        msg = f"{label} failed (exit {exit_code}): " + "\n".join(stderr)
        raise TransportError(msg)
    return parse_response(stdout)


@dataclass(slots=True)
class RequestHandle:
    """Handle returned by :meth:`HttpClient.request`, used for cancellation."""

    process: ProcessHandle
    completed: bool = False
    cancelled: bool = False


class HttpClient:
    """Executes :class:`HttpRequestSpec` objects without blocking the event loop."""

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        binary: str = "curl",
        default_timeout: int = DEFAULT_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner or AsyncioProcessRunner()
        self._binary = binary
        self._default_timeout = default_timeout
        self._logger = logger or logging.getLogger(__name__)

    @property
    def binary(self) -> str:
        return self._binary

    @property
    def default_timeout(self) -> int:
        """Timeout callers should use for requests they build without one of their own."""

        return self._default_timeout

    def request(self, request: HttpRequestSpec, callback: ResponseCallback) -> RequestHandle:
        """Start ``request`` and report through ``callback(response, error)``.

        Exactly one of ``response``/``error`` is set, the callback fires exactly
        once, and it is always dispatched through the event loop, never from
        inside this call. Must be called with a running loop.
        """

        def _complete(response: HttpResponse | None, error: HttpError | None) -> None:
            callback(response, str(error) if error is not None else None)

        return self._dispatch(request, _complete)

    async def fetch(self, request: HttpRequestSpec) -> HttpResponse:
        """Coroutine form of :meth:`request` raising ``HttpError`` on failure."""

        loop = asyncio.get_running_loop()
        future: asyncio.Future[HttpResponse] = loop.create_future()

        def _complete(response: HttpResponse | None, error: HttpError | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(response)  # type: ignore[arg-type]

        handle = self._dispatch(request, _complete)
        try:
            return await future
        except asyncio.CancelledError:
            self.cancel(handle)
            raise

    def cancel(self, handle: RequestHandle | None) -> None:
        """Ask the process behind ``handle`` to stop; silent if it already finished."""

        if handle is None or handle.completed or handle.cancelled:
            return
        handle.cancelled = True
        with suppress(OSError):
            handle.process.terminate()

    def _dispatch(self, request: HttpRequestSpec, complete: _Completion) -> RequestHandle:
        loop = asyncio.get_running_loop()
        command = build_command(request, self._binary)
        stdout: list[str] = []
        stderr: list[str] = []
        handle: RequestHandle | None = None
        finished = False

        def _on_exit(code: int) -> None:
            nonlocal finished
            if finished:
                return
            finished = True
            if handle is not None:
                handle.completed = True
            loop.call_soon(_finish, code)

        def _finish(code: int) -> None:
            if handle is not None:
                handle.completed = True
            try:
                response = resolve_outcome(code, stdout, stderr, label=self._binary)
            except HttpError as exc:
                self._logger.debug("%s %s failed: %s", request.method, request.url, exc)
                complete(None, exc)
                return
            self._logger.debug("%s %s -> %s", request.method, request.url, response.status)
            complete(response, None)

        self._logger.debug("Starting %s %s", request.method, request.url)
        process = self._runner.start(
            command,
            on_stdout=lambda lines: stdout.extend(strip_trailing_blank(lines)),
            on_stderr=lambda lines: stderr.extend(strip_trailing_blank(lines)),
            on_exit=_on_exit,
            timeout=request.timeout_seconds + WATCHDOG_GRACE_SECONDS,
        )
        handle = RequestHandle(process=process, completed=finished)
        return handle


__all__ = [
    "WATCHDOG_GRACE_SECONDS",
    "HttpClient",
    "RequestHandle",
    "ResponseCallback",
    "build_command",
    "parse_response",
    "resolve_outcome",
]
