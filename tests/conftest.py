"""Shared test fixtures for twenty_cli.

Provides isolated config environments, output-state management, a CLI
runner and a fake Twenty API served through :class:`httpx.MockTransport`.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from twenty_cli.output import reset_output
from twenty_cli.runtime import Runtime


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager binds its Rich console to sys.stderr at creation
    time. When Typer's CliRunner redirects the streams during a test the
    cached reference goes stale once the test ends, so a fresh manager is
    forced on next use.
    """
    reset_output()
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config or stored tokens, and
    clears every TWENTY_* environment variable.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("twenty_cli.config._is_xdg_platform", lambda: True)

    for var in [
        "TWENTY_TOKEN",
        "TWENTY_PROFILE",
        "TWENTY_BASE_URL",
        "TWENTY_OUTPUT",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeAPI:
    """Scripted Twenty API for :class:`httpx.MockTransport`.

    Routes are keyed by ``(METHOD, path)``. Each route holds a queue of
    replies; the last reply is repeated once the queue is drained. Every
    request is recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Reply]] = {}

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        status: int = 200,
        headers: Optional[dict[str, str]] = None,
        reply: Optional[Reply] = None,
    ) -> FakeAPI:
        if reply is None:
            reply = httpx.Response(status, json=json_body, headers=headers)
        self._routes.setdefault((method.upper(), path), []).append(reply)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": f"no route {request.url.path}"})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(reply):
            return reply(request)
        return reply

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def runtime(self, **kwargs: Any) -> Runtime:
        """A runtime with a token whose HTTP calls land on this fake."""
        kwargs.setdefault("token", "test-token")
        kwargs.setdefault("no_retry", True)
        return Runtime(transport=self.transport, **kwargs)

    def bodies(self) -> list[Any]:
        return [json.loads(request.content) if request.content else None for request in self.requests]


@pytest.fixture
def fake_api() -> FakeAPI:
    """An empty :class:`FakeAPI`; tests register their routes."""
    return FakeAPI()
