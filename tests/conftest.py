"""Shared test fixtures for apicache.

Provides a controllable millisecond clock, a cache store wired to it, an
in-process transport that records every call, isolated config directories,
and output-state management. These fixtures are discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Union

import pytest

from apicache.cache import CacheStore
from apicache.models import Envelope, RawPayload, classify_body
from apicache.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager keeps references to sys.stdout/sys.stderr from the
    moment it was created. CliRunner swaps those streams, so a manager
    surviving into the next test would write to a closed file.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Detach handlers installed by configure_logging (e.g. via the CLI callback)."""
    yield
    logger = logging.getLogger("apicache")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def _no_cache_opt_out(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure a developer's CLIENT_HTTP_CACHE_DISABLE never leaks into tests."""
    monkeypatch.delenv("CLIENT_HTTP_CACHE_DISABLE", raising=False)


# ---------------------------------------------------------------------------
# Clock and store
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock returning a settable epoch time in milliseconds."""

    def __init__(self, now: float = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CacheStore:
    """A cache store driven by the fake clock."""
    return CacheStore(clock=clock)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class RecordingTransport:
    """In-process transport that returns canned bodies and records calls.

    ``responses`` maps ``(method, url)`` to a decoded body; unknown routes
    answer with ``{"data": None}``. Set ``error`` to make every call raise.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str, Any, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}
        self.error: Exception | None = None

    def respond(self, method: str, url: str, body: Any) -> None:
        self.responses[(method, url)] = body

    def calls_to(self, method: str, url: str) -> int:
        return sum(1 for m, u, _, _ in self.calls if (m, u) == (method, url))

    async def _answer(
        self, method: str, url: str, body: Any, options: dict[str, Any]
    ) -> Union[Envelope, RawPayload]:
        self.calls.append((method, url, body, options))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return classify_body(self.responses.get((method, url), {"data": None}))

    async def get(self, url: str, **options: Any) -> Union[Envelope, RawPayload]:
        return await self._answer("GET", url, None, options)

    async def post(self, url: str, body: Any = None, **options: Any) -> Union[Envelope, RawPayload]:
        return await self._answer("POST", url, body, options)

    async def delete(self, url: str, **options: Any) -> Union[Envelope, RawPayload]:
        return await self._answer("DELETE", url, None, options)

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at ``tmp_path/config``, forces the XDG code
    path, and clears every APICACHE_* variable.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("apicache.config._is_xdg_platform", lambda: True)
    for var in ["APICACHE_BASE_URL", "APICACHE_CACHE_TTL", "APICACHE_TOKEN"]:
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
