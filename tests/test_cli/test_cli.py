"""Integration tests for the apicache CLI, backed by httpx.MockTransport."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from apicache.app import app
from apicache.client import HttpxTransport
from apicache.config import load_settings


BASE = "https://api.example.com"


@pytest.fixture()
def requests_seen(monkeypatch: pytest.MonkeyPatch) -> list[httpx.Request]:
    """Route the CLI's transport through a MockTransport and record requests."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/missing/upload":
            return httpx.Response(404, json={"message": "no such thing"})
        if request.method == "POST":
            return httpx.Response(201, json={"data": {"id": 7}})
        return httpx.Response(200, json={"data": [{"id": 1, "label": "cat"}]})

    def factory(**kwargs):
        return HttpxTransport(http_transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr("apicache.commands.uploads.HttpxTransport", factory)
    return seen


class TestUploads:
    def test_list(self, cli_runner, isolated_config: Path, requests_seen) -> None:
        result = cli_runner.invoke(
            app, ["--base-url", BASE, "--json", "uploads", "list", "--page", "2"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [{"id": 1, "label": "cat"}]
        assert str(requests_seen[0].url) == f"{BASE}/upload?page=2"

    def test_list_renders_a_table(self, cli_runner, isolated_config: Path, requests_seen) -> None:
        result = cli_runner.invoke(app, ["--base-url", BASE, "--plain", "uploads", "list"])
        assert result.exit_code == 0, result.output
        assert result.stdout == "id\tlabel\n1\tcat\n"

    def test_create_sends_token(self, cli_runner, isolated_config: Path, requests_seen) -> None:
        result = cli_runner.invoke(
            app,
            ["--base-url", BASE, "--token", "tok", "--json", "uploads", "create", "cat", "https://x/cat.png"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"id": 7}
        request = requests_seen[0]
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {"label": "cat", "photoUrl": "https://x/cat.png"}

    def test_delete(self, cli_runner, isolated_config: Path, requests_seen) -> None:
        result = cli_runner.invoke(app, ["--base-url", BASE, "--json", "uploads", "delete", "9"])
        assert result.exit_code == 0, result.output
        assert requests_seen[0].method == "DELETE"
        assert str(requests_seen[0].url) == f"{BASE}/upload?id=9"

    def test_base_url_from_env(self, cli_runner, isolated_config: Path, requests_seen, monkeypatch) -> None:
        monkeypatch.setenv("APICACHE_BASE_URL", BASE)
        result = cli_runner.invoke(app, ["--json", "uploads", "list"])
        assert result.exit_code == 0, result.output
        assert str(requests_seen[0].url) == f"{BASE}/upload"

    def test_missing_base_url(self, cli_runner, isolated_config: Path, requests_seen) -> None:
        result = cli_runner.invoke(app, ["uploads", "list"])
        assert result.exit_code == 2
        assert requests_seen == []

    def test_http_error_maps_to_exit_code(self, cli_runner, isolated_config: Path, requests_seen) -> None:
        result = cli_runner.invoke(app, ["--base-url", f"{BASE}/missing", "uploads", "list"])
        assert result.exit_code == 4


class TestConfigCommands:
    def test_set_and_show(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "base_url", BASE])
        assert result.exit_code == 0, result.output
        assert load_settings().base_url == BASE

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["base_url"] == BASE

    def test_set_coerces_types(self, cli_runner, isolated_config: Path) -> None:
        assert cli_runner.invoke(app, ["config", "set", "cache.disabled", "true"]).exit_code == 0
        assert cli_runner.invoke(app, ["config", "set", "request.timeout", "10"]).exit_code == 0
        assert cli_runner.invoke(app, ["config", "set", "cache.default_ttl", "5m"]).exit_code == 0
        settings = load_settings()
        assert settings.cache.disabled is True
        assert settings.request.timeout == 10
        assert settings.cache.default_ttl == "5m"

    def test_set_rejects_unknown_key(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "nope", "1"])
        assert result.exit_code == 2

    def test_set_rejects_bad_integer(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "request.timeout", "soon"])
        assert result.exit_code == 2

    def test_set_rejects_bad_format(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "output.format", "xml"])
        assert result.exit_code == 2


def test_version(cli_runner) -> None:
    from apicache import __version__

    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout
