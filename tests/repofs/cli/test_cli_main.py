"""Tests for the repofs CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from repofs.cli.main import EXIT_NOT_FOUND, EXIT_REMOTE_ERROR, app

REPO = "https://github.com/owner/repo"

runner = CliRunner()


@pytest.fixture()
def fake_api(content_api, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Route every session opened by the CLI to the in-memory content API."""
    monkeypatch.chdir(tmp_path)
    opened: list[str] = []

    def factory(api_base: str, **_kwargs):
        opened.append(api_base)
        return content_api

    monkeypatch.setattr("repofs.api.session.GitHubContentAPI", factory)
    content_api.opened = opened
    return content_api


class TestLs:
    def test_lists_root(self, fake_api) -> None:
        result = runner.invoke(app, ["ls", REPO])

        assert result.exit_code == 0, result.output
        assert "README.md" in result.output
        assert "src/" in result.output
        assert fake_api.opened == ["https://api.github.com/repos/owner/repo"]
        assert fake_api.closed

    def test_lists_nested_directory_as_json(self, fake_api) -> None:
        result = runner.invoke(app, ["--json", "ls", REPO, "src"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == [
            {"name": "main.py", "type": "file", "path": "/src/main.py"},
            {"name": "pkg", "type": "directory", "path": "/src/pkg"},
        ]

    def test_missing_directory_exits_not_found(self, fake_api) -> None:
        result = runner.invoke(app, ["ls", REPO, "/nope"])
        assert result.exit_code == EXIT_NOT_FOUND

    def test_remote_failure_is_reported(self, fake_api) -> None:
        fake_api.list_errors["/"] = "API rate limit exceeded"

        result = runner.invoke(app, ["ls", REPO])

        assert result.exit_code == EXIT_REMOTE_ERROR
        assert "API rate limit exceeded" in result.output


class TestCat:
    def test_prints_content(self, fake_api) -> None:
        result = runner.invoke(app, ["cat", REPO, "/src/pkg/mod.py"])

        assert result.exit_code == 0, result.output
        assert result.output == "x = 1\n"

    def test_directory_exits_not_found(self, fake_api) -> None:
        result = runner.invoke(app, ["cat", REPO, "/src"])
        assert result.exit_code == EXIT_NOT_FOUND

    def test_download_failure(self, fake_api) -> None:
        fake_api.fetch_errors[fake_api.url_for("README.md")] = "502 Bad Gateway"

        result = runner.invoke(app, ["cat", REPO, "README.md"])

        assert result.exit_code == EXIT_REMOTE_ERROR
        assert "502 Bad Gateway" in result.output


class TestStat:
    def test_json(self, fake_api) -> None:
        result = runner.invoke(app, ["--json", "stat", REPO, "/docs"])

        assert result.exit_code == 0, result.output
        info = json.loads(result.output)
        assert info["path"] == "/docs"
        assert info["type"] == "directory"

    def test_table(self, fake_api) -> None:
        result = runner.invoke(app, ["stat", REPO, "/README.md"])

        assert result.exit_code == 0, result.output
        assert "/README.md" in result.output
        assert "file" in result.output


class TestTree:
    def test_default_depth(self, fake_api) -> None:
        result = runner.invoke(app, ["tree", REPO])

        assert result.exit_code == 0, result.output
        assert "main.py" in result.output
        assert "pkg/" in result.output
        assert "mod.py" not in result.output

    def test_depth_one_as_json(self, fake_api) -> None:
        result = runner.invoke(app, ["--json", "tree", REPO, "--depth", "1"])

        assert result.exit_code == 0, result.output
        paths = [item["path"] for item in json.loads(result.output)]
        assert paths == ["/README.md", "/empty.txt", "/src", "/docs", "/vendor-lib"]

    def test_depth_must_be_positive(self, fake_api) -> None:
        result = runner.invoke(app, ["tree", REPO, "--depth", "0"])
        assert result.exit_code != 0


class TestConfiguration:
    def test_missing_config_file(self, fake_api) -> None:
        result = runner.invoke(app, ["--config", "missing.toml", "ls", REPO])

        assert result.exit_code == EXIT_REMOTE_ERROR
        assert "not found" in result.output

    def test_scheme_from_config_file(self, fake_api, tmp_path: Path) -> None:
        (tmp_path / "repofs.toml").write_text('[notifier]\ndebounce_ms = 0\n')

        result = runner.invoke(app, ["ls", REPO])

        assert result.exit_code == 0, result.output

    def test_bad_repo_url(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["ls", "owner/repo"])

        assert result.exit_code == EXIT_REMOTE_ERROR
        assert "repo_url" in result.output
