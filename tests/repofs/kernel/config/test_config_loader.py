"""Tests for TOML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from repofs.kernel.config.loader import ConfigLoader, clear_config_cache, load_config
from repofs.kernel.config.models import DEFAULT_HEADERS, NotifierConfig, RemoteConfig, RepoFSConfig
from repofs.kernel.exceptions import ConfigurationError


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


class TestDefaults:
    def test_no_file_gives_defaults(self, workdir: Path) -> None:
        config = load_config()

        assert config.repo_url is None
        assert config.scheme == "gpfs"
        assert config.remote.timeout == 30.0
        assert config.remote.headers == DEFAULT_HEADERS
        assert config.notifier.debounce_ms == 5.0
        assert config.logging.level == "WARNING"

    def test_explicit_missing_file_raises(self, workdir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(workdir / "missing.toml")

    def test_env_overrides_apply_without_a_file(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REPOFS_REPO_URL", "https://github.com/o/r")
        monkeypatch.setenv("REPOFS_DEBOUNCE_MS", "20")

        config = load_config()

        assert config.repo_url == "https://github.com/o/r"
        assert config.notifier.debounce_ms == 20.0


class TestTomlFiles:
    def test_flat_repofs_toml(self, workdir: Path) -> None:
        write(
            workdir / "repofs.toml",
            """
repo_url = "https://github.com/owner/repo"
scheme = "repo"

[remote]
timeout = 5
headers = { "User-Agent" = "custom" }

[notifier]
debounce_ms = 10

[logging]
level = "debug"
format = "rich"
""",
        )

        config = load_config()

        assert config.repo_url == "https://github.com/owner/repo"
        assert config.scheme == "repo"
        assert config.remote.timeout == 5.0
        assert config.remote.headers["User-Agent"] == "custom"
        assert config.remote.headers["Accept"] == DEFAULT_HEADERS["Accept"]
        assert config.notifier.debounce_ms == 10.0
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "rich"

    def test_pyproject_tool_section(self, workdir: Path) -> None:
        write(
            workdir / "pyproject.toml",
            """
[project]
name = "demo"

[tool.repofs]
repo_url = "https://github.com/a/b"
""",
        )

        assert load_config().repo_url == "https://github.com/a/b"

    def test_pyproject_without_section_gives_defaults(self, workdir: Path) -> None:
        write(workdir / "pyproject.toml", '[project]\nname = "demo"\n')

        assert load_config() == RepoFSConfig()

    def test_repofs_toml_wins_over_pyproject(self, workdir: Path) -> None:
        write(workdir / "repofs.toml", 'scheme = "first"\n')
        write(workdir / "pyproject.toml", '[tool.repofs]\nscheme = "second"\n')

        assert load_config().scheme == "first"

    def test_config_path_env(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        other = write(workdir / "elsewhere.toml", 'scheme = "fromenv"\n')
        write(workdir / "repofs.toml", 'scheme = "local"\n')
        monkeypatch.setenv("REPOFS_CONFIG_PATH", str(other))

        assert load_config().scheme == "fromenv"

    def test_env_var_substitution(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPO_OWNER", "someone")
        write(workdir / "repofs.toml", 'repo_url = "https://github.com/${REPO_OWNER}/r"\n')

        assert load_config().repo_url == "https://github.com/someone/r"

    def test_unknown_env_var_keeps_placeholder(self, workdir: Path) -> None:
        write(workdir / "repofs.toml", 'repo_url = "https://github.com/${NOT_SET_ANYWHERE}/r"\n')

        assert load_config().repo_url == "https://github.com/${NOT_SET_ANYWHERE}/r"

    def test_results_are_cached_until_cleared(self, workdir: Path) -> None:
        path = write(workdir / "repofs.toml", 'scheme = "one"\n')
        assert load_config().scheme == "one"

        path.write_text('scheme = "two"\n')
        assert load_config().scheme == "one"

        clear_config_cache()
        assert load_config().scheme == "two"


class TestEnvironmentOverrides:
    def test_env_wins_over_file(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write(
            workdir / "repofs.toml",
            'repo_url = "https://github.com/file/r"\n[remote]\ntimeout = 5\n',
        )
        monkeypatch.setenv("REPOFS_REPO_URL", "https://github.com/env/r")
        monkeypatch.setenv("REPOFS_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("REPOFS_SCHEME", "envscheme")

        config = load_config()

        assert config.repo_url == "https://github.com/env/r"
        assert config.remote.timeout == 2.5
        assert config.scheme == "envscheme"

    def test_logging_env(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPOFS_LOG_LEVEL", "error")
        monkeypatch.setenv("REPOFS_LOG_FORMAT", "JSON")
        monkeypatch.setenv("REPOFS_LOG_FILE", "/tmp/repofs.log")
        monkeypatch.setenv("REPOFS_LOG_COLOR", "off")

        logging_config = load_config().logging

        assert logging_config.level == "ERROR"
        assert logging_config.format == "json"
        assert logging_config.output_file == "/tmp/repofs.log"
        assert logging_config.use_color is False

    def test_invalid_color_value_is_ignored(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REPOFS_LOG_COLOR", "maybe")
        assert load_config().logging.use_color is True

    def test_invalid_timeout_raises(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPOFS_HTTP_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="remote.timeout"):
            load_config()

    def test_unknown_log_level_raises(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPOFS_LOG_LEVEL", "loud")
        with pytest.raises(ConfigurationError, match="logging.level"):
            load_config()


class TestModels:
    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ConfigurationError):
            RemoteConfig(timeout=0)

    def test_debounce_must_not_be_negative(self) -> None:
        with pytest.raises(ConfigurationError):
            NotifierConfig(debounce_ms=-1)

    def test_loader_substitutes_nested_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN_HEADER", "abc")
        data = {"remote": {"headers": {"X-Token": "${TOKEN_HEADER}"}}, "list": ["${TOKEN_HEADER}"]}

        result = ConfigLoader()._substitute_env_vars(data)

        assert result == {"remote": {"headers": {"X-Token": "abc"}}, "list": ["abc"]}
