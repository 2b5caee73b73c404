"""TOML configuration loader for repofs."""

from __future__ import annotations

import os
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, cast

from repofs.kernel.config.models import (
    DEFAULT_HEADERS,
    DEFAULT_TIMEOUT,
    LoggingConfig,
    NotifierConfig,
    RemoteConfig,
    RepoFSConfig,
)
from repofs.kernel.domain.uri import DEFAULT_SCHEME
from repofs.kernel.events.batching import DEFAULT_DEBOUNCE_MS
from repofs.kernel.exceptions import ConfigurationError
from repofs.kernel.logging import get_logger

CONFIG_PATH_ENV = "REPOFS_CONFIG_PATH"
SEARCH_PATHS = ("repofs.toml", "pyproject.toml", ".repofs.toml")

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


def _parse_float(component: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(component, f"expected a number, got {value!r}") from e


class ConfigLoader:
    """Loads repofs configuration from TOML files and the environment."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_from_toml(self, path: str | Path | None = None) -> RepoFSConfig:
        """Load configuration from a TOML file.

        Parameters
        ----------
        path : str | Path | None
            Path to a TOML file. If None, searches the usual locations.

        Raises
        ------
        FileNotFoundError
            If ``path`` is given but missing, or no file is found by the search.
        """
        config_path = self._find_config_file(path)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _load_and_parse(self, config_path: Path) -> RepoFSConfig:
        logger.info("Loading configuration from {path}", path=config_path)

        with config_path.open("rb") as f:
            data = tomllib.load(f)

        section = data.get("tool", {}).get("repofs")
        if section is None:
            if config_path.name == "pyproject.toml":
                logger.debug("No [tool.repofs] section in {path}, using defaults", path=config_path)
                section = {}
            else:
                # flat repofs.toml
                section = data

        return self._parse_config(self._substitute_env_vars(section))

    def _find_config_file(self, path: str | Path | None) -> Path:
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv(CONFIG_PATH_ENV):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug(
                    "Using config from {var}: {path}", var=CONFIG_PATH_ENV, path=config_path
                )
                return config_path
            logger.warning(
                "{var} set but file not found: {path}", var=CONFIG_PATH_ENV, path=config_path
            )

        for name in SEARCH_PATHS:
            candidate = Path(name)
            if candidate.exists():
                return candidate

        raise FileNotFoundError(
            f"No configuration file found. Searched for: {', '.join(SEARCH_PATHS)}"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders; unknown variables are kept."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                value = os.environ.get(match.group(1))
                if value is None:
                    logger.debug(
                        "Environment variable {name} not set, keeping placeholder",
                        name=match.group(1),
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> RepoFSConfig:
        """Build a :class:`RepoFSConfig`, applying environment overrides on top of ``data``."""
        repo_url = os.getenv("REPOFS_REPO_URL") or data.get("repo_url")
        scheme = os.getenv("REPOFS_SCHEME") or data.get("scheme") or DEFAULT_SCHEME

        return RepoFSConfig(
            repo_url=repo_url,
            scheme=scheme,
            remote=self._parse_remote_config(data.get("remote", {})),
            notifier=self._parse_notifier_config(data.get("notifier", {})),
            logging=self._parse_logging_config(data.get("logging", {})),
        )

    def _parse_remote_config(self, remote_data: dict[str, Any]) -> RemoteConfig:
        timeout = remote_data.get("timeout", DEFAULT_TIMEOUT)
        if env_timeout := os.getenv("REPOFS_HTTP_TIMEOUT"):
            timeout = env_timeout
            logger.debug("Overriding HTTP timeout from env: {timeout}", timeout=timeout)

        headers = dict(DEFAULT_HEADERS)
        headers.update({str(k): str(v) for k, v in remote_data.get("headers", {}).items()})
        return RemoteConfig(timeout=_parse_float("remote.timeout", timeout), headers=headers)

    def _parse_notifier_config(self, notifier_data: dict[str, Any]) -> NotifierConfig:
        debounce_ms = notifier_data.get("debounce_ms", DEFAULT_DEBOUNCE_MS)
        if env_debounce := os.getenv("REPOFS_DEBOUNCE_MS"):
            debounce_ms = env_debounce
            logger.debug("Overriding debounce from env: {ms}ms", ms=debounce_ms)
        return NotifierConfig(debounce_ms=_parse_float("notifier.debounce_ms", debounce_ms))

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over TOML configuration:
        - REPOFS_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - REPOFS_LOG_FORMAT: Output format (console, json, structured, rich)
        - REPOFS_LOG_FILE: Optional file path for log output
        - REPOFS_LOG_COLOR: Use color output (true/false)
        """
        level = str(logging_data.get("level", "WARNING")).upper()
        format_type = str(logging_data.get("format", "structured")).lower()
        output_file = logging_data.get("output_file")
        use_color = logging_data.get("use_color", True)

        if env_level := os.getenv("REPOFS_LOG_LEVEL"):
            level = env_level.upper()

        if env_format := os.getenv("REPOFS_LOG_FORMAT"):
            format_type = env_format.lower()

        if env_file := os.getenv("REPOFS_LOG_FILE"):
            output_file = env_file

        if env_color := os.getenv("REPOFS_LOG_COLOR"):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning("Invalid REPOFS_LOG_COLOR value: {error}", error=e)

        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError("logging.level", f"unknown level {level!r}")
        if format_type not in ("console", "json", "structured", "rich"):
            raise ConfigurationError("logging.format", f"unknown format {format_type!r}")

        return LoggingConfig(
            level=cast("Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']", level),
            format=cast("Literal['console', 'json', 'structured', 'rich']", format_type),
            output_file=output_file,
            use_color=bool(use_color),
        )


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> RepoFSConfig:
    return ConfigLoader()._load_and_parse(Path(path_str))


def load_config(path: str | Path | None = None) -> RepoFSConfig:
    """Load configuration from a TOML file or return defaults.

    Parameters
    ----------
    path : str | Path | None
        Path to configuration file or None to search

    Returns
    -------
    RepoFSConfig
        Loaded configuration, or defaults (with environment overrides) if no
        file was found
    """
    loader = ConfigLoader()
    try:
        return loader.load_from_toml(path)
    except FileNotFoundError:
        if path:
            raise
        logger.debug("No configuration file found, using defaults")
        return loader._parse_config({})


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when configuration files have been modified
    and you need to force a reload.
    """
    _load_and_parse_cached.cache_clear()


def get_default_config() -> RepoFSConfig:
    """Configuration with every setting at its default."""
    return RepoFSConfig()


__all__ = [
    "ConfigLoader",
    "clear_config_cache",
    "get_default_config",
    "load_config",
]
