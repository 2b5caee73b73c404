"""Configuration data models for repofs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from repofs.kernel.domain.uri import DEFAULT_SCHEME
from repofs.kernel.events.batching import DEFAULT_DEBOUNCE_MS
from repofs.kernel.exceptions import ConfigurationError

DEFAULT_TIMEOUT = 30.0

DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/vnd.github+json",
    "User-Agent": "repofs",
}


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for repofs.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.repofs.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export REPOFS_LOG_LEVEL=DEBUG
    export REPOFS_LOG_FORMAT=rich
    export REPOFS_LOG_FILE=/var/log/repofs.log
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True


@dataclass(frozen=True, slots=True)
class RemoteConfig:
    """HTTP settings for the content API.

    Attributes
    ----------
    timeout : float
        Per-request timeout in seconds.
    headers : dict[str, str]
        Headers sent with every request.
    """

    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError("remote.timeout", f"must be positive, got {self.timeout}")


@dataclass(frozen=True, slots=True)
class NotifierConfig:
    """Change notification settings.

    Attributes
    ----------
    debounce_ms : float
        Quiet period before a batch of change events is delivered.
    """

    debounce_ms: float = DEFAULT_DEBOUNCE_MS

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            raise ConfigurationError(
                "notifier.debounce_ms", f"must not be negative, got {self.debounce_ms}"
            )


@dataclass(slots=True)
class RepoFSConfig:
    """Complete repofs configuration.

    Attributes
    ----------
    repo_url : str | None
        Repository web URL; the content API base is derived from it once.
    scheme : str
        Virtual URI scheme served by the provider.
    remote : RemoteConfig
        HTTP settings
    notifier : NotifierConfig
        Change notification settings
    logging : LoggingConfig
        Logging configuration

    Examples
    --------
    TOML configuration in pyproject.toml:

    ```toml
    [tool.repofs]
    repo_url = "https://github.com/owner/repo"
    scheme = "gpfs"

    [tool.repofs.remote]
    timeout = 10.0

    [tool.repofs.notifier]
    debounce_ms = 5
    ```
    """

    repo_url: str | None = None
    scheme: str = DEFAULT_SCHEME
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    notifier: NotifierConfig = field(default_factory=NotifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


__all__ = [
    "DEFAULT_HEADERS",
    "DEFAULT_TIMEOUT",
    "LoggingConfig",
    "NotifierConfig",
    "RemoteConfig",
    "RepoFSConfig",
]
