"""Configuration loading for repofs."""

from repofs.kernel.config.loader import clear_config_cache, get_default_config, load_config
from repofs.kernel.config.models import LoggingConfig, NotifierConfig, RemoteConfig, RepoFSConfig

__all__ = [
    "LoggingConfig",
    "NotifierConfig",
    "RemoteConfig",
    "RepoFSConfig",
    "clear_config_cache",
    "get_default_config",
    "load_config",
]
