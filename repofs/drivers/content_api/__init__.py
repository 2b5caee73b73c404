"""Content API drivers."""

from repofs.drivers.content_api.github import GitHubContentAPI

__all__ = ["GitHubContentAPI"]
