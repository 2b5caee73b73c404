"""Shared entry points for embedding hosts and the CLI.

Available submodules
--------------------
- session: Open a provider for a repository URL
- browse: Path-based list/stat/read/walk helpers
"""

from repofs.api import browse, session

__all__ = ["browse", "session"]
