"""Scheme-based registration of file-system providers.

A host keeps one :class:`FileSystemRegistry` and dispatches each
``scheme:/path`` URI to the provider registered for that scheme.

Example
-------
.. code-block:: python

    registry = FileSystemRegistry()
    handle = registry.register("gpfs", provider)

    provider = registry.provider_for("gpfs:/src/main.py")
    handle.dispose()  # unregister
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from repofs.kernel.domain.disposable import Disposable
from repofs.kernel.domain.uri import VirtualUri
from repofs.kernel.exceptions import EntryNotFoundError
from repofs.kernel.logging import get_logger

if TYPE_CHECKING:
    from repofs.kernel.ports.vfs import FileSystemProvider

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Registration:
    """One registered provider."""

    scheme: str
    provider: FileSystemProvider
    is_readonly: bool = True


class FileSystemRegistry:
    """Routes URIs to providers by scheme."""

    def __init__(self) -> None:
        self._registrations: dict[str, Registration] = {}

    def register(
        self, scheme: str, provider: FileSystemProvider, *, is_readonly: bool = True
    ) -> Disposable:
        """Register ``provider`` for ``scheme``.

        Args
        ----
            scheme: URI scheme without the trailing ``:`` (e.g. ``gpfs``).
            provider: The provider to handle URIs with this scheme.
            is_readonly: Advertised to hosts; repository mirrors are read-only.

        Returns
        -------
            Handle that unregisters the provider when disposed.

        Raises
        ------
        ValueError
            If the scheme is malformed or already registered.
        """
        if not scheme or ":" in scheme or "/" in scheme:
            msg = f"Invalid scheme: {scheme!r}"
            raise ValueError(msg)
        if scheme in self._registrations:
            msg = f"A provider is already registered for scheme {scheme!r}"
            raise ValueError(msg)

        registration = Registration(scheme=scheme, provider=provider, is_readonly=is_readonly)
        self._registrations[scheme] = registration
        logger.debug(
            "Registered file system provider for {scheme}: {provider}",
            scheme=scheme,
            provider=type(provider).__name__,
        )

        def unregister() -> None:
            if self._registrations.get(scheme) is registration:
                del self._registrations[scheme]
                logger.debug("Unregistered file system provider for {scheme}", scheme=scheme)

        return Disposable(unregister)

    def schemes(self) -> list[str]:
        """Registered schemes, sorted."""
        return sorted(self._registrations)

    def is_readonly(self, scheme: str) -> bool:
        return self._registration(scheme).is_readonly

    def provider_for(self, uri: str | VirtualUri) -> FileSystemProvider:
        """Find the provider for ``uri``.

        Raises
        ------
        EntryNotFoundError
            If no provider is registered for the URI's scheme.
        """
        scheme = VirtualUri.parse(uri, default_scheme="").scheme
        return self._registration(scheme, uri).provider

    def _registration(self, scheme: str, uri: object | None = None) -> Registration:
        registration = self._registrations.get(scheme)
        if registration is None:
            available = self.schemes()
            raise EntryNotFoundError(
                uri if uri is not None else f"{scheme}:",
                f"no provider registered for scheme {scheme!r}. Available: {available}",
            )
        return registration


__all__ = ["FileSystemRegistry", "Registration"]
