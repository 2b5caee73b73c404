"""Shared fixtures for repofs tests.

- make_content_api: builds an in-memory ContentAPI from a nested dict
- sample_tree: a small repository used by most provider tests
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from repofs.kernel.config.loader import clear_config_cache
from repofs.kernel.domain.vfs import RemoteItem
from repofs.kernel.exceptions import RemoteUnavailableError

RAW_BASE = "https://raw.example.com/owner/repo/main"
NOT_FOUND_BODY = '{"message": "Not Found"}'

# bytes -> file, dict -> directory, None -> file without a download locator
TreeSpec = dict[str, Any]


def _key(path: str) -> str:
    return "/" + path.strip("/")


def _item(kind: str, name: str, path: str, url: str | None = None) -> dict[str, Any]:
    return {"type": kind, "name": name, "path": path, "download_url": url}


class FakeContentAPI:
    """ContentAPI serving listings and file bodies from memory.

    Records every call. ``gate`` (when set) blocks every call until the
    event is set, which lets tests pile up concurrent requests.
    """

    def __init__(self, tree: TreeSpec | None = None) -> None:
        self.listings: dict[str, list[dict[str, Any]]] = {}
        self.files: dict[str, bytes] = {}
        self.list_calls: list[str] = []
        self.fetch_calls: list[str] = []
        self.list_errors: dict[str, str] = {}
        self.fetch_errors: dict[str, str] = {}
        self.gate: asyncio.Event | None = None
        self.closed = False
        self._add_directory("", tree or {})

    def _add_directory(self, path: str, children: TreeSpec) -> None:
        items: list[dict[str, Any]] = []
        for name, value in children.items():
            child_path = f"{path}/{name}" if path else name
            match value:
                case dict():
                    items.append(_item("dir", name, child_path))
                    self._add_directory(child_path, value)
                case None:
                    items.append(_item("submodule", name, child_path))
                case bytes():
                    url = f"{RAW_BASE}/{child_path}"
                    self.files[url] = value
                    items.append(_item("file", name, child_path, url))
        self.listings[_key(path)] = items

    def url_for(self, path: str) -> str:
        return f"{RAW_BASE}/{path.strip('/')}"

    async def list_children(self, base_path: str) -> list[RemoteItem]:
        self.list_calls.append(base_path)
        if self.gate is not None:
            await self.gate.wait()
        key = _key(base_path)
        if key in self.list_errors:
            raise RemoteUnavailableError(self.list_errors[key], status_code=500)
        if key not in self.listings:
            raise RemoteUnavailableError(NOT_FOUND_BODY, status_code=404)
        return [RemoteItem.model_validate(item) for item in self.listings[key]]

    async def fetch_content(self, download_url: str) -> bytes:
        self.fetch_calls.append(download_url)
        if self.gate is not None:
            await self.gate.wait()
        if download_url in self.fetch_errors:
            raise RemoteUnavailableError(self.fetch_errors[download_url], status_code=500)
        if download_url not in self.files:
            raise RemoteUnavailableError("404: Not Found", status_code=404)
        return self.files[download_url]

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def sample_tree() -> TreeSpec:
    return {
        "README.md": b"# repo\n",
        "empty.txt": b"",
        "src": {
            "main.py": b"print('hi')\n",
            "pkg": {"mod.py": b"x = 1\n"},
        },
        "docs": {},
        "vendor-lib": None,
    }


@pytest.fixture()
def make_content_api() -> Callable[[TreeSpec | None], FakeContentAPI]:
    return FakeContentAPI


@pytest.fixture()
def content_api(sample_tree: TreeSpec) -> FakeContentAPI:
    return FakeContentAPI(sample_tree)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep REPOFS_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("REPOFS_"):
            monkeypatch.delenv(name)
    clear_config_cache()
    yield
    clear_config_cache()
