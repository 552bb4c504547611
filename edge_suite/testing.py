"""Test doubles for edge_suite: use in host integration tests.

Usage::

    from edge_suite.testing import InMemoryLibraryStore

    store = InMemoryLibraryStore({"jquery-1.7.1.min.js": b"shared"})
    builder = CompositionBuilder(settings, library_store=store)
"""

from __future__ import annotations

from pathlib import PurePosixPath

from edge_suite.build.libraries import LibraryStore


class InMemoryLibraryStore(LibraryStore):
    """Library store that keeps file contents in a dict."""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self.files: dict[str, bytes] = dict(files or {})
        self.writes: list[str] = []

    def contains(self, name: str) -> bool:
        return name in self.files

    def put(self, name: str, data: bytes) -> None:
        self.files[name] = data
        self.writes.append(name)

    def path_for(self, name: str) -> PurePosixPath:
        return PurePosixPath("memory://libraries") / name
