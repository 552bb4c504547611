"""Reconcile runtime libraries shipped in an archive with the shared library store."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path, PurePath

import structlog

from edge_suite.exceptions import LibraryMoveFailedError
from edge_suite.models.composition import FileReport, LibraryEntry
from edge_suite.workspace import ensure_writable_dir

log = structlog.get_logger("edge_suite.libraries")

LIBRARY_EXTENSION = ".js"
_VERSIONED_LIBRARY_RE = re.compile(r"^edge\.(\d+\.\d+\.\d+)(?:\.min)?\.js$")


def library_version(filename: str) -> str | None:
    """Return the runtime version encoded in ``edge.<x.y.z>[.min].js``."""
    match = _VERSIONED_LIBRARY_RE.match(filename)
    return match.group(1) if match else None


class LibraryStore(ABC):
    """Cross-composition library storage.

    Not synchronised: callers running builds concurrently must serialise
    access themselves.
    """

    def prepare(self) -> None:
        """Make the store ready for writes; no-op by default."""

    @abstractmethod
    def contains(self, name: str) -> bool:
        ...

    @abstractmethod
    def put(self, name: str, data: bytes) -> None:
        ...

    @abstractmethod
    def path_for(self, name: str) -> PurePath:
        ...


class DirectoryLibraryStore(LibraryStore):
    """Shared library store backed by a plain directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def prepare(self) -> None:
        ensure_writable_dir(self.root)

    def contains(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def put(self, name: str, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.path_for(name)
        partial = target.with_name(target.name + ".part")
        partial.write_bytes(data)
        partial.replace(target)

    def path_for(self, name: str) -> Path:
        return self.root / name


@dataclass
class ReconcileResult:
    libraries: list[LibraryEntry] = field(default_factory=list)
    report: FileReport = field(default_factory=FileReport)
    runtime_version: str = ""
    failures: list[LibraryMoveFailedError] = field(default_factory=list)


class LibraryReconciler:
    """Move ``*.js`` files from the library subfolder into the shared store.

    Policy:
        overwrite  exists   action             bucket
        True       True     replace in store   updated
        True       False    move into store    added
        False      True     drop incoming      ignored
        False      False    move into store    added
    """

    def __init__(self, store: LibraryStore) -> None:
        self.store = store

    def reconcile(
        self,
        library_dir: Path,
        overwrite: bool = False,
        runtime_version: str = "",
    ) -> ReconcileResult:
        result = ReconcileResult(runtime_version=runtime_version)
        if not library_dir.is_dir():
            log.info("libraries.no_library_dir", path=str(library_dir))
            return result

        files = sorted(
            p for p in library_dir.iterdir()
            if p.is_file() and p.suffix.lower() == LIBRARY_EXTENSION
        )
        for src in files:
            name = src.name
            entry = LibraryEntry(name=name, source_path=src, target_path=self.store.path_for(name))
            exists = self.store.contains(name)
            try:
                if exists and not overwrite:
                    self._discard(src, name)
                    bucket = "ignored"
                else:
                    self._move(src, name)
                    bucket = "updated" if exists else "added"
            except LibraryMoveFailedError as e:
                result.failures.append(e)
                log.warning("libraries.move_failed", name=name, reason=e.reason)
                continue

            result.report.add(bucket, name)
            log.info("libraries.reconciled", name=name, bucket=bucket)
            result.libraries.append(entry)
            if not result.runtime_version:
                version = library_version(name)
                if version:
                    result.runtime_version = version
                    log.info("libraries.runtime_version", version=version, source=name)

        return result

    def _move(self, src: Path, name: str) -> None:
        try:
            self.store.put(name, src.read_bytes())
            src.unlink()
        except OSError as e:
            raise LibraryMoveFailedError(name, str(e)) from e

    @staticmethod
    def _discard(src: Path, name: str) -> None:
        try:
            src.unlink()
        except OSError as e:
            raise LibraryMoveFailedError(name, str(e)) from e
