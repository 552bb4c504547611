"""Workspace management: writable roots, per-run temp dir, archive extraction.

Also hosts the small filesystem helpers the build phases share.
"""

from __future__ import annotations

import os
import re
import shutil
import time
import uuid
import zipfile
from pathlib import Path

import structlog

from edge_suite.exceptions import (
    ArchiveNotFoundError,
    ConfigurationError,
    ExtractionFailedError,
    FileReadError,
    FileWriteError,
)

log = structlog.get_logger("edge_suite.workspace")


def ensure_writable_dir(path: Path) -> Path:
    """Create ``path`` if needed and check it is writable."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Directory '{path}' could not be created: {e}") from e
    if not path.is_dir() or not os.access(path, os.W_OK):
        raise ConfigurationError(f"Directory '{path}' is not writable.")
    return path


def clear_dir(path: Path) -> None:
    """Remove everything inside ``path`` but keep the directory itself."""
    if not path.is_dir():
        return
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def find_files(root: Path, pattern: str | re.Pattern[str]) -> list[Path]:
    """Recursively list files under ``root`` whose name matches ``pattern``.

    Results are ordered shallowest first, then by path, so "first match"
    decisions do not depend on the filesystem's listing order.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    matches = [p for p in root.rglob("*") if p.is_file() and regex.search(p.name)]
    return sorted(matches, key=lambda p: (len(p.relative_to(root).parts), p.as_posix()))


def move_file(src: Path, dst: Path) -> None:
    """Move a single file, replacing ``dst`` if it exists."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    if dst.exists():
        dst.unlink()
    shutil.move(str(src), str(dst))


def read_script(path: Path) -> str:
    """Read generated script or markup text.

    Bytes that are not valid UTF-8 are carried as surrogates and line endings
    are kept as is, so ``write_script`` reproduces untouched regions exactly.
    """
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read()
    except OSError as e:
        raise FileReadError(str(path), str(e)) from e


def write_script(path: Path, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(content)
    except OSError as e:
        raise FileWriteError(str(path), str(e)) from e


class WorkspaceManager:
    """Own the writable roots and the per-run temporary extraction directory.

    Use as a context manager so the temporary directory is removed on every
    exit path::

        with WorkspaceManager(base_dir, project_dir) as ws:
            ws.extract(archive, ws.tmp_dir)
    """

    def __init__(self, base_dir: Path, project_dir: Path) -> None:
        self.base_dir = Path(base_dir)
        self.project_dir = Path(project_dir)
        self.tmp_dir: Path | None = None

    def prepare(self) -> Path:
        """Guarantee both roots are writable and create the per-run temp dir."""
        ensure_writable_dir(self.base_dir)
        ensure_writable_dir(self.project_dir)
        tmp_root = ensure_writable_dir(self.base_dir / "tmp")
        suffix = f"{time.strftime('%Y%m%d%H%M%S')}_{uuid.uuid4().hex[:8]}"
        self.tmp_dir = ensure_writable_dir(tmp_root / f"build_{suffix}")
        log.debug("workspace.prepared", tmp_dir=str(self.tmp_dir))
        return self.tmp_dir

    def extract(self, archive: Path, destination: Path) -> Path:
        """Unpack ``archive`` into a clean ``destination``."""
        archive = Path(archive)
        if not archive.is_file():
            raise ArchiveNotFoundError(str(archive))

        destination.mkdir(parents=True, exist_ok=True)
        clear_dir(destination)
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(destination)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, RuntimeError) as e:
            raise ExtractionFailedError(str(archive), str(e)) from e

        log.info("workspace.extracted", archive=archive.name, destination=str(destination))
        return destination

    def cleanup(self) -> None:
        """Remove the temp dir; safe to call more than once or after a partial failure."""
        if self.tmp_dir is None:
            return
        shutil.rmtree(self.tmp_dir, ignore_errors=True)
        log.debug("workspace.cleaned", tmp_dir=str(self.tmp_dir))
        self.tmp_dir = None

    def __enter__(self) -> WorkspaceManager:
        self.prepare()
        return self

    def __exit__(self, *exc_info: object) -> None:
        try:
            self.cleanup()
        except Exception:
            log.debug("workspace.cleanup_failed", exc_info=True)
