"""Relocate composition assets into the final project directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import structlog

from edge_suite.config import BuilderSettings
from edge_suite.models.composition import FileReport
from edge_suite.workspace import move_file

log = structlog.get_logger("edge_suite.assets")

OBSOLETE_SUFFIXES = (".edge", ".html")


@dataclass
class RelocationResult:
    moved: list[str] = field(default_factory=list)  # paths relative to the work dir
    excluded: list[str] = field(default_factory=list)


class AssetRelocator:
    """Move allow-listed files from the work dir to the destination, keeping layout."""

    def __init__(self, settings: BuilderSettings) -> None:
        self.settings = settings

    def _is_excluded(self, rel_dir: PurePosixPath) -> bool:
        prefix = self.settings.excluded_prefix
        return bool(prefix) and str(rel_dir).startswith(prefix)

    def relocate(self, work_dir: Path, destination: Path) -> RelocationResult:
        result = RelocationResult()
        files = sorted(p for p in work_dir.rglob("*") if p.is_file())
        for src in files:
            if not self.settings.is_allowed_asset(src.name):
                continue
            rel = PurePosixPath(src.relative_to(work_dir).as_posix())
            if self._is_excluded(rel.parent):
                result.excluded.append(str(rel))
                continue
            target = destination.joinpath(*rel.parts)
            move_file(src, target)
            result.moved.append(str(rel))

        log.info(
            "assets.relocated",
            moved=len(result.moved),
            excluded=len(result.excluded),
            destination=str(destination),
        )
        return result


def collect_leftovers(
    root: Path, project_name: str, skip: set[Path] | None = None
) -> FileReport:
    """Classify files still in the extraction tree as obsolete or ignored.

    ``<project>.edge`` and ``<project>.html`` are obsolete authoring
    companions; anything else was not relocated and is reported as ignored.
    Paths in ``skip`` (deliberately excluded assets) are not reported.
    """
    report = FileReport()
    obsolete = {f"{project_name}{suffix}" for suffix in OBSOLETE_SUFFIXES}
    files = sorted(p for p in root.rglob("*") if p.is_file())
    for path in files:
        if skip and path in skip:
            continue
        rel = path.relative_to(root).as_posix()
        if path.name in obsolete:
            report.add("obsolete", rel)
        else:
            report.add("ignored", rel)
    return report
