"""Locate the composition's entry script inside an extracted archive."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from edge_suite.exceptions import InvalidProjectNameError, NoEntryScriptError
from edge_suite.workspace import find_files

log = structlog.get_logger("edge_suite.build")

ENTRY_SUFFIX = "_edge.js"
PRELOADER_SUFFIX = "_edgePreload.js"

ENTRY_SCRIPT_RE = re.compile(r"_edge\.js$")
PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9_-]*$")


@dataclass
class EntryLocation:
    """Result of a structure scan."""

    entry_script: Path
    work_dir: Path
    project_name: str
    preloader_script: Path | None = None
    other_candidates: list[Path] | None = None


class EntryScriptLocator:
    """Find ``<project>_edge.js`` in the extraction tree and derive the project name."""

    def locate(self, root: Path) -> EntryLocation:
        """Scan ``root`` recursively for entry scripts.

        The first candidate (shallowest, then by path) defines the working
        directory; further candidates are left for the leftover scan.

        Raises:
            NoEntryScriptError: no ``*_edge.js`` file exists.
            InvalidProjectNameError: the derived name has forbidden characters.
        """
        candidates = find_files(root, ENTRY_SCRIPT_RE)
        if not candidates:
            raise NoEntryScriptError(
                f"No main Edge file (*{ENTRY_SUFFIX}) found in the archive."
            )

        entry = candidates[0]
        project_name = entry.name[: -len(ENTRY_SUFFIX)]
        if not project_name or not PROJECT_NAME_RE.fullmatch(project_name):
            raise InvalidProjectNameError(project_name)

        if len(candidates) > 1:
            log.info(
                "locator.multiple_entry_scripts",
                selected=str(entry.relative_to(root)),
                ignored=[str(c.relative_to(root)) for c in candidates[1:]],
            )

        location = EntryLocation(
            entry_script=entry,
            work_dir=entry.parent,
            project_name=project_name,
            other_candidates=candidates[1:],
        )
        location.preloader_script = self.locate_preloader(location.work_dir, project_name)
        log.info("locator.found", project=project_name, work_dir=str(location.work_dir))
        return location

    @staticmethod
    def locate_preloader(work_dir: Path, project_name: str) -> Path | None:
        """Return ``<project>_edgePreload.js`` next to the entry script, if present."""
        candidate = work_dir / f"{project_name}{PRELOADER_SUFFIX}"
        if candidate.is_file():
            return candidate
        log.debug("locator.no_preloader", project=project_name)
        return None
