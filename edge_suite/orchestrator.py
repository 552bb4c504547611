"""Composition build orchestrator: archive in, deployable project out."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from edge_suite.build.assets import AssetRelocator, collect_leftovers
from edge_suite.build.libraries import DirectoryLibraryStore, LibraryReconciler, LibraryStore
from edge_suite.build.locator import PROJECT_NAME_RE, EntryScriptLocator
from edge_suite.build.metadata import MetadataExtractor, parse_runtime_version
from edge_suite.build.rewriter import ScriptRewriter
from edge_suite.config import BuilderSettings
from edge_suite.exceptions import (
    ConfigurationError,
    DestinationExistsError,
    InvalidProjectNameError,
)
from edge_suite.models.composition import Composition
from edge_suite.progress import BuildState, ProgressTracker
from edge_suite.reporting import (
    FanOutReportSink,
    LogReportSink,
    MemoryReportSink,
    Report,
    ReportSink,
    report_files,
)
from edge_suite.workspace import WorkspaceManager

log = structlog.get_logger("edge_suite.orchestrator")


@dataclass
class BuildOutput:
    """Orchestrator return value."""

    composition: Composition
    destination: Path
    altered_main: bool
    altered_preloader: bool
    reports: list[Report] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.composition.build_success

    def to_dict(self) -> dict[str, Any]:
        c = self.composition
        return {
            "success": self.success,
            "project_name": c.project_name,
            "stage_id": c.stage_id,
            "runtime_version": c.runtime_version,
            "destination": str(self.destination),
            "dimensions": c.dimensions.as_dict(),
            "dimension_encoding": c.dimension_encoding,
            "libraries": list(c.libraries),
            "altered_main": self.altered_main,
            "altered_preloader": self.altered_preloader,
            "reports": [{"severity": r.severity, "message": r.message} for r in self.reports],
        }


class CompositionBuilder:
    """
    Run the composition build pipeline.

    destination check -> extract -> validate structure -> extract metadata ->
    locate preloader -> rewrite scripts -> reconcile libraries ->
    relocate assets -> report leftovers -> clean up

    Any fatal error aborts the run, marks the tracker FAILED, removes the
    temporary workspace and propagates. Files already moved to the
    destination or the library store are not rolled back.
    """

    def __init__(
        self,
        settings: BuilderSettings,
        library_store: LibraryStore | None = None,
        sink: ReportSink | None = None,
    ) -> None:
        self.settings = settings
        self.library_store = library_store or DirectoryLibraryStore(settings.library_dir)
        self.sink = sink or LogReportSink()
        self.progress = ProgressTracker()
        self._memory = MemoryReportSink()
        self._out: ReportSink = FanOutReportSink(self._memory, self.sink)

    @property
    def state(self) -> BuildState:
        return self.progress.state

    def build(
        self,
        archive: str | Path,
        destination_name: str,
        replace: bool = False,
        overwrite_libraries: bool = False,
    ) -> BuildOutput:
        """Build ``archive`` into ``<project_dir>/<destination_name>``."""
        progress = ProgressTracker()
        self.progress = progress
        self._memory = MemoryReportSink()
        self._out = FanOutReportSink(self._memory, self.sink)

        archive = Path(archive)
        composition = Composition(archive_path=archive)
        workspace = WorkspaceManager(self.settings.base_dir, self.settings.project_dir)
        structlog.contextvars.bind_contextvars(archive=archive.name)

        try:
            progress.start_phase("prepare")
            if not destination_name or not PROJECT_NAME_RE.fullmatch(destination_name):
                raise InvalidProjectNameError(destination_name)
            tmp_dir = workspace.prepare()
            self.library_store.prepare()
            composition.tmp_dir = tmp_dir
            progress.complete_phase("prepare", BuildState.INIT, detail=str(tmp_dir))

            progress.start_phase("destination")
            destination = self._check_destination(destination_name, replace)
            composition.destination_dir = destination
            progress.complete_phase(
                "destination", BuildState.DESTINATION_CHECKED, detail=str(destination)
            )

            progress.start_phase("extract")
            workspace.extract(archive, tmp_dir)
            progress.complete_phase("extract", BuildState.EXTRACTED)

            progress.start_phase("validate")
            location = EntryScriptLocator().locate(tmp_dir)
            composition.project_name = location.project_name
            composition.work_dir = location.work_dir
            structlog.contextvars.bind_contextvars(project=location.project_name)
            if location.other_candidates:
                self._out.warning(
                    "Multiple main Edge files found, only "
                    f"'{location.entry_script.relative_to(tmp_dir).as_posix()}' is used."
                )

            metadata = MetadataExtractor().extract(location.entry_script)
            composition.stage_id = metadata.stage_id
            if metadata.dimensions is not None:
                composition.dimensions = metadata.dimensions
                composition.dimension_encoding = metadata.encoding
            else:
                self._out.warning("Stage dimensions could not be read from the main Edge file.")
            progress.complete_phase(
                "validate",
                BuildState.VALIDATED,
                detail=f"project={composition.project_name}, stage={composition.stage_id}, "
                f"encoding={composition.dimension_encoding}",
            )

            progress.start_phase("preloader")
            preloader = location.preloader_script
            if preloader is None:
                self._out.warning("No preloader file found for this composition.")
            progress.complete_phase(
                "preloader",
                BuildState.PRELOADER_LOCATED,
                detail=preloader.name if preloader else "missing",
            )

            progress.start_phase("rewrite")
            rewriter = ScriptRewriter()
            altered_main = rewriter.rewrite_entry(location.entry_script)
            if not altered_main:
                self._out.warning("Main Edge file could not be altered.")
            progress.complete_phase("rewrite", BuildState.REWRITTEN, detail=f"main={altered_main}")

            altered_preloader = False
            if preloader is None:
                progress.skip_phase("rewrite_preloader", "no preloader file")
            else:
                progress.start_phase("rewrite_preloader")
                altered_preloader = rewriter.rewrite_preloader(preloader, composition.stage_id)
                progress.complete_phase(
                    "rewrite_preloader",
                    BuildState.REWRITTEN,
                    detail=f"load_resources={altered_preloader}",
                )

            progress.start_phase("libraries")
            self._reconcile_libraries(
                composition, location.work_dir, overwrite_libraries, altered_preloader
            )
            progress.complete_phase(
                "libraries",
                BuildState.LIBRARIES_RECONCILED,
                detail=f"libraries={len(composition.libraries)}, "
                f"version={composition.runtime_version or '-'}",
            )

            progress.start_phase("assets")
            relocation = AssetRelocator(self.settings).relocate(location.work_dir, destination)
            progress.complete_phase(
                "assets",
                BuildState.ASSETS_MOVED,
                detail=f"moved={len(relocation.moved)}, excluded={len(relocation.excluded)}",
            )

            progress.start_phase("report")
            skip = {location.work_dir / rel for rel in relocation.excluded}
            report_files(
                self._out, collect_leftovers(tmp_dir, composition.project_name, skip)
            )
            self._out.status(f"Composition '{composition.project_name}' was built successfully.")
            progress.complete_phase("report", BuildState.REPORTED)

            progress.start_phase("cleanup")
            workspace.cleanup()
            composition.build_success = True
            progress.complete_phase("cleanup", BuildState.CLEANED_UP)

            log.info(
                "build.completed",
                stage_id=composition.stage_id,
                version=composition.runtime_version,
                destination=str(destination),
            )
            return BuildOutput(
                composition=composition,
                destination=destination,
                altered_main=altered_main,
                altered_preloader=altered_preloader,
                reports=list(self._memory.reports),
            )

        except Exception as e:
            progress.fail(str(e))
            log.warning("build.failed", error=str(e), error_type=type(e).__name__)
            raise
        finally:
            try:
                workspace.cleanup()
            except Exception:
                log.debug("build.cleanup_failed", exc_info=True)
            structlog.contextvars.unbind_contextvars("archive", "project")

    def _check_destination(self, destination_name: str, replace: bool) -> Path:
        destination = self.settings.project_dir / destination_name
        if destination.exists():
            if not replace:
                raise DestinationExistsError(str(destination))
            try:
                shutil.rmtree(destination)
            except OSError as e:
                raise ConfigurationError(
                    f"Existing project '{destination}' could not be removed: {e}"
                ) from e
            log.info("build.destination_purged", destination=str(destination))
        destination.mkdir(parents=True)
        return destination

    def _reconcile_libraries(
        self,
        composition: Composition,
        work_dir: Path,
        overwrite: bool,
        altered_preloader: bool,
    ) -> None:
        library_dir = work_dir / self.settings.library_subdir
        result = LibraryReconciler(self.library_store).reconcile(
            library_dir, overwrite=overwrite, runtime_version=composition.runtime_version
        )
        composition.libraries.extend(entry.name for entry in result.libraries)
        composition.runtime_version = result.runtime_version
        report_files(self._out, result.report)
        for failure in result.failures:
            self._out.warning(str(failure))

        # Runtime loaded from the CDN: read the version from <project>.html.
        if not composition.runtime_version and not altered_preloader:
            document = work_dir / f"{composition.project_name}.html"
            composition.runtime_version = parse_runtime_version(document)
            if not composition.runtime_version:
                self._out.warning("Runtime version could not be detected.")

