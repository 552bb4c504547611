"""Edge Suite: import packaged animation compositions into a host site."""

__version__ = "0.1.0"

from edge_suite.build.libraries import DirectoryLibraryStore, LibraryStore
from edge_suite.config import BuilderSettings
from edge_suite.models.composition import Composition, DimensionSet, FileReport
from edge_suite.orchestrator import BuildOutput, CompositionBuilder
from edge_suite.progress import BuildState, ProgressTracker
from edge_suite.reporting import MemoryReportSink, Report, ReportSink

__all__ = [
    "BuildOutput",
    "BuildState",
    "BuilderSettings",
    "Composition",
    "CompositionBuilder",
    "DimensionSet",
    "DirectoryLibraryStore",
    "FileReport",
    "LibraryStore",
    "MemoryReportSink",
    "ProgressTracker",
    "Report",
    "ReportSink",
]
