"""User-facing build reports.

The builder only produces message text; rendering is left to whatever
``ReportSink`` the host plugs in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import structlog

from edge_suite.models.composition import FileReport

log = structlog.get_logger("edge_suite.report")

STATUS = "status"
WARNING = "warning"

_CATEGORY_LABELS = {
    "obsolete": "Obsolete files",
    "ignored": "Ignored files",
    "added": "Added libraries",
    "updated": "Updated libraries",
}


@dataclass(frozen=True)
class Report:
    message: str
    severity: str = STATUS  # "status" | "warning"


class ReportSink(ABC):
    """Destination for end-user build messages."""

    @abstractmethod
    def emit(self, report: Report) -> None:
        ...

    def status(self, message: str) -> None:
        self.emit(Report(message, STATUS))

    def warning(self, message: str) -> None:
        self.emit(Report(message, WARNING))


class MemoryReportSink(ReportSink):
    """Keep reports in emission order."""

    def __init__(self) -> None:
        self.reports: list[Report] = []

    def emit(self, report: Report) -> None:
        self.reports.append(report)

    def messages(self, severity: str | None = None) -> list[str]:
        return [r.message for r in self.reports if severity is None or r.severity == severity]


class LogReportSink(ReportSink):
    """Forward reports to the structured log."""

    def emit(self, report: Report) -> None:
        if report.severity == WARNING:
            log.warning("report", message=report.message)
        else:
            log.info("report", message=report.message)


def report_files(sink: ReportSink, file_report: FileReport) -> None:
    """Emit one message per non-empty category; empty categories stay silent."""
    for category, names in file_report.non_empty().items():
        label = _CATEGORY_LABELS.get(category, category.capitalize())
        severity = STATUS if category in ("added", "updated") else WARNING
        sink.emit(Report(f"{label}: {', '.join(names)}", severity))


class FanOutReportSink(ReportSink):
    """Emit every report to several sinks in order."""

    def __init__(self, *sinks: ReportSink) -> None:
        self.sinks = list(sinks)

    def emit(self, report: Report) -> None:
        for sink in self.sinks:
            sink.emit(report)
