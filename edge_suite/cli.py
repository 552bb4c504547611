"""CLI entry point for standalone usage: edge-suite.

Subcommands:
    edge-suite build demo.zip                 # Import an archive into the project dir
    edge-suite build demo.zip --replace --json
    edge-suite inspect demo_edge.js           # Read metadata from an entry script only
"""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path

import click

from edge_suite.core.logging import setup_logging
from edge_suite.exceptions import EdgeSuiteError

_STATUS_ICONS = {
    "completed": "+",
    "failed": "!",
    "skipped": "-",
    "running": "~",
    "pending": ".",
}


def _default_destination(archive: str) -> str:
    """Derive a destination directory name from the archive file name."""
    stem = Path(archive).stem
    return re.sub(r"[^A-Za-z0-9_-]+", "_", stem).strip("_") or "composition"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Edge Suite: import animation composition archives."""
    setup_logging("DEBUG" if verbose else None)


@main.command("build")
@click.argument("archive", type=click.Path(exists=True, dir_okay=False))
@click.option("--dest", "destination", default=None, help="Destination directory name")
@click.option("--replace", is_flag=True, help="Replace an existing project with the same name")
@click.option(
    "--overwrite-libraries", is_flag=True, help="Overwrite libraries already in the shared store"
)
@click.option("--base-dir", default=None, help="Base working directory (EDGE_SUITE_BASE_DIR)")
@click.option("--project-dir", default=None, help="Project directory (EDGE_SUITE_PROJECT_DIR)")
@click.option("--library-dir", default=None, help="Shared library dir (EDGE_SUITE_LIBRARY_DIR)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def build(
    archive: str,
    destination: str | None,
    replace: bool,
    overwrite_libraries: bool,
    base_dir: str | None,
    project_dir: str | None,
    library_dir: str | None,
    as_json: bool,
) -> None:
    """Build a composition archive into the project directory."""
    from edge_suite.config import BuilderSettings
    from edge_suite.orchestrator import CompositionBuilder
    from edge_suite.reporting import MemoryReportSink

    settings = BuilderSettings.from_env(
        base_dir=base_dir, project_dir=project_dir, library_dir=library_dir
    )
    builder = CompositionBuilder(settings, sink=MemoryReportSink())

    try:
        result = builder.build(
            archive,
            destination or _default_destination(archive),
            replace=replace,
            overwrite_libraries=overwrite_libraries,
        )
    except EdgeSuiteError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        payload = result.to_dict()
        payload["progress"] = builder.progress.get_summary()
        click.echo(json.dumps(payload, indent=2))
        return

    for report in result.reports:
        prefix = "warning: " if report.severity == "warning" else ""
        click.echo(f"{prefix}{report.message}")

    c = result.composition
    click.echo(f"\nProject: {c.project_name}")
    click.echo(f"  Stage ID: {c.stage_id}")
    click.echo(f"  Runtime version: {c.runtime_version or '-'}")
    click.echo(f"  Destination: {result.destination}")
    dims = ", ".join(f"{k}={v}" for k, v in c.dimensions.as_dict().items())
    click.echo(f"  Dimensions: {dims}")

    summary = builder.progress.get_summary()
    click.echo(f"\nPipeline summary (total: {summary['total_duration']}s):")
    for p in summary["phases"]:
        status_icon = _STATUS_ICONS.get(p["status"], "?")
        duration = f" ({p['duration']}s)" if p["duration"] else ""
        detail = f" - {p['detail']}" if p["detail"] else ""
        click.echo(f"  [{status_icon}] {p['phase']}{duration}{detail}")


@main.command("inspect")
@click.argument("entry_script", type=click.Path(exists=True, dir_okay=False))
def inspect(entry_script: str) -> None:
    """Read stage id and dimensions from an entry script without building."""
    from edge_suite.build.metadata import MetadataExtractor

    try:
        metadata = MetadataExtractor().extract(Path(entry_script))
    except EdgeSuiteError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Stage ID: {metadata.stage_id}")
    click.echo(f"Encoding: {metadata.encoding or 'unknown'}")
    if metadata.dimensions is None:
        click.echo("Dimensions: not found")
        return
    click.echo("Dimensions:")
    for key, value in metadata.dimensions.as_dict().items():
        click.echo(f"  {key}: {value}")


if __name__ == "__main__":
    main()
