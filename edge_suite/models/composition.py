"""Data models for a composition build."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePath

DIMENSION_KEYS: tuple[str, ...] = (
    "width",
    "height",
    "min-width",
    "max-width",
    "min-height",
    "max-height",
)

UNIT_PX = "px"
UNIT_PERCENT = "%"


@dataclass
class Dimension:
    """A CSS length as written by the authoring tool (e.g. ``600px``, ``100%``)."""

    value: str = "0"
    unit: str = ""  # "px" | "%" | "" (unset)

    @property
    def is_set(self) -> bool:
        return self.unit != ""

    def __str__(self) -> str:
        return f"{self.value}{self.unit}"


@dataclass
class DimensionSet:
    """Stage dimensions; keys not found in the script keep the unset default."""

    values: dict[str, Dimension] = field(
        default_factory=lambda: {key: Dimension() for key in DIMENSION_KEYS}
    )

    def set(self, key: str, value: str, unit: str) -> None:
        if key not in DIMENSION_KEYS:
            raise KeyError(key)
        self.values[key] = Dimension(value=value, unit=unit)

    def get(self, key: str) -> Dimension:
        return self.values[key]

    @property
    def is_empty(self) -> bool:
        return not any(d.is_set for d in self.values.values())

    def as_dict(self) -> dict[str, str]:
        return {key: str(self.values[key]) for key in DIMENSION_KEYS}


@dataclass
class LibraryEntry:
    """A runtime library shipped inside the archive."""

    name: str
    source_path: Path
    target_path: PurePath


@dataclass
class Composition:
    """The unit of work for a single pipeline run."""

    archive_path: Path
    tmp_dir: Path | None = None
    destination_dir: Path | None = None
    work_dir: Path | None = None  # folder holding the entry script
    project_name: str = ""
    stage_id: str = ""
    runtime_version: str = ""
    dimensions: DimensionSet = field(default_factory=DimensionSet)
    dimension_encoding: str | None = None  # "pretty" | "minified" | None
    libraries: list[str] = field(default_factory=list)
    build_success: bool = False


FILE_REPORT_CATEGORIES: tuple[str, ...] = ("obsolete", "ignored", "added", "updated")


@dataclass
class FileReport:
    """Filenames grouped by category, used only for user feedback."""

    entries: dict[str, list[str]] = field(
        default_factory=lambda: {c: [] for c in FILE_REPORT_CATEGORIES}
    )

    def add(self, category: str, name: str) -> None:
        self.entries.setdefault(category, []).append(name)

    def __getitem__(self, category: str) -> list[str]:
        return self.entries.get(category, [])

    def non_empty(self) -> dict[str, list[str]]:
        return {c: names for c, names in self.entries.items() if names}
