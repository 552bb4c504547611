"""Builder settings: directories and the asset extension allow-list."""

from __future__ import annotations

import os
import re
from pathlib import Path

from pydantic import BaseModel, field_validator, model_validator

DEFAULT_ALLOWED_ASSET_EXTENSIONS = (
    "js png jpg jpeg gif svg css mp3 ogg oga wav m4a aac mp4 m4v ogv webm "
    "woff woff2 ttf otf eot json"
)

_ENV_BASE_DIR = "EDGE_SUITE_BASE_DIR"
_ENV_PROJECT_DIR = "EDGE_SUITE_PROJECT_DIR"
_ENV_LIBRARY_DIR = "EDGE_SUITE_LIBRARY_DIR"
_ENV_ALLOWED_EXTENSIONS = "EDGE_SUITE_ALLOWED_ASSET_EXTENSIONS"

_EXTENSION_SPLIT_RE = re.compile(r"[|,\s]+")


class BuilderSettings(BaseModel):
    """Filesystem roots and relocation rules for the composition builder."""

    base_dir: Path
    project_dir: Path | None = None
    library_dir: Path | None = None
    allowed_asset_extensions: frozenset[str] = frozenset(DEFAULT_ALLOWED_ASSET_EXTENSIONS.split())
    library_subdir: str = "edge_includes"
    excluded_prefix: str = "publish"

    @field_validator("allowed_asset_extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, v: object) -> frozenset[str]:
        if isinstance(v, str):
            items = _EXTENSION_SPLIT_RE.split(v)
        else:
            items = list(v)  # type: ignore[arg-type]
        return frozenset(item.strip().lstrip(".").lower() for item in items if item.strip())

    @model_validator(mode="after")
    def _fill_defaults(self) -> BuilderSettings:
        if self.project_dir is None:
            self.project_dir = self.base_dir / "project"
        if self.library_dir is None:
            self.library_dir = self.base_dir / "edge_includes"
        return self

    def is_allowed_asset(self, filename: str) -> bool:
        suffix = Path(filename).suffix.lstrip(".").lower()
        return bool(suffix) and suffix in self.allowed_asset_extensions

    @classmethod
    def from_env(cls, **overrides: object) -> BuilderSettings:
        """Build settings from ``EDGE_SUITE_*`` environment variables.

        Explicit keyword overrides that are not None take precedence.
        """
        values: dict[str, object] = {
            "base_dir": os.environ.get(_ENV_BASE_DIR, "edge_suite"),
        }
        if os.environ.get(_ENV_PROJECT_DIR):
            values["project_dir"] = os.environ[_ENV_PROJECT_DIR]
        if os.environ.get(_ENV_LIBRARY_DIR):
            values["library_dir"] = os.environ[_ENV_LIBRARY_DIR]
        if os.environ.get(_ENV_ALLOWED_EXTENSIONS):
            values["allowed_asset_extensions"] = os.environ[_ENV_ALLOWED_EXTENSIONS]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
