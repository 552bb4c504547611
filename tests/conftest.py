"""Shared pytest fixtures for composition builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from samples import COMPANION_HTML, PRELOAD_JS, PRETTY_EDGE_JS, make_archive

from edge_suite.config import BuilderSettings


@pytest.fixture
def settings(tmp_path: Path) -> BuilderSettings:
    return BuilderSettings(base_dir=tmp_path / "edge_suite")


@pytest.fixture
def demo_files() -> dict[str, str | bytes]:
    return {
        "demo_edge.js": PRETTY_EDGE_JS,
        "demo_edgePreload.js": PRELOAD_JS,
        "demo_edgeActions.js": "(function($,Edge,compId){})(jQuery,AdobeEdge,\"EDGE-2489594\");",
        "demo.html": COMPANION_HTML,
        "demo.edge": "<edge/>",
        "edge_includes/edge.0.5.4.min.js": "/* edge runtime */",
        "edge_includes/jquery-1.7.1.min.js": "/* jquery */",
        "assets/bg.png": b"\x89PNG\r\n\x1a\n",
        "publish/web/demo.html": "<html></html>",
        "publish/web/demo_edge.js": "/* published copy */",
        "notes.txt": "readme",
    }


@pytest.fixture
def demo_archive(tmp_path: Path, demo_files: dict[str, str | bytes]) -> Path:
    return make_archive(tmp_path / "demo.zip", demo_files)
