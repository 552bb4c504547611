"""Tests for EntryScriptLocator: pure filesystem logic."""

from __future__ import annotations

from pathlib import Path

import pytest

from edge_suite.build.locator import EntryScriptLocator
from edge_suite.exceptions import InvalidProjectNameError, NoEntryScriptError


@pytest.fixture
def locator():
    return EntryScriptLocator()


class TestLocate:
    def test_root_entry_script(self, tmp_path: Path, locator: EntryScriptLocator):
        (tmp_path / "demo_edge.js").write_text("")

        loc = locator.locate(tmp_path)
        assert loc.project_name == "demo"
        assert loc.work_dir == tmp_path
        assert loc.entry_script == tmp_path / "demo_edge.js"
        assert loc.preloader_script is None

    def test_nested_entry_script_narrows_work_dir(
        self, tmp_path: Path, locator: EntryScriptLocator
    ):
        nested = tmp_path / "export" / "banner-2"
        nested.mkdir(parents=True)
        (nested / "banner-2_edge.js").write_text("")
        (nested / "banner-2_edgePreload.js").write_text("")

        loc = locator.locate(tmp_path)
        assert loc.project_name == "banner-2"
        assert loc.work_dir == nested
        assert loc.preloader_script == nested / "banner-2_edgePreload.js"

    def test_helper_scripts_are_not_entry_scripts(
        self, tmp_path: Path, locator: EntryScriptLocator
    ):
        (tmp_path / "demo_edgeActions.js").write_text("")
        (tmp_path / "demo_edgePreload.js").write_text("")

        with pytest.raises(NoEntryScriptError):
            locator.locate(tmp_path)


class TestMultipleCandidates:
    def test_first_candidate_wins(self, tmp_path: Path, locator: EntryScriptLocator):
        (tmp_path / "main_edge.js").write_text("")
        (tmp_path / "publish" / "web").mkdir(parents=True)
        (tmp_path / "publish" / "web" / "main_edge.js").write_text("")

        loc = locator.locate(tmp_path)
        assert loc.entry_script == tmp_path / "main_edge.js"
        assert loc.other_candidates == [tmp_path / "publish" / "web" / "main_edge.js"]


class TestLocateErrors:
    def test_empty_dir(self, tmp_path: Path, locator: EntryScriptLocator):
        with pytest.raises(NoEntryScriptError):
            locator.locate(tmp_path)

    def test_invalid_project_name(self, tmp_path: Path, locator: EntryScriptLocator):
        (tmp_path / "my project_edge.js").write_text("")

        with pytest.raises(InvalidProjectNameError) as exc_info:
            locator.locate(tmp_path)
        assert exc_info.value.name == "my project"

    def test_empty_project_name(self, tmp_path: Path, locator: EntryScriptLocator):
        (tmp_path / "_edge.js").write_text("")

        with pytest.raises(InvalidProjectNameError):
            locator.locate(tmp_path)
