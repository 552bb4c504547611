"""Tests for WorkspaceManager and filesystem helpers: pure filesystem logic."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from samples import make_archive

from edge_suite.exceptions import (
    ArchiveNotFoundError,
    ConfigurationError,
    ExtractionFailedError,
)
from edge_suite.workspace import (
    WorkspaceManager,
    clear_dir,
    find_files,
    move_file,
    read_script,
    write_script,
)


class TestPrepare:
    def test_creates_roots_and_tmp_dir(self, tmp_path: Path):
        ws = WorkspaceManager(tmp_path / "base", tmp_path / "base" / "project")
        tmp_dir = ws.prepare()

        assert (tmp_path / "base").is_dir()
        assert (tmp_path / "base" / "project").is_dir()
        assert tmp_dir.is_dir()
        assert tmp_dir.parent == tmp_path / "base" / "tmp"

    def test_tmp_dirs_are_unique(self, tmp_path: Path):
        a = WorkspaceManager(tmp_path, tmp_path / "project").prepare()
        b = WorkspaceManager(tmp_path, tmp_path / "project").prepare()
        assert a != b

    def test_base_dir_is_a_file(self, tmp_path: Path):
        blocker = tmp_path / "base"
        blocker.write_text("not a dir")

        with pytest.raises(ConfigurationError):
            WorkspaceManager(blocker, tmp_path / "project").prepare()

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_unwritable_project_dir(self, tmp_path: Path):
        project = tmp_path / "project"
        project.mkdir()
        project.chmod(0o500)
        try:
            with pytest.raises(ConfigurationError):
                WorkspaceManager(tmp_path / "base", project).prepare()
        finally:
            project.chmod(0o700)


class TestExtract:
    def test_extract(self, tmp_path: Path):
        archive = make_archive(tmp_path / "a.zip", {"x/y.txt": "hello"})
        ws = WorkspaceManager(tmp_path / "base", tmp_path / "project")
        tmp_dir = ws.prepare()

        ws.extract(archive, tmp_dir)
        assert (tmp_dir / "x" / "y.txt").read_text() == "hello"

    def test_extract_clears_destination(self, tmp_path: Path):
        archive = make_archive(tmp_path / "a.zip", {"new.txt": "new"})
        dest = tmp_path / "dest"
        (dest / "old").mkdir(parents=True)
        (dest / "old" / "stale.txt").write_text("stale")

        WorkspaceManager(tmp_path, tmp_path / "project").extract(archive, dest)
        assert sorted(p.name for p in dest.iterdir()) == ["new.txt"]

    def test_missing_archive(self, tmp_path: Path):
        ws = WorkspaceManager(tmp_path, tmp_path / "project")
        with pytest.raises(ArchiveNotFoundError):
            ws.extract(tmp_path / "missing.zip", tmp_path / "dest")

    def test_corrupt_archive(self, tmp_path: Path):
        bad = tmp_path / "bad.zip"
        bad.write_bytes(b"this is not a zip file")
        ws = WorkspaceManager(tmp_path, tmp_path / "project")

        with pytest.raises(ExtractionFailedError) as exc_info:
            ws.extract(bad, tmp_path / "dest")
        assert exc_info.value.reason


class TestCleanup:
    def test_cleanup_removes_tmp_dir(self, tmp_path: Path):
        ws = WorkspaceManager(tmp_path, tmp_path / "project")
        tmp_dir = ws.prepare()
        (tmp_dir / "file.txt").write_text("x")

        ws.cleanup()
        assert not tmp_dir.exists()
        # Second call is a no-op
        ws.cleanup()

    def test_cleanup_before_prepare(self, tmp_path: Path):
        WorkspaceManager(tmp_path, tmp_path / "project").cleanup()

    def test_context_manager_cleans_up_on_error(self, tmp_path: Path):
        with pytest.raises(RuntimeError):
            with WorkspaceManager(tmp_path, tmp_path / "project") as ws:
                tmp_dir = ws.tmp_dir
                raise RuntimeError("boom")
        assert tmp_dir is not None and not tmp_dir.exists()


class TestHelpers:
    def test_find_files_shallowest_first(self, tmp_path: Path):
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "b" / "deep_edge.js").write_text("")
        (tmp_path / "z_edge.js").write_text("")
        (tmp_path / "other.js").write_text("")

        found = find_files(tmp_path, r"_edge\.js$")
        assert [p.name for p in found] == ["z_edge.js", "deep_edge.js"]

    def test_move_file_creates_parents_and_replaces(self, tmp_path: Path):
        src = tmp_path / "src.txt"
        src.write_text("new")
        dst = tmp_path / "out" / "nested" / "dst.txt"
        dst.parent.mkdir(parents=True)
        dst.write_text("old")

        move_file(src, dst)
        assert dst.read_text() == "new"
        assert not src.exists()

    def test_clear_dir_missing_is_noop(self, tmp_path: Path):
        clear_dir(tmp_path / "nope")

    def test_script_text_keeps_foreign_bytes_and_line_endings(self, tmp_path: Path):
        script = tmp_path / "demo_edge.js"
        raw = b"// \xa9 Caf\xe9\r\nvar a = 1;\r\n"
        script.write_bytes(raw)

        content = read_script(script)
        assert "\r\n" in content
        write_script(script, content.replace("var a", "var b"))

        assert script.read_bytes() == b"// \xa9 Caf\xe9\r\nvar b = 1;\r\n"
