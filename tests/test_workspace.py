"""Tests for the per-request workspace manager."""

from __future__ import annotations

import logging
import shutil

import pytest

from codecheck.core.workspace import WorkspaceManager, new_session_id
from codecheck.errors import WorkspaceError
from codecheck.model.request import SOURCE_FILENAME


class TestCreate:

    def test_creates_directory_under_root(self, tmp_path):
        ws = WorkspaceManager(tmp_path / "root")
        session = ws.create()

        assert session.workspace_path.parent == tmp_path / "root"
        assert session.workspace_path.is_dir()
        assert session.workspace_path.name == session.session_id
        assert session.source_file_path == session.workspace_path / SOURCE_FILENAME

    def test_session_ids_are_unique_and_long(self):
        ids = {new_session_id() for _ in range(500)}
        assert len(ids) == 500
        assert all(len(i) == 32 for i in ids)

    def test_existing_session_dir_is_a_collision(self, tmp_path):
        ws = WorkspaceManager(tmp_path)
        ws.create("deadbeefdeadbeef")
        with pytest.raises(WorkspaceError):
            ws.create("deadbeefdeadbeef")

    @pytest.mark.parametrize("bad", ["../escape1", "a/b/c/d/e", "short", ""])
    def test_rejects_unsafe_ids(self, tmp_path, bad):
        ws = WorkspaceManager(tmp_path)
        if bad == "":
            # empty falls back to a generated id
            assert ws.create(bad).session_id
            return
        with pytest.raises(WorkspaceError):
            ws.create(bad)

    def test_root_that_is_a_file_fails(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(WorkspaceError, match="cannot create workspace"):
            WorkspaceManager(blocker).create()


class TestWriteSource:

    def test_writes_verbatim(self, tmp_path):
        ws = WorkspaceManager(tmp_path)
        session = ws.create()
        text = "int main() {\r\n  return 0; // ünïcode\r\n}"

        path = ws.write_source(session, text)

        assert path == session.source_file_path
        assert path.read_bytes() == text.encode("utf-8")

    def test_write_after_destroy_fails(self, tmp_path):
        ws = WorkspaceManager(tmp_path)
        session = ws.create()
        ws.destroy(session)
        with pytest.raises(WorkspaceError, match="cannot write source file"):
            ws.write_source(session, "int x;")


class TestDestroy:

    def test_removes_tree(self, tmp_path):
        ws = WorkspaceManager(tmp_path)
        session = ws.create()
        ws.write_source(session, "int x;")
        (session.workspace_path / "nested").mkdir()

        ws.destroy(session)

        assert not session.workspace_path.exists()

    def test_idempotent(self, tmp_path):
        ws = WorkspaceManager(tmp_path)
        session = ws.create()
        ws.destroy(session)
        ws.destroy(session)
        assert not session.workspace_path.exists()

    def test_failure_is_logged_not_raised(self, tmp_path, monkeypatch, caplog):
        ws = WorkspaceManager(tmp_path)
        session = ws.create()

        def boom(path, *a, **kw):
            raise PermissionError("busy")

        monkeypatch.setattr(shutil, "rmtree", boom)
        with caplog.at_level(logging.WARNING, logger="codecheck.core.workspace"):
            ws.destroy(session)

        assert "Failed to clean up" in caplog.text


class TestSessionScope:

    def test_cleanup_on_normal_exit(self, tmp_path):
        ws = WorkspaceManager(tmp_path)
        with ws.session() as session:
            ws.write_source(session, "int x;")
            assert session.source_file_path.exists()
        assert not session.workspace_path.exists()

    def test_cleanup_on_exception(self, tmp_path):
        ws = WorkspaceManager(tmp_path)
        with pytest.raises(RuntimeError):
            with ws.session() as session:
                raise RuntimeError("analysis blew up")
        assert not session.workspace_path.exists()

    def test_create_failure_propagates(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(WorkspaceError):
            with WorkspaceManager(blocker).session():
                pass
