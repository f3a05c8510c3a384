"""Tests for per-run working directories and temp-file cleanup."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from blazecut.errors import InvalidRequest, IoFailed
from blazecut.workspace import Workspace, clean_temp_file, is_temp_path


class TestWorkspace:
    def test_unique_per_run(self, tmp_path):
        a, b = Workspace(tmp_path), Workspace(tmp_path)
        assert a.dir != b.dir
        assert a.run_id != b.run_id
        assert a.path("segment_0.mkv") != b.path("segment_0.mkv")
        a.cleanup()
        b.cleanup()

    def test_dir_carries_app_marker(self, tmp_path):
        with Workspace(tmp_path) as ws:
            assert ws.dir.parent == tmp_path
            assert ws.dir.name.startswith("blazecut_")

    def test_cleanup_removes_tracked_files_and_dir(self, tmp_path):
        ws = Workspace(tmp_path)
        ws.path("a.mkv").write_bytes(b"x")
        ws.path("b.srt").write_text("1")
        ws.path("never_written.mkv")
        ws.cleanup()
        assert list(tmp_path.iterdir()) == []

    def test_cleanup_errors_are_logged(self, tmp_path, caplog):
        ws = Workspace(tmp_path)
        ws.path("a.mkv").write_bytes(b"x")
        with patch.object(Path, "unlink", side_effect=PermissionError("locked")):
            ws.cleanup()
        assert "Could not remove" in caplog.text

    def test_unusable_root(self, tmp_path):
        with pytest.raises(IoFailed):
            Workspace(tmp_path / "does" / "not" / "exist")


class TestCleanTempFile:
    @pytest.mark.parametrize("path", [
        "/tmp/preview_1.mp4",
        "C:\\Users\\me\\AppData\\Local\\Temp\\x.mp4",
        "/home/me/.local/share/blazecut/old.mp4",
    ])
    def test_marker_detection(self, path):
        assert is_temp_path(path)

    @patch("blazecut.workspace.os.remove")
    def test_rejects_without_touching_filesystem(self, mock_remove):
        with pytest.raises(InvalidRequest, match="refusing"):
            clean_temp_file("/home/me/videos/wedding.mp4")
        mock_remove.assert_not_called()

    def test_removes_temp_file(self, tmp_path):
        # pytest's tmp_path lives under the system temp dir
        target = tmp_path / "blazecut_preview.mp4"
        target.write_bytes(b"x")
        clean_temp_file(target)
        assert not target.exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(IoFailed):
            clean_temp_file(os.path.join(str(tmp_path), "blazecut_gone.mp4"))
