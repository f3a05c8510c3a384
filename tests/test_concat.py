"""Tests for the concatenator."""

from pathlib import Path

import pytest

from blazecut.editors.concat import build_concat_job, concat_segments, write_concat_list
from blazecut.errors import ConcatFailed, IoFailed


class TestWriteConcatList:
    def test_one_line_per_artifact(self, tmp_path):
        lst = write_concat_list([Path("/tmp/a.mkv"), Path("/tmp/b.mkv")], tmp_path / "l.txt")
        assert lst.read_text() == "file '/tmp/a.mkv'\nfile '/tmp/b.mkv'\n"

    def test_single_quote_escaped(self, tmp_path):
        lst = write_concat_list([Path("/tmp/it's.mkv")], tmp_path / "l.txt")
        assert lst.read_text() == "file '/tmp/it'\\''s.mkv'\n"

    def test_write_error(self, tmp_path):
        with pytest.raises(IoFailed):
            write_concat_list([Path("a.mkv")], tmp_path / "nope" / "l.txt")


class TestBuildConcatJob:
    def test_webm_codecs(self):
        cmd = build_concat_job(Path("l.txt"), "webm", Path("out.webm")).command()
        assert cmd[cmd.index("-f") + 1] == "concat"
        assert cmd[cmd.index("-safe") + 1] == "0"
        assert cmd[cmd.index("-c:v") + 1] == "libvpx-vp9"
        assert cmd[cmd.index("-c:a") + 1] == "libopus"
        assert cmd[-1] == "out.webm"

    def test_unknown_format_is_h264(self):
        cmd = build_concat_job(Path("l.txt"), "flv", Path("out.flv")).command()
        assert cmd[cmd.index("-c:v") + 1] == "libx264"
        assert cmd[cmd.index("-c:a") + 1] == "aac"


class TestConcatSegments:
    def test_success(self, tmp_path, fake_runner):
        out = tmp_path / "out.mp4"
        concat_segments([tmp_path / "a.mkv"], "mp4", out, tmp_path / "l.txt", fake_runner)
        assert out.exists()
        assert fake_runner.concat_lists == [[f"file '{tmp_path / 'a.mkv'}'"]]

    def test_failure_removes_partial_output(self, tmp_path, make_runner):
        runner = make_runner(fail_on="concat", stderr="Impossible to open")
        out = tmp_path / "out.mp4"
        with pytest.raises(ConcatFailed, match="Impossible to open"):
            concat_segments([tmp_path / "a.mkv"], "mp4", out, tmp_path / "l.txt", runner)
        assert not out.exists()

    def test_empty_segments_raises(self, tmp_path):
        with pytest.raises(ValueError, match="empty segment list"):
            concat_segments([], "mp4", tmp_path / "out.mp4", tmp_path / "l.txt")
