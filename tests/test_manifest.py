"""Tests for edit request loading and validation."""

from pathlib import Path

import pytest

from blazecut.errors import InvalidRequest, IoFailed
from blazecut.manifest import (
    EditRequest,
    load_request,
    preview_from_dict,
    request_from_dict,
)
from blazecut.models import Segment


class TestEditRequest:
    def test_defaults(self):
        r = EditRequest(input=Path("in.mp4"), output=Path("out.mp4"))
        assert r.segments == []
        assert r.quality == "medium"
        assert r.format == "mp4"
        assert r.transition == "none"
        assert r.transition_duration == 1.0
        assert r.volume == 1.0
        assert r.add_subtitles is False

    def test_valid_segments_preserve_order(self):
        r = EditRequest(
            input=Path("in.mp4"),
            output=Path("out.mp4"),
            segments=[Segment(10, 12), Segment(3, 3), Segment(0, 2), Segment(9, 1)],
        )
        assert r.valid_segments() == [Segment(10, 12), Segment(0, 2)]


class TestSegment:
    def test_immutable(self):
        seg = Segment(0, 1)
        with pytest.raises(AttributeError):
            seg.start = 5

    def test_duration(self):
        assert Segment(1.5, 4.0).duration == 2.5


class TestLoadRequest:
    def test_load_sample(self, sample_request_path: Path):
        r = load_request(sample_request_path)
        assert r.input == Path("video.mp4")
        assert r.output == Path("edited.mp4")
        assert r.format == "webm"
        assert r.quality == "high"
        assert r.transition == "fade"
        assert r.transition_duration == 0.5
        assert r.volume == 1.5
        assert r.add_subtitles is True
        assert r.segments[0] == Segment(0.0, 4.5, text="Opening")
        assert r.segments[2].kind == "highlight"
        # invalid ranges are kept here and dropped by the engine
        assert len(r.segments) == 3
        assert len(r.valid_segments()) == 2

    def test_load_invalid_json(self, tmp_path: Path):
        bad = tmp_path / "bad.json"
        bad.write_text("not json")
        with pytest.raises(InvalidRequest, match="not valid JSON"):
            load_request(bad)

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(IoFailed, match="could not read"):
            load_request(tmp_path / "absent.json")

    def test_load_missing_fields(self, tmp_path: Path):
        incomplete = tmp_path / "incomplete.json"
        incomplete.write_text('{"segments": []}')
        with pytest.raises(InvalidRequest, match="must contain"):
            load_request(incomplete)


class TestRequestFromDict:
    def test_null_options_use_defaults(self):
        r = request_from_dict({
            "input": "a.mp4", "output": "b.mp4",
            "quality": None, "transition_duration": None, "volume": None,
        })
        assert r.quality == "medium"
        assert r.transition_duration == 1.0
        assert r.volume == 1.0

    def test_segment_without_end(self):
        with pytest.raises(InvalidRequest, match="'start' and 'end'"):
            request_from_dict({"input": "a", "output": "b", "segments": [{"start": 1}]})

    def test_non_numeric_time(self):
        with pytest.raises(InvalidRequest, match="numbers"):
            request_from_dict({
                "input": "a", "output": "b",
                "segments": [{"start": "soon", "end": 2}],
            })

    def test_non_numeric_volume(self):
        with pytest.raises(InvalidRequest, match="volume"):
            request_from_dict({"input": "a", "output": "b", "volume": "loud"})

    def test_subtitle_flag_must_be_boolean(self):
        with pytest.raises(InvalidRequest, match="add_subtitles"):
            request_from_dict({"input": "a", "output": "b", "add_subtitles": "false"})

    @pytest.mark.parametrize("value,expected", [(True, True), (False, False), (None, False)])
    def test_subtitle_flag(self, value, expected):
        r = request_from_dict({"input": "a", "output": "b", "add_subtitles": value})
        assert r.add_subtitles is expected


class TestPreviewFromDict:
    def test_basic(self):
        p = preview_from_dict({
            "input": "a.mp4",
            "segment": {"start": 1, "end": 3, "text": "Hi"},
            "add_subtitles": True,
        })
        assert p.segment == Segment(1.0, 3.0, text="Hi")
        assert p.add_subtitles is True
        assert p.volume == 1.0

    def test_missing_segment(self):
        with pytest.raises(InvalidRequest):
            preview_from_dict({"input": "a.mp4"})
