"""Tests for profile resolution."""

import pytest

from blazecut.models import EncodeProfile
from blazecut.profiles import output_codecs, resolve_profile


class TestResolveProfile:
    def test_webm_low(self):
        p = resolve_profile("webm", "low")
        assert p.video_codec == "libvpx-vp9"
        assert p.describe() == "scale=1280:720 -b:v 1M"

    def test_mp4_medium_has_preset(self):
        p = resolve_profile("mp4", "medium")
        assert p == EncodeProfile("libx264", "aac", "4M", (1920, 1080), "fast")
        assert p.video_args() == ["-b:v", "4M", "-preset", "fast"]

    def test_mov_ultra(self):
        p = resolve_profile("mov", "ultra")
        assert p.scale is None
        assert p.describe() == "-b:v 15M -preset slow"

    def test_mkv_uses_generic_h264(self):
        p = resolve_profile("mkv", "high")
        assert p.video_codec == "libx264"
        assert p.describe() == "-b:v 8M"

    def test_unknown_format_falls_back_to_h264(self):
        p = resolve_profile("avi", "low")
        assert p.video_codec == "libx264"
        assert p.audio_codec == "aac"

    @pytest.mark.parametrize("fmt", ["mp4", "webm", "mkv"])
    def test_unknown_quality_is_medium(self, fmt):
        assert resolve_profile(fmt, "cinematic") == resolve_profile(fmt, "medium")

    def test_missing_values(self):
        assert resolve_profile(None, None) == resolve_profile("mkv", "medium")

    def test_case_insensitive(self):
        assert resolve_profile(" WebM ", "HIGH") == resolve_profile("webm", "high")


class TestOutputCodecs:
    @pytest.mark.parametrize("fmt", ["mp4", "mov", "mkv", "avi"])
    def test_h264_family(self, fmt):
        assert output_codecs(fmt) == ("libx264", "aac")

    def test_webm(self):
        assert output_codecs("webm") == ("libvpx-vp9", "libopus")
