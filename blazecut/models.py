"""Shared data types used across BlazeCut."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Segment:
    """A time-bounded excerpt of the source, optionally carrying caption text."""

    start: float
    end: float
    text: str | None = None
    kind: str | None = None

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def is_valid(self) -> bool:
        return self.end > self.start


@dataclass
class ProbeResult:
    """Metadata extracted from a media file via ffprobe."""

    duration: float
    width: int
    height: int
    fps: float
    codec: str
    bitrate: int


@dataclass(frozen=True)
class EncodeProfile:
    """Resolved encoder settings for a (format, quality) pair."""

    video_codec: str
    audio_codec: str
    bitrate: str | None = None
    scale: tuple[int, int] | None = None
    preset: str | None = None

    def video_args(self) -> list[str]:
        args: list[str] = []
        if self.bitrate:
            args += ["-b:v", self.bitrate]
        if self.preset:
            args += ["-preset", self.preset]
        return args

    def describe(self) -> str:
        """Human-readable filter/bitrate string, e.g. ``scale=1280:720 -b:v 1M``."""
        parts: list[str] = []
        if self.scale:
            parts.append(f"scale={self.scale[0]}:{self.scale[1]}")
        parts.extend(self.video_args())
        return " ".join(parts)
