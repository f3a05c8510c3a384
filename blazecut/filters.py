"""Structured ffmpeg filter chains.

Filters are collected as typed descriptors and serialized once, when the
command line is built. Escaping happens only here: first at the filter
option level (``\\``, ``'`` and ``:``), then at the filtergraph level
(``\\``, ``'``, ``[``, ``]``, ``,`` and ``;``).
"""

from dataclasses import dataclass, field
from pathlib import Path

from blazecut.models import EncodeProfile

VOLUME_TOLERANCE = 0.01

_OPTION_SPECIAL = "\\':"
_GRAPH_SPECIAL = "\\'[],;"


def _escape(value: str, special: str) -> str:
    return "".join(f"\\{c}" if c in special else c for c in value)


def escape_filter_value(value: str) -> str:
    """Escape a filter option value for use inside a -vf/-af argument."""
    return _escape(_escape(value, _OPTION_SPECIAL), _GRAPH_SPECIAL)


def _format_number(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class Scale:
    width: int
    height: int
    stream = "video"

    def render(self) -> str:
        return f"scale={self.width}:{self.height}"


@dataclass(frozen=True)
class Volume:
    factor: float
    stream = "audio"

    def render(self) -> str:
        return f"volume={_format_number(self.factor)}"


@dataclass(frozen=True)
class Subtitles:
    path: Path
    stream = "video"

    def render(self) -> str:
        return f"subtitles={escape_filter_value(str(self.path))}"


@dataclass
class FilterChain:
    """Ordered filters for one encode; video and audio filters serialize separately."""

    filters: list = field(default_factory=list)

    def append(self, flt) -> "FilterChain":
        self.filters.append(flt)
        return self

    def video_filters(self) -> list:
        return [f for f in self.filters if f.stream == "video"]

    def audio_filters(self) -> list:
        return [f for f in self.filters if f.stream == "audio"]

    def video_arg(self) -> str | None:
        parts = [f.render() for f in self.video_filters()]
        return ",".join(parts) if parts else None

    def audio_arg(self) -> str | None:
        parts = [f.render() for f in self.audio_filters()]
        return ",".join(parts) if parts else None

    def to_args(self) -> list[str]:
        args: list[str] = []
        vf = self.video_arg()
        if vf:
            args += ["-vf", vf]
        af = self.audio_arg()
        if af:
            args += ["-af", af]
        return args

    def __len__(self) -> int:
        return len(self.filters)


def needs_volume(volume: float) -> bool:
    return abs(volume - 1.0) > VOLUME_TOLERANCE


def build_segment_chain(
    profile: EncodeProfile | None,
    volume: float = 1.0,
    subtitle_path: Path | None = None,
) -> FilterChain:
    """Profile scale first, then volume (if not ~1.0), then the caption overlay."""
    chain = FilterChain()
    if profile is not None and profile.scale:
        chain.append(Scale(*profile.scale))
    if needs_volume(volume):
        chain.append(Volume(volume))
    if subtitle_path is not None:
        chain.append(Subtitles(subtitle_path))
    return chain
