"""JSON edit requests — the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from blazecut.errors import InvalidRequest, IoFailed
from blazecut.models import Segment

TRANSITIONS = ("none", "fade", "dissolve", "wipe", "slide")


@dataclass
class EditRequest:
    """Cut, optionally transition, and join segments of one source file."""

    input: Path
    output: Path
    segments: list[Segment] = field(default_factory=list)
    quality: str = "medium"
    format: str = "mp4"
    transition: str = "none"
    transition_duration: float = 1.0
    volume: float = 1.0
    add_subtitles: bool = False

    def valid_segments(self) -> list[Segment]:
        """Segments with end > start, in timeline order."""
        return [s for s in self.segments if s.is_valid]


@dataclass
class PreviewRequest:
    """Render a single segment for quick playback."""

    input: Path
    segment: Segment
    volume: float = 1.0
    add_subtitles: bool = False


def segment_from_dict(data: dict) -> Segment:
    if not isinstance(data, dict) or "start" not in data or "end" not in data:
        raise InvalidRequest("each segment must contain 'start' and 'end'")
    try:
        start = float(data["start"])
        end = float(data["end"])
    except (TypeError, ValueError) as e:
        raise InvalidRequest(f"segment times must be numbers: {e}") from e
    return Segment(
        start=start,
        end=end,
        text=data.get("text", data.get("content")),
        kind=data.get("kind", data.get("type")),
    )


def _number(data: dict, key: str, default: float) -> float:
    value = data.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidRequest(f"'{key}' must be a number") from e


def _flag(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidRequest(f"'{key}' must be true or false")
    return value


def request_from_dict(data: dict) -> EditRequest:
    """Build an EditRequest from a decoded JSON payload."""
    if not isinstance(data, dict) or "input" not in data or "output" not in data:
        raise InvalidRequest("request must contain 'input' and 'output' fields")

    segments = data.get("segments") or []
    if not isinstance(segments, list):
        raise InvalidRequest("'segments' must be a list")

    return EditRequest(
        input=Path(data["input"]),
        output=Path(data["output"]),
        segments=[segment_from_dict(s) for s in segments],
        quality=data.get("quality") or "medium",
        format=data.get("format") or "mp4",
        transition=data.get("transition") or "none",
        transition_duration=_number(data, "transition_duration", 1.0),
        volume=_number(data, "volume", 1.0),
        add_subtitles=_flag(data, "add_subtitles"),
    )


def preview_from_dict(data: dict) -> PreviewRequest:
    if not isinstance(data, dict) or "input" not in data or "segment" not in data:
        raise InvalidRequest("preview must contain 'input' and 'segment' fields")
    return PreviewRequest(
        input=Path(data["input"]),
        segment=segment_from_dict(data["segment"]),
        volume=_number(data, "volume", 1.0),
        add_subtitles=_flag(data, "add_subtitles"),
    )


def load_request(path: str | Path) -> EditRequest:
    """Load and validate an edit request from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise IoFailed(f"could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidRequest(f"{path} is not valid JSON: {e}") from e
    return request_from_dict(data)
