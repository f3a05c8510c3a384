"""Caption writer — one timed SRT cue per rendered segment."""

import logging
from pathlib import Path

from blazecut.errors import SubtitleWriteFailed

logger = logging.getLogger(__name__)


def _format_srt_time(seconds: float) -> str:
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    ms = int((seconds % 1) * 1000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def _format_cue_end(duration: float) -> str:
    # Whole seconds only; the hours field stays at 00 even past an hour.
    total = int(duration)
    return f"00:{total // 60:02d}:{total % 60:02d},000"


def caption_text(text: str, duration: float) -> str:
    lines = [
        "1",
        f"{_format_srt_time(0)} --> {_format_cue_end(duration)}",
        text,
    ]
    return "\n".join(lines) + "\n"


def write_caption_file(text: str, duration: float, path: Path) -> Path:
    """Write a single cue covering the whole segment."""
    try:
        path.write_text(caption_text(text, duration), encoding="utf-8")
    except OSError as e:
        raise SubtitleWriteFailed(f"{path}: {e}") from e
    logger.debug("Wrote caption file %s", path)
    return path
