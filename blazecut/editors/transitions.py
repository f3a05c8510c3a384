"""Transition compositor — blends adjacent rendered segments pairwise."""

import logging
from pathlib import Path
from typing import Callable

from blazecut import ffutil
from blazecut.errors import TransitionFailed

logger = logging.getLogger(__name__)

XFADE_OFFSET = 5.0

_XFADE = {
    "dissolve": "fade",
    "wipe": "wiperight",
    "slide": "slideleft",
}


def transition_filter(kind: str, duration: float) -> str:
    """filter_complex for one pair; unknown kinds fall back to a hard cut."""
    kind = (kind or "").strip().lower()
    d = ffutil.format_seconds(duration)
    if kind == "fade":
        return (
            f"[0:v]format=pix_fmts=yuva420p,fade=t=out:st={d}:d={d}:alpha=1[fv1];"
            f"[1:v]format=pix_fmts=yuva420p,fade=t=in:st=0:d={d}:alpha=1[fv2];"
            "[fv1][fv2]overlay=format=yuv420[outv]"
        )
    if kind in _XFADE:
        return (
            f"[0:v][1:v]xfade=transition={_XFADE[kind]}"
            f":duration={d}:offset={ffutil.format_seconds(XFADE_OFFSET)}[outv]"
        )
    return "[0:v][1:v]concat=n=2:v=1:a=0[outv]"


def build_transition_job(
    first: Path,
    second: Path,
    kind: str,
    duration: float,
    output_path: Path,
    video_codec: str,
) -> ffutil.FFmpegJob:
    args = [
        "-i", str(first),
        "-i", str(second),
        "-filter_complex", transition_filter(kind, duration),
        "-map", "[outv]",
        "-c:v", video_codec,
    ]
    return ffutil.FFmpegJob(stage="transition", args=args, output=output_path)


def composite_pair(
    first: Path,
    second: Path,
    kind: str,
    duration: float,
    output_path: Path,
    video_codec: str,
    runner: ffutil.Runner | None = None,
) -> Path:
    job = build_transition_job(first, second, kind, duration, output_path, video_codec)
    logger.info("Compositing %s + %s (%s)", first.name, second.name, kind)
    return ffutil.execute(job, runner, TransitionFailed)


def composite_pairs(
    artifacts: list[Path],
    kind: str,
    duration: float,
    output_for: Callable[[int], Path],
    video_codec: str,
    runner: ffutil.Runner | None = None,
) -> list[Path]:
    """Composite each adjacent pair; N artifacts become N-1 independent pairs.

    The pairs are not chained: artifact i appears in both pair i-1 and pair i.
    """
    return [
        composite_pair(
            artifacts[i], artifacts[i + 1], kind, duration,
            output_for(i), video_codec, runner,
        )
        for i in range(len(artifacts) - 1)
    ]
