"""Segment renderer — trims one time range of the source into an artifact."""

import logging
from pathlib import Path

from blazecut import ffutil
from blazecut.editors.captions import write_caption_file
from blazecut.errors import RenderFailed
from blazecut.filters import build_segment_chain
from blazecut.models import EncodeProfile, Segment
from blazecut.workspace import Workspace

logger = logging.getLogger(__name__)

SEGMENT_AUDIO_CODEC = "aac"


def build_render_job(
    input_path: Path,
    segment: Segment,
    profile: EncodeProfile,
    output_path: Path,
    volume: float = 1.0,
    subtitle_path: Path | None = None,
) -> ffutil.FFmpegJob:
    chain = build_segment_chain(profile, volume=volume, subtitle_path=subtitle_path)
    args = [
        "-ss", ffutil.format_seconds(segment.start),
        "-i", str(input_path),
        "-t", ffutil.format_seconds(segment.duration),
        *chain.to_args(),
        "-c:v", profile.video_codec,
        *profile.video_args(),
        "-c:a", SEGMENT_AUDIO_CODEC,
        "-strict", "experimental",
    ]
    return ffutil.FFmpegJob(stage="render", args=args, output=output_path)


def render_segment(
    input_path: Path,
    segment: Segment,
    profile: EncodeProfile,
    output_path: Path,
    workspace: Workspace,
    volume: float = 1.0,
    add_subtitles: bool = False,
    runner: ffutil.Runner | None = None,
) -> Path:
    """Cut *segment* out of *input_path* into *output_path*.

    When subtitles are requested and the segment has text, a caption file is
    written into *workspace* first and burnt in.
    """
    subtitle_path = None
    if add_subtitles and segment.text:
        subtitle_path = workspace.path(f"{output_path.stem}.srt")
        write_caption_file(segment.text, segment.duration, subtitle_path)

    job = build_render_job(
        input_path, segment, profile, output_path,
        volume=volume, subtitle_path=subtitle_path,
    )
    logger.info("Rendering %.2fs-%.2fs -> %s", segment.start, segment.end, output_path.name)
    return ffutil.execute(job, runner, RenderFailed)
