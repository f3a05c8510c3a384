"""Orchestrator — runs the segment pipeline described by an EditRequest."""

import logging
import os
import shutil
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from blazecut import ffutil
from blazecut.editors.concat import concat_segments
from blazecut.editors.cut import render_segment
from blazecut.editors.transitions import composite_pairs
from blazecut.errors import Cancelled, InvalidRequest, IoFailed, NoValidSegments
from blazecut.manifest import EditRequest, PreviewRequest
from blazecut.models import EncodeProfile
from blazecut.profiles import resolve_profile
from blazecut.workspace import APP_NAMESPACE, Workspace, run_id

logger = logging.getLogger(__name__)

# Matroska takes any codec pair, so intermediates never hit container limits.
INTERMEDIATE_EXT = "mkv"

RENDER_SPAN = 0.6
TRANSITION_MARK = 0.7
CONCAT_MARK = 0.9

PREVIEW_PROFILE = EncodeProfile(video_codec="libx264", audio_codec="aac", scale=(1280, 720))


@dataclass
class EngineResult:
    output_path: Path
    segments_rendered: int = 0
    segments_skipped: int = 0
    transitions_applied: int = 0


class _Progress:
    """Non-decreasing, best-effort progress reporting."""

    def __init__(self, callback: Callable[[str, float], None] | None):
        self.callback = callback
        self.fraction = 0.0

    def __call__(self, stage: str, frac: float) -> None:
        self.fraction = max(self.fraction, min(frac, 1.0))
        if self.callback is None:
            return
        try:
            self.callback(stage, self.fraction)
        except Exception:
            logger.warning("Progress callback failed at %r", stage, exc_info=True)


def process(
    request: EditRequest,
    on_progress: Callable[[str, float], None] | None = None,
    *,
    runner: ffutil.Runner | None = None,
    work_root: Path | None = None,
    cancel_event: threading.Event | None = None,
) -> EngineResult:
    """Execute the full editing pipeline.

    Args:
        request: Edit to perform.
        on_progress: Optional callback(stage_name, fraction_complete).
        runner: Executes ffmpeg argument lists; defaults to a real subprocess.
        work_root: Directory under which the per-run working directory is made.
        cancel_event: Checked between stages; when set the run stops with
            ``Cancelled`` once intermediates are cleaned up.
    """
    progress = _Progress(on_progress)

    def _checkpoint() -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise Cancelled()

    ffutil.check_ffmpeg()

    # --- Validating ---
    progress("Validating segments", 0.0)
    segments = request.valid_segments()
    for seg in request.segments:
        if not seg.is_valid:
            logger.info("Ignoring invalid segment %.2f-%.2f", seg.start, seg.end)
    if not segments:
        raise NoValidSegments()

    profile = resolve_profile(request.format, request.quality)
    transition = (request.transition or "none").strip().lower()
    logger.info(
        "Editing %s: %d segments, profile %s %s, transition %s",
        request.input, len(segments), profile.video_codec, profile.describe(), transition,
    )

    workspace = Workspace(work_root)
    transitions_applied = 0
    try:
        # --- Rendering ---
        artifacts: list[Path] = []
        n = len(segments)
        for i, seg in enumerate(segments):
            _checkpoint()
            artifact = workspace.path(f"segment_{i}.{INTERMEDIATE_EXT}")
            render_segment(
                request.input, seg, profile, artifact, workspace,
                volume=request.volume,
                add_subtitles=request.add_subtitles,
                runner=runner,
            )
            artifacts.append(artifact)
            progress(f"Rendered segment {i + 1}/{n}", RENDER_SPAN * (i + 1) / n)

        # --- Transitioning ---
        if transition != "none" and len(artifacts) > 1:
            _checkpoint()
            progress(f"Applying {transition} transitions", TRANSITION_MARK)
            artifacts = composite_pairs(
                artifacts,
                transition,
                request.transition_duration,
                lambda i: workspace.path(f"transition_{i}_{i + 1}.{INTERMEDIATE_EXT}"),
                profile.video_codec,
                runner,
            )
            transitions_applied = len(artifacts)

        # --- Concatenating ---
        _checkpoint()
        progress("Joining segments", CONCAT_MARK)
        # ffmpeg writes into the workspace; the output path is only touched on success
        suffix = request.output.suffix or f".{request.format}"
        staged = workspace.path(f"output{suffix}")
        concat_segments(
            artifacts, request.format, staged,
            workspace.path("segments.txt"), runner,
        )
        _publish(staged, request.output)
        progress("Done", 1.0)
    finally:
        workspace.cleanup()

    return EngineResult(
        output_path=request.output,
        segments_rendered=n,
        segments_skipped=len(request.segments) - n,
        transitions_applied=transitions_applied,
    )


def _publish(staged: Path, output: Path) -> None:
    """Move the finished file onto *output*, copying across filesystems."""
    try:
        os.replace(staged, output)
    except OSError:
        try:
            shutil.copyfile(staged, output)
        except OSError as e:
            raise IoFailed(f"could not write {output}: {e}") from e


def preview(
    request: PreviewRequest,
    *,
    runner: ffutil.Runner | None = None,
    preview_root: Path | None = None,
) -> Path:
    """Render one segment at 720p into a fresh preview file and return its path."""
    ffutil.check_ffmpeg()

    seg = request.segment
    if not seg.is_valid:
        raise InvalidRequest(f"invalid time range {seg.start}-{seg.end}")

    preview_dir = Path(preview_root or tempfile.gettempdir()) / f"{APP_NAMESPACE}_preview"
    try:
        preview_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoFailed(f"could not create preview directory: {e}") from e

    output = preview_dir / f"preview_{run_id()}.mp4"
    with Workspace(preview_dir) as workspace:
        render_segment(
            request.input, seg, PREVIEW_PROFILE, output, workspace,
            volume=request.volume,
            add_subtitles=request.add_subtitles,
            runner=runner,
        )
    return output
