"""FFmpeg/ffprobe subprocess helpers.

Every ffmpeg stage is described as an :class:`FFmpegJob` and handed to a
*runner*, a callable that takes an argument list and returns a
:class:`RunOutcome`. The default runner spawns the real process; tests pass
their own.
"""

import json
import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from blazecut.errors import InvalidRequest, ProbeFailed, ToolFailed, ToolNotInstalled
from blazecut.models import ProbeResult

logger = logging.getLogger(__name__)

TOOLS = ("ffmpeg", "ffprobe")
THUMBNAIL_POSITION = 0.15
THUMBNAIL_WIDTH = 320


def format_seconds(value: float) -> str:
    """Fixed-point seconds for ffmpeg arguments, trailing zeros dropped."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


@dataclass
class RunOutcome:
    returncode: int
    stderr: str = ""
    stdout: str = ""


Runner = Callable[[list[str]], RunOutcome]


@dataclass
class FFmpegJob:
    """One ffmpeg invocation: arguments before the output path, and the output."""

    stage: str
    args: list[str]
    output: Path

    def command(self) -> list[str]:
        return ["ffmpeg", "-y", *self.args, str(self.output)]


def run_command(cmd: list[str]) -> RunOutcome:
    """Run *cmd* to completion and capture its output."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ToolNotInstalled(f"{cmd[0]} not found") from e
    return RunOutcome(returncode=result.returncode, stderr=result.stderr, stdout=result.stdout)


def execute(
    job: FFmpegJob,
    runner: Runner | None = None,
    error_cls: type[ToolFailed] = ToolFailed,
) -> Path:
    """Run *job*; on non-zero exit drop any partial output and raise *error_cls*."""
    runner = runner or run_command
    cmd = job.command()
    logger.debug("%s: %s", job.stage, shlex.join(cmd))
    outcome = runner(cmd)
    if outcome.returncode != 0:
        logger.warning(
            "%s failed (rc=%s): %s", job.stage, outcome.returncode, outcome.stderr[-500:]
        )
        job.output.unlink(missing_ok=True)
        raise error_cls(outcome.stderr)
    return job.output


def check_ffmpeg() -> None:
    """Raise ToolNotInstalled if ffmpeg/ffprobe are not on PATH."""
    for cmd in TOOLS:
        if shutil.which(cmd) is None:
            raise ToolNotInstalled(f"{cmd} not found on PATH")


def ffmpeg_version() -> str | None:
    """First line of ``ffmpeg -version``, or None if it cannot be read."""
    try:
        result = subprocess.run(["ffmpeg", "-version"], capture_output=True, text=True)
    except OSError:
        return None
    if result.returncode != 0:
        return None
    lines = result.stdout.splitlines()
    return lines[0] if lines else None


def tool_status() -> dict:
    try:
        check_ffmpeg()
    except ToolNotInstalled:
        return {"installed": False}
    status: dict = {"installed": True}
    version = ffmpeg_version()
    if version:
        status["version"] = version
    return status


def parse_fps(rate: str) -> float:
    """Parse an ffprobe rational such as ``"24000/1001"``; 0.0 if unusable."""
    parts = str(rate).split("/")
    if len(parts) != 2:
        return 0.0
    try:
        num = float(parts[0])
        den = float(parts[1])
    except ValueError:
        return 0.0
    if den <= 0:
        return 0.0
    return num / den


def _to_float(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def probe(input_path: Path) -> ProbeResult:
    """Extract media metadata via ffprobe."""
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ToolNotInstalled("ffprobe not found") from e
    if result.returncode != 0:
        raise ProbeFailed(f"ffprobe exited with {result.returncode}: {result.stderr.strip()}")

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ProbeFailed(f"could not parse ffprobe output: {e}") from e

    video_stream = next(
        (s for s in data.get("streams", []) if s.get("codec_type") == "video"), None
    )
    if video_stream is None:
        raise ProbeFailed(f"No video stream found in {input_path}")

    fmt = data.get("format", {})
    return ProbeResult(
        duration=_to_float(fmt.get("duration")),
        width=_to_int(video_stream.get("width")),
        height=_to_int(video_stream.get("height")),
        fps=parse_fps(video_stream.get("r_frame_rate", "0/1")),
        codec=video_stream.get("codec_name", "unknown"),
        bitrate=_to_int(fmt.get("bit_rate")),
    )


def frame_job(input_path: Path, position: float, output_path: Path, width: int | None = None) -> FFmpegJob:
    args = ["-ss", f"{position:.3f}", "-i", str(input_path), "-vframes", "1"]
    if width:
        args += ["-vf", f"scale={width}:-1"]
    args += ["-q:v", "2", "-f", "image2"]
    return FFmpegJob(stage="frame", args=args, output=output_path)


def extract_thumbnail(
    input_path: Path, output_path: Path, runner: Runner | None = None
) -> Path:
    """Grab a single scaled frame 15% of the way into the video."""
    duration = probe(input_path).duration
    job = frame_job(input_path, duration * THUMBNAIL_POSITION, output_path, THUMBNAIL_WIDTH)
    return execute(job, runner)


def key_frame_positions(duration: float, count: int) -> list[float]:
    if count < 1:
        raise InvalidRequest(f"frame count must be at least 1, got {count}")
    step = duration / (count + 1)
    return [step * i for i in range(1, count + 1)]


def extract_key_frames(
    input_path: Path, count: int, output_dir: Path, runner: Runner | None = None
) -> list[Path]:
    """Grab *count* frames spread evenly across the video."""
    duration = probe(input_path).duration
    output_dir.mkdir(parents=True, exist_ok=True)
    frames: list[Path] = []
    for i, position in enumerate(key_frame_positions(duration, count), 1):
        job = frame_job(input_path, position, output_dir / f"frame_{i}.jpg")
        frames.append(execute(job, runner))
    return frames
