"""Concatenator — joins the final artifacts and encodes the output container."""

import logging
from pathlib import Path

from blazecut import ffutil
from blazecut.errors import ConcatFailed, IoFailed
from blazecut.profiles import output_codecs

logger = logging.getLogger(__name__)


def _quote(path: Path) -> str:
    return "'" + str(path).replace("'", "'\\''") + "'"


def write_concat_list(paths: list[Path], list_path: Path) -> Path:
    """Write the concat demuxer list, one ``file '<path>'`` line per artifact."""
    lines = [f"file {_quote(p)}" for p in paths]
    try:
        list_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        raise IoFailed(f"could not write segment list {list_path}: {e}") from e
    return list_path


def build_concat_job(list_path: Path, fmt: str, output_path: Path) -> ffutil.FFmpegJob:
    video_codec, audio_codec = output_codecs(fmt)
    args = [
        "-f", "concat",
        "-safe", "0",
        "-i", str(list_path),
        "-c:v", video_codec,
        "-c:a", audio_codec,
        "-strict", "-2",
    ]
    return ffutil.FFmpegJob(stage="concat", args=args, output=output_path)


def concat_segments(
    paths: list[Path],
    fmt: str,
    output_path: Path,
    list_path: Path,
    runner: ffutil.Runner | None = None,
) -> Path:
    """Join *paths* in order into *output_path*, re-encoding for *fmt*."""
    if not paths:
        raise ValueError("concat_segments called with empty segment list")

    write_concat_list(paths, list_path)
    job = build_concat_job(list_path, fmt, output_path)
    logger.info("Joining %d segments into %s", len(paths), output_path)
    return ffutil.execute(job, runner, ConcatFailed)
