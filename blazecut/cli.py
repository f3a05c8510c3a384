"""Thin CLI entry point — builds an EditRequest and calls the engine."""

import argparse
import json
import logging
import sys
from pathlib import Path

from blazecut import ffutil
from blazecut.engine import preview, process
from blazecut.errors import BlazecutError, InvalidRequest
from blazecut.manifest import TRANSITIONS, EditRequest, PreviewRequest, load_request
from blazecut.models import Segment
from blazecut.profiles import QUALITIES


def parse_segment(value: str) -> Segment:
    """Parse ``START:END`` or ``START:END:TEXT``."""
    parts = value.split(":", 2)
    if len(parts) < 2:
        raise argparse.ArgumentTypeError(f"expected START:END[:TEXT], got {value!r}")
    try:
        start, end = float(parts[0]), float(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"segment times must be numbers: {value!r}")
    text = parts[2] if len(parts) == 3 and parts[2] else None
    return Segment(start=start, end=end, text=text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blazecut",
        description="BlazeCut — cut, transition and join video segments with FFmpeg.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    proc = sub.add_parser("process", help="Cut and join segments of a video")
    proc.add_argument("video", nargs="?", type=Path, help="Input video file")
    proc.add_argument("--manifest", "-m", type=Path, help="Path to a JSON edit request")
    proc.add_argument("--output", "-o", type=Path, help="Output file path")
    proc.add_argument("--segment", "-s", type=parse_segment, action="append", default=[],
                      help="START:END[:TEXT] in seconds; repeat for more segments")
    proc.add_argument("--quality", choices=QUALITIES, default="medium", help="Encode quality")
    proc.add_argument("--format", default="mp4", help="Output container (mp4, mov, webm, mkv)")
    proc.add_argument("--transition", choices=TRANSITIONS, default="none", help="Transition between segments")
    proc.add_argument("--transition-duration", type=float, default=1.0, help="Transition length (seconds)")
    proc.add_argument("--volume", type=float, default=1.0, help="Volume multiplier")
    proc.add_argument("--subtitles", action="store_true", help="Burn segment text in as captions")

    prev = sub.add_parser("preview", help="Render a single segment at 720p")
    prev.add_argument("video", type=Path, help="Input video file")
    prev.add_argument("segment", type=parse_segment, help="START:END[:TEXT]")
    prev.add_argument("--volume", type=float, default=1.0, help="Volume multiplier")
    prev.add_argument("--subtitles", action="store_true", help="Burn segment text in as captions")

    probe = sub.add_parser("probe", help="Print video metadata as JSON")
    probe.add_argument("video", type=Path)

    thumb = sub.add_parser("thumbnail", help="Extract a thumbnail image")
    thumb.add_argument("video", type=Path)
    thumb.add_argument("--output", "-o", type=Path, help="Output image path")

    frames = sub.add_parser("keyframes", help="Extract evenly spaced frames")
    frames.add_argument("video", type=Path)
    frames.add_argument("--count", "-n", type=int, default=5, help="Number of frames")
    frames.add_argument("--output-dir", "-o", type=Path, help="Directory for the frames")

    sub.add_parser("check", help="Report whether ffmpeg/ffprobe are installed")

    serve = sub.add_parser("serve", help="Launch the HTTP API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    return parser


def _edit_request(args: argparse.Namespace) -> EditRequest:
    if args.manifest:
        return load_request(args.manifest)
    if not args.video:
        raise InvalidRequest("provide either a VIDEO argument or --manifest")
    output = args.output or args.video.with_name(f"{args.video.stem}_edited.{args.format}")
    return EditRequest(
        input=args.video,
        output=output,
        segments=args.segment,
        quality=args.quality,
        format=args.format,
        transition=args.transition,
        transition_duration=args.transition_duration,
        volume=args.volume,
        add_subtitles=args.subtitles,
    )


def _run(args: argparse.Namespace) -> None:
    if args.command == "check":
        print(json.dumps(ffutil.tool_status(), indent=2))
        return

    if args.command == "probe":
        ffutil.check_ffmpeg()
        print(json.dumps(vars(ffutil.probe(args.video)), indent=2))
        return

    if args.command == "thumbnail":
        ffutil.check_ffmpeg()
        output = args.output or args.video.with_name(f"{args.video.stem}_thumb.jpg")
        print(ffutil.extract_thumbnail(args.video, output))
        return

    if args.command == "keyframes":
        ffutil.check_ffmpeg()
        out_dir = args.output_dir or args.video.with_name(f"{args.video.stem}_frames")
        for frame in ffutil.extract_key_frames(args.video, args.count, out_dir):
            print(frame)
        return

    if args.command == "preview":
        req = PreviewRequest(
            input=args.video, segment=args.segment,
            volume=args.volume, add_subtitles=args.subtitles,
        )
        print(preview(req))
        return

    req = _edit_request(args)

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:4.0%}] {stage}")

    result = process(req, on_progress=on_progress)

    print()
    print(f"Done! Output: {result.output_path}")
    print(f"  Segments rendered: {result.segments_rendered}")
    if result.segments_skipped:
        print(f"  Invalid segments skipped: {result.segments_skipped}")
    if result.transitions_applied:
        print(f"  Transitions applied: {result.transitions_applied}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from blazecut.web import create_app
        app = create_app()
        print(f"BlazeCut API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    try:
        _run(args)
    except BlazecutError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
