"""Error taxonomy shared by the pipeline, CLI and web surface."""


class BlazecutError(RuntimeError):
    """Base class for every failure surfaced to callers."""

    kind = "Error"
    message = "Video processing failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": str(self)}


class ToolNotInstalled(BlazecutError):
    kind = "ToolNotInstalled"
    message = "FFmpeg is not installed; install ffmpeg and ffprobe and try again"


class InvalidRequest(BlazecutError, ValueError):
    kind = "InvalidRequest"
    message = "Invalid request"


class NoValidSegments(InvalidRequest):
    kind = "NoValidSegments"
    message = "No valid segments were provided"


class ProbeFailed(BlazecutError):
    kind = "ProbeFailed"
    message = "Could not read video metadata"


class ToolFailed(BlazecutError):
    """An ffmpeg invocation exited non-zero; ``stderr`` holds its output."""

    def __init__(self, stderr: str = ""):
        self.stderr = stderr
        super().__init__(stderr.strip() or None)


class RenderFailed(ToolFailed):
    kind = "RenderFailed"
    message = "Failed to cut segment"


class TransitionFailed(ToolFailed):
    kind = "TransitionFailed"
    message = "Failed to create transition"


class ConcatFailed(ToolFailed):
    kind = "ConcatFailed"
    message = "Failed to join segments"


class SubtitleWriteFailed(BlazecutError):
    kind = "SubtitleWriteFailed"
    message = "Failed to write subtitle file"


class IoFailed(BlazecutError):
    kind = "IoFailed"
    message = "File operation failed"


class Cancelled(BlazecutError):
    kind = "Cancelled"
    message = "Edit was cancelled"
