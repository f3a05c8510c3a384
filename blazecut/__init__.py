"""BlazeCut — segment-based video editing on top of FFmpeg."""

__version__ = "0.1.0"
