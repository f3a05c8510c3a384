"""Encode profiles — maps (container format, quality tier) to encoder settings."""

from blazecut.models import EncodeProfile

DEFAULT_QUALITY = "medium"

_HD = (1280, 720)
_FULL_HD = (1920, 1080)

# family -> (video codec, audio codec, {quality: (scale, bitrate, preset)})
_FAMILIES: dict[str, tuple[str, str, dict[str, tuple]]] = {
    "h264": (
        "libx264",
        "aac",
        {
            "low": (_HD, "1.5M", "fast"),
            "medium": (_FULL_HD, "4M", "fast"),
            "high": (None, "8M", "slow"),
            "ultra": (None, "15M", "slow"),
        },
    ),
    "vp9": (
        "libvpx-vp9",
        "libopus",
        {
            "low": (_HD, "1M", None),
            "medium": (_FULL_HD, "3M", None),
            "high": (None, "6M", None),
            "ultra": (None, "10M", None),
        },
    ),
    # mkv and anything unrecognised: H.264 without a preset
    "generic": (
        "libx264",
        "aac",
        {
            "low": (_HD, "1.5M", None),
            "medium": (_FULL_HD, "4M", None),
            "high": (None, "8M", None),
            "ultra": (None, "15M", None),
        },
    ),
}

_FORMAT_FAMILY = {"mp4": "h264", "mov": "h264", "webm": "vp9"}

QUALITIES = tuple(_FAMILIES["h264"][2])


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def resolve_profile(fmt: str | None, quality: str | None) -> EncodeProfile:
    """Resolve encoder settings. Unknown formats use H.264, unknown tiers use medium."""
    family = _FORMAT_FAMILY.get(_normalize(fmt), "generic")
    video_codec, audio_codec, tiers = _FAMILIES[family]
    tier = _normalize(quality)
    if tier not in tiers:
        tier = DEFAULT_QUALITY
    scale, bitrate, preset = tiers[tier]
    return EncodeProfile(
        video_codec=video_codec,
        audio_codec=audio_codec,
        bitrate=bitrate,
        scale=scale,
        preset=preset,
    )


def output_codecs(fmt: str | None) -> tuple[str, str]:
    """Return the (video, audio) codec pair used for the final encode."""
    if _normalize(fmt) == "webm":
        return "libvpx-vp9", "libopus"
    return "libx264", "aac"
