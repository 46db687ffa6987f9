"""Shared data types used across TakeSync."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

SUPPORTED_AUDIO = ("wav",)
SUPPORTED_VIDEO = ("mp4",)


class MediaType(Enum):
    AUDIO = "audio"
    VIDEO = "video"

    @classmethod
    def from_extension(cls, extension: str | None) -> "MediaType | None":
        if not extension:
            return None
        ext = extension.lower().lstrip(".")
        if ext in SUPPORTED_AUDIO:
            return cls.AUDIO
        if ext in SUPPORTED_VIDEO:
            return cls.VIDEO
        return None

    @classmethod
    def from_path(cls, path: Path) -> "MediaType | None":
        return cls.from_extension(Path(path).suffix)


def _str_or_none(value) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _int_or_none(value) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class StreamInfo:
    """One entry of ffprobe's ``streams`` list."""

    index: int | None = None
    codec_type: str | None = None
    codec_name: str | None = None
    sample_rate: str | None = None
    duration: str | None = None
    duration_ts: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "StreamInfo":
        return cls(
            index=_int_or_none(data.get("index")),
            codec_type=_str_or_none(data.get("codec_type")),
            codec_name=_str_or_none(data.get("codec_name")),
            sample_rate=_str_or_none(data.get("sample_rate")),
            duration=_str_or_none(data.get("duration")),
            duration_ts=_int_or_none(data.get("duration_ts")),
        )


@dataclass
class FormatTags:
    """Container-level tags. Which keys are present depends on the recording device.

    Keys are matched case-insensitively; anything without a dedicated field is
    kept in ``extra`` (e.g. ``com.android.version``).
    """

    creation_time: str | None = None
    date: str | None = None
    time_reference: str | None = None
    encoded_by: str | None = None
    originator_reference: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "FormatTags":
        known = {"creation_time", "date", "time_reference", "encoded_by", "originator_reference"}
        values: dict[str, str | None] = {}
        extra: dict[str, str] = {}
        for key, value in data.items():
            value = _str_or_none(value)
            if value is None:
                continue
            lowered = str(key).lower()
            if lowered in known:
                values[lowered] = value
            else:
                extra[str(key)] = value
        return cls(**values, extra=extra)


@dataclass
class FormatInfo:
    """ffprobe's ``format`` block."""

    filename: str | None = None
    format_name: str | None = None
    duration: str | None = None
    tags: FormatTags | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "FormatInfo":
        tags = data.get("tags")
        return cls(
            filename=_str_or_none(data.get("filename")),
            format_name=_str_or_none(data.get("format_name")),
            duration=_str_or_none(data.get("duration")),
            tags=FormatTags.from_dict(tags) if isinstance(tags, dict) else None,
        )


@dataclass
class MetadataRecord:
    """Metadata extracted from a media file via ffprobe.

    Every field is optional: what ffprobe reports varies by container and
    recording device, and a missing value is normal.
    """

    streams: list[StreamInfo] = field(default_factory=list)
    format: FormatInfo | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "MetadataRecord":
        streams = data.get("streams")
        fmt = data.get("format")
        return cls(
            streams=[
                StreamInfo.from_dict(s)
                for s in (streams if isinstance(streams, list) else [])
                if isinstance(s, dict)
            ],
            format=FormatInfo.from_dict(fmt) if isinstance(fmt, dict) else None,
        )

    @property
    def tags(self) -> FormatTags | None:
        if self.format is None:
            return None
        return self.format.tags
