"""A single recorded take and the facts derived from its metadata."""

import math
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import cached_property
from pathlib import Path

from takesync.models import MediaType, MetadataRecord


def duration_pretty(duration: timedelta) -> str:
    """Format a duration as e.g. ``1h2m3s``; seconds are always shown."""
    s = int(duration.total_seconds())
    out = ""
    if s >= 86400:
        out += f"{s // 86400}d"
        s %= 86400
    if s >= 3600:
        out += f"{s // 3600}h"
        s %= 3600
    if s >= 60:
        out += f"{s // 60}m"
        s %= 60
    return out + f"{s}s"


def _parse_seconds(raw: str) -> float | None:
    try:
        value = float(raw.replace('"', ""))
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


@dataclass(frozen=True)
class MediaItem:
    """One probed media file.

    ``metadata`` is what ffprobe reported (None if nothing usable) and
    ``stat`` is the file's ``os.stat`` result, used by the filesystem
    timestamp fallback.

    ``duration`` and ``end`` are computed on first access and cached.
    """

    path: Path
    metadata: MetadataRecord | None = None
    stat: os.stat_result | None = None

    @classmethod
    def from_path(cls, path: Path, metadata: MetadataRecord | None) -> "MediaItem":
        path = Path(path)
        try:
            stat = path.stat()
        except OSError:
            stat = None
        return cls(path=path, metadata=metadata, stat=stat)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str | None:
        suffix = self.path.suffix
        return suffix[1:].lower() if suffix else None

    @property
    def base_name(self) -> str:
        return self.path.stem

    @property
    def media_type(self) -> MediaType | None:
        return MediaType.from_extension(self.extension)

    @property
    def duration_ts(self) -> int | None:
        if self.metadata is None:
            return None
        values = [s.duration_ts for s in self.metadata.streams if s.duration_ts is not None]
        return max(values, default=None)

    @cached_property
    def duration(self) -> timedelta | None:
        """Longest stream duration, to the nearest microsecond."""
        if self.metadata is None:
            return None
        micros = [
            round(seconds * 1_000_000)
            for seconds in (
                _parse_seconds(s.duration) for s in self.metadata.streams if s.duration
            )
            if seconds is not None
        ]
        if not micros:
            return None
        return timedelta(microseconds=max(micros))

    @cached_property
    def end(self) -> datetime | None:
        """When the take stopped recording, per the first device heuristic that answers."""
        from takesync.devices import resolve_end

        return resolve_end(self)

    @property
    def start(self) -> datetime | None:
        end = self.end
        duration = self.duration
        if end is None or duration is None:
            return None
        return end - duration

    @property
    def is_complete(self) -> bool:
        return self.duration is not None and self.end is not None

    @property
    def duration_pretty(self) -> str | None:
        duration = self.duration
        return duration_pretty(duration) if duration is not None else None

    @property
    def start_pretty(self) -> str | None:
        start = self.start
        return start.strftime("%Y-%m-%d %H:%M:%S") if start is not None else None

    def __str__(self) -> str:
        return '[({}): "{}" ({})]'.format(
            self.start_pretty or "unknown",
            self.path,
            self.duration_pretty or "unknown",
        )
