"""Per-device heuristics that recover when a take stopped recording.

Recorders store their clock in different tags (or not at all), so each
heuristic knows one device's convention. They are tried in order and the
first one that yields a timestamp wins.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from takesync.media import MediaItem

logger = logging.getLogger(__name__)

DeviceDatetimeGetter = Callable[["MediaItem"], datetime | None]

# YYYY-MM-DDTHH:MM:SS[.f+]Z, any number of fractional digits.
ANDROID_CREATION_TIME = re.compile(
    r"(?P<stamp>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(?P<fraction>\d+))?Z", re.ASCII
)
ANDROID_CLOCK_OFFSET = timedelta(hours=1)
# YYYY-MM-DD HH:MM:SS
ZOOM_DATE_TIME = re.compile(r"(?P<stamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})", re.ASCII)


def _parse(value: str, pattern: re.Pattern) -> datetime | None:
    """Match *value* against *pattern* exactly; fractions beyond microseconds are truncated."""
    match = pattern.fullmatch(value)
    if match is None:
        return None
    try:
        parsed = datetime.strptime(match["stamp"].replace("T", " "), "%Y-%m-%d %H:%M:%S")
    except ValueError:
        # Right shape, impossible value (month 13, Feb 30, ...).
        return None
    fraction = match.groupdict().get("fraction")
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed


def android_creation_time(item: "MediaItem") -> datetime | None:
    """``creation_time`` as written by Android 10 cameras, which record it an hour early."""
    tags = item.metadata.tags if item.metadata else None
    if tags is None or tags.creation_time is None:
        return None
    parsed = _parse(tags.creation_time, ANDROID_CREATION_TIME)
    if parsed is None:
        return None
    return parsed + ANDROID_CLOCK_OFFSET


def zoom_h6_date_time(item: "MediaItem") -> datetime | None:
    """Zoom H6 splits the timestamp into ``date`` and ``creation_time`` (time of day) tags."""
    tags = item.metadata.tags if item.metadata else None
    if tags is None or tags.date is None or tags.creation_time is None:
        return None
    return _parse(f"{tags.date} {tags.creation_time}".strip(), ZOOM_DATE_TIME)


def filesystem_timestamp(item: "MediaItem") -> datetime | None:
    """File birth time (or mtime where the OS has none).

    Only right if the file was never copied off the recording device.
    """
    if item.stat is None:
        return None
    timestamp = getattr(item.stat, "st_birthtime", None)
    if timestamp is None:
        timestamp = getattr(item.stat, "st_mtime", None)
    if timestamp is None:
        return None
    try:
        return datetime.fromtimestamp(timestamp)
    except (OverflowError, OSError, ValueError):
        return None


# Least informative last.
DEVICE_PARSERS: list[DeviceDatetimeGetter] = [
    android_creation_time,
    zoom_h6_date_time,
    filesystem_timestamp,
]


def resolve_end(
    item: "MediaItem", parsers: list[DeviceDatetimeGetter] | None = None
) -> datetime | None:
    """Return the first timestamp any parser recovers for *item*, else None."""
    for parser in DEVICE_PARSERS if parsers is None else parsers:
        end = parser(item)
        if end is not None:
            return end
        logger.debug("%s: no timestamp from %s", item.name, getattr(parser, "__name__", parser))
    return None
