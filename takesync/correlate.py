"""Group video takes with the audio takes recorded at the same time."""

from typing import Iterable, NamedTuple

from takesync.media import MediaItem
from takesync.models import MediaType


class CandidateGroup(NamedTuple):
    video: MediaItem
    audios: list[MediaItem]


def partition(items: Iterable[MediaItem]) -> tuple[list[MediaItem], list[MediaItem]]:
    """Split items into (videos, audios); unclassifiable items are dropped."""
    videos: list[MediaItem] = []
    audios: list[MediaItem] = []
    for item in items:
        media_type = item.media_type
        if media_type is MediaType.VIDEO:
            videos.append(item)
        elif media_type is MediaType.AUDIO:
            audios.append(item)
    return videos, audios


def _starts_during(item: MediaItem, other: MediaItem) -> bool | None:
    start, other_start, other_end = item.start, other.start, other.end
    if start is None or other_start is None or other_end is None:
        return None
    return other_start <= start <= other_end


def _ends_during(item: MediaItem, other: MediaItem) -> bool | None:
    end, other_start, other_end = item.end, other.start, other.end
    if end is None or other_start is None or other_end is None:
        return None
    return other_start <= end <= other_end


def overlaps(a: MediaItem, b: MediaItem) -> bool:
    """True if either take starts within the other's closed [start, end].

    A take with unknown timing overlaps nothing.
    """
    a_in_b = _starts_during(a, b)
    b_in_a = _starts_during(b, a)
    if a_in_b is None or b_in_a is None:
        return False
    return a_in_b or b_in_a


def overlapping(item: MediaItem, others: Iterable[MediaItem]) -> list[MediaItem]:
    return [other for other in others if overlaps(item, other)]


def contains(outer: MediaItem, inner: MediaItem) -> bool:
    """True if *inner* starts and ends within *outer*."""
    return bool(_starts_during(inner, outer)) and bool(_ends_during(inner, outer))


def contained(item: MediaItem, others: Iterable[MediaItem]) -> list[MediaItem]:
    return [other for other in others if contains(item, other)]


def candidates(items: Iterable[MediaItem]) -> list[CandidateGroup]:
    """Return every video that overlaps at least one audio take, earliest first.

    An audio take may belong to several groups. Videos with the same start
    keep their input order.
    """
    videos, audios = partition(items)
    groups = [CandidateGroup(video, overlapping(video, audios)) for video in videos]
    groups = [g for g in groups if g.audios]
    # Every remaining video overlaps something, so its start is known.
    groups.sort(key=lambda g: g.video.start)
    return groups
