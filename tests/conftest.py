"""Shared test fixtures."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from takesync.media import MediaItem
from takesync.models import FormatInfo, FormatTags, MetadataRecord, StreamInfo

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Timestamps in tests are offsets (in seconds) from this instant.
BASE = datetime(2020, 1, 1, 12, 0, 0)


def timed_item(name: str, start: float | None, end: float | None) -> MediaItem:
    """A take whose interval resolves to [BASE+start, BASE+end] through Zoom-style tags.

    Passing None for either bound yields a take with unknown timing.
    """
    if start is None or end is None:
        return MediaItem(
            path=Path("/media") / name,
            metadata=MetadataRecord(streams=[StreamInfo(duration="10.0")]),
        )
    end_at = BASE + timedelta(seconds=end)
    return MediaItem(
        path=Path("/media") / name,
        metadata=MetadataRecord(
            streams=[StreamInfo(codec_type="audio", duration=str(float(end - start)))],
            format=FormatInfo(
                tags=FormatTags(
                    date=end_at.strftime("%Y-%m-%d"),
                    creation_time=end_at.strftime("%H:%M:%S"),
                )
            ),
        ),
    )


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def make_item():
    return timed_item


@pytest.fixture
def base_time() -> datetime:
    return BASE
