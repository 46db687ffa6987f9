"""Tests for file discovery, parallel probing and temporary copies."""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from takesync.discover import (
    copy_to_temp,
    load_media_items,
    media_items,
    media_paths,
    tmp_path_for,
)
from takesync.ffutil import FFprobeNotFoundError
from takesync.media import MediaItem
from takesync.models import MetadataRecord, StreamInfo

RECORD = MetadataRecord(streams=[StreamInfo(duration="5.0")])


@pytest.fixture
def footage(tmp_path: Path) -> Path:
    (tmp_path / "cam").mkdir()
    (tmp_path / "rec" / "day1").mkdir(parents=True)
    for rel in ("cam/b.mp4", "cam/A.MP4", "cam/notes.txt", "rec/day1/ZOOM0001.WAV", "rec/clip.mov"):
        (tmp_path / rel).write_bytes(b"data")
    return tmp_path


class TestMediaPaths:
    def test_finds_supported_files(self, footage: Path):
        paths = media_paths([footage / "cam", footage / "rec"])
        assert [p.relative_to(footage).as_posix() for p in paths] == [
            "cam/A.MP4",
            "cam/b.mp4",
            "rec/day1/ZOOM0001.WAV",
        ]

    def test_missing_directory_skipped(self, footage: Path):
        assert media_paths([footage / "nope"]) == []


class TestLoadMediaItems:
    @patch("takesync.discover.ffutil.probe")
    def test_order_preserved_and_failures_isolated(self, mock_probe, footage: Path):
        paths = media_paths([footage])
        mock_probe.side_effect = lambda p: None if p.name == "b.mp4" else RECORD

        items = load_media_items(paths, workers=3)

        assert [i.name for i in items] == ["A.MP4", "ZOOM0001.WAV"]
        assert all(i.metadata is RECORD for i in items)
        assert all(i.stat is not None for i in items)

    @patch("takesync.discover.ffutil.probe", side_effect=FFprobeNotFoundError("ffprobe not found"))
    def test_missing_ffprobe_aborts(self, mock_probe, footage: Path):
        with pytest.raises(FFprobeNotFoundError):
            load_media_items(media_paths([footage]), workers=2)

    def test_no_paths(self):
        assert load_media_items([]) == []

    @patch("takesync.discover.ffutil.probe", return_value=RECORD)
    def test_media_items(self, mock_probe, footage: Path):
        assert len(media_items([footage / "cam"], workers=1)) == 2


FAKE_FFPROBE = r"""#!/bin/sh
for last; do :; done
case "$last" in
  *bad.wav) printf '{"format": {"tags": {"title": "caf\351"}}}' ;;
  *) printf '{"streams": [{"duration": "5.0"}]}' ;;
esac
"""


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")
class TestLatin1Output:
    def test_other_files_still_load(self, tmp_path: Path):
        ffprobe = tmp_path / "bin" / "ffprobe"
        ffprobe.parent.mkdir()
        ffprobe.write_text(FAKE_FFPROBE)
        ffprobe.chmod(0o755)
        media = tmp_path / "media"
        media.mkdir()
        for name in ("bad.wav", "good.wav", "good.mp4"):
            (media / name).write_bytes(b"data")

        with patch("takesync.ffutil.FFPROBE", str(ffprobe)):
            items = media_items([media], workers=3)

        assert [i.name for i in items] == ["bad.wav", "good.mp4", "good.wav"]
        assert items[0].metadata.tags.extra["title"] == "caf�"
        assert items[1].duration is not None


class TestCopyToTemp:
    @patch("takesync.discover.ffutil.probe", return_value=RECORD)
    def test_copies_and_reprobes(self, mock_probe, footage: Path, tmp_path: Path):
        original = MediaItem.from_path(footage / "cam" / "b.mp4", RECORD)
        tmp_root = tmp_path / "tmp"

        copy = copy_to_temp(original, tmp_root)

        assert copy.path == tmp_path_for(original, tmp_root)
        assert copy.path.parent.parent == tmp_root / "b"
        assert copy.path.name == "b.mp4"
        assert copy.path.read_bytes() == b"data"
        assert copy is not original
        mock_probe.assert_called_once_with(copy.path)

    @patch("takesync.discover.ffutil.probe", return_value=RECORD)
    def test_same_name_from_other_directory_not_reused(self, mock_probe, tmp_path: Path):
        (tmp_path / "card1").mkdir()
        (tmp_path / "card2").mkdir()
        (tmp_path / "card1" / "ZOOM0001.WAV").write_bytes(b"first take")
        (tmp_path / "card2" / "ZOOM0001.WAV").write_bytes(b"second take")
        tmp_root = tmp_path / "tmp"

        first = copy_to_temp(MediaItem(path=tmp_path / "card1" / "ZOOM0001.WAV"), tmp_root)
        second = copy_to_temp(MediaItem(path=tmp_path / "card2" / "ZOOM0001.WAV"), tmp_root)

        assert first.path != second.path
        assert first.path.read_bytes() == b"first take"
        assert second.path.read_bytes() == b"second take"

    @patch("takesync.discover.ffutil.probe", return_value=RECORD)
    def test_existing_copy_reused(self, mock_probe, footage: Path, tmp_path: Path):
        source = footage / "cam" / "b.mp4"
        item = MediaItem(path=source)
        target = tmp_path_for(item, tmp_path / "tmp")
        target.parent.mkdir(parents=True)
        target.write_bytes(b"DATA")
        st = source.stat()
        os.utime(target, (st.st_atime, st.st_mtime))

        copy = copy_to_temp(item, tmp_path / "tmp")

        assert copy.path.read_bytes() == b"DATA"

    @patch("takesync.discover.ffutil.probe", return_value=RECORD)
    def test_stale_copy_replaced(self, mock_probe, footage: Path, tmp_path: Path):
        item = MediaItem(path=footage / "cam" / "b.mp4")
        target = tmp_path_for(item, tmp_path / "tmp")
        target.parent.mkdir(parents=True)
        target.write_bytes(b"an older recording")

        copy = copy_to_temp(item, tmp_path / "tmp")

        assert copy.path.read_bytes() == b"data"

    def test_missing_source(self, tmp_path: Path):
        assert copy_to_temp(MediaItem(path=tmp_path / "gone.mp4"), tmp_path / "tmp") is None

    @patch("takesync.discover.ffutil.probe", return_value=None)
    def test_unprobeable_copy(self, mock_probe, footage: Path, tmp_path: Path):
        assert copy_to_temp(MediaItem(path=footage / "cam" / "b.mp4"), tmp_path / "tmp") is None
