"""ffprobe subprocess helpers."""

import json
import logging
import shutil
import subprocess
from pathlib import Path

from takesync.models import MetadataRecord

logger = logging.getLogger(__name__)

FFPROBE = "ffprobe"


class FFprobeNotFoundError(RuntimeError):
    pass


def check_ffprobe() -> None:
    """Raise FFprobeNotFoundError if ffprobe is not on PATH."""
    if shutil.which(FFPROBE) is None:
        raise FFprobeNotFoundError(f"{FFPROBE} not found on PATH")


def _run(args: list[str]) -> subprocess.CompletedProcess:
    # ffprobe passes tag and file name bytes through untouched.
    try:
        return subprocess.run(
            [FFPROBE, *args], capture_output=True, text=True, encoding="utf-8", errors="replace"
        )
    except OSError as e:
        raise FFprobeNotFoundError(f"Failed to run {FFPROBE}: {e}") from e


def ffprobe_version() -> str | None:
    """Return the version token of ``ffprobe -version`` (e.g. ``"4.2.2"``)."""
    result = _run(["-version"])
    tokens = result.stdout.split()
    if len(tokens) < 3:
        return None
    return tokens[2]


def parse_probe_output(stdout: str) -> MetadataRecord | None:
    """Parse ffprobe's JSON output. Anything that is not a JSON object yields None."""
    try:
        data = json.loads(stdout)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    return MetadataRecord.from_dict(data)


def probe(input_path: Path) -> MetadataRecord | None:
    """Extract media metadata via ffprobe.

    Returns None when ffprobe fails on the file or prints something that
    cannot be parsed. Raises FFprobeNotFoundError when ffprobe itself cannot
    be launched.
    """
    cmd = [
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    result = _run(cmd)

    if result.returncode != 0:
        logger.info("ffprobe failed on %s (rc=%s)", input_path, result.returncode)
        return None

    metadata = parse_probe_output(result.stdout)
    if metadata is None:
        logger.info("Unreadable ffprobe output for %s", input_path)
    return metadata
