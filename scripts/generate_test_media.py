#!/usr/bin/env python3
"""Generate a synthetic camera/recorder pair for manual TakeSync runs.

Produces, in the output directory:
  camera/VID_0001.mp4      20 s test pattern + tone, Android-style
                           creation_time tag (UTC, one hour early)
  recorder/ZOOM0001.WAV    30 s tone with Zoom-style BWF origination
                           date/time tags, overlapping the video

``takesync scan OUT/camera OUT/recorder`` should report one group.
"""

import subprocess
import sys
from pathlib import Path


def generate_camera_clip(output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", "testsrc=s=320x240:d=20:r=30",
        "-f", "lavfi", "-i", "sine=f=440:d=20",
        "-c:v", "libx264",
        "-c:a", "aac",
        "-shortest",
        # Ends 2019-12-07 15:03:44 local once the one-hour correction is applied.
        "-metadata", "creation_time=2019-12-07T14:03:44.000000Z",
        str(output),
    ]
    subprocess.run(cmd, check=True)
    print(f"Generated: {output}")


def generate_recorder_take(output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", "sine=f=660:d=30",
        "-c:a", "pcm_s24le",
        "-write_bext", "1",
        "-metadata", "originator=ZOOM H6",
        "-metadata", "origination_date=2019-12-07",
        "-metadata", "origination_time=15:03:50",
        str(output),
    ]
    subprocess.run(cmd, check=True)
    print(f"Generated: {output}")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic")
    generate_camera_clip(out / "camera" / "VID_0001.mp4")
    generate_recorder_take(out / "recorder" / "ZOOM0001.WAV")
