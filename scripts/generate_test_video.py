#!/usr/bin/env python3
"""Generate a synthetic test video with hard cuts for scene detection testing.

Produces a 12-second video with abrupt color changes and a continuous tone:
  0-3s    blue
  3-7s    red
  7-7.3s  white flash (shorter than the minimum scene length)
  7.3-12s green
Running ``scenecut scenes`` on it should yield three scenes.
"""

import subprocess
import sys
from pathlib import Path

SHOTS = [
    ("blue", 3.0),
    ("red", 4.0),
    ("white", 0.3),
    ("green", 4.7),
]


def generate_test_video(output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)

    parts = [
        f"color=c={color}:s=320x240:d={length}:r=30[v{i}]"
        for i, (color, length) in enumerate(SHOTS)
    ]
    labels = "".join(f"[v{i}]" for i in range(len(SHOTS)))
    video_filter = ";".join(parts) + f";{labels}concat=n={len(SHOTS)}:v=1:a=0[vout]"

    total = sum(length for _, length in SHOTS)
    audio_filter = f"sine=f=440:d={total}[aout]"

    cmd = [
        "ffmpeg", "-y",
        "-filter_complex", video_filter + ";" + audio_filter,
        "-map", "[vout]",
        "-map", "[aout]",
        "-c:v", "libx264",
        "-g", "15",
        "-c:a", "aac",
        "-shortest",
        str(output),
    ]
    subprocess.run(cmd, check=True)
    print(f"Generated: {output}")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic.mp4")
    generate_test_video(out)
