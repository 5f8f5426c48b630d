"""ffmpeg / ffprobe invocation."""
from __future__ import annotations
import json
import shutil
import subprocess
from pathlib import Path

from loudgraph.types import MediaInfo

PEAK_MODES = ("true", "sample")


def _which(name: str) -> str:
    exe = shutil.which(name)
    if not exe:
        raise RuntimeError(f"{name} not found; install it or add it to PATH.")
    return exe


def _ffprobe_json(path: str, entries: str) -> dict:
    """Run ffprobe -show_entries and return the decoded JSON."""
    cmd = [
        _which("ffprobe"),
        "-v", "error",
        "-show_entries", entries,
        "-of", "json",
        path,
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if proc.returncode != 0:
        raise ValueError(f"ffprobe failed: {proc.stderr.strip()}")
    try:
        return json.loads(proc.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError(f"ffprobe returned unparseable output: {exc}") from exc


def probe_duration(path: str) -> float:
    """Return the container duration in seconds."""
    info = _ffprobe_json(path, "format=duration")
    raw = info.get("format", {}).get("duration")
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"ffprobe reported no duration for {path}.") from None


def title_from_tags(tags: dict, path: str) -> str:
    """Build a chart title from container tags, falling back to the file name."""
    lowered = {str(k).lower(): str(v).strip() for k, v in (tags or {}).items()}
    title = lowered.get("title", "")
    artist = lowered.get("artist", "")
    if title and artist:
        return f"{artist} - {title}"
    if title:
        return title
    return Path(path).stem


def probe_title(path: str) -> str:
    info = _ffprobe_json(path, "format_tags=title,artist")
    return title_from_tags(info.get("format", {}).get("tags", {}), path)


def probe_media(path: str) -> MediaInfo:
    """Check the input exists and collect duration and title."""
    if not Path(path).is_file():
        raise FileNotFoundError(path)
    return MediaInfo(path=path, duration=probe_duration(path), title=probe_title(path))


def ebur128_command(path: str, peak_mode: str = "true") -> list[str]:
    if peak_mode not in PEAK_MODES:
        raise ValueError(f"peak mode must be one of {PEAK_MODES}, got {peak_mode!r}")
    return [
        _which("ffmpeg"),
        "-nostats",
        "-hide_banner",
        "-v", "info",
        "-i", path,
        "-vn",
        "-af", f"ebur128=peak={peak_mode}:framelog=info",
        "-f", "null",
        "-",
    ]


def run_ebur128(path: str, peak_mode: str = "true") -> list[str]:
    """
    Run the ebur128 analyzer over a media file.

    Returns the analyzer's log lines (per-frame lines followed by the
    summary block), which ffmpeg writes to stderr.
    """
    if not Path(path).is_file():
        raise FileNotFoundError(path)
    proc = subprocess.run(
        ebur128_command(path, peak_mode),
        stdin=subprocess.DEVNULL,
        capture_output=True,
        check=False
    )
    stderr = proc.stderr.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        raise ValueError(f"ffmpeg ebur128 failed: {stderr.strip()[-2000:]}")
    return stderr.splitlines()


def read_framelog(path: str) -> list[str]:
    """Read a previously captured analyzer log."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read().splitlines()
