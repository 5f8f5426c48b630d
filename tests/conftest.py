from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _num(v) -> str:
    if v is None:
        return "-inf"
    return f"{v:.1f}"


def frame_line(
    t: float,
    *,
    momentary: float | None = -20.0,
    short_term: float | None = -20.0,
    integrated: float | None = -21.0,
    lra: float | None = 5.0,
    peaks: tuple = (-10.0, -11.0)
) -> str:
    """Build a frame line the way ffmpeg's ebur128 filter prints it."""
    peak_txt = " ".join(_num(p) for p in peaks)
    return (
        f"[Parsed_ebur128_0 @ 0x55d0c8a2b0c0] t: {t:<10g} TARGET:-23 LUFS    "
        f"M:{_num(momentary):>6} S:{_num(short_term):>6}     I:{_num(integrated):>6} LUFS       "
        f"LRA:{_num(lra):>6} LU  FTPK:{peak_txt} dBFS  TPK:{peak_txt} dBFS"
    )


SUMMARY_LINES = [
    "[Parsed_ebur128_0 @ 0x55d0c8a2b0c0] Summary:",
    "",
    "  Integrated loudness:",
    "    I:         -22.7 LUFS",
    "    Threshold: -33.7 LUFS",
    "",
    "  Loudness range:",
    "    LRA:        14.1 LU",
    "    Threshold: -43.7 LUFS",
    "    LRA low:   -33.6 LUFS",
    "    LRA high:  -19.5 LUFS",
    "",
    "  True peak:",
    "    Peak:       -4.2 dBFS",
]


def build_framelog(n_frames: int, *, short_term: float = -20.0) -> list[str]:
    """Analyzer output: banner noise, n frames at 10 fps, then the summary."""
    lines = [
        "Input #0, wav, from 'tone.wav':",
        "  Duration: 00:00:20.00, bitrate: 1536 kb/s",
        "  Stream #0:0: Audio: pcm_s16le ([1][0][0][0] / 0x0001), 48000 Hz, stereo, s16, 1536 kb/s",
        "Output #0, null, to 'pipe:':",
    ]
    for k in range(n_frames):
        t = round((k + 1) / 10.0, 1)
        peaks = (-10.0, -11.0) if k % 2 == 0 else (-6.0, -5.0)
        lines.append(frame_line(t, short_term=short_term, peaks=peaks))
    lines.extend(SUMMARY_LINES)
    return lines
