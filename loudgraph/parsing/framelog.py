"""ffmpeg ebur128 frame log parsing."""
from __future__ import annotations
import math
import re
from typing import Iterable, Iterator

from loudgraph.types import FrameRecord, LoudnessSummary

# [Parsed_ebur128_0 @ 0x55d0c8a2b0c0] t: 763.8     TARGET:-23 LUFS    M: -14.9 S: -15.4
#     I: -17.1 LUFS       LRA:  17.2 LU  FTPK: -7.2 -6.7 dBFS  TPK: -4.2 -3.9 dBFS
# (one line per frame; wrapped here)

TIME_LABEL = "t:"
MOMENTARY_LABEL = "M:"
SHORT_TERM_LABEL = "S:"
INTEGRATED_LABEL = "I:"
LRA_LABEL = "LRA:"
PEAK_LABEL = "FTPK:"
SAMPLE_PEAK_LABEL = "FSPK:"
# Only the analyzer's own header line opens the summary; tags may contain the word too.
_SUMMARY_RE = re.compile(r"^\s*(?:\[Parsed_ebur128_\d+ @ [^\]]+\]\s*)?Summary:\s*$")

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)"
_SINGLE_RE = re.compile(r"\s*(" + _NUMBER + r")(?![\w.])")
# Peak channels print -inf while silent.
_PEAK_TOKEN = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+|inf|nan)"
_PEAK_PAIR_RE = re.compile(r"\s*(" + _PEAK_TOKEN + r")\s+(" + _PEAK_TOKEN + r")(?![\w.])")
_PEAK_SINGLE_RE = re.compile(r"\s*(" + _PEAK_TOKEN + r")(?![\w.])")

_label_cache: dict[str, re.Pattern] = {}


def _label_re(label: str) -> re.Pattern:
    pat = _label_cache.get(label)
    if pat is None:
        # "TPK:" must not match inside "FTPK:", nor "S:" inside "LUFS:".
        pat = re.compile(r"(?<![A-Za-z])" + re.escape(label))
        _label_cache[label] = pat
    return pat


def _label_end(line: str, label: str) -> int | None:
    """Offset just past the first occurrence of label, or None."""
    m = _label_re(label).search(line)
    if m is None:
        return None
    return m.end()


def extract_field(line: str, label: str) -> float | None:
    """
    Read the signed decimal following the first occurrence of label.

    Only the leftmost occurrence is considered: if it is not followed by a
    number (``-inf``, ``nan``, garbage) the field is missing.
    """
    pos = _label_end(line, label)
    if pos is None:
        return None
    m = _SINGLE_RE.match(line, pos)
    if m is None:
        return None
    return float(m.group(1))


def extract_peak(line: str, label: str = PEAK_LABEL) -> float | None:
    """
    Return the louder of the two channel peaks following label.

    Mono sources only print one value. A silent channel (-inf) is
    ignored; None when no channel has a finite peak.
    """
    pos = _label_end(line, label)
    if pos is None:
        return None
    m = _PEAK_PAIR_RE.match(line, pos) or _PEAK_SINGLE_RE.match(line, pos)
    if m is None:
        return None
    values = [float(v) for v in m.groups()]
    finite = [v for v in values if math.isfinite(v)]
    if not finite:
        return None
    return max(finite)


def parse_frame_line(line: str, peak_label: str = PEAK_LABEL) -> FrameRecord | None:
    """Parse one frame line; None if the line carries no frame time."""
    t = extract_field(line, TIME_LABEL)
    if t is None:
        return None
    return FrameRecord(
        time=t,
        momentary=extract_field(line, MOMENTARY_LABEL),
        short_term=extract_field(line, SHORT_TERM_LABEL),
        integrated=extract_field(line, INTEGRATED_LABEL),
        loudness_range=extract_field(line, LRA_LABEL),
        peak=extract_peak(line, peak_label),
    )


def is_frame_line(line: str) -> bool:
    return extract_field(line, TIME_LABEL) is not None


def split_framelog(lines: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split analyzer output into per-frame lines and the trailing summary block."""
    frames: list[str] = []
    summary: list[str] = []
    in_summary = False
    for line in lines:
        if not in_summary and _SUMMARY_RE.match(line):
            in_summary = True
            continue
        if in_summary:
            summary.append(line)
        elif is_frame_line(line):
            frames.append(line)
    return frames, summary


def parse_framelog(
    lines: Iterable[str],
    peak_label: str = PEAK_LABEL
) -> Iterator[FrameRecord]:
    """Yield a FrameRecord per frame line, in input order."""
    for line in lines:
        record = parse_frame_line(line, peak_label)
        if record is not None:
            yield record


def parse_summary(summary_lines: Iterable[str]) -> LoudnessSummary:
    """
    Read the scalar values of the ebur128 summary block.

    Expected layout::

        Integrated loudness:
          I:         -22.7 LUFS
          Threshold: -33.7 LUFS
        Loudness range:
          LRA:        14.1 LU
          Threshold: -43.7 LUFS
          LRA low:   -33.6 LUFS
          LRA high:  -19.5 LUFS
        True peak:
          Peak:       -4.2 dBFS
    """
    text = "\n".join(summary_lines)
    return LoudnessSummary(
        integrated=extract_field(text, INTEGRATED_LABEL),
        loudness_range=extract_field(text, LRA_LABEL),
        lra_low=extract_field(text, "LRA low:"),
        lra_high=extract_field(text, "LRA high:"),
        true_peak=extract_field(text, "Peak:"),
    )
