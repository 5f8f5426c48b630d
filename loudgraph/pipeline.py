"""End-to-end analysis: analyzer log -> augmented PSR records."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from loudgraph.analysis.windowing import WINDOW_COUNT, window_sizing
from loudgraph.metrics.psr import aggregate_psr
from loudgraph.parsing.framelog import (
    PEAK_LABEL,
    parse_framelog,
    parse_summary,
    split_framelog,
)
from loudgraph.reporting.table import write_table
from loudgraph.types import AugmentedRecord, LoudnessSummary, WindowSizing


@dataclass(frozen=True)
class PSRAnalysis:
    sizing: WindowSizing
    records: list[AugmentedRecord]
    summary: LoudnessSummary

    @property
    def closed_windows(self) -> int:
        return sum(1 for r in self.records if r.psr is not None)

    @property
    def last_time(self) -> float:
        return self.records[-1].frame.time if self.records else 0.0


def last_frame_time(lines: Iterable[str], peak_label: str = PEAK_LABEL) -> float:
    """Time of the last frame in a log; stands in for the duration of offline logs."""
    last = 0.0
    for record in parse_framelog(lines, peak_label):
        last = record.time
    return last


def analyze_lines(
    lines: Iterable[str],
    duration: float,
    *,
    window_count: int = WINDOW_COUNT,
    peak_label: str = PEAK_LABEL
) -> PSRAnalysis:
    """Parse an ebur128 log and compute the windowed PSR series."""
    frame_lines, summary_lines = split_framelog(lines)
    sizing = window_sizing(duration, window_count=window_count)
    records = list(
        aggregate_psr(parse_framelog(frame_lines, peak_label), sizing.window_frames)
    )
    return PSRAnalysis(
        sizing=sizing,
        records=records,
        summary=parse_summary(summary_lines),
    )


def write_dataset(analysis: PSRAnalysis, path: str) -> int:
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        return write_table(analysis.records, f)
