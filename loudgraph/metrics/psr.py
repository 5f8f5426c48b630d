"""Windowed peak-to-short-term ratio (PSR)."""
from __future__ import annotations
from dataclasses import replace
from typing import Iterable, Iterator

from loudgraph.types import AugmentedRecord, FrameRecord, WindowState

PEAK_FLOOR_DB = -120.0
PSR_CEILING_DB = 21.0
SILENCE_FLOOR_LUFS = -70.0
# LRA is meaningless until the 3 s short-term window has filled once.
STARTUP_SECONDS = 4.0
CLOSE_AFTER_SECONDS = 3.0


def past_startup(time: float) -> bool:
    return time > CLOSE_AFTER_SECONDS


def window_full(frame_count: int, window_frames: int) -> bool:
    return frame_count >= window_frames


def audible(short_term: float | None) -> bool:
    """Gated/silent frames never close a window."""
    return short_term is not None and short_term > SILENCE_FLOOR_LUFS


class PSRAggregator:
    """
    Stateful PSR computation over an ordered frame stream.

    A window is a count of frames; its PSR is the loudest peak seen in the
    window minus the short-term loudness of the frame that closes it.
    """

    def __init__(self, window_frames: int):
        self.window_frames = int(window_frames)
        self.state = WindowState(frame_count=0, max_peak=PEAK_FLOOR_DB)

    def _reset(self) -> None:
        self.state.frame_count = 0
        self.state.max_peak = PEAK_FLOOR_DB

    def should_close(self, record: FrameRecord) -> bool:
        return (
            past_startup(record.time)
            and window_full(self.state.frame_count, self.window_frames)
            and audible(record.short_term)
        )

    def feed(self, record: FrameRecord) -> AugmentedRecord:
        if record.time < STARTUP_SECONDS:
            record = replace(record, loudness_range=0.0)

        state = self.state
        if record.peak is not None and record.peak > state.max_peak:
            state.max_peak = record.peak
        state.frame_count += 1

        if not self.should_close(record):
            return AugmentedRecord(frame=record, psr=None)

        psr = min(state.max_peak - record.short_term, PSR_CEILING_DB)
        self._reset()
        return AugmentedRecord(frame=record, psr=psr)


def aggregate_psr(
    records: Iterable[FrameRecord],
    window_frames: int
) -> Iterator[AugmentedRecord]:
    """Yield one AugmentedRecord per input record, in input order."""
    aggregator = PSRAggregator(window_frames)
    for record in records:
        yield aggregator.feed(record)
