from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class FrameRecord:
    time: float
    momentary: float | None = None
    short_term: float | None = None
    integrated: float | None = None
    loudness_range: float | None = None
    peak: float | None = None


@dataclass(frozen=True)
class AugmentedRecord:
    frame: FrameRecord
    psr: float | None = None

    def as_row(self) -> tuple[float | None, ...]:
        """Values in dataset column order."""
        f = self.frame
        return (
            f.time,
            f.momentary,
            f.short_term,
            f.integrated,
            f.loudness_range,
            f.peak,
            self.psr,
        )


@dataclass
class WindowState:
    frame_count: int = 0
    max_peak: float = -120.0


@dataclass(frozen=True)
class WindowSizing:
    window_frames: int
    time_offset: float


@dataclass(frozen=True)
class LoudnessSummary:
    integrated: float | None = None
    loudness_range: float | None = None
    lra_low: float | None = None
    lra_high: float | None = None
    true_peak: float | None = None


@dataclass(frozen=True)
class MediaInfo:
    path: str
    duration: float
    title: str
