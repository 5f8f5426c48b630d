"""
loudgraph - loudness and PSR graphing for audio/video files

Runs ffmpeg's EBU R128 analyzer over a media file, derives the windowed
peak-to-short-term ratio and charts the result with gnuplot.
"""
from loudgraph.version import __version__
from loudgraph.types import (
    FrameRecord,
    AugmentedRecord,
    WindowState,
    WindowSizing,
    LoudnessSummary,
    MediaInfo,
)

__all__ = [
    "__version__",
    "FrameRecord",
    "AugmentedRecord",
    "WindowState",
    "WindowSizing",
    "LoudnessSummary",
    "MediaInfo",
]
