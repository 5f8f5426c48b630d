"""Window sizing for the PSR series."""
from __future__ import annotations
import math

from loudgraph.types import WindowSizing

# ebur128 emits one frame every 100 ms.
FRAMES_PER_SECOND = 10
WINDOW_COUNT = 200


def window_sizing(
    duration: float,
    window_count: int = WINDOW_COUNT,
    frames_per_second: int = FRAMES_PER_SECOND
) -> WindowSizing:
    """
    Derive the window length in frames and the chart time offset.

    Args:
        duration: Total media duration in seconds
        window_count: Target number of PSR windows over the whole program
        frames_per_second: Analyzer frame rate

    Returns:
        WindowSizing; time_offset is negative since a window's PSR is
        stamped at its last frame and has to be shifted back to its centre.
    """
    duration = max(0.0, float(duration))
    window_frames = int(math.floor(duration * frames_per_second / window_count))
    time_offset = -(window_frames / frames_per_second) / 2.0
    return WindowSizing(window_frames=window_frames, time_offset=time_offset)
