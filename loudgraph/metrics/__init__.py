"""Metrics derived from the ebur128 frame series."""

from loudgraph.metrics.psr import (
    PSRAggregator,
    aggregate_psr,
    audible,
    past_startup,
    window_full,
)

__all__ = [
    "PSRAggregator",
    "aggregate_psr",
    "audible",
    "past_startup",
    "window_full",
]
