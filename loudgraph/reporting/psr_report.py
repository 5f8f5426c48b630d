"""PSR report generation."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Iterable

import numpy as np

from loudgraph.reporting.table import COLUMNS
from loudgraph.types import LoudnessSummary, WindowSizing

REPORT_SCHEMA_VERSION = "1.0"
ROUND_DIGITS = 2


def _r(x: float | None) -> float | None:
    if x is None or not np.isfinite(x):
        return None
    return round(float(x), ROUND_DIGITS)


def _summary_stats(values: Iterable[float]) -> dict | None:
    arr = np.asarray([v for v in values], dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return {
        "count": int(arr.size),
        "mean": _r(np.mean(arr)),
        "min": _r(np.min(arr)),
        "p50": _r(np.percentile(arr, 50)),
        "p90": _r(np.percentile(arr, 90)),
        "max": _r(np.max(arr)),
    }


def build_psr_report(
    *,
    engine: dict,
    input_meta: dict,
    sizing: WindowSizing,
    summary: LoudnessSummary,
    table: np.ndarray,
    created_utc: str | None = None
) -> dict:
    """
    Build the PSR report dictionary from a loaded dataset.

    Args:
        engine: Engine metadata (name, version)
        input_meta: Input file metadata (path, title, duration)
        sizing: Window sizing used for the PSR series
        summary: Program-level values from the analyzer summary
        table: (n, 7) array as returned by load_table
        created_utc: Timestamp override, for reproducible output

    Returns:
        Report dictionary ready for JSON serialization
    """
    table = np.asarray(table, dtype=np.float64).reshape(-1, len(COLUMNS))
    col = {name: table[:, i] for i, name in enumerate(COLUMNS)}
    if created_utc is None:
        created_utc = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "created_utc": created_utc,
        "engine": engine,
        "input": input_meta,
        "windowing": {
            "window_frames": int(sizing.window_frames),
            "time_offset_s": float(sizing.time_offset),
        },
        "program": {
            "integrated_lufs": _r(summary.integrated),
            "loudness_range_lu": _r(summary.loudness_range),
            "lra_low_lufs": _r(summary.lra_low),
            "lra_high_lufs": _r(summary.lra_high),
            "true_peak_dbfs": _r(summary.true_peak),
        },
        "frames": {
            "count": int(table.shape[0]),
            "last_time_s": _r(col["time"][-1]) if table.shape[0] else None,
        },
        "series": {
            "psr_lu": _summary_stats(col["psr"]),
            "short_term_lufs": _summary_stats(col["short_term"]),
            "momentary_lufs": _summary_stats(col["momentary"]),
            "peak_dbfs": _summary_stats(col["peak"]),
        },
    }
