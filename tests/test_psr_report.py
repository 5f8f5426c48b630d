from __future__ import annotations

import json

import numpy as np

from loudgraph.reporting.psr_report import build_psr_report
from loudgraph.types import LoudnessSummary, WindowSizing


def test_build_psr_report_stats():
    nan = np.nan
    table = np.array([
        [10.0, -20.0, -20.0, -21.0, 4.0, -6.0, nan],
        [10.1, -19.0, -20.0, -21.0, 4.0, -5.0, 15.0],
        [10.2, -19.0, -20.0, -21.0, 4.0, -5.0, nan],
        [10.3, -19.0, -19.0, -21.0, 4.0, -9.0, 10.0],
    ])
    report = build_psr_report(
        engine={"name": "loudgraph", "version": "0"},
        input_meta={"path": "file.wav"},
        sizing=WindowSizing(window_frames=2, time_offset=-0.1),
        summary=LoudnessSummary(integrated=-22.7, loudness_range=14.1),
        table=table,
        created_utc="2024-01-01T00:00:00Z",
    )
    psr = report["series"]["psr_lu"]
    assert psr["count"] == 2
    assert psr["min"] == 10.0
    assert psr["max"] == 15.0
    assert psr["mean"] == 12.5
    assert report["frames"]["count"] == 4
    assert report["frames"]["last_time_s"] == 10.3
    assert report["program"]["integrated_lufs"] == -22.7
    assert report["program"]["lra_low_lufs"] is None
    assert report["windowing"] == {"window_frames": 2, "time_offset_s": -0.1}
    json.dumps(report)


def test_build_psr_report_empty_table():
    report = build_psr_report(
        engine={"name": "loudgraph", "version": "0"},
        input_meta={"path": "file.wav"},
        sizing=WindowSizing(window_frames=0, time_offset=0.0),
        summary=LoudnessSummary(),
        table=np.empty((0, 7)),
        created_utc="2024-01-01T00:00:00Z",
    )
    assert report["series"]["psr_lu"] is None
    assert report["frames"] == {"count": 0, "last_time_s": None}
