from __future__ import annotations

import pytest

from loudgraph.render.gnuplot import build_gnuplot_script, chart_title, render_chart
from loudgraph.types import LoudnessSummary, WindowSizing


def test_chart_title_includes_summary():
    summary = LoudnessSummary(integrated=-22.7, loudness_range=14.1, lra_low=-33.6, lra_high=-19.5)
    title = chart_title("Band - Song", summary)
    assert title.startswith("Band - Song\\n")
    assert "I: -22.7 LUFS" in title
    assert "LRA: 14.1 LU (-33.6 .. -19.5 LUFS)" in title


def test_chart_title_missing_summary():
    assert "I: n/a" in chart_title("x", LoudnessSummary())


def test_build_gnuplot_script_series_and_offset():
    script = build_gnuplot_script(
        "/tmp/it's.dat",
        "/tmp/out.png",
        title='say "hi"',
        sizing=WindowSizing(window_frames=200, time_offset=-10.0),
        summary=LoudnessSummary(integrated=-22.7),
        size=(800, 600),
    )
    assert "set terminal pngcairo size 800,600" in script
    assert "set datafile missing '-'" in script
    assert "psr_offset = -10.0" in script
    assert "'/tmp/it''s.dat' using ($1+psr_offset):7 axes x1y2" in script
    assert "using 1:5 axes x1y2" in script
    assert 'set title "say \'hi\'' in script
    for name in ("Momentary", "Short-term", "Integrated", "Peak",
                 "Loudness range", "PSR", "Program loudness"):
        assert f"title '{name}'" in script


def test_build_gnuplot_script_without_program_loudness():
    script = build_gnuplot_script(
        "d.dat", "o.png", title="t",
        sizing=WindowSizing(window_frames=1, time_offset=-0.05),
        summary=LoudnessSummary(),
    )
    assert "Program loudness" not in script


def test_render_chart_without_gnuplot(tmp_path, monkeypatch):
    monkeypatch.setattr("loudgraph.render.gnuplot.shutil.which", lambda name: None)
    with pytest.raises(RuntimeError):
        render_chart(
            str(tmp_path / "d.dat"), str(tmp_path / "o.png"), title="t",
            sizing=WindowSizing(window_frames=1, time_offset=-0.05),
            summary=LoudnessSummary(),
        )
