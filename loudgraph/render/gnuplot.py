"""Chart rendering through gnuplot."""
from __future__ import annotations
import shutil
import subprocess
from pathlib import Path

from loudgraph.reporting.table import COLUMNS, MISSING
from loudgraph.types import LoudnessSummary, WindowSizing

DEFAULT_SIZE = (1600, 900)
LOUDNESS_RANGE_DB = (-60.0, 3.0)
LU_RANGE = (0.0, 30.0)

# gnuplot column numbers are 1-based.
_COL = {name: i + 1 for i, name in enumerate(COLUMNS)}


def _quote(text: str) -> str:
    """Single-quoted gnuplot string literal."""
    return "'" + str(text).replace("'", "''") + "'"


def _fmt_value(value: float | None, units: str) -> str:
    if value is None:
        return "n/a"
    return f"{value:.1f} {units}"


def chart_title(title: str, summary: LoudnessSummary) -> str:
    """Media title followed by the program-level analyzer summary."""
    lra = _fmt_value(summary.loudness_range, "LU")
    if summary.lra_low is not None and summary.lra_high is not None:
        lra += f" ({summary.lra_low:.1f} .. {summary.lra_high:.1f} LUFS)"
    return f"{title}\\nI: {_fmt_value(summary.integrated, 'LUFS')}   LRA: {lra}"


def build_gnuplot_script(
    data_path: str,
    out_path: str,
    *,
    title: str,
    sizing: WindowSizing,
    summary: LoudnessSummary,
    size: tuple[int, int] = DEFAULT_SIZE
) -> str:
    """
    Build the gnuplot program for a dataset written by write_table.

    Loudness and peak series share the left axis; loudness range and PSR
    use the right axis. PSR points are shifted by the window time offset so
    they sit at the centre of the window they describe.
    """
    width, height = size
    data = _quote(data_path)
    ylo, yhi = LOUDNESS_RANGE_DB
    y2lo, y2hi = LU_RANGE
    lines = [
        f"set terminal pngcairo size {int(width)},{int(height)} noenhanced font 'sans,10'",
        f"set output {_quote(out_path)}",
        f"set datafile missing {_quote(MISSING)}",
        f'set title "{chart_title(title, summary).replace(chr(34), chr(39))}"',
        "set key outside bottom center horizontal",
        "set grid xtics ytics",
        "set xlabel 'Time (s)'",
        "set ylabel 'Loudness (LUFS) / Peak (dBFS)'",
        "set y2label 'LU'",
        "set ytics nomirror",
        "set y2tics",
        f"set yrange [{ylo}:{yhi}]",
        f"set y2range [{y2lo}:{y2hi}]",
        f"psr_offset = {sizing.time_offset!r}",
    ]
    series = [
        f"{data} using 1:{_COL['momentary']} with lines lw 1 lc rgb '#b0c4de' title 'Momentary'",
        f"{data} using 1:{_COL['short_term']} with lines lw 2 lc rgb '#1f77b4' title 'Short-term'",
        f"{data} using 1:{_COL['integrated']} with lines lw 2 lc rgb '#2ca02c' title 'Integrated'",
        f"{data} using 1:{_COL['peak']} with lines lw 1 lc rgb '#d62728' title 'Peak'",
        f"{data} using 1:{_COL['loudness_range']} axes x1y2 with lines lw 2 lc rgb '#9467bd' title 'Loudness range'",
        f"{data} using ($1+psr_offset):{_COL['psr']} axes x1y2 with linespoints pt 7 ps 0.6 lc rgb '#ff7f0e' title 'PSR'",
    ]
    if summary.integrated is not None:
        series.append(
            f"{summary.integrated!r} with lines dt 2 lc rgb '#2ca02c' title 'Program loudness'"
        )
    lines.append("plot " + ", \\\n     ".join(series))
    return "\n".join(lines) + "\n"


def render_chart(
    data_path: str,
    out_path: str,
    *,
    title: str,
    sizing: WindowSizing,
    summary: LoudnessSummary,
    size: tuple[int, int] = DEFAULT_SIZE,
    script_path: str | None = None
) -> str:
    """Write the gnuplot script next to the dataset and run it; returns the script path."""
    gnuplot = shutil.which("gnuplot")
    if not gnuplot:
        raise RuntimeError("gnuplot not found; install it or add it to PATH.")
    script = build_gnuplot_script(
        data_path, out_path, title=title, sizing=sizing, summary=summary, size=size
    )
    if script_path is None:
        script_path = str(Path(data_path).with_suffix(".gp"))
    Path(script_path).write_text(script, encoding="utf-8")

    proc = subprocess.run(
        [gnuplot, script_path],
        capture_output=True,
        text=True,
        check=False
    )
    if proc.returncode != 0:
        raise ValueError(f"gnuplot failed: {proc.stderr.strip()}")
    if not Path(out_path).is_file():
        raise ValueError(f"gnuplot did not produce {out_path}")
    return script_path
