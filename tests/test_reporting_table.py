from __future__ import annotations

import io
import math

import numpy as np

from loudgraph.metrics.psr import aggregate_psr
from loudgraph.reporting.table import (
    COLUMNS,
    format_row,
    load_table,
    parse_row,
    write_table,
)
from loudgraph.types import AugmentedRecord, FrameRecord


def _record(psr=None, **kw):
    frame = FrameRecord(
        time=kw.get("time", 12.3),
        momentary=kw.get("momentary", -18.2),
        short_term=kw.get("short_term", -19.0),
        integrated=kw.get("integrated", -20.5),
        loudness_range=kw.get("loudness_range", 6.4),
        peak=kw.get("peak", -3.1),
    )
    return AugmentedRecord(frame=frame, psr=psr)


def test_format_row_widths_and_missing_marker():
    row = format_row(_record())
    assert row == "       12.3  -18.2  -19.0  -20.5    6.4   -3.1      -"
    assert len(row) == 11 + 6 * 7


def test_format_row_with_psr():
    row = format_row(_record(psr=15.9))
    assert row.endswith("   15.9")


def test_format_row_all_missing():
    rec = AugmentedRecord(frame=FrameRecord(time=0.1))
    assert format_row(rec) == "        0.1" + "      -" * 6


def test_write_table_is_deterministic():
    frames = [
        FrameRecord(time=round(3.0 + k / 10.0, 1), momentary=-20.0, short_term=-21.0,
                    integrated=-22.0, loudness_range=3.0, peak=-6.0 if k % 3 else -1.0)
        for k in range(40)
    ]
    records = list(aggregate_psr(frames, 4))
    first, second = io.StringIO(), io.StringIO()
    assert write_table(records, first) == 40
    assert write_table(records, second) == 40
    assert first.getvalue() == second.getvalue()
    assert first.getvalue().count("\n") == 40


def test_rows_round_trip_by_position():
    records = [
        _record(),
        _record(psr=20.4, time=763.8, peak=None),
        _record(time=0.0999792, momentary=-120.7, loudness_range=None),
    ]
    for rec in records:
        parsed = parse_row(format_row(rec))
        assert len(parsed) == len(COLUMNS)
        for got, want in zip(parsed, rec.as_row()):
            if want is None:
                assert got is None
            else:
                assert math.isclose(got, want, abs_tol=0.05)


def test_load_table(tmp_path):
    path = tmp_path / "loudness.dat"
    with open(path, "w", encoding="utf-8") as f:
        write_table([_record(), _record(psr=12.0, time=13.0)], f)
    table = load_table(str(path))
    assert table.shape == (2, 7)
    assert np.isnan(table[0, 6])
    assert table[1, 6] == 12.0
    assert table[1, 0] == 13.0


def test_load_table_empty(tmp_path):
    path = tmp_path / "empty.dat"
    path.write_text("", encoding="utf-8")
    assert load_table(str(path)).shape == (0, 7)
