"""Whitespace-aligned dataset consumed by the chart renderer."""
from __future__ import annotations
from typing import IO, Iterable

import numpy as np

from loudgraph.types import AugmentedRecord

COLUMNS = (
    "time",
    "momentary",
    "short_term",
    "integrated",
    "loudness_range",
    "peak",
    "psr",
)
MISSING = "-"
TIME_WIDTH = 11
FIELD_WIDTH = 6


def _fmt(value: float | None, width: int, spec: str) -> str:
    if value is None:
        return MISSING.rjust(width)
    return format(value, spec).rjust(width)


def format_row(record: AugmentedRecord) -> str:
    """Format one record as a fixed-width row (no trailing newline)."""
    values = record.as_row()
    cells = [_fmt(values[0], TIME_WIDTH, "g")]
    cells.extend(_fmt(v, FIELD_WIDTH, ".1f") for v in values[1:])
    return " ".join(cells)


def write_table(records: Iterable[AugmentedRecord], stream: IO[str]) -> int:
    """Write one row per record in input order; returns the row count."""
    n = 0
    for record in records:
        stream.write(format_row(record))
        stream.write("\n")
        n += 1
    return n


def parse_row(row: str) -> tuple[float | None, ...]:
    """Split a dataset row back into its seven positional values."""
    cells = row.split()
    if len(cells) != len(COLUMNS):
        raise ValueError(f"Expected {len(COLUMNS)} columns, got {len(cells)}: {row!r}")
    return tuple(None if c == MISSING else float(c) for c in cells)


def load_table(path: str) -> np.ndarray:
    """Load a dataset file as an (n, 7) float array with NaN for missing values."""
    rows = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            rows.append([np.nan if v is None else v for v in parse_row(line)])
    if not rows:
        return np.empty((0, len(COLUMNS)), dtype=np.float64)
    return np.asarray(rows, dtype=np.float64)
