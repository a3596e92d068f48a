"""Readers for the raw input tables and an atomic CSV writer for the output."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pandas as pd

from .config import CLOSURE_COLUMNS, METRIC_COLUMNS

MISSING_MARKER = "NA"


def read_metric_table(path: Path) -> pd.DataFrame:
    """Load the network-metric table, keeping port-group codes as strings."""
    frame = pd.read_csv(path, dtype={"pcgroup": str, "period": str})
    missing = [column for column in METRIC_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"{path} is missing metric columns: {', '.join(missing)}")
    return frame


def read_closure_table(path: Path) -> pd.DataFrame:
    """Load the closure-event table with one row per (y, pcgroup)."""
    frame = pd.read_csv(path, dtype={"pcgroup": str})
    missing = [column for column in CLOSURE_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"{path} is missing closure columns: {', '.join(missing)}")
    return frame


def write_output_table(frame: pd.DataFrame, path: Path) -> None:
    """Write ``frame`` as CSV atomically so a failed run never leaves a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile("w", delete=False, dir=path.parent, suffix=".tmp", newline="") as tmp:
        frame.to_csv(tmp, index=False, na_rep=MISSING_MARKER)
    os.replace(tmp.name, path)
    print(f"[write] Wrote {len(frame)} rows to {path}")


__all__ = [
    "MISSING_MARKER",
    "read_closure_table",
    "read_metric_table",
    "write_output_table",
]
