"""Attach manual significance markers to the coefficient table."""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from src.datahub.io import MISSING_MARKER
from src.errors import ConfigurationError, DataQualityWarning

from .aggregation import COEFFICIENT_COLUMNS, KEY_COLUMNS
from .records import SIGNIFICANCE_MARKERS, OutputRow, SignificanceRecord

SIGNIFICANCE_COLUMNS = ["season", "metric", "variable", "sig"]
OUTPUT_COLUMNS = COEFFICIENT_COLUMNS + ["sig", "adj_x"]

NEGATIVE_OFFSET = -0.15
POSITIVE_OFFSET = 0.1


def label_offset(coefficient: float) -> float:
    """Where a plot label sits relative to its coefficient."""
    if coefficient < 0:
        return coefficient + NEGATIVE_OFFSET
    return coefficient + POSITIVE_OFFSET


def label_offsets(coefficients: pd.Series) -> pd.Series:
    return coefficients.astype(float).map(label_offset).rename("adj_x")


def significance_table_from_records(records: Iterable[SignificanceRecord]) -> pd.DataFrame:
    """Build the significance table in process."""
    rows = [
        {"season": record.season, "metric": record.metric, "variable": record.variable, "sig": record.sig}
        for record in records
    ]
    return pd.DataFrame(rows, columns=SIGNIFICANCE_COLUMNS)


def load_significance_table(path: Path) -> pd.DataFrame:
    """Read the versioned significance CSV.

    Empty cells stay ``""``; a cell holding exactly ``NA`` is an absent marker.
    """
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    frame = frame.apply(lambda column: column.str.strip())
    if "sig" in frame.columns:
        frame["sig"] = frame["sig"].mask(frame["sig"] == MISSING_MARKER)
    validate_significance_table(frame)
    return frame.loc[:, SIGNIFICANCE_COLUMNS]


def validate_significance_table(significance: pd.DataFrame) -> None:
    """Reject missing columns, unknown markers and repeated keys."""
    missing = [column for column in SIGNIFICANCE_COLUMNS if column not in significance.columns]
    if missing:
        raise ConfigurationError(f"Significance table is missing columns: {', '.join(missing)}")

    markers = significance["sig"].dropna()
    unknown = sorted(set(markers) - set(SIGNIFICANCE_MARKERS))
    if unknown:
        raise ConfigurationError(f"Unknown significance markers {unknown}; expected {list(SIGNIFICANCE_MARKERS)}.")

    duplicated = significance.duplicated(subset=KEY_COLUMNS, keep=False)
    if duplicated.any():
        keys = sorted({tuple(row) for row in significance.loc[duplicated, KEY_COLUMNS].itertuples(index=False)})
        raise ConfigurationError(f"Significance table has duplicate keys: {keys}")


def merge_significance(coefficients: pd.DataFrame, significance: pd.DataFrame) -> pd.DataFrame:
    """Left-join markers onto coefficients and add the ``adj_x`` label offset.

    Every coefficient row appears exactly once, in its original order. Rows
    without a marker keep a missing ``sig``; markers without a coefficient are
    dropped. Both cases emit a DataQualityWarning.
    """
    validate_significance_table(significance)
    annotations = significance.loc[:, SIGNIFICANCE_COLUMNS]

    merged = coefficients.loc[:, COEFFICIENT_COLUMNS].merge(
        annotations,
        on=KEY_COLUMNS,
        how="left",
        indicator=True,
        validate="one_to_one",
    )
    unannotated = merged["_merge"] == "left_only"
    if unannotated.any():
        keys = [tuple(row) for row in merged.loc[unannotated, KEY_COLUMNS].itertuples(index=False)]
        warnings.warn(
            f"{len(keys)} coefficients have no significance entry: {keys}",
            DataQualityWarning,
            stacklevel=2,
        )

    orphans = annotations.merge(coefficients.loc[:, KEY_COLUMNS], on=KEY_COLUMNS, how="left", indicator=True)
    orphaned = orphans["_merge"] == "left_only"
    if orphaned.any():
        keys = [tuple(row) for row in orphans.loc[orphaned, KEY_COLUMNS].itertuples(index=False)]
        warnings.warn(
            f"{len(keys)} significance entries match no coefficient and were dropped: {keys}",
            DataQualityWarning,
            stacklevel=2,
        )

    merged = merged.drop(columns="_merge")
    merged["adj_x"] = label_offsets(merged["coefficients"])
    return merged.loc[:, OUTPUT_COLUMNS]


def to_output_rows(table: pd.DataFrame) -> List[OutputRow]:
    """Convert the merged table into OutputRow records."""
    rows: List[OutputRow] = []
    for row in table.loc[:, OUTPUT_COLUMNS].itertuples(index=False):
        sig = None if pd.isna(row.sig) else str(row.sig)
        rows.append(
            OutputRow(
                metric=str(row.metric),
                season=str(row.season),
                variable=str(row.variable),
                coefficients=float(row.coefficients),
                sig=sig,
                adj_x=float(row.adj_x),
            )
        )
    return rows


__all__ = [
    "OUTPUT_COLUMNS",
    "SIGNIFICANCE_COLUMNS",
    "label_offset",
    "label_offsets",
    "load_significance_table",
    "merge_significance",
    "significance_table_from_records",
    "to_output_rows",
    "validate_significance_table",
]
