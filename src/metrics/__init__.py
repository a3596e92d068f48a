"""Coefficient extraction, aggregation and significance annotation."""

from .aggregation import aggregate
from .extraction import extract
from .records import CoefficientRecord, OutputRow, SignificanceRecord
from .significance import (
    label_offset,
    load_significance_table,
    merge_significance,
    significance_table_from_records,
    to_output_rows,
)

__all__ = [
    "CoefficientRecord",
    "OutputRow",
    "SignificanceRecord",
    "aggregate",
    "extract",
    "label_offset",
    "load_significance_table",
    "merge_significance",
    "significance_table_from_records",
    "to_output_rows",
]
