"""Concatenate coefficient records from every model into one table."""

from __future__ import annotations

from typing import Iterable, List, Sequence

import pandas as pd

from src.errors import ConfigurationError

from .records import CoefficientRecord

KEY_COLUMNS = ["metric", "season", "variable"]
COEFFICIENT_COLUMNS = KEY_COLUMNS + ["coefficients"]


def aggregate(records_per_model: Iterable[Sequence[CoefficientRecord]]) -> pd.DataFrame:
    """Append records in model order; a repeated (metric, season, variable) key is fatal."""
    rows: List[dict] = []
    for records in records_per_model:
        for record in records:
            rows.append(
                {
                    "metric": record.metric,
                    "season": record.season,
                    "variable": record.variable,
                    "coefficients": record.coefficient,
                }
            )

    table = pd.DataFrame(rows, columns=COEFFICIENT_COLUMNS)
    duplicated = table.duplicated(subset=KEY_COLUMNS, keep=False)
    if duplicated.any():
        keys = sorted({tuple(row) for row in table.loc[duplicated, KEY_COLUMNS].itertuples(index=False)})
        raise ConfigurationError(f"Coefficient table has duplicate keys: {keys}")
    table["coefficients"] = table["coefficients"].astype(float)
    return table


__all__ = ["COEFFICIENT_COLUMNS", "KEY_COLUMNS", "aggregate"]
