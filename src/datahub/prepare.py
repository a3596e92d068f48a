"""Derive modelling predictors from raw network metrics and closure events."""

from __future__ import annotations

import warnings
from typing import Dict, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from src.errors import ConfigurationError, DataQualityWarning

from .config import (
    CLOSURE_COLUMNS,
    CLOSURE_LEVELS,
    JOIN_KEYS,
    REGION_LEVELS,
    SEASON_LABELS,
    PrepareConfig,
)

REGION_COLUMN = "region"
CLOSURE_BUCKET_COLUMN = "closure_bucket"
PCGROUP_CODE_COLUMN = "pcgroup_code"


def derive_region(pcgroup: pd.Series, north_groups: Iterable[str]) -> pd.Series:
    """Label each port group as North or Central."""
    north = set(north_groups)
    north_label, central_label = REGION_LEVELS
    labels = np.where(pcgroup.isin(north), north_label, central_label)
    return pd.Series(
        pd.Categorical(labels, categories=list(REGION_LEVELS)),
        index=pcgroup.index,
        name=REGION_COLUMN,
    )


def derive_closure_bucket(days_closed: pd.Series, medium_limit: int) -> pd.Series:
    """Bucket closure duration into none / medium / high; missing stays missing."""
    days = pd.to_numeric(days_closed, errors="coerce")
    if (days < 0).any():
        raise ValueError("days.closed must be non-negative.")
    none_label, medium_label, high_label = CLOSURE_LEVELS
    buckets = np.select(
        [days == 0, (days > 0) & (days < medium_limit), days >= medium_limit],
        [none_label, medium_label, high_label],
        default="",
    )
    # "" is not a category, so missing days become NaN.
    return pd.Series(
        pd.Categorical(buckets, categories=list(CLOSURE_LEVELS)),
        index=days_closed.index,
        name=CLOSURE_BUCKET_COLUMN,
    )


def recode_pcgroup(pcgroup: pd.Series, codes: Mapping[str, int]) -> pd.Series:
    """Map port-group identifiers to their ordinal codes (see ``PrepareConfig.pcgroup_codes``)."""
    unknown = sorted({str(value) for value in pcgroup.dropna().unique()} - set(codes))
    if unknown:
        raise ConfigurationError(f"Port groups missing from the configured ordering: {', '.join(unknown)}")
    return pcgroup.map(codes).astype(float).rename(PCGROUP_CODE_COLUMN)


def join_closures(metrics: pd.DataFrame, closures: pd.DataFrame) -> pd.DataFrame:
    """Left-join closure durations onto metric rows by (y, pcgroup).

    Metric rows without a closure record keep a missing ``days.closed`` and a
    DataQualityWarning is emitted; the rows themselves are never dropped.
    """
    _require_columns(closures, CLOSURE_COLUMNS, "closure table")
    _require_columns(metrics, JOIN_KEYS, "metric table")

    closure_keys = closures.loc[:, list(CLOSURE_COLUMNS)]
    duplicated = closure_keys.duplicated(subset=list(JOIN_KEYS), keep=False)
    if duplicated.any():
        pairs = sorted({(row.y, row.pcgroup) for row in closure_keys[duplicated].itertuples()})
        raise ConfigurationError(f"Closure table has duplicate (y, pcgroup) keys: {pairs}")

    joined = metrics.merge(closure_keys, on=list(JOIN_KEYS), how="left", indicator=True, validate="many_to_one")
    unmatched = joined["_merge"] == "left_only"
    if unmatched.any():
        pairs = sorted({(row.y, row.pcgroup) for row in joined.loc[unmatched, list(JOIN_KEYS)].itertuples()})
        warnings.warn(
            f"{int(unmatched.sum())} of {len(joined)} metric rows have no closure record; "
            f"missing (y, pcgroup) pairs: {pairs}",
            DataQualityWarning,
            stacklevel=2,
        )
    return joined.drop(columns="_merge")


def prepare_metric_rows(
    metrics: pd.DataFrame,
    closures: pd.DataFrame,
    config: Optional[PrepareConfig] = None,
) -> pd.DataFrame:
    """Join closures and derive region, closure bucket and port-group code.

    The input frames are left untouched; a new frame is returned.
    """
    cfg = config or PrepareConfig()
    cfg.validate()
    _require_columns(metrics, ("y", "period", "pcgroup"), "metric table")

    joined = join_closures(metrics, closures)
    joined[REGION_COLUMN] = derive_region(joined["pcgroup"], cfg.north_groups)
    joined[CLOSURE_BUCKET_COLUMN] = derive_closure_bucket(joined["days.closed"], cfg.medium_limit)
    joined[PCGROUP_CODE_COLUMN] = recode_pcgroup(joined["pcgroup"], cfg.pcgroup_codes())
    print(f"[prepare] Prepared {len(joined)} metric rows across {joined['pcgroup'].nunique()} port groups.")
    return joined


def split_by_season(frame: pd.DataFrame, labels: Optional[Dict[str, str]] = None) -> Dict[str, pd.DataFrame]:
    """Partition prepared rows by season, keyed by the season display name.

    Raises:
        ConfigurationError: if ``period`` holds a value outside ``labels``.
    """
    season_labels = labels or SEASON_LABELS
    observed = set(frame["period"].unique())
    unknown = sorted(str(value) for value in observed - set(season_labels))
    if unknown:
        raise ConfigurationError(
            f"Unknown season values {unknown}; expected one of {sorted(season_labels)}."
        )

    partitions: Dict[str, pd.DataFrame] = {}
    for raw, label in season_labels.items():
        partitions[label] = frame.loc[frame["period"] == raw].reset_index(drop=True)
    return partitions


def _require_columns(frame: pd.DataFrame, columns: Iterable[str], what: str) -> None:
    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise ValueError(f"The {what} is missing required columns: {', '.join(missing)}")


__all__ = [
    "CLOSURE_BUCKET_COLUMN",
    "PCGROUP_CODE_COLUMN",
    "REGION_COLUMN",
    "derive_closure_bucket",
    "derive_region",
    "join_closures",
    "prepare_metric_rows",
    "recode_pcgroup",
    "split_by_season",
]
