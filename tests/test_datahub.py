"""Tests for input loading, predictor derivation and season partitioning."""

from __future__ import annotations

from pathlib import Path

import sys

import numpy as np
import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.datahub.config import METRIC_COLUMNS, PrepareConfig
from src.datahub.io import read_closure_table, read_metric_table, write_output_table
from src.datahub.prepare import (
    derive_closure_bucket,
    derive_region,
    join_closures,
    prepare_metric_rows,
    recode_pcgroup,
    split_by_season,
)
from src.errors import ConfigurationError, DataQualityWarning


# ---------------------------------------------------------------------------
# Helper fixtures and utilities


def _metrics() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "y": [2015, 2016, 2015, 2016],
            "period": ["early", "early", "late", "late"],
            "pcgroup": ["CCA", "SFA", "CCA", "SFA"],
            "N": [12, 15, 11, 14],
            "ed": [0.3, 0.4, 0.35, 0.45],
        }
    )


def _closures() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "y": [2015, 2016, 2016, 2015],
            "pcgroup": ["CCA", "SFA", "CCA", "SFA"],
            "days.closed": [0, 60, 20, 0],
        }
    )


# ---------------------------------------------------------------------------
# Derived predictor tests


def test_derive_region_uses_north_set() -> None:
    region = derive_region(pd.Series(["CCA", "SFA", "BDA", "MRA"]), ("CCA", "ERA", "BGA", "BDA"))
    assert list(region) == ["North", "Central", "North", "Central"]
    assert list(region.cat.categories) == ["North", "Central"]


def test_derive_closure_bucket_thresholds() -> None:
    days = pd.Series([0, 1, 49, 50, 60, np.nan])
    buckets = derive_closure_bucket(days, medium_limit=50)
    assert list(buckets[:5]) == ["none", "medium", "medium", "high", "high"]
    assert pd.isna(buckets.iloc[5])
    assert list(buckets.cat.categories) == ["none", "medium", "high"]


def test_derive_closure_bucket_rejects_negative_days() -> None:
    with pytest.raises(ValueError):
        derive_closure_bucket(pd.Series([0, -3]), medium_limit=50)


def test_recode_pcgroup_follows_configured_order() -> None:
    codes = recode_pcgroup(
        pd.Series(["SFA", "CCA", "ERA"]),
        PrepareConfig(pcgroup_order=("CCA", "ERA", "SFA")).pcgroup_codes(),
    )
    assert list(codes) == [3.0, 1.0, 2.0]


def test_recode_pcgroup_rejects_unknown_groups() -> None:
    with pytest.raises(ConfigurationError):
        recode_pcgroup(pd.Series(["CCA", "XXX"]), {"CCA": 1, "ERA": 2})


# ---------------------------------------------------------------------------
# Join and preparation tests


def test_join_closures_keeps_unmatched_rows_and_warns() -> None:
    closures = _closures().iloc[[0]]
    with pytest.warns(DataQualityWarning):
        joined = join_closures(_metrics(), closures)
    assert len(joined) == 4
    assert joined["days.closed"].isna().sum() == 2


def test_join_closures_rejects_duplicate_keys() -> None:
    closures = pd.concat([_closures(), _closures().iloc[:1]], ignore_index=True)
    with pytest.raises(ConfigurationError):
        join_closures(_metrics(), closures)


def test_prepare_metric_rows_derives_predictors_without_mutating_inputs() -> None:
    metrics = _metrics()
    closures = _closures()
    metrics_before = metrics.copy()
    closures_before = closures.copy()

    prepared = prepare_metric_rows(metrics, closures)

    pd.testing.assert_frame_equal(metrics, metrics_before)
    pd.testing.assert_frame_equal(closures, closures_before)
    assert list(prepared["region"]) == ["North", "Central", "North", "Central"]
    assert list(prepared["closure_bucket"]) == ["none", "high", "none", "high"]
    assert list(prepared["pcgroup_code"]) == [1.0, 5.0, 1.0, 5.0]


def test_prepare_metric_rows_codes_port_groups_from_config() -> None:
    config = PrepareConfig(north_groups=("SFA",), pcgroup_order=("SFA", "CCA"))
    prepared = prepare_metric_rows(_metrics(), _closures(), config)
    assert list(prepared["pcgroup_code"]) == [2.0, 1.0, 2.0, 1.0]
    assert list(prepared["region"]) == ["Central", "North", "Central", "North"]


def test_prepare_config_validation() -> None:
    with pytest.raises(ValueError):
        PrepareConfig(pcgroup_order=()).validate()
    with pytest.raises(ValueError):
        PrepareConfig(pcgroup_order=("CCA", "CCA")).validate()
    with pytest.raises(ValueError):
        PrepareConfig(north_groups=("XXX",)).validate()
    with pytest.raises(ValueError):
        PrepareConfig(medium_limit=0).validate()
    assert PrepareConfig().pcgroup_codes()["CCA"] == 1


# ---------------------------------------------------------------------------
# Season partition tests


def test_split_by_season_returns_both_partitions() -> None:
    partitions = split_by_season(_metrics())
    assert list(partitions) == ["Early Season", "Late Season"]
    assert len(partitions["Early Season"]) == 2
    assert set(partitions["Late Season"]["period"]) == {"late"}


def test_split_by_season_rejects_unknown_values() -> None:
    metrics = _metrics()
    metrics.loc[0, "period"] = "mid"
    with pytest.raises(ConfigurationError):
        split_by_season(metrics)


# ---------------------------------------------------------------------------
# IO tests


def test_read_metric_table_requires_columns(tmp_path: Path) -> None:
    path = tmp_path / "metrics.csv"
    _metrics().to_csv(path, index=False)
    with pytest.raises(ValueError):
        read_metric_table(path)


def test_read_tables_round_trip(tmp_path: Path) -> None:
    metrics = _metrics()
    for column in METRIC_COLUMNS:
        if column not in metrics:
            metrics[column] = 0.0
    metrics_path = tmp_path / "metrics.csv"
    closures_path = tmp_path / "closures.csv"
    metrics.to_csv(metrics_path, index=False)
    _closures().to_csv(closures_path, index=False)

    loaded = read_metric_table(metrics_path)
    closures = read_closure_table(closures_path)
    assert loaded["pcgroup"].tolist() == ["CCA", "SFA", "CCA", "SFA"]
    assert closures["days.closed"].tolist() == [0, 60, 20, 0]


def test_write_output_table_marks_missing_values(tmp_path: Path) -> None:
    frame = pd.DataFrame({"variable": ["Size", "Port Group"], "sig": ["", None]})
    target = tmp_path / "out" / "table.csv"

    write_output_table(frame, target)

    lines = target.read_text().splitlines()
    assert lines == ["variable,sig", "Size,", "Port Group,NA"]
    assert [path.name for path in target.parent.iterdir()] == ["table.csv"]
