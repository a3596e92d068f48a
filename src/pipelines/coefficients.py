"""End-to-end orchestration: prepare, fit, standardize, extract, merge, write."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Optional, Sequence

import pandas as pd

from src.datahub.config import PrepareConfig
from src.datahub.io import read_closure_table, read_metric_table, write_output_table
from src.datahub.prepare import prepare_metric_rows, split_by_season
from src.errors import ConfigurationError
from src.metrics import aggregate, extract, load_significance_table, merge_significance
from src.metrics.records import CoefficientRecord
from src.models.fitting import fit_model
from src.models.formula import ModelFormula
from src.models.registry import FORMULAS, validate_formulas
from src.models.variables import VARIABLE_SPECS, VariableSpec
from src.standardization import standardize


def collect_coefficients(
    partitions: Mapping[str, pd.DataFrame],
    formulas: Sequence[ModelFormula] = FORMULAS,
    specs: Mapping[str, VariableSpec] = VARIABLE_SPECS,
    names: Optional[Mapping[str, str]] = None,
) -> List[List[CoefficientRecord]]:
    """Fit and standardize every formula in declaration order."""
    per_model: List[List[CoefficientRecord]] = []
    for formula in formulas:
        try:
            partition = partitions[formula.season]
        except KeyError as exc:
            raise ConfigurationError(f"No partition for season '{formula.season}'.") from exc
        fitted = fit_model(partition, formula, specs)
        standardized = standardize(fitted, specs)
        records = extract(standardized, formula.metric, formula.season, names)
        print(f"[pipeline] {formula.metric} / {formula.season}: {len(records)} standardized coefficients.")
        per_model.append(records)
    return per_model


def run_pipeline(
    metrics: pd.DataFrame,
    closures: pd.DataFrame,
    significance: pd.DataFrame,
    formulas: Sequence[ModelFormula] = FORMULAS,
    specs: Mapping[str, VariableSpec] = VARIABLE_SPECS,
    names: Optional[Mapping[str, str]] = None,
    config: Optional[PrepareConfig] = None,
) -> pd.DataFrame:
    """Return the merged coefficient table for in-memory inputs."""
    validate_formulas(formulas, specs, names)
    prepared = prepare_metric_rows(metrics, closures, config)
    partitions = split_by_season(prepared)
    coefficients = aggregate(collect_coefficients(partitions, formulas, specs, names))
    print(f"[pipeline] Aggregated {len(coefficients)} coefficients from {len(formulas)} models.")
    return merge_significance(coefficients, significance)


def run_from_files(
    metrics_path: Path,
    closures_path: Path,
    significance_path: Path,
    output_path: Path,
    formulas: Sequence[ModelFormula] = FORMULAS,
    config: Optional[PrepareConfig] = None,
) -> pd.DataFrame:
    """Load inputs, run the pipeline and write the output only if every stage succeeds."""
    table = run_pipeline(
        read_metric_table(metrics_path),
        read_closure_table(closures_path),
        load_significance_table(significance_path),
        formulas=formulas,
        config=config,
    )
    write_output_table(table, output_path)
    return table


__all__ = ["collect_coefficients", "run_from_files", "run_pipeline"]
