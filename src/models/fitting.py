"""Statsmodels-backed GLM fitting for one (metric, season) partition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm

from src.errors import ConfigurationError

from .design import binary_codes, build_design
from .formula import FamilyName, ModelFormula
from .variables import VariableKind, VariableSpec


def make_family(name: FamilyName) -> sm.families.Family:
    """Binomial uses the logit link and Gaussian the identity link."""
    if name == "binomial":
        return sm.families.Binomial()
    if name == "gaussian":
        return sm.families.Gaussian()
    raise ConfigurationError(f"Unsupported family '{name}'.")


@dataclass(frozen=True, eq=False)
class GLMFit:
    """Coefficients of one fit; aliased columns carry NaN."""

    params: pd.Series
    aliased: Tuple[str, ...]
    converged: bool
    nobs: int


@dataclass(frozen=True, eq=False)
class FittedModel:
    """A GLM fitted on the raw (unstandardized) predictors of one partition."""

    formula: ModelFormula
    frame: pd.DataFrame
    design: pd.DataFrame
    fit: GLMFit

    @property
    def metric(self) -> str:
        return self.formula.metric

    @property
    def season(self) -> str:
        return self.formula.season

    @property
    def params(self) -> pd.Series:
        return self.fit.params


def find_aliased_columns(design: pd.DataFrame) -> List[str]:
    """Return columns that are linearly dependent on the columns before them."""
    values = design.to_numpy(dtype=float)
    kept: List[int] = []
    rank = 0
    aliased: List[str] = []
    for idx, column in enumerate(design.columns):
        candidate_rank = int(np.linalg.matrix_rank(values[:, kept + [idx]]))
        if candidate_rank > rank:
            kept.append(idx)
            rank = candidate_rank
        else:
            aliased.append(str(column))
    return aliased


def fit_glm(response: pd.Series, design: pd.DataFrame, family: FamilyName) -> GLMFit:
    """Fit a GLM, leaving aliased design columns out of the estimation."""
    aliased = find_aliased_columns(design)
    exog = design.drop(columns=aliased)
    result = sm.GLM(response.astype(float), exog, family=make_family(family)).fit()
    params = pd.Series(result.params, index=exog.columns).reindex(design.columns)
    return GLMFit(
        params=params,
        aliased=tuple(aliased),
        converged=bool(getattr(result, "converged", True)),
        nobs=int(result.nobs),
    )


def model_frame(partition: pd.DataFrame, formula: ModelFormula, specs: Mapping[str, VariableSpec]) -> pd.DataFrame:
    """Complete-case rows of ``partition`` for the response and every predictor column."""
    columns = [formula.response] + [spec.column for spec in specs.values()]
    missing = [column for column in columns if column not in partition.columns]
    if missing:
        raise ConfigurationError(f"Columns {missing} required by {formula.key} are absent from the data.")

    complete = partition.dropna(subset=columns).reset_index(drop=True)
    if complete.empty:
        raise ValueError(f"No complete rows left to fit {formula.key}.")
    dropped = len(partition) - len(complete)
    if dropped:
        print(f"[fit] {formula.metric} / {formula.season}: dropped {dropped} rows with missing values.")
    return complete


def raw_inputs(frame: pd.DataFrame, specs: Mapping[str, VariableSpec]) -> Dict[str, pd.Series]:
    """Encode predictors on their original scale for the unstandardized fit."""
    inputs: Dict[str, pd.Series] = {}
    for name, spec in specs.items():
        values = frame[spec.column]
        if spec.kind is VariableKind.BINARY:
            inputs[name] = binary_codes(values, spec)
        elif spec.kind is VariableKind.CONTINUOUS:
            inputs[name] = pd.to_numeric(values).astype(float)
        else:
            inputs[name] = values
    return inputs


def fit_model(
    partition: pd.DataFrame,
    formula: ModelFormula,
    specs: Optional[Mapping[str, VariableSpec]] = None,
) -> FittedModel:
    """Fit ``formula`` to ``partition`` with predictors on their original scale."""
    resolved = formula.variable_specs(specs)
    frame = model_frame(partition, formula, resolved)
    design = build_design(raw_inputs(frame, resolved), formula, resolved, standardized=False)
    fit = fit_glm(frame[formula.response], design, formula.family)
    print(f"[fit] {formula.metric} / {formula.season}: {formula.describe()} on {fit.nobs} rows (converged={fit.converged}).")
    return FittedModel(formula=formula, frame=frame, design=design, fit=fit)


__all__ = [
    "FittedModel",
    "GLMFit",
    "find_aliased_columns",
    "fit_glm",
    "fit_model",
    "make_family",
    "model_frame",
    "raw_inputs",
]
