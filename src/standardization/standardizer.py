"""Refit a GLM after putting its predictors on the standardized scale."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import pandas as pd

from src.errors import ConfigurationError
from src.models.design import build_design
from src.models.fitting import FittedModel, GLMFit, fit_glm
from src.models.formula import ModelFormula
from src.models.variables import VariableSpec

from .rescale import rescale_column


@dataclass(frozen=True, eq=False)
class StandardizedModel:
    """Refit of a FittedModel on rescaled predictors.

    ``inputs`` holds one column per predictor keyed by its standardized name
    (``z.N``, ``c.R``; categorical variables keep their own name).
    """

    source: FittedModel
    inputs: pd.DataFrame
    design: pd.DataFrame
    fit: GLMFit

    @property
    def formula(self) -> ModelFormula:
        return self.source.formula

    @property
    def params(self) -> pd.Series:
        return self.fit.params


def standardize(
    model: FittedModel,
    variable_specs: Optional[Mapping[str, VariableSpec]] = None,
) -> StandardizedModel:
    """Rescale each predictor of ``model`` by its declared kind and refit.

    The coefficients are re-estimated rather than transformed, since the
    binomial link is not linear.

    Raises:
        ConfigurationError: if a predictor's column is absent from the model frame.
    """
    formula = model.formula
    specs = formula.variable_specs(variable_specs)
    missing = [spec.column for spec in specs.values() if spec.column not in model.frame.columns]
    if missing:
        raise ConfigurationError(f"Model {formula.key} has no columns {missing} to standardize.")

    inputs: Dict[str, pd.Series] = {}
    named: Dict[str, pd.Series] = {}
    for name, spec in specs.items():
        rescaled = rescale_column(model.frame[spec.column], spec)
        inputs[name] = rescaled
        named[f"{spec.kind.standardized_prefix}{name}"] = rescaled

    design = build_design(inputs, formula, specs, standardized=True)
    fit = fit_glm(model.frame[formula.response], design, formula.family)
    if fit.aliased:
        print(f"[fit] {formula.metric} / {formula.season}: aliased terms {list(fit.aliased)} left undefined.")
    return StandardizedModel(source=model, inputs=pd.DataFrame(named), design=design, fit=fit)


__all__ = ["StandardizedModel", "standardize"]
