"""Design-matrix construction shared by the raw fit and the standardized refit."""

from __future__ import annotations

from itertools import product
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from src.errors import ConfigurationError

from .formula import InteractionTerm, ModelFormula
from .variables import VariableKind, VariableSpec

INTERCEPT = "(Intercept)"


def binary_codes(values: pd.Series, spec: VariableSpec) -> pd.Series:
    """Code a two-level variable as 0 (first level) / 1 (second level).

    Raises:
        ConfigurationError: if more than two distinct values are present or a
            value falls outside the declared levels.
    """
    observed = list(pd.unique(values.dropna()))
    if spec.levels is not None:
        levels: Sequence = spec.levels
        stray = [value for value in observed if value not in levels]
        if stray:
            raise ConfigurationError(
                f"Binary variable '{spec.name}' has values outside its levels {list(levels)}: {stray}"
            )
    else:
        if len(observed) > 2:
            raise ConfigurationError(
                f"Binary variable '{spec.name}' has {len(observed)} distinct values; expected at most 2."
            )
        levels = sorted(observed)
    # A constant column codes as all zeros; the fit then reports it as aliased.
    mapping = {level: float(code) for code, level in enumerate(levels)}
    return values.astype(object).map(mapping).astype(float)


def variable_columns(
    name: str,
    spec: VariableSpec,
    standardized: bool,
    restrict: Optional[Sequence[str]] = None,
) -> List[str]:
    """Design column names produced by one variable."""
    if spec.kind is VariableKind.CATEGORICAL:
        levels = list(spec.levels or ())[1:]
        if restrict is not None:
            unknown = [level for level in restrict if level not in levels]
            if unknown:
                raise ConfigurationError(f"'{name}' has no non-reference levels {unknown}.")
            levels = [level for level in levels if level in restrict]
        return [f"{name}{level}" for level in levels]
    prefix = spec.kind.standardized_prefix if standardized else ""
    return [f"{prefix}{name}"]


def interaction_columns(term: InteractionTerm, specs: Mapping[str, VariableSpec], standardized: bool) -> List[str]:
    parts = [
        variable_columns(member, specs[member], standardized, term.levels.get(member))
        for member in term.members
    ]
    return [":".join(combo) for combo in product(*parts)]


def term_names(formula: ModelFormula, specs: Mapping[str, VariableSpec], standardized: bool = True) -> List[str]:
    """All design column names of ``formula``, intercept first."""
    names = [INTERCEPT]
    for name in formula.variables:
        names.extend(variable_columns(name, specs[name], standardized))
    for term in formula.interactions:
        names.extend(interaction_columns(term, specs, standardized))
    return names


def build_design(
    inputs: Mapping[str, pd.Series],
    formula: ModelFormula,
    specs: Mapping[str, VariableSpec],
    standardized: bool,
) -> pd.DataFrame:
    """Assemble the design matrix from already-encoded predictor columns.

    ``inputs`` maps each variable name to its encoded values: numeric for
    continuous and binary variables, raw labels for categorical ones.
    """
    if not inputs:
        raise ValueError("No predictor columns supplied.")
    index = next(iter(inputs.values())).index
    columns: Dict[str, pd.Series] = {INTERCEPT: pd.Series(1.0, index=index)}

    for name in formula.variables:
        columns.update(_encode(name, inputs[name], specs[name], standardized))

    for term in formula.interactions:
        blocks = [
            _encode(member, inputs[member], specs[member], standardized, term.levels.get(member))
            for member in term.members
        ]
        for combo in product(*(block.items() for block in blocks)):
            label = ":".join(column for column, _ in combo)
            values = np.prod(np.column_stack([series.to_numpy(dtype=float) for _, series in combo]), axis=1)
            columns[label] = pd.Series(values, index=index)

    return pd.DataFrame(columns, index=index)


def _encode(
    name: str,
    values: pd.Series,
    spec: VariableSpec,
    standardized: bool,
    restrict: Optional[Sequence[str]] = None,
) -> Dict[str, pd.Series]:
    labels = variable_columns(name, spec, standardized, restrict)
    if spec.kind is not VariableKind.CATEGORICAL:
        return {labels[0]: values.astype(float)}

    raw = values.astype(object)
    declared = list(spec.levels or ())
    stray = sorted({str(value) for value in raw.dropna().unique()} - set(declared))
    if stray:
        raise ConfigurationError(f"Categorical variable '{name}' has undeclared levels: {stray}")
    encoded: Dict[str, pd.Series] = {}
    for label in labels:
        level = label[len(name):]
        encoded[label] = (raw == level).astype(float)
    return encoded


__all__ = [
    "INTERCEPT",
    "binary_codes",
    "build_design",
    "interaction_columns",
    "term_names",
    "variable_columns",
]
