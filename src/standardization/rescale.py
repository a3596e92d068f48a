"""Rescaling strategies, one per variable kind.

Continuous inputs are centred and divided by two standard deviations, binary
inputs are coded 0/1 and centred, and categorical inputs pass through.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol

import numpy as np
import pandas as pd

from src.errors import ConfigurationError
from src.models.design import binary_codes
from src.models.variables import VariableKind, VariableSpec


class RescaleStrategy(Protocol):
    """Transforms one predictor column onto the standardized scale."""

    def apply(self, values: pd.Series, spec: VariableSpec) -> pd.Series: ...


@dataclass(frozen=True)
class ContinuousRescale:
    """Mean 0 and standard deviation ``target_sd`` (sample sd, ddof=1)."""

    target_sd: float = 0.5

    def __post_init__(self) -> None:
        if not np.isfinite(self.target_sd) or self.target_sd <= 0:
            raise ValueError("target_sd must be a positive finite number.")

    def apply(self, values: pd.Series, spec: VariableSpec) -> pd.Series:
        numeric = pd.to_numeric(values, errors="coerce").astype(float)
        if numeric.notna().sum() < 2:
            raise ConfigurationError(f"Continuous variable '{spec.name}' needs at least two observations.")
        sd = float(numeric.std(ddof=1))
        if not np.isfinite(sd) or sd == 0.0:
            raise ConfigurationError(f"Continuous variable '{spec.name}' has zero variance.")
        scaled = (numeric - numeric.mean()) * (self.target_sd / sd)
        return scaled.rename(f"{spec.kind.standardized_prefix}{spec.name}")


@dataclass(frozen=True)
class BinaryRescale:
    """Keeps the unit gap between the two levels and centres on the mean."""

    def apply(self, values: pd.Series, spec: VariableSpec) -> pd.Series:
        distinct = values.dropna().nunique()
        if distinct > 2:
            raise ConfigurationError(
                f"Binary variable '{spec.name}' has {distinct} distinct values; expected at most 2."
            )
        codes = binary_codes(values, spec)
        return (codes - codes.mean()).rename(f"{spec.kind.standardized_prefix}{spec.name}")


@dataclass(frozen=True)
class CategoricalPassthrough:
    """Leaves the column and its factor encoding untouched."""

    def apply(self, values: pd.Series, spec: VariableSpec) -> pd.Series:
        return values.copy()


STRATEGIES: Mapping[VariableKind, RescaleStrategy] = {
    VariableKind.CONTINUOUS: ContinuousRescale(),
    VariableKind.BINARY: BinaryRescale(),
    VariableKind.CATEGORICAL: CategoricalPassthrough(),
}


def rescale_column(values: pd.Series, spec: VariableSpec) -> pd.Series:
    """Rescale ``values`` with the strategy declared for ``spec.kind``."""
    try:
        strategy = STRATEGIES[spec.kind]
    except KeyError as exc:
        raise ConfigurationError(f"No rescaling strategy for kind '{spec.kind}'.") from exc
    return strategy.apply(values, spec)


__all__ = [
    "BinaryRescale",
    "CategoricalPassthrough",
    "ContinuousRescale",
    "RescaleStrategy",
    "STRATEGIES",
    "rescale_column",
]
