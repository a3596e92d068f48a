"""Formula and display-name registries for the standardized coefficient models.

Each entry pairs a (metric, season) combination with its response, family and
predictors. The declaration order is the order in which models are fitted and
their coefficients concatenated.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence, Tuple

from src.datahub.config import METRIC_LABELS, SEASON_LABELS
from src.errors import ConfigurationError

from .design import INTERCEPT, term_names
from .formula import InteractionTerm, ModelFormula
from .variables import VARIABLE_SPECS, VariableSpec

EDGE_DENSITY = METRIC_LABELS["ed"]
CENTRALIZATION = METRIC_LABELS["nc_weighted"]
MODULARITY = METRIC_LABELS["m_weighted"]
EARLY = SEASON_LABELS["early"]
LATE = SEASON_LABELS["late"]

SEASONS: Tuple[str, ...] = tuple(SEASON_LABELS.values())

DISPLAY_NAMES: Mapping[str, str] = {
    "Dmedium": "D (medium)",
    "Dhigh": "D (high)",
    "c.R": "R (Central)",
    "z.N": "Size",
    "z.pcgroup": "Port Group",
    "Dhigh:c.R": "D (high) : R (Central)",
}

FORMULAS: Tuple[ModelFormula, ...] = (
    ModelFormula(EDGE_DENSITY, EARLY, "ed", "binomial", ("D", "R", "N")),
    ModelFormula(EDGE_DENSITY, LATE, "ed", "binomial", ("D", "R", "N")),
    ModelFormula(CENTRALIZATION, EARLY, "nc_weighted", "gaussian", ("D", "R", "pcgroup")),
    ModelFormula(
        CENTRALIZATION,
        LATE,
        "nc_weighted",
        "gaussian",
        ("D", "R"),
        (InteractionTerm(("D", "R"), {"D": ("high",)}),),
    ),
    ModelFormula(MODULARITY, EARLY, "m_weighted", "gaussian", ("D", "R", "N")),
    ModelFormula(MODULARITY, LATE, "m_weighted", "gaussian", ("D", "R", "pcgroup")),
)


def display_name(term: str, names: Optional[Mapping[str, str]] = None) -> str:
    """Translate an internal design term into its display name."""
    table = DISPLAY_NAMES if names is None else names
    try:
        return table[term]
    except KeyError as exc:
        raise ConfigurationError(f"No display name for model term '{term}'. Known: {list(table)}") from exc


def validate_formulas(
    formulas: Sequence[ModelFormula],
    specs: Optional[Mapping[str, VariableSpec]] = None,
    names: Optional[Mapping[str, str]] = None,
) -> None:
    """Check labels and keys, and that every standardized term has a display name.

    Season labels must match the partitions built by ``split_by_season`` and
    each metric label must belong to its response column.
    """
    table = DISPLAY_NAMES if names is None else names
    seen: Dict[Tuple[str, str], ModelFormula] = {}
    for formula in formulas:
        if formula.season not in SEASONS:
            raise ConfigurationError(f"Formula {formula.key} names an unknown season; expected one of {list(SEASONS)}.")
        if METRIC_LABELS.get(formula.response) != formula.metric:
            raise ConfigurationError(
                f"Formula {formula.key} pairs response '{formula.response}' with the wrong metric label."
            )
        if formula.key in seen:
            raise ConfigurationError(f"Formula {formula.key} is declared twice.")
        seen[formula.key] = formula
        resolved = formula.variable_specs(specs)
        unmapped = [term for term in term_names(formula, resolved) if term != INTERCEPT and term not in table]
        if unmapped:
            raise ConfigurationError(f"Formula {formula.key} produces terms without display names: {unmapped}")


def get_formula(metric: str, season: str, formulas: Sequence[ModelFormula] = FORMULAS) -> ModelFormula:
    """Return the formula registered for ``(metric, season)``."""
    for formula in formulas:
        if formula.key == (metric, season):
            return formula
    raise ConfigurationError(f"No formula registered for ({metric!r}, {season!r}).")


validate_formulas(FORMULAS, VARIABLE_SPECS)


__all__ = [
    "CENTRALIZATION",
    "DISPLAY_NAMES",
    "EARLY",
    "EDGE_DENSITY",
    "FORMULAS",
    "LATE",
    "MODULARITY",
    "SEASONS",
    "display_name",
    "get_formula",
    "validate_formulas",
]
