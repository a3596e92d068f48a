"""Declarative description of one (metric, season) model formula."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Mapping, Optional, Tuple

from src.errors import ConfigurationError

from .variables import VariableSpec, get_variable_spec

FamilyName = Literal["binomial", "gaussian"]
FAMILIES: Tuple[FamilyName, ...] = ("binomial", "gaussian")


@dataclass(frozen=True)
class InteractionTerm:
    """Product of two or more main-effect variables.

    ``levels`` optionally restricts a categorical member to a subset of its
    non-reference levels, e.g. ``{"D": ("high",)}`` keeps only ``Dhigh``.
    """

    members: Tuple[str, ...]
    levels: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(self.members) < 2:
            raise ConfigurationError("An interaction needs at least two members.")
        stray = sorted(set(self.levels) - set(self.members))
        if stray:
            raise ConfigurationError(f"Level restriction names non-members: {', '.join(stray)}")


@dataclass(frozen=True)
class ModelFormula:
    """Response, family and predictors fitted for one (metric, season) pair."""

    metric: str
    season: str
    response: str
    family: FamilyName
    variables: Tuple[str, ...]
    interactions: Tuple[InteractionTerm, ...] = ()

    def __post_init__(self) -> None:
        if self.family not in FAMILIES:
            raise ConfigurationError(f"Unsupported family '{self.family}'. Available: {list(FAMILIES)}")
        if not self.variables:
            raise ConfigurationError(f"Formula for {self.key} has no predictors.")
        for term in self.interactions:
            outside = [member for member in term.members if member not in self.variables]
            if outside:
                raise ConfigurationError(
                    f"Interaction members {outside} of {self.key} are not main effects."
                )

    @property
    def key(self) -> Tuple[str, str]:
        return (self.metric, self.season)

    def variable_specs(self, specs: Optional[Mapping[str, VariableSpec]] = None) -> Dict[str, VariableSpec]:
        """Resolve every predictor to its VariableSpec, in declaration order."""
        return {name: get_variable_spec(name, specs) for name in self.variables}

    def describe(self) -> str:
        terms = list(self.variables)
        terms.extend(":".join(term.members) for term in self.interactions)
        return f"{self.response} ~ {' + '.join(terms)}"


__all__ = ["FAMILIES", "FamilyName", "InteractionTerm", "ModelFormula"]
