"""Variable kinds and the project-wide classifier table.

Kinds are declared from each variable's role in the design, never inferred
from how many distinct values a column happens to hold.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from src.datahub.config import CLOSURE_LEVELS, REGION_LEVELS
from src.datahub.prepare import CLOSURE_BUCKET_COLUMN, PCGROUP_CODE_COLUMN, REGION_COLUMN
from src.errors import ConfigurationError


class VariableKind(str, Enum):
    CONTINUOUS = "continuous"
    BINARY = "binary"
    CATEGORICAL = "categorical"

    @property
    def standardized_prefix(self) -> str:
        """Prefix given to the rescaled column (``z.`` scaled, ``c.`` centred)."""
        return _PREFIXES[self]


_PREFIXES: Dict[VariableKind, str] = {
    VariableKind.CONTINUOUS: "z.",
    VariableKind.BINARY: "c.",
    VariableKind.CATEGORICAL: "",
}


@dataclass(frozen=True)
class VariableSpec:
    """A model variable, the frame column it reads and its declared kind.

    ``levels`` fixes the level order: for binary variables the first level is
    coded 0 and the second 1, for categorical variables the first level is the
    treatment-coding reference.
    """

    name: str
    kind: VariableKind
    column: str
    levels: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if self.kind is VariableKind.BINARY and self.levels is not None and len(self.levels) != 2:
            raise ConfigurationError(f"Binary variable '{self.name}' must declare exactly two levels.")
        if self.kind is VariableKind.CATEGORICAL and (self.levels is None or len(self.levels) < 2):
            raise ConfigurationError(f"Categorical variable '{self.name}' must declare its levels.")
        if self.kind is VariableKind.CONTINUOUS and self.levels is not None:
            raise ConfigurationError(f"Continuous variable '{self.name}' cannot declare levels.")


VARIABLE_SPECS: Mapping[str, VariableSpec] = {
    "D": VariableSpec("D", VariableKind.CATEGORICAL, CLOSURE_BUCKET_COLUMN, CLOSURE_LEVELS),
    "R": VariableSpec("R", VariableKind.BINARY, REGION_COLUMN, REGION_LEVELS),
    "N": VariableSpec("N", VariableKind.CONTINUOUS, "N"),
    "pcgroup": VariableSpec("pcgroup", VariableKind.CONTINUOUS, PCGROUP_CODE_COLUMN),
}


def classify(name: str, specs: Optional[Mapping[str, VariableSpec]] = None) -> VariableKind:
    """Return the declared kind of ``name``."""
    return get_variable_spec(name, specs).kind


def get_variable_spec(name: str, specs: Optional[Mapping[str, VariableSpec]] = None) -> VariableSpec:
    table = VARIABLE_SPECS if specs is None else specs
    try:
        return table[name]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown variable '{name}'. Declared: {list(table)}") from exc


__all__ = [
    "VARIABLE_SPECS",
    "VariableKind",
    "VariableSpec",
    "classify",
    "get_variable_spec",
]
