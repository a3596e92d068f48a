"""Shared records for standardized coefficients and their annotations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SIGNIFICANCE_MARKERS = ("", "*", "**", "***")


@dataclass(frozen=True)
class CoefficientRecord:
    """One non-intercept coefficient of a standardized model."""

    metric: str
    season: str
    variable: str
    coefficient: float


@dataclass(frozen=True)
class SignificanceRecord:
    """Externally determined significance marker for one coefficient; None when absent."""

    metric: str
    season: str
    variable: str
    sig: Optional[str]

    def __post_init__(self) -> None:
        if self.sig is not None and self.sig not in SIGNIFICANCE_MARKERS:
            raise ValueError(f"Unknown significance marker {self.sig!r}; expected one of {SIGNIFICANCE_MARKERS}.")


@dataclass(frozen=True)
class OutputRow:
    """Coefficient joined with its marker (None when absent) and label offset."""

    metric: str
    season: str
    variable: str
    coefficients: float
    sig: Optional[str]
    adj_x: float
