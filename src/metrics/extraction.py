"""Turn a standardized model's coefficients into display-named records."""

from __future__ import annotations

from typing import List, Mapping, Optional

import numpy as np

from src.models.design import INTERCEPT
from src.models.registry import display_name
from src.standardization import StandardizedModel

from .records import CoefficientRecord


def extract(
    model: StandardizedModel,
    metric_name: str,
    season_name: str,
    names: Optional[Mapping[str, str]] = None,
) -> List[CoefficientRecord]:
    """Return one record per defined, non-intercept coefficient.

    Aliased terms (NaN coefficients) are left out rather than reported as zero.

    Raises:
        ConfigurationError: if a term has no display name.
    """
    records: List[CoefficientRecord] = []
    for term, value in model.params.items():
        if term == INTERCEPT:
            continue
        variable = display_name(str(term), names)
        if value is None or not np.isfinite(value):
            continue
        records.append(
            CoefficientRecord(
                metric=metric_name,
                season=season_name,
                variable=variable,
                coefficient=float(value),
            )
        )
    return records


__all__ = ["extract"]
