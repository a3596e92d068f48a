"""Gelman-style predictor rescaling and standardized refits."""

from .rescale import BinaryRescale, CategoricalPassthrough, ContinuousRescale, RescaleStrategy, rescale_column
from .standardizer import StandardizedModel, standardize

__all__ = [
    "BinaryRescale",
    "CategoricalPassthrough",
    "ContinuousRescale",
    "RescaleStrategy",
    "StandardizedModel",
    "rescale_column",
    "standardize",
]
