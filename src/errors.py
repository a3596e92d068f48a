"""Exception and warning types shared across the coefficient pipeline."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Fatal inconsistency between the declared configuration and the data."""


class DataQualityWarning(UserWarning):
    """Non-fatal data problem surfaced to the caller."""


__all__ = ["ConfigurationError", "DataQualityWarning"]
