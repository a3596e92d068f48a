"""Pipeline entry points for the standardized coefficient table."""

from .coefficients import collect_coefficients, run_from_files, run_pipeline

__all__ = [
    "collect_coefficients",
    "run_from_files",
    "run_pipeline",
]
