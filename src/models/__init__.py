"""Variable classification, formula registry and GLM fitting."""

from __future__ import annotations

from .design import INTERCEPT, build_design, term_names
from .fitting import FittedModel, GLMFit, fit_glm, fit_model
from .formula import FamilyName, InteractionTerm, ModelFormula
from .registry import DISPLAY_NAMES, FORMULAS, display_name, get_formula, validate_formulas
from .variables import VARIABLE_SPECS, VariableKind, VariableSpec, classify, get_variable_spec

__all__ = [
    "DISPLAY_NAMES",
    "FORMULAS",
    "FamilyName",
    "FittedModel",
    "GLMFit",
    "INTERCEPT",
    "InteractionTerm",
    "ModelFormula",
    "VARIABLE_SPECS",
    "VariableKind",
    "VariableSpec",
    "build_design",
    "classify",
    "display_name",
    "fit_glm",
    "fit_model",
    "get_formula",
    "get_variable_spec",
    "term_names",
    "validate_formulas",
]
