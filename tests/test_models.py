"""Unit tests for the variable classifier, formula registry and GLM fitting."""

from __future__ import annotations

from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
import pandas as pd
import pytest

from src.errors import ConfigurationError
from src.models.design import INTERCEPT, binary_codes, build_design, term_names
from src.models.fitting import find_aliased_columns, fit_glm, fit_model, model_frame
from src.models.formula import InteractionTerm, ModelFormula
from src.datahub.config import METRIC_LABELS, SEASON_LABELS
from src.models.registry import DISPLAY_NAMES, FORMULAS, SEASONS, display_name, get_formula, validate_formulas
from src.models.variables import VARIABLE_SPECS, VariableKind, VariableSpec, classify, get_variable_spec


# ---------------------------------------------------------------------------
# Helper fixtures


NOISE = [0.01, -0.02, 0.015, -0.01, 0.02, -0.015, 0.005, -0.005, 0.012, -0.012, 0.008, -0.008]


def _partition() -> pd.DataFrame:
    buckets = [("none", "medium", "high")[i % 3] for i in range(12)]
    regions = [("North", "Central")[(i // 3) % 2] for i in range(12)]
    sizes = [10.0, 14.0, 11.0, 18.0, 13.0, 16.0, 12.0, 19.0, 15.0, 17.0, 20.0, 9.0]
    central = np.array([region == "Central" for region in regions], dtype=float)
    high = np.array([bucket == "high" for bucket in buckets], dtype=float)
    response = 0.3 + 0.05 * central - 0.02 * high + 0.01 * np.asarray(sizes) + np.asarray(NOISE)
    return pd.DataFrame(
        {
            "closure_bucket": buckets,
            "region": regions,
            "N": sizes,
            "pcgroup_code": [float(1 + i % 7) for i in range(12)],
            "nc_weighted": response,
        }
    )


def _formula(**overrides: object) -> ModelFormula:
    fields = dict(
        metric="Centralization",
        season="Early Season",
        response="nc_weighted",
        family="gaussian",
        variables=("D", "R", "N"),
    )
    fields.update(overrides)
    return ModelFormula(**fields)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Classifier tests


def test_classifier_returns_declared_kinds() -> None:
    assert classify("D") is VariableKind.CATEGORICAL
    assert classify("R") is VariableKind.BINARY
    assert classify("N") is VariableKind.CONTINUOUS
    assert classify("pcgroup") is VariableKind.CONTINUOUS
    assert get_variable_spec("R").levels == ("North", "Central")


def test_classifier_rejects_unknown_variable() -> None:
    with pytest.raises(ConfigurationError):
        classify("unknown")


def test_variable_spec_validates_levels() -> None:
    with pytest.raises(ConfigurationError):
        VariableSpec("R", VariableKind.BINARY, "region", ("a", "b", "c"))
    with pytest.raises(ConfigurationError):
        VariableSpec("D", VariableKind.CATEGORICAL, "closure_bucket")
    with pytest.raises(ConfigurationError):
        VariableSpec("N", VariableKind.CONTINUOUS, "N", ("a", "b"))


def test_standardized_prefixes() -> None:
    assert VariableKind.CONTINUOUS.standardized_prefix == "z."
    assert VariableKind.BINARY.standardized_prefix == "c."
    assert VariableKind.CATEGORICAL.standardized_prefix == ""


# ---------------------------------------------------------------------------
# Formula registry tests


def test_registry_covers_every_metric_and_season() -> None:
    keys = [formula.key for formula in FORMULAS]
    assert len(keys) == len(set(keys)) == 6
    assert get_formula("Modularity", "Late Season").response == "m_weighted"
    with pytest.raises(ConfigurationError):
        get_formula("Modularity", "Mid Season")


def test_restricted_interaction_yields_single_term() -> None:
    formula = get_formula("Centralization", "Late Season")
    specs = formula.variable_specs()
    assert term_names(formula, specs) == [INTERCEPT, "Dmedium", "Dhigh", "c.R", "Dhigh:c.R"]
    assert term_names(formula, specs, standardized=False) == [INTERCEPT, "Dmedium", "Dhigh", "R", "Dhigh:R"]
    assert display_name("Dhigh:c.R") == "D (high) : R (Central)"


def test_display_names_are_fixed() -> None:
    assert DISPLAY_NAMES == {
        "Dmedium": "D (medium)",
        "Dhigh": "D (high)",
        "c.R": "R (Central)",
        "z.N": "Size",
        "z.pcgroup": "Port Group",
        "Dhigh:c.R": "D (high) : R (Central)",
    }
    with pytest.raises(ConfigurationError):
        display_name("z.y")


def test_validate_formulas_flags_unmapped_terms_and_duplicates() -> None:
    names = {key: value for key, value in DISPLAY_NAMES.items() if key != "z.N"}
    with pytest.raises(ConfigurationError):
        validate_formulas([_formula()], VARIABLE_SPECS, names)
    with pytest.raises(ConfigurationError):
        validate_formulas([_formula(), _formula()], VARIABLE_SPECS)
    validate_formulas([_formula()], VARIABLE_SPECS)


def test_validate_formulas_checks_configured_labels() -> None:
    with pytest.raises(ConfigurationError):
        validate_formulas([_formula(season="Mid Season")], VARIABLE_SPECS)
    with pytest.raises(ConfigurationError):
        validate_formulas([_formula(response="m_weighted")], VARIABLE_SPECS)
    assert SEASONS == tuple(SEASON_LABELS.values())
    assert {formula.metric for formula in FORMULAS} == set(METRIC_LABELS.values())


def test_formula_rejects_bad_interactions() -> None:
    with pytest.raises(ConfigurationError):
        InteractionTerm(("D",))
    with pytest.raises(ConfigurationError):
        InteractionTerm(("D", "R"), {"N": ("high",)})
    with pytest.raises(ConfigurationError):
        _formula(variables=("D",), interactions=(InteractionTerm(("D", "R")),))
    with pytest.raises(ConfigurationError):
        _formula(family="poisson")


# ---------------------------------------------------------------------------
# Design matrix tests


def test_binary_codes_follow_declared_levels() -> None:
    spec = VARIABLE_SPECS["R"]
    codes = binary_codes(pd.Series(["Central", "North", "Central"]), spec)
    assert list(codes) == [1.0, 0.0, 1.0]


def test_binary_codes_reject_extra_values() -> None:
    spec = VariableSpec("flag", VariableKind.BINARY, "flag")
    with pytest.raises(ConfigurationError):
        binary_codes(pd.Series([0, 1, 2]), spec)
    with pytest.raises(ConfigurationError):
        binary_codes(pd.Series(["North", "South"]), VARIABLE_SPECS["R"])


def test_build_design_rejects_undeclared_levels() -> None:
    formula = _formula(variables=("D",))
    inputs = {"D": pd.Series(["none", "severe"])}
    with pytest.raises(ConfigurationError):
        build_design(inputs, formula, formula.variable_specs(), standardized=True)


# ---------------------------------------------------------------------------
# Fitting tests


def test_find_aliased_columns_detects_dependence() -> None:
    x = np.arange(6.0)
    design = pd.DataFrame({INTERCEPT: 1.0, "x": x, "zero": 0.0, "twice": 2 * x})
    assert find_aliased_columns(design) == ["zero", "twice"]


def test_fit_glm_gaussian_matches_least_squares() -> None:
    x = np.arange(8.0)
    response = pd.Series(1.0 + 2.0 * x + np.asarray(NOISE[:8]))
    design = pd.DataFrame({INTERCEPT: 1.0, "x": x})

    fit = fit_glm(response, design, "gaussian")

    expected, *_ = np.linalg.lstsq(design.to_numpy(), response.to_numpy(), rcond=None)
    assert np.allclose(fit.params.to_numpy(), expected, atol=1e-8)
    assert fit.aliased == ()
    assert fit.nobs == 8


def test_fit_model_uses_raw_encoding() -> None:
    fitted = fit_model(_partition(), _formula())
    assert list(fitted.design.columns) == [INTERCEPT, "Dmedium", "Dhigh", "R", "N"]
    assert fitted.params.notna().all()
    assert fitted.fit.nobs == 12
    assert fitted.metric == "Centralization"
    assert fitted.season == "Early Season"


def test_fit_model_reports_aliased_levels_as_undefined() -> None:
    partition = _partition()
    partition = partition[partition["closure_bucket"] != "medium"].reset_index(drop=True)
    fitted = fit_model(partition, _formula())
    assert np.isnan(fitted.params["Dmedium"])
    assert "Dmedium" in fitted.fit.aliased
    assert np.isfinite(fitted.params["Dhigh"])


def test_model_frame_drops_incomplete_rows() -> None:
    partition = _partition()
    partition.loc[3, "N"] = np.nan
    formula = _formula()
    frame = model_frame(partition, formula, formula.variable_specs())
    assert len(frame) == 11


def test_fit_model_requires_declared_columns() -> None:
    specs = dict(VARIABLE_SPECS)
    specs["N"] = VariableSpec("N", VariableKind.CONTINUOUS, "absent")
    with pytest.raises(ConfigurationError):
        fit_model(_partition(), _formula(), specs)
