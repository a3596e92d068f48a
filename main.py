from pathlib import Path

import typer

from src.datahub.config import (
    DEFAULT_CLOSURES_PATH,
    DEFAULT_METRICS_PATH,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_SIGNIFICANCE_PATH,
)
from src.errors import ConfigurationError
from src.models import DISPLAY_NAMES, FORMULAS, INTERCEPT, VARIABLE_SPECS, term_names
from src.pipelines import run_from_files

app = typer.Typer()


@app.command()
def standardize(
    metrics: Path = typer.Option(
        DEFAULT_METRICS_PATH,
        "--metrics",
        exists=True,
        dir_okay=False,
        help="CSV of network metrics per (period, pcgroup, year).",
    ),
    closures: Path = typer.Option(
        DEFAULT_CLOSURES_PATH,
        "--closures",
        exists=True,
        dir_okay=False,
        help="CSV of closure days per (year, pcgroup).",
    ),
    significance: Path = typer.Option(
        DEFAULT_SIGNIFICANCE_PATH,
        "--significance",
        exists=True,
        dir_okay=False,
        help="CSV of manual significance markers (season, metric, variable, sig).",
    ),
    output: Path = typer.Option(
        DEFAULT_OUTPUT_PATH,
        "--output",
        dir_okay=False,
        writable=True,
        help="Destination CSV for the merged coefficient table.",
    ),
) -> None:
    """
    Fit every declared model, standardize its predictors and write the annotated coefficients.
    """
    try:
        run_from_files(metrics, closures, significance, output)
    except ConfigurationError as exc:
        typer.echo(f"[pipeline] Configuration error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def formulas() -> None:
    """List the declared models with their standardized terms."""
    for formula in FORMULAS:
        specs = formula.variable_specs(VARIABLE_SPECS)
        print(f"{formula.metric} / {formula.season} [{formula.family}]: {formula.describe()}")
        for term in term_names(formula, specs):
            if term == INTERCEPT:
                continue
            print(f"    {term:<12} -> {DISPLAY_NAMES[term]}")


if __name__ == "__main__":
    app()
