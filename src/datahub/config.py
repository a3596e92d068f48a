"""Static configuration for input paths, port groups and season labels."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

# Default locations used by the Typer CLI; callers may override these.
DEFAULT_RAW_ROOT = Path("data/raw")
DEFAULT_METRICS_PATH = DEFAULT_RAW_ROOT / "network_metrics.csv"
DEFAULT_CLOSURES_PATH = DEFAULT_RAW_ROOT / "closures.csv"
DEFAULT_SIGNIFICANCE_PATH = DEFAULT_RAW_ROOT / "significance.csv"
DEFAULT_OUTPUT_PATH = Path("data/output/standardized_coefficients.csv")

# ---------------------------------------------------------------------------
# Input schemas.

METRIC_COLUMNS: Tuple[str, ...] = ("y", "period", "pcgroup", "N", "ed", "nc_weighted", "m_weighted", "mean_deg", "nc", "m")
CLOSURE_COLUMNS: Tuple[str, ...] = ("y", "pcgroup", "days.closed")
JOIN_KEYS: Tuple[str, ...] = ("y", "pcgroup")

# ---------------------------------------------------------------------------
# Port groups, ordered north to south. The ordinal code of a port group is its
# 1-based position in this tuple.

PORT_GROUP_ORDER: Tuple[str, ...] = ("CCA", "ERA", "BGA", "BDA", "SFA", "MNA", "MRA")
NORTH_PORT_GROUPS: Tuple[str, ...] = ("CCA", "ERA", "BGA", "BDA")
REGION_LEVELS: Tuple[str, str] = ("North", "Central")

CLOSURE_LEVELS: Tuple[str, str, str] = ("none", "medium", "high")
CLOSURE_MEDIUM_LIMIT = 50

SEASON_LABELS: Dict[str, str] = {
    "early": "Early Season",
    "late": "Late Season",
}

METRIC_LABELS: Dict[str, str] = {
    "ed": "Edge Density",
    "nc_weighted": "Centralization",
    "m_weighted": "Modularity",
}


@dataclass(frozen=True)
class PrepareConfig:
    """Parameters for deriving region, closure bucket and port-group code."""

    north_groups: Tuple[str, ...] = NORTH_PORT_GROUPS
    pcgroup_order: Tuple[str, ...] = PORT_GROUP_ORDER
    medium_limit: int = CLOSURE_MEDIUM_LIMIT

    def validate(self) -> None:
        if not self.pcgroup_order:
            raise ValueError("pcgroup_order must list at least one port group.")
        if len(set(self.pcgroup_order)) != len(self.pcgroup_order):
            raise ValueError("pcgroup_order contains duplicate port groups.")
        unknown = sorted(set(self.north_groups) - set(self.pcgroup_order))
        if unknown:
            raise ValueError(f"North port groups missing from pcgroup_order: {', '.join(unknown)}")
        if self.medium_limit <= 0:
            raise ValueError("medium_limit must be strictly positive.")

    def pcgroup_codes(self) -> Dict[str, int]:
        """Return the 1-based ordinal code of each port group."""
        return {group: idx for idx, group in enumerate(self.pcgroup_order, start=1)}


__all__ = [
    "CLOSURE_COLUMNS",
    "CLOSURE_LEVELS",
    "CLOSURE_MEDIUM_LIMIT",
    "DEFAULT_CLOSURES_PATH",
    "DEFAULT_METRICS_PATH",
    "DEFAULT_OUTPUT_PATH",
    "DEFAULT_RAW_ROOT",
    "DEFAULT_SIGNIFICANCE_PATH",
    "JOIN_KEYS",
    "METRIC_COLUMNS",
    "METRIC_LABELS",
    "NORTH_PORT_GROUPS",
    "PORT_GROUP_ORDER",
    "PrepareConfig",
    "REGION_LEVELS",
    "SEASON_LABELS",
]
