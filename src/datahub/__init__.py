from .config import PrepareConfig
from .io import read_closure_table, read_metric_table, write_output_table
from .prepare import prepare_metric_rows, split_by_season

__all__ = [
    "PrepareConfig",
    "prepare_metric_rows",
    "read_closure_table",
    "read_metric_table",
    "split_by_season",
    "write_output_table",
]
