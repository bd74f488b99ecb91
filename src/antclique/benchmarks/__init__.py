"""
Benchmarking framework for running the colony solver over DIMACS binary instances.
"""

from .runner import (
    BenchmarkRunner,
    BenchmarkResult,
    discover_instances,
    solution_path_for
)
from .analysis import (
    RunStatistics,
    statistical_summary,
    summarize_all,
    results_to_dataframe,
    summary_table
)

__all__ = [
    "BenchmarkRunner",
    "BenchmarkResult",
    "discover_instances",
    "solution_path_for",
    "RunStatistics",
    "statistical_summary",
    "summarize_all",
    "results_to_dataframe",
    "summary_table"
]
