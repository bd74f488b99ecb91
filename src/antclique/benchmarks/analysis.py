"""
Statistical analysis of repeated benchmark runs.
"""

import numpy as np
import pandas as pd
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from .runner import BenchmarkResult


@dataclass
class RunStatistics:
    """Statistical summary for all runs on one instance."""
    instance_name: str
    num_runs: int

    # Clique size statistics
    mean_clique_size: float
    median_clique_size: float
    std_clique_size: float
    min_clique_size: int
    max_clique_size: int

    # Runtime statistics
    mean_runtime: float
    std_runtime: float

    success_rate: float

    # Accuracy against the reference solution (if available)
    known_optimum: Optional[int] = None
    best_accuracy_percent: Optional[float] = None
    mean_accuracy_percent: Optional[float] = None


def statistical_summary(results: List[BenchmarkResult], instance_name: str) -> RunStatistics:
    """
    Compute statistics over repeated runs on a single instance.

    Args:
        results: Results of every run on the instance.
        instance_name: Name reported in the summary.

    Returns:
        RunStatistics object.
    """
    if not results:
        return RunStatistics(
            instance_name=instance_name,
            num_runs=0,
            mean_clique_size=0.0, median_clique_size=0.0, std_clique_size=0.0,
            min_clique_size=0, max_clique_size=0,
            mean_runtime=0.0, std_runtime=0.0,
            success_rate=0.0
        )

    num_runs = len(results)
    successful_results = [r for r in results if r.success]

    if successful_results:
        sizes = [r.clique_size for r in successful_results]
        mean_size = float(np.mean(sizes))
        median_size = float(np.median(sizes))
        std_size = float(np.std(sizes))
        min_size = min(sizes)
        max_size = max(sizes)
    else:
        mean_size = median_size = std_size = 0.0
        min_size = max_size = 0

    runtimes = [r.runtime_seconds for r in results]

    known_optimum = next((r.known_optimum for r in results if r.known_optimum is not None), None)
    best_accuracy = mean_accuracy = None
    accuracies = [r.accuracy_percent for r in successful_results if r.accuracy_percent is not None]
    if accuracies:
        best_accuracy = float(max(accuracies))
        mean_accuracy = float(np.mean(accuracies))

    return RunStatistics(
        instance_name=instance_name,
        num_runs=num_runs,
        mean_clique_size=mean_size,
        median_clique_size=median_size,
        std_clique_size=std_size,
        min_clique_size=min_size,
        max_clique_size=max_size,
        mean_runtime=float(np.mean(runtimes)),
        std_runtime=float(np.std(runtimes)),
        success_rate=len(successful_results) / num_runs,
        known_optimum=known_optimum,
        best_accuracy_percent=best_accuracy,
        mean_accuracy_percent=mean_accuracy
    )


def summarize_all(results: Dict[str, List[BenchmarkResult]]) -> Dict[str, RunStatistics]:
    return {name: statistical_summary(runs, name) for name, runs in results.items()}


def results_to_dataframe(results: Dict[str, List[BenchmarkResult]]) -> pd.DataFrame:
    """
    One row per run with columns: instance, run, graph_size, graph_edges,
    clique_size, known_optimum, accuracy_percent, cycles, runtime_seconds,
    seed, valid, success, error_message.
    """
    rows = []
    for name, runs in results.items():
        for i, result in enumerate(runs):
            rows.append({
                'instance': name,
                'run': i,
                'graph_size': result.graph_size,
                'graph_edges': result.graph_edges,
                'clique_size': result.clique_size,
                'known_optimum': result.known_optimum,
                'accuracy_percent': result.accuracy_percent,
                'cycles': result.cycles,
                'runtime_seconds': result.runtime_seconds,
                'seed': result.seed,
                'valid': result.valid,
                'success': result.success,
                'error_message': result.error_message
            })
    return pd.DataFrame(rows)


def summary_table(summaries: Dict[str, RunStatistics]) -> pd.DataFrame:
    """DataFrame with one row per instance, indexed by instance name."""
    if not summaries:
        return pd.DataFrame()
    frame = pd.DataFrame([asdict(s) for s in summaries.values()])
    return frame.set_index('instance_name')
