"""
Running the colony solver over a directory of DIMACS binary benchmark files.
"""

import logging
import time
import numpy as np
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..algorithms import accuracy_percent
from ..colony import ColonyConfig, ColonySolver
from ..exceptions import AntCliqueError
from ..io import read_dimacs_binary_graph, read_solution_file

logger = logging.getLogger(__name__)

INSTANCE_SUFFIX = ".clq.b"
SOLUTION_SUFFIX = ".sol"


@dataclass
class BenchmarkResult:
    """Results from one solver run on one benchmark instance."""
    instance_name: str
    graph_path: str
    graph_size: int = 0
    graph_edges: int = 0

    # Core results
    clique: List[int] = field(default_factory=list)
    clique_size: int = 0
    cycles: int = 0
    runtime_seconds: float = 0.0
    seed: Optional[int] = None

    # Comparison with the reference solution
    known_optimum: Optional[int] = None
    valid: bool = True

    # Error handling
    success: bool = True
    error_message: Optional[str] = None

    @property
    def accuracy_percent(self) -> Optional[float]:
        if not self.success or self.known_optimum is None:
            return None
        return accuracy_percent(self.clique_size, self.known_optimum)


def instance_name(path: Union[str, Path]) -> str:
    """``c-fat200-1.clq.b`` -> ``c-fat200-1``."""
    name = Path(path).name
    if name.endswith(INSTANCE_SUFFIX):
        return name[: -len(INSTANCE_SUFFIX)]
    return Path(name).stem


def discover_instances(benchmark_dir: Union[str, Path], pattern: str = "*" + INSTANCE_SUFFIX) -> List[Path]:
    """Benchmark files in ``benchmark_dir`` sorted by name."""
    return sorted(p for p in Path(benchmark_dir).glob(pattern) if p.is_file())


def solution_path_for(instance: Union[str, Path], solutions_dir: Union[str, Path]) -> Path:
    return Path(solutions_dir) / (instance_name(instance) + SOLUTION_SUFFIX)


class BenchmarkRunner:
    """
    Runs the solver several times per instance and collects BenchmarkResults.

    Errors are isolated per file: an unreadable or malformed instance yields
    failed results and the runner moves on to the next file.

    Args:
        config: Solver parameters shared by all runs, validated up front. Its
            seed is ignored.
        num_runs: Independent runs per instance.
        base_seed: Run ``r`` uses seed ``base_seed + r``. When None, a seed is
            drawn per run and recorded in the result.
        solutions_dir: Directory with ``<name>.sol`` reference solutions.
    """

    def __init__(
        self,
        config: Optional[ColonyConfig] = None,
        num_runs: int = 1,
        base_seed: Optional[int] = None,
        solutions_dir: Optional[Union[str, Path]] = None,
    ):
        if num_runs <= 0:
            raise ValueError(f"num_runs must be positive, got {num_runs}")
        self.config = config or ColonyConfig()
        self.config.validate()
        self.num_runs = num_runs
        self.base_seed = base_seed
        self.solutions_dir = Path(solutions_dir) if solutions_dir is not None else None
        self._seed_source = np.random.RandomState(base_seed)

    def _seed_for_run(self, run: int) -> int:
        if self.base_seed is not None:
            return self.base_seed + run
        return int(self._seed_source.randint(0, 2**31 - 1))

    def _known_optimum(self, path: Path) -> Optional[int]:
        if self.solutions_dir is None:
            return None
        solution_path = solution_path_for(path, self.solutions_dir)
        try:
            return read_solution_file(solution_path).size
        except (OSError, AntCliqueError) as e:
            logger.warning("No usable reference solution for %s: %s", path.name, e)
            return None

    def run_instance(self, path: Union[str, Path]) -> List[BenchmarkResult]:
        path = Path(path)
        name = instance_name(path)
        known_optimum = self._known_optimum(path)

        try:
            graph = read_dimacs_binary_graph(path)
        except (OSError, AntCliqueError) as e:
            logger.warning("Skipping %s: %s", path.name, e)
            return [
                BenchmarkResult(
                    instance_name=name,
                    graph_path=str(path),
                    known_optimum=known_optimum,
                    valid=False,
                    success=False,
                    error_message=f"{type(e).__name__}: {e}",
                )
            ]

        results = []
        for run in range(self.num_runs):
            seed = self._seed_for_run(run)
            solver = ColonySolver(replace(self.config, seed=seed))
            start_time = time.time()
            outcome = solver.solve(graph)

            clique = outcome.vertices
            results.append(
                BenchmarkResult(
                    instance_name=name,
                    graph_path=str(path),
                    graph_size=graph.num_vertices,
                    graph_edges=graph.num_edges,
                    clique=clique,
                    clique_size=len(clique),
                    cycles=outcome.cycles,
                    runtime_seconds=time.time() - start_time,
                    seed=seed,
                    known_optimum=known_optimum,
                    valid=graph.is_clique(clique),
                )
            )
        return results

    def run_directory(
        self,
        benchmark_dir: Union[str, Path],
        pattern: str = "*" + INSTANCE_SUFFIX,
    ) -> Dict[str, List[BenchmarkResult]]:
        """Run every instance in ``benchmark_dir``, keyed by instance name."""
        instances = discover_instances(benchmark_dir, pattern)
        if not instances:
            logger.warning("No benchmark files matching %s in %s", pattern, benchmark_dir)
        return {instance_name(path): self.run_instance(path) for path in instances}
