"""
Ant Colony Optimization search for large cliques.

This package provides:
1. A loader for the DIMACS binary clique format (.clq.b) into a dense BitGraph
2. An ant colony solver with bounded pheromone trails and randomized greedy
   clique construction
3. Benchmark tooling for running the solver over instance directories and
   comparing against reference solutions (.sol)
"""

__version__ = "0.1.0"

from .algorithms import find_max_clique_aco, verify_clique
from .colony import ColonyConfig, ColonyResult, ColonySolver, deposit_amount
from .construction import Clique, CliqueConstructor, HeuristicKind, StartPolicy, roulette_select
from .exceptions import AntCliqueError, ConfigError, FormatError, TruncatedGraphError
from .graph import BitGraph, GraphBuilder
from .io import (
    DimacsBinaryReader,
    DimacsBinaryWriter,
    KnownSolution,
    read_dimacs_binary_graph,
    read_solution_file,
    write_dimacs_binary_graph
)
from .pheromone import PheromoneField

__all__ = [
    # Graph model and file formats
    "BitGraph",
    "GraphBuilder",
    "DimacsBinaryReader",
    "DimacsBinaryWriter",
    "KnownSolution",
    "read_dimacs_binary_graph",
    "write_dimacs_binary_graph",
    "read_solution_file",
    # Solver engine
    "PheromoneField",
    "Clique",
    "CliqueConstructor",
    "StartPolicy",
    "HeuristicKind",
    "roulette_select",
    "ColonyConfig",
    "ColonyResult",
    "ColonySolver",
    "deposit_amount",
    # Convenience API
    "find_max_clique_aco",
    "verify_clique",
    # Errors
    "AntCliqueError",
    "FormatError",
    "TruncatedGraphError",
    "ConfigError"
]
