"""
Convenience entry points and verification helpers for clique search.
"""

import networkx as nx
from dataclasses import replace
from itertools import combinations
from typing import Iterable, Optional, Set, Union

from .colony import ColonyConfig, ColonySolver
from .graph import BitGraph

GraphLike = Union[BitGraph, nx.Graph]


def as_bit_graph(graph: GraphLike) -> BitGraph:
    """Return ``graph`` as a BitGraph, converting networkx graphs."""
    if isinstance(graph, BitGraph):
        return graph
    return BitGraph.from_networkx(graph)


def find_max_clique_aco(
    graph: GraphLike,
    config: Optional[ColonyConfig] = None,
    **overrides,
) -> tuple[Set[int], int]:
    """
    Search for a large clique with the ant colony solver.

    Args:
        graph: A BitGraph, or a networkx graph whose nodes are relabelled to
            ``0..n-1`` in sorted order.
        config: Solver parameters, defaults to ``ColonyConfig()``.
        **overrides: Individual ColonyConfig fields replacing those of ``config``.

    Returns:
        A tuple containing:
        - The set of vertices of the best clique found (original labels for
          networkx input)
        - The number of cycles run
    """
    config = replace(config or ColonyConfig(), **overrides)
    result = ColonySolver(config).solve(as_bit_graph(graph))

    if isinstance(graph, BitGraph):
        return set(result.clique), result.cycles
    # Map indices back to the original networkx labels
    nodes = sorted(graph.nodes())
    return {nodes[v] for v in result.clique}, result.cycles


def verify_clique(graph: GraphLike, node_set: Iterable[int]) -> bool:
    """
    Verify that a set of nodes forms a clique.

    Args:
        graph: A BitGraph or networkx graph.
        node_set: Nodes to verify.

    Returns:
        True if every pair of nodes is adjacent, False otherwise.
    """
    if isinstance(graph, BitGraph):
        return graph.is_clique(node_set)
    for u, v in combinations(node_set, 2):
        if not graph.has_edge(u, v):
            return False
    return True


def accuracy_percent(found_size: int, optimal_size: int) -> Optional[float]:
    """Found clique size as a percentage of the known optimum."""
    if optimal_size <= 0:
        return None
    return 100.0 * found_size / optimal_size
