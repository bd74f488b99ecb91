"""
Pytest configuration and common fixtures for the test suite.
"""

import pytest
import networkx as nx
import numpy as np
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from antclique.colony import ColonyConfig
from antclique.graph import BitGraph
from antclique.io import write_dimacs_binary_graph


def binary_graph_bytes(preamble: str, rows) -> bytes:
    """Assemble a raw .clq.b payload from preamble text and packed row bytes."""
    encoded = preamble.encode("ascii")
    return f"{len(encoded)}\n".encode("ascii") + encoded + b"".join(rows)


@pytest.fixture
def raw_graph_bytes():
    """Factory assembling raw .clq.b payloads."""
    return binary_graph_bytes


@pytest.fixture
def path4_bytes():
    """4-vertex path 0-1-2-3 encoded by hand, MSB first."""
    rows = [
        bytes([0b00000000]),  # row 0: column 0 (diagonal)
        bytes([0b10000000]),  # row 1: edge to 0
        bytes([0b01000000]),  # row 2: edge to 1
        bytes([0b00100000]),  # row 3: edge to 2
    ]
    return binary_graph_bytes("c path graph\np edge 4 3\n", rows)


@pytest.fixture
def write_graph_file(tmp_path):
    """Factory writing a BitGraph to a .clq.b file under tmp_path."""
    def _write(graph: BitGraph, name: str = "graph.clq.b"):
        path = tmp_path / name
        write_dimacs_binary_graph(graph, path)
        return path
    return _write


@pytest.fixture
def small_test_graphs():
    """Fixture providing small graphs with known clique numbers."""
    graphs = []

    # Triangle (K3) - clique size 3
    graphs.append(("Triangle K3", BitGraph.from_networkx(nx.complete_graph(3)), 3))

    # Square (4-cycle) - clique size 2
    graphs.append(("4-cycle", BitGraph.from_networkx(nx.cycle_graph(4)), 2))

    # Complete graph K5 - clique size 5
    graphs.append(("Complete K5", BitGraph.from_networkx(nx.complete_graph(5)), 5))

    # Star graph (5 nodes) - clique size 2
    graphs.append(("Star 5 nodes", BitGraph.from_networkx(nx.star_graph(4)), 2))

    # Two triangles joined by an edge, plus an isolated vertex
    edges = [(0, 1), (1, 2), (0, 2), (2, 3), (3, 4), (4, 5), (3, 5)]
    graphs.append(("Two triangles + isolated", BitGraph.from_edges(7, edges), 3))

    return graphs


@pytest.fixture
def random_graph():
    """Dense Erdos-Renyi graph large enough for the colony to matter."""
    return BitGraph.from_networkx(nx.erdos_renyi_graph(30, 0.5, seed=42))


@pytest.fixture
def planted_clique_graph():
    """Sparse random graph with a planted clique on vertices 0..7."""
    g = nx.erdos_renyi_graph(40, 0.15, seed=7)
    g.add_edges_from((u, v) for u in range(8) for v in range(u + 1, 8))
    return BitGraph.from_networkx(g)


@pytest.fixture
def fast_config():
    """Small colony configuration for quick tests."""
    return ColonyConfig(num_ants=8, max_cycles=15, rho=0.9, alpha=1.0, beta=1.0,
                        tau_min=0.01, tau_max=5.0, seed=123)


@pytest.fixture
def rng():
    return np.random.RandomState(2024)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
