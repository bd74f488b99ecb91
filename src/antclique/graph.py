"""
Dense adjacency-matrix graph used by the loader and the colony solver.
"""

import networkx as nx
import numpy as np
from itertools import combinations
from typing import Iterable, Iterator, Tuple


class BitGraph:
    """
    Immutable undirected graph backed by a boolean adjacency matrix.

    The matrix is symmetric with an all-False diagonal and is marked read-only,
    so the same instance can be shared by every ant of a colony.

    Args:
        adjacency: Square boolean matrix. It is copied, symmetrised and its
            diagonal cleared.
    """

    __slots__ = ("_adjacency", "_degrees", "_num_edges")

    def __init__(self, adjacency: np.ndarray):
        matrix = np.array(adjacency, dtype=bool, copy=True)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Adjacency matrix must be square, got shape {matrix.shape}")
        matrix |= matrix.T
        np.fill_diagonal(matrix, False)
        matrix.setflags(write=False)

        degrees = matrix.sum(axis=1, dtype=np.int64)
        degrees.setflags(write=False)

        self._adjacency = matrix
        self._degrees = degrees
        self._num_edges = int(degrees.sum()) // 2

    @classmethod
    def empty(cls, num_vertices: int) -> "BitGraph":
        """Graph with ``num_vertices`` vertices and no edges."""
        return cls(np.zeros((num_vertices, num_vertices), dtype=bool))

    @classmethod
    def from_edges(cls, num_vertices: int, edges: Iterable[Tuple[int, int]]) -> "BitGraph":
        """Build a graph from an edge list over vertices ``0..num_vertices-1``."""
        builder = GraphBuilder(num_vertices)
        for u, v in edges:
            builder.add_edge(u, v)
        return builder.build()

    @classmethod
    def from_networkx(cls, graph: nx.Graph) -> "BitGraph":
        """
        Convert a networkx graph.

        Nodes are relabelled to ``0..n-1`` following their sorted order, which
        keeps integer-labelled graphs such as ``nx.complete_graph(5)`` unchanged.
        """
        nodes = sorted(graph.nodes())
        if not nodes:
            return cls.empty(0)
        matrix = nx.to_numpy_array(graph, nodelist=nodes, weight=None) != 0
        return cls(matrix)

    def to_networkx(self) -> nx.Graph:
        """Return an equivalent networkx graph with nodes ``0..n-1``."""
        graph = nx.Graph()
        graph.add_nodes_from(range(self.num_vertices))
        graph.add_edges_from(self.edges())
        return graph

    @property
    def num_vertices(self) -> int:
        return self._adjacency.shape[0]

    @property
    def num_edges(self) -> int:
        return self._num_edges

    @property
    def adjacency(self) -> np.ndarray:
        """Read-only boolean adjacency matrix."""
        return self._adjacency

    def is_adjacent(self, u: int, v: int) -> bool:
        return bool(self._adjacency[u, v])

    def degree(self, v: int) -> int:
        return int(self._degrees[v])

    def degrees(self) -> np.ndarray:
        """Read-only array of vertex degrees."""
        return self._degrees

    def neighbors(self, v: int) -> np.ndarray:
        """Neighbours of ``v`` in ascending order."""
        return np.flatnonzero(self._adjacency[v])

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Yield each edge once as ``(u, v)`` with ``u < v``."""
        rows, cols = np.nonzero(np.triu(self._adjacency, k=1))
        for u, v in zip(rows.tolist(), cols.tolist()):
            yield u, v

    def is_clique(self, vertices: Iterable[int]) -> bool:
        """Check that every pair of the given vertices is adjacent."""
        for u, v in combinations(vertices, 2):
            if u == v or not self._adjacency[u, v]:
                return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, BitGraph):
            return NotImplemented
        return np.array_equal(self._adjacency, other._adjacency)

    def __hash__(self):
        return hash((self.num_vertices, self._adjacency.tobytes()))

    def __repr__(self) -> str:
        return f"BitGraph(num_vertices={self.num_vertices}, num_edges={self.num_edges})"


class GraphBuilder:
    """
    Mutable staging area for a BitGraph.

    Edge insertion is idempotent: adding an edge that is already present
    leaves ``num_edges`` unchanged. Self-loops are ignored.
    """

    def __init__(self, num_vertices: int):
        if num_vertices < 0:
            raise ValueError(f"Number of vertices must be non-negative, got {num_vertices}")
        self._matrix = np.zeros((num_vertices, num_vertices), dtype=bool)
        self.num_edges = 0

    @property
    def num_vertices(self) -> int:
        return self._matrix.shape[0]

    def _check_vertex(self, v: int) -> None:
        if not 0 <= v < self.num_vertices:
            raise ValueError(f"Vertex {v} out of bounds for n={self.num_vertices}")

    def add_edge(self, u: int, v: int) -> bool:
        """
        Insert the undirected edge ``(u, v)``.

        Returns:
            True if the edge was new, False if it already existed or is a self-loop.
        """
        self._check_vertex(u)
        self._check_vertex(v)
        if u == v or self._matrix[u, v]:
            return False
        self._matrix[u, v] = self._matrix[v, u] = True
        self.num_edges += 1
        return True

    def add_row(self, row: int, columns: Iterable[int]) -> int:
        """
        Insert ``(row, j)`` for every ``j`` in ``columns``.

        Returns:
            Number of edges that were actually new.
        """
        self._check_vertex(row)
        cols = np.unique(np.asarray(list(columns), dtype=np.int64))
        cols = cols[cols != row]
        if cols.size == 0:
            return 0
        if cols[0] < 0 or cols[-1] >= self.num_vertices:
            raise ValueError(f"Column out of bounds for n={self.num_vertices} in row {row}")
        new_cols = cols[~self._matrix[row, cols]]
        self._matrix[row, new_cols] = True
        self._matrix[new_cols, row] = True
        self.num_edges += int(new_cols.size)
        return int(new_cols.size)

    def build(self) -> BitGraph:
        return BitGraph(self._matrix)
