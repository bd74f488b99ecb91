"""
Randomized greedy clique construction performed by a single ant.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterator, List, Optional, Tuple

from .graph import BitGraph
from .pheromone import PheromoneField


class StartPolicy(Enum):
    """How an ant picks its first vertex."""
    RANDOM = "random"
    HIGHEST_DEGREE = "highest-degree"


class HeuristicKind(Enum):
    """Heuristic desirability of a candidate vertex."""
    DEGREE = "degree"
    CANDIDATE_DEGREE = "candidate-degree"


@dataclass(frozen=True)
class Clique:
    """A set of pairwise adjacent vertices, kept in the order they were added."""
    vertices: Tuple[int, ...] = ()

    @property
    def size(self) -> int:
        return len(self.vertices)

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[int]:
        return iter(self.vertices)

    def __contains__(self, vertex) -> bool:
        return vertex in self.vertices

    def as_set(self) -> FrozenSet[int]:
        return frozenset(self.vertices)

    def sorted(self) -> List[int]:
        return sorted(self.vertices)


EMPTY_CLIQUE = Clique()


def roulette_select(weights: np.ndarray, rng: np.random.RandomState) -> int:
    """
    Pick an index with probability proportional to its weight.

    Weights are accumulated in array order and the first index whose cumulative
    weight reaches the drawn threshold wins. A zero (or non-finite) total falls
    back to a uniform choice; rounding that keeps the cumulative sum below the
    threshold falls back to the last index.

    Args:
        weights: Non-negative weights, at least one entry.
        rng: Random source.

    Returns:
        The selected index.
    """
    total = float(np.sum(weights))
    if total == 0.0 or not np.isfinite(total):
        return int(rng.randint(len(weights)))

    threshold = rng.random_sample() * total
    cumulative = np.cumsum(weights)
    index = int(np.searchsorted(cumulative, threshold, side="left"))
    return min(index, len(weights) - 1)


class CliqueConstructor:
    """
    Builds one candidate clique by randomized greedy expansion.

    Each step weights every remaining candidate ``v`` by
    ``score(v, clique) ** alpha * heuristic(v) ** beta``, where ``score`` is the
    summed pheromone between ``v`` and the clique members, and picks one by
    roulette-wheel selection. Candidates not adjacent to the new member are then
    dropped, so the result is always a maximal clique.

    Args:
        alpha: Pheromone exponent (>= 0).
        beta: Heuristic exponent (>= 0). ``beta = 0`` disables the heuristic.
        start_policy: How the first vertex is chosen.
        heuristic: Which heuristic to use.
    """

    def __init__(
        self,
        alpha: float = 1.0,
        beta: float = 2.0,
        start_policy: StartPolicy = StartPolicy.RANDOM,
        heuristic: HeuristicKind = HeuristicKind.DEGREE,
    ):
        self.alpha = alpha
        self.beta = beta
        self.start_policy = start_policy
        self.heuristic = heuristic

    def choose_start(self, graph: BitGraph, rng: np.random.RandomState) -> int:
        if self.start_policy is StartPolicy.HIGHEST_DEGREE:
            return int(np.argmax(graph.degrees()))
        return int(rng.randint(graph.num_vertices))

    def construct(
        self,
        graph: BitGraph,
        pheromone: PheromoneField,
        rng: np.random.RandomState,
        start: Optional[int] = None,
    ) -> Clique:
        """
        Build a clique.

        Args:
            graph: Graph to search.
            pheromone: Trails to read. Never modified.
            rng: Random source; the result is a pure function of its state.
            start: Optional first vertex, overriding the start policy.

        Returns:
            A maximal clique containing the start vertex.
        """
        if graph.num_vertices == 0:
            return EMPTY_CLIQUE

        if start is None:
            start = self.choose_start(graph, rng)
        clique = [int(start)]
        candidates = graph.neighbors(start)

        while candidates.size:
            weights = self.weights(graph, pheromone, clique, candidates)
            chosen = int(candidates[roulette_select(weights, rng)])
            clique.append(chosen)
            candidates = candidates[graph.adjacency[chosen, candidates]]

        return Clique(tuple(clique))

    def weights(
        self,
        graph: BitGraph,
        pheromone: PheromoneField,
        clique: List[int],
        candidates: np.ndarray,
    ) -> np.ndarray:
        """Selection weights for ``candidates`` given the partial ``clique``."""
        trail = pheromone.scores(candidates, clique)
        if self.heuristic is HeuristicKind.CANDIDATE_DEGREE:
            desirability = graph.adjacency[np.ix_(candidates, candidates)].sum(axis=1)
        else:
            desirability = graph.degrees()[candidates]
        return np.power(trail, self.alpha) * np.power(desirability.astype(np.float64), self.beta)
