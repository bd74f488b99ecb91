"""
Pheromone trails over vertex pairs with MAX-MIN style bounds.
"""

import math
import numpy as np
from typing import Iterable, Optional

from .exceptions import ConfigError

NEUTRAL_SCORE = 1.0


def _as_indices(vertices: Iterable[int]) -> np.ndarray:
    if isinstance(vertices, np.ndarray):
        return vertices.astype(np.int64, copy=False)
    return np.fromiter(vertices, dtype=np.int64)


class PheromoneField:
    """
    Dense symmetric matrix of trail strengths bounded to ``[tau_min, tau_max]``.

    Evaporation clamps from below and deposit clamps from above, so after any
    sequence of ``evaporate`` and ``deposit`` calls every entry stays within the
    bounds.

    Args:
        num_vertices: Size of the matrix.
        tau_min: Lower trail bound (>= 0).
        tau_max: Upper trail bound, strictly greater than ``tau_min``.
        initial: Starting value for every entry. Defaults to ``tau_max``.
    """

    def __init__(
        self,
        num_vertices: int,
        tau_min: float,
        tau_max: float,
        initial: Optional[float] = None,
    ):
        if not (math.isfinite(tau_min) and math.isfinite(tau_max)):
            raise ConfigError(f"Pheromone bounds must be finite, got [{tau_min}, {tau_max}]")
        if tau_min < 0:
            raise ConfigError(f"tau_min must be non-negative, got {tau_min}")
        if tau_min >= tau_max:
            raise ConfigError(f"tau_min must be smaller than tau_max, got {tau_min} >= {tau_max}")

        self.tau_min = float(tau_min)
        self.tau_max = float(tau_max)
        self._trail = np.empty((num_vertices, num_vertices), dtype=np.float64)
        self.reset(self.tau_max if initial is None else initial)

    @property
    def num_vertices(self) -> int:
        return self._trail.shape[0]

    def reset(self, value: float) -> None:
        """Set every entry to ``value``, which must lie within the bounds."""
        if not self.tau_min <= value <= self.tau_max:
            raise ConfigError(
                f"Initial pheromone {value} outside bounds [{self.tau_min}, {self.tau_max}]"
            )
        self._trail.fill(value)

    def trail(self, u: int, v: int) -> float:
        return float(self._trail[u, v])

    def as_array(self) -> np.ndarray:
        """Read-only copy of the trail matrix."""
        trail = self._trail.copy()
        trail.setflags(write=False)
        return trail

    def evaporate(self, rho: float) -> None:
        """Multiply every trail by the persistence factor ``rho`` and clamp below."""
        if not 0.0 < rho <= 1.0:
            raise ConfigError(f"Persistence factor rho must be in (0, 1], got {rho}")
        self._trail *= rho
        np.maximum(self._trail, self.tau_min, out=self._trail)

    def deposit(self, clique: Iterable[int], amount: float) -> None:
        """
        Reinforce every pair of distinct vertices in ``clique`` by ``amount``
        and clamp above at ``tau_max``.
        """
        if not (math.isfinite(amount) and amount > 0):
            raise ValueError(f"Deposit amount must be positive and finite, got {amount}")
        members = np.unique(_as_indices(clique))
        if members.size < 2:
            return

        block = np.ix_(members, members)
        updated = self._trail[block]
        off_diagonal = ~np.eye(members.size, dtype=bool)
        updated[off_diagonal] = np.minimum(updated[off_diagonal] + amount, self.tau_max)
        self._trail[block] = updated

    def score(self, vertex: int, partial_clique: Iterable[int]) -> float:
        """
        Sum of trails between ``vertex`` and each member of ``partial_clique``.

        Returns ``1.0`` for an empty partial clique.
        """
        members = _as_indices(partial_clique)
        if members.size == 0:
            return NEUTRAL_SCORE
        return float(self._trail[vertex, members].sum())

    def scores(self, candidates: np.ndarray, partial_clique: Iterable[int]) -> np.ndarray:
        """Vectorised ``score`` for every vertex in ``candidates``."""
        members = _as_indices(partial_clique)
        if members.size == 0:
            return np.full(len(candidates), NEUTRAL_SCORE, dtype=np.float64)
        return self._trail[np.ix_(candidates, members)].sum(axis=1)

    def __repr__(self) -> str:
        return (
            f"PheromoneField(num_vertices={self.num_vertices}, "
            f"tau_min={self.tau_min}, tau_max={self.tau_max})"
        )
