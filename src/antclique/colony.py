"""
Ant colony driver: cycles of evaporation, construction and pheromone deposit.
"""

import json
import logging
import math
import time
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .construction import EMPTY_CLIQUE, Clique, CliqueConstructor, HeuristicKind, StartPolicy
from .exceptions import ConfigError
from .graph import BitGraph
from .pheromone import PheromoneField

logger = logging.getLogger(__name__)

MIN_DEPOSIT_DENOMINATOR = 0.5


def deposit_amount(best_size: int, cycle_size: int) -> float:
    """
    Pheromone deposited for a cycle's best clique.

    ``1 / (1 + best_size - cycle_size)`` where ``best_size`` is the global best
    before this cycle: a tie deposits 1.0 and falling behind by ``k`` deposits
    ``1 / (1 + k)``. When the cycle beats the incumbent the denominator is not
    positive; it is floored at ``MIN_DEPOSIT_DENOMINATOR`` so the improvement
    receives the largest deposit, 2.0.
    """
    denominator = max(1.0 + best_size - cycle_size, MIN_DEPOSIT_DENOMINATOR)
    return 1.0 / denominator


@dataclass
class ColonyConfig:
    """
    Parameters of an ant colony run.

    Attributes:
        num_ants: Constructions per cycle.
        max_cycles: Fixed number of cycles; there is no early stop.
        rho: Pheromone persistence applied at each evaporation, in (0, 1].
        alpha: Pheromone exponent in the selection weight.
        beta: Heuristic exponent in the selection weight.
        tau_min: Lower trail bound.
        tau_max: Upper trail bound.
        initial_pheromone: Starting trail value, ``None`` means ``tau_max``.
        start_policy: How each ant picks its first vertex.
        heuristic: Heuristic term of the selection weight.
        seed: Seed of the run's random generator, ``None`` for a fresh one.
    """
    num_ants: int = 30
    max_cycles: int = 1000
    rho: float = 0.99
    alpha: float = 1.0
    beta: float = 2.0
    tau_min: float = 0.01
    tau_max: float = 6.0
    initial_pheromone: Optional[float] = None
    start_policy: StartPolicy = StartPolicy.RANDOM
    heuristic: HeuristicKind = HeuristicKind.DEGREE
    seed: Optional[int] = None

    def validate(self) -> None:
        """Raise ConfigError if any parameter is out of range."""
        if not isinstance(self.num_ants, (int, np.integer)) or self.num_ants <= 0:
            raise ConfigError(f"num_ants must be a positive integer, got {self.num_ants}")
        if not isinstance(self.max_cycles, (int, np.integer)) or self.max_cycles <= 0:
            raise ConfigError(f"max_cycles must be a positive integer, got {self.max_cycles}")
        if not 0.0 < self.rho <= 1.0:
            raise ConfigError(f"rho must be in (0, 1], got {self.rho}")
        for name in ("alpha", "beta"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigError(f"{name} must be a non-negative finite number, got {value}")
        if not (math.isfinite(self.tau_min) and math.isfinite(self.tau_max)):
            raise ConfigError(f"Pheromone bounds must be finite, got [{self.tau_min}, {self.tau_max}]")
        if self.tau_min < 0:
            raise ConfigError(f"tau_min must be non-negative, got {self.tau_min}")
        if self.tau_min >= self.tau_max:
            raise ConfigError(f"tau_min must be smaller than tau_max, got {self.tau_min} >= {self.tau_max}")
        initial = self.initial_pheromone
        if initial is not None and not self.tau_min <= initial <= self.tau_max:
            raise ConfigError(
                f"initial_pheromone {initial} outside bounds [{self.tau_min}, {self.tau_max}]"
            )
        if not isinstance(self.start_policy, StartPolicy):
            raise ConfigError(f"Unknown start policy {self.start_policy!r}")
        if not isinstance(self.heuristic, HeuristicKind):
            raise ConfigError(f"Unknown heuristic {self.heuristic!r}")

    @property
    def initial_trail(self) -> float:
        return self.tau_max if self.initial_pheromone is None else self.initial_pheromone

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "ColonyConfig":
        """Build a config from plain values, e.g. parsed JSON."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        values = dict(values)
        try:
            if "start_policy" in values:
                values["start_policy"] = StartPolicy(values["start_policy"])
            if "heuristic" in values:
                values["heuristic"] = HeuristicKind(values["heuristic"])
        except ValueError as e:
            raise ConfigError(str(e)) from None
        return cls(**values)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "ColonyConfig":
        with open(path, "r") as f:
            try:
                values = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid JSON in config file {path}: {e}") from None
        if not isinstance(values, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        return cls.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        values = asdict(self)
        values["start_policy"] = self.start_policy.value
        values["heuristic"] = self.heuristic.value
        return values


@dataclass
class ColonyResult:
    """
    Outcome of one solve call.

    ``pheromone`` holds the trail field as it was after the last cycle; it is
    not reused by later runs.
    """
    clique: Clique
    cycles: int
    cycle_best_sizes: List[int] = field(default_factory=list)
    global_best_sizes: List[int] = field(default_factory=list)
    runtime_seconds: float = 0.0
    seed: Optional[int] = None
    constructions: Optional[List[List[Clique]]] = None
    pheromone: Optional[PheromoneField] = None

    @property
    def size(self) -> int:
        return self.clique.size

    @property
    def vertices(self) -> List[int]:
        return self.clique.sorted()


class ColonySolver:
    """
    Ant colony search for a large clique.

    Every cycle evaporates the trails, lets each ant build a clique, deposits
    pheromone on the first largest clique of the cycle and then updates the
    global best. Every call to ``solve`` starts from a fresh pheromone field.

    Args:
        config: Run parameters. Validated when ``solve`` starts.
    """

    def __init__(self, config: Optional[ColonyConfig] = None):
        self.config = config or ColonyConfig()

    def _constructor(self) -> CliqueConstructor:
        config = self.config
        return CliqueConstructor(
            alpha=config.alpha,
            beta=config.beta,
            start_policy=config.start_policy,
            heuristic=config.heuristic,
        )

    def solve(
        self,
        graph: BitGraph,
        rng: Optional[np.random.RandomState] = None,
        record_constructions: bool = False,
    ) -> ColonyResult:
        """
        Run the full cycle budget on ``graph``.

        Args:
            graph: Graph to search.
            rng: Random source. Defaults to ``RandomState(config.seed)``. When
                given, the result records no seed.
            record_constructions: Keep every ant's clique for every cycle.

        Returns:
            ColonyResult with the best clique found.

        Raises:
            ConfigError: If the configuration is invalid.
        """
        config = self.config
        config.validate()
        # A caller-supplied generator makes config.seed meaningless for this run
        seed = config.seed if rng is None else None

        if graph.num_vertices == 0:
            return ColonyResult(
                clique=EMPTY_CLIQUE,
                cycles=0,
                seed=seed,
                constructions=[] if record_constructions else None,
            )

        if rng is None:
            rng = np.random.RandomState(config.seed)

        start_time = time.perf_counter()
        constructor = self._constructor()
        pheromone = PheromoneField(
            graph.num_vertices, config.tau_min, config.tau_max, config.initial_trail
        )

        global_best = EMPTY_CLIQUE
        cycle_best_sizes: List[int] = []
        global_best_sizes: List[int] = []
        constructions: Optional[List[List[Clique]]] = [] if record_constructions else None

        for cycle in range(1, config.max_cycles + 1):
            pheromone.evaporate(config.rho)

            cliques = [constructor.construct(graph, pheromone, rng) for _ in range(config.num_ants)]
            if constructions is not None:
                constructions.append(cliques)

            cycle_best = cliques[0]
            for clique in cliques[1:]:
                if clique.size > cycle_best.size:
                    cycle_best = clique

            pheromone.deposit(cycle_best, deposit_amount(global_best.size, cycle_best.size))

            if cycle_best.size > global_best.size:
                global_best = cycle_best
                logger.info("Cycle %d: new best clique size %d", cycle, global_best.size)

            cycle_best_sizes.append(cycle_best.size)
            global_best_sizes.append(global_best.size)
            logger.debug("Cycle %d: cycle best %d, global best %d", cycle, cycle_best.size, global_best.size)

        return ColonyResult(
            clique=global_best,
            cycles=config.max_cycles,
            cycle_best_sizes=cycle_best_sizes,
            global_best_sizes=global_best_sizes,
            runtime_seconds=time.perf_counter() - start_time,
            seed=seed,
            constructions=constructions,
            pheromone=pheromone,
        )
