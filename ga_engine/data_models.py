"""
Data models for the GA engine.

Core data structures representing genes, candidates, run configuration,
and the results of evolutionary runs and retry loops.
"""

import math
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from packing.exceptions import ConfigurationError

# Defaults for the evolutionary search
POPULATION_SIZE = 100
GENERATION_COUNT = 800
MUTATION_PROBABILITY = 0.02
INITIAL_MUTATION_STRENGTH = 1.0
CROSSOVER_PROBABILITY = 0.9
TOURNAMENT_SIZE = 3
ELITE_FRACTION = 0.05
MAX_RETRY_ATTEMPTS = 3
MAX_SAMPLING_ATTEMPTS = 100_000


@dataclass(frozen=True)
class Gene:
    """
    One placed item.

    Attributes:
        x, y: Position of the item centre
        radius: Clearance radius of the item
        category: Item category from the manifest
        variety_id: Variety identifier from the manifest
        variety_name: Variety display name from the manifest
    """
    x: float
    y: float
    radius: float
    category: str
    variety_id: int
    variety_name: str

    def moved_to(self, x: float, y: float) -> "Gene":
        """Return a new gene at (x, y) with the same item identity"""
        return replace(self, x=x, y=y)


@dataclass
class Candidate:
    """
    One full proposed placement of all requested items.

    The gene list has a fixed length equal to the manifest's total quantity.
    A candidate is only modified by the task that created it; once it is
    published into a population it is treated as read-only.

    Attributes:
        genes: Ordered list of placed items
        fitness: Score assigned by the fitness evaluator (None until scored)
    """
    genes: List[Gene]
    fitness: Optional[float] = None

    def copy(self) -> "Candidate":
        """Shallow copy: new gene list, shared immutable genes"""
        return Candidate(genes=list(self.genes), fitness=self.fitness)

    @property
    def is_scored(self) -> bool:
        return self.fitness is not None

    def __len__(self) -> int:
        return len(self.genes)

    def positions(self) -> List[Tuple[float, float]]:
        return [(gene.x, gene.y) for gene in self.genes]


def default_workers() -> int:
    """Thread count used when GAConfig.workers is not set"""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class GAConfig:
    """
    Hyperparameters of one optimization.

    Attributes:
        population_size: Candidates per generation
        generation_count: Generations per evolutionary run
        mutation_probability: Per-gene mutation probability
        initial_mutation_strength: Displacement magnitude at generation 0
        crossover_probability: Probability that two parents are mixed gene by gene
        tournament_size: Candidates drawn per tournament
        elite_fraction: Fraction of the population carried over unchanged
        max_retry_attempts: Evolutionary runs attempted before giving up
        random_seed: Seed for reproducible runs (None for OS entropy)
        workers: Worker threads (None for default_workers(), 1 for serial)
        max_sampling_attempts: Rejection sampling attempts before giving up
        time_budget: Cumulative seconds after which retries stop (None for no limit)
    """
    population_size: int = POPULATION_SIZE
    generation_count: int = GENERATION_COUNT
    mutation_probability: float = MUTATION_PROBABILITY
    initial_mutation_strength: float = INITIAL_MUTATION_STRENGTH
    crossover_probability: float = CROSSOVER_PROBABILITY
    tournament_size: int = TOURNAMENT_SIZE
    elite_fraction: float = ELITE_FRACTION
    max_retry_attempts: int = MAX_RETRY_ATTEMPTS
    random_seed: Optional[int] = None
    workers: Optional[int] = None
    max_sampling_attempts: int = MAX_SAMPLING_ATTEMPTS
    time_budget: Optional[float] = None

    def validate(self) -> None:
        """
        Check every option.

        Raises:
            ConfigurationError: If any option is out of range
        """
        for name in ("population_size", "generation_count", "tournament_size",
                     "max_retry_attempts", "max_sampling_attempts"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"'{name}' must be a positive integer, got: {value!r}")

        if self.population_size < 2:
            raise ConfigurationError(
                f"'population_size' must be at least 2 to select distinct parents, got: {self.population_size}"
            )

        for name in ("mutation_probability", "crossover_probability", "elite_fraction"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not 0 < value <= 1:
                raise ConfigurationError(f"'{name}' must be in (0, 1], got: {value!r}")

        strength = self.initial_mutation_strength
        if not isinstance(strength, (int, float)) or not math.isfinite(strength) or strength <= 0:
            raise ConfigurationError(f"'initial_mutation_strength' must be positive, got: {strength!r}")

        seed = self.random_seed
        if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool) or seed < 0):
            raise ConfigurationError(f"'random_seed' must be a non-negative integer or None, got: {seed!r}")

        if self.workers is not None and (not isinstance(self.workers, int) or self.workers <= 0):
            raise ConfigurationError(f"'workers' must be a positive integer, got: {self.workers!r}")

        if self.time_budget is not None and (
            not isinstance(self.time_budget, (int, float)) or self.time_budget <= 0
        ):
            raise ConfigurationError(f"'time_budget' must be positive seconds, got: {self.time_budget!r}")

    @property
    def effective_workers(self) -> int:
        return self.workers if self.workers is not None else default_workers()


@dataclass
class RunResult:
    """
    Outcome of one evolutionary run.

    Attributes:
        best: Best candidate observed across all generations
        is_feasible: Whether the best candidate satisfies every constraint
        generations: Number of generations completed
        elapsed_time: Wall-clock seconds spent on the run
        history: Per-generation "best" and "mean" fitness (index 0 is the initial population)
    """
    best: Candidate
    is_feasible: bool
    generations: int
    elapsed_time: float
    history: Dict[str, List[float]] = field(default_factory=dict)


@dataclass
class OptimizationResult:
    """Outcome of the retry loop returned to collaborators"""
    candidate: Candidate
    is_feasible: bool
    attempts_used: int
    elapsed_time: float


@dataclass(frozen=True)
class RetryState:
    """
    Progress of the outer retry loop, passed by value between attempts.

    Attributes:
        attempts_used: Attempts completed so far
        elapsed_time: Cumulative seconds spent on completed attempts
        best_fitness: Best fitness over completed attempts (-inf before the first)
        best_candidate: Candidate that achieved best_fitness
    """
    attempts_used: int = 0
    elapsed_time: float = 0.0
    best_fitness: float = -math.inf
    best_candidate: Optional[Any] = None

    def advance(self, result: RunResult) -> "RetryState":
        """Return the state after one more completed attempt"""
        fitness = result.best.fitness if result.best.fitness is not None else -math.inf
        improved = self.best_candidate is None or fitness > self.best_fitness
        return RetryState(
            attempts_used=self.attempts_used + 1,
            elapsed_time=self.elapsed_time + result.elapsed_time,
            best_fitness=fitness if improved else self.best_fitness,
            best_candidate=result.best if improved else self.best_candidate,
        )
