"""
Selection operators: elitism and tournament selection.

All functions read a scored population snapshot and never modify it.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from .data_models import Candidate

MAX_PARENT_REDRAWS = 100


def _fitness(candidate: Candidate) -> float:
    return candidate.fitness if candidate.fitness is not None else -math.inf


def elite_count(population_size: int, elite_fraction: float) -> int:
    """Number of elites: ceil(size * fraction), at least 1 and at most size"""
    # round() guards against float noise such as 100 * 0.07 = 7.000000000000001
    count = math.ceil(round(population_size * elite_fraction, 9))
    return max(1, min(population_size, count))


def select_elites(population: Sequence[Candidate], elite_fraction: float) -> List[Candidate]:
    """
    Return the best-scoring candidates of a population.

    Ties keep population order (stable sort).

    Args:
        population: Scored population
        elite_fraction: Fraction of the population to keep, in (0, 1]

    Returns:
        List of ceil(len(population) * elite_fraction) candidates, best first
    """
    ranked = sorted(population, key=_fitness, reverse=True)
    return ranked[:elite_count(len(population), elite_fraction)]


def tournament(population: Sequence[Candidate], k: int, rng: np.random.Generator) -> Candidate:
    """
    Draw k candidates uniformly with replacement and return the best.

    Ties go to the earliest draw.
    """
    indices = rng.integers(0, len(population), size=k)
    winner = population[indices[0]]
    for idx in indices[1:]:
        challenger = population[idx]
        if _fitness(challenger) > _fitness(winner):
            winner = challenger
    return winner


def select_parents(
    population: Sequence[Candidate],
    k: int,
    rng: np.random.Generator
) -> Tuple[Candidate, Candidate]:
    """
    Pick two distinct parents by tournament selection.

    The second tournament is repeated while it returns the first parent.
    After MAX_PARENT_REDRAWS failed redraws the second parent is drawn
    uniformly from the rest of the population.

    Args:
        population: Scored population with at least two candidates
        k: Tournament size
        rng: Random number generator

    Returns:
        Tuple of (first_parent, second_parent)
    """
    if len(population) < 2:
        raise ValueError("Parent selection requires at least two candidates")

    first = tournament(population, k, rng)
    for _ in range(MAX_PARENT_REDRAWS):
        second = tournament(population, k, rng)
        if second is not first:
            return first, second

    others = [candidate for candidate in population if candidate is not first]
    return first, others[int(rng.integers(0, len(others)))]
