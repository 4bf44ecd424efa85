"""
Mutation operator for GA engine.

Genes are displaced by a random offset whose magnitude cools down over the
generations. A displaced gene that leaves the domain is re-sampled inside
it rather than clamped to the bounding box.
"""

import numpy as np

from packing.shapes import Shape

from .data_models import Candidate, GAConfig
from .sampler import sample_point


def mutation_strength(initial_strength: float, generation_index: int, generation_count: int) -> float:
    """
    Displacement magnitude for a generation.

    Decays from initial_strength at generation 0 to initial_strength / 6 at
    the final generation.
    """
    progress = generation_index / generation_count if generation_count > 0 else 1.0
    return initial_strength / (1.0 + 5.0 * progress)


def mutate(
    candidate: Candidate,
    generation_index: int,
    shape: Shape,
    config: GAConfig,
    rng: np.random.Generator
) -> Candidate:
    """
    Perturb genes of an unpublished child in place.

    Each gene moves with probability config.mutation_probability by a
    uniform offset in [-s, s] on both axes, where s is the cooled mutation
    strength. Radius, category and variety are preserved.

    Args:
        candidate: Child owned by the caller
        generation_index: Current generation (0-based)
        shape: Domain shape
        config: GA configuration
        rng: Random number generator

    Returns:
        The same candidate, with its fitness reset to None
    """
    strength = mutation_strength(
        config.initial_mutation_strength, generation_index, config.generation_count
    )
    genes = candidate.genes
    mutate_mask = rng.random(len(genes)) < config.mutation_probability

    for idx in np.flatnonzero(mutate_mask):
        gene = genes[idx]
        offset_x, offset_y = rng.uniform(-strength, strength, size=2)
        x = gene.x + offset_x
        y = gene.y + offset_y
        if not shape.contains(x, y):
            x, y = sample_point(shape, gene.radius, rng, config.max_sampling_attempts)
        genes[idx] = gene.moved_to(float(x), float(y))

    candidate.fitness = None
    return candidate
