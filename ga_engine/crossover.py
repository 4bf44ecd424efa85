"""
Crossover operator for GA engine.

Uniform crossover mixes two parents gene by gene. Genes are immutable, so
the child shares gene objects with its parents but owns its gene list.
"""

import numpy as np

from .data_models import Candidate


def uniform_crossover(
    parent_a: Candidate,
    parent_b: Candidate,
    crossover_probability: float,
    rng: np.random.Generator
) -> Candidate:
    """
    Combine two parents into one child.

    With probability crossover_probability each gene index takes the gene
    of parent_a or parent_b on a fair coin flip. Otherwise the child is a
    copy of one parent picked on a coin flip.

    Args:
        parent_a: First parent
        parent_b: Second parent
        crossover_probability: Probability of gene-wise mixing
        rng: Random number generator

    Returns:
        New unscored Candidate
    """
    if len(parent_a) != len(parent_b):
        raise ValueError(
            f"Parents must have the same length, got {len(parent_a)} and {len(parent_b)}"
        )

    if rng.random() < crossover_probability:
        mask = rng.random(len(parent_a)) < 0.5
        genes = [
            gene_a if take_a else gene_b
            for gene_a, gene_b, take_a in zip(parent_a.genes, parent_b.genes, mask)
        ]
        return Candidate(genes=genes)

    source = parent_a if rng.random() < 0.5 else parent_b
    return Candidate(genes=list(source.genes))
