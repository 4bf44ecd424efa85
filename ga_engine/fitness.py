"""
Fitness evaluation for candidate placements.

A candidate is penalised for every gene whose centre lies outside the
domain and for every pair of genes closer than the sum of their clearance
radii. The score is the negated penalty, so higher is better and every
feasible candidate scores exactly 0.0.

Two overlap strategies compute the same separation penalty: an all-pairs
numpy version for small candidates and a spatial hash for large ones.
"""

import math
from collections import defaultdict
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from packing.manifest import Manifest
from packing.shapes import Shape

from .data_models import Candidate, Gene

DOMAIN_PENALTY = 10000.0
OVERLAP_WEIGHT = 100.0
PAIR_VIOLATION_PENALTY = 1.0
HASHING_THRESHOLD = 80


class OverlapSummary(NamedTuple):
    """Aggregated pairwise clearance violations"""
    violating_pairs: int
    overlap_sq_sum: float


class FitnessBreakdown(NamedTuple):
    """Penalty terms of one candidate"""
    outside_genes: int
    violating_pairs: int
    overlap_sq_sum: float

    @property
    def penalty(self) -> float:
        return (
            DOMAIN_PENALTY * self.outside_genes
            + OVERLAP_WEIGHT * self.overlap_sq_sum
            + PAIR_VIOLATION_PENALTY * self.violating_pairs
        )


def _gene_arrays(genes: Sequence[Gene]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    n = len(genes)
    xs = np.fromiter((g.x for g in genes), dtype=float, count=n)
    ys = np.fromiter((g.y for g in genes), dtype=float, count=n)
    radii = np.fromiter((g.radius for g in genes), dtype=float, count=n)
    return xs, ys, radii


def _pairwise_violations(genes: Sequence[Gene]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Squared distances, required separations and violation mask of every pair.

    Pairs are the upper triangle (i < j); needs at least two genes.
    """
    xs, ys, radii = _gene_arrays(genes)
    i, j = np.triu_indices(len(genes), k=1)
    dx = xs[i] - xs[j]
    dy = ys[i] - ys[j]
    dist_sq = dx * dx + dy * dy
    required = radii[i] + radii[j]
    return dist_sq, required, dist_sq < required * required


def overlap_quadratic(genes: Sequence[Gene]) -> OverlapSummary:
    """
    Check every pair of genes against its combined clearance radius.

    O(n²) pairs, evaluated in one vectorised pass.
    """
    if len(genes) < 2:
        return OverlapSummary(0, 0.0)

    dist_sq, required, violating = _pairwise_violations(genes)
    count = int(np.count_nonzero(violating))
    if count == 0:
        return OverlapSummary(0, 0.0)
    overlap = required[violating] - np.sqrt(dist_sq[violating])
    return OverlapSummary(count, float(np.sum(overlap * overlap)))


def overlap_spatial(genes: Sequence[Gene], max_radius: Optional[float] = None) -> OverlapSummary:
    """
    Spatial-hash version of overlap_quadratic.

    Genes are bucketed into square cells of side 2 * max_radius, so any
    violating pair lies in the same or an adjacent cell.

    Args:
        genes: Genes to check
        max_radius: Largest clearance radius (computed from genes if omitted)
    """
    n = len(genes)
    if n < 2:
        return OverlapSummary(0, 0.0)
    if max_radius is None:
        max_radius = max(g.radius for g in genes)
    cell_size = 2.0 * max_radius

    grid: Dict[Tuple[int, int], List[int]] = defaultdict(list)
    cells = []
    for idx, gene in enumerate(genes):
        cell = (math.floor(gene.x / cell_size), math.floor(gene.y / cell_size))
        grid[cell].append(idx)
        cells.append(cell)

    count = 0
    overlap_sq_sum = 0.0
    for idx, gene in enumerate(genes):
        ci, cj = cells[idx]
        for di in (-1, 0, 1):
            for dj in (-1, 0, 1):
                for other in grid.get((ci + di, cj + dj), ()):
                    # each unordered pair once
                    if other <= idx:
                        continue
                    neighbor = genes[other]
                    dx = gene.x - neighbor.x
                    dy = gene.y - neighbor.y
                    dist_sq = dx * dx + dy * dy
                    required = gene.radius + neighbor.radius
                    if dist_sq < required * required:
                        count += 1
                        overlap = required - math.sqrt(dist_sq)
                        overlap_sq_sum += overlap * overlap
    return OverlapSummary(count, overlap_sq_sum)


def compute_overlap(genes: Sequence[Gene], max_radius: Optional[float] = None) -> OverlapSummary:
    """Pick the overlap strategy by candidate size"""
    if len(genes) <= HASHING_THRESHOLD:
        return overlap_quadratic(genes)
    return overlap_spatial(genes, max_radius)


def count_outside(candidate: Candidate, shape: Shape) -> int:
    return sum(1 for gene in candidate.genes if not shape.contains(gene.x, gene.y))


def fitness_breakdown(
    candidate: Candidate,
    shape: Shape,
    manifest: Optional[Manifest] = None
) -> FitnessBreakdown:
    """
    Compute the individual penalty terms of a candidate.

    Args:
        candidate: Candidate to evaluate
        shape: Domain shape
        manifest: Item manifest, used for the largest clearance radius

    Returns:
        FitnessBreakdown with the containment and separation terms
    """
    max_radius = manifest.max_radius if manifest is not None else None
    overlap = compute_overlap(candidate.genes, max_radius)
    return FitnessBreakdown(
        outside_genes=count_outside(candidate, shape),
        violating_pairs=overlap.violating_pairs,
        overlap_sq_sum=overlap.overlap_sq_sum,
    )


def score(candidate: Candidate, shape: Shape, manifest: Optional[Manifest] = None) -> float:
    """
    Score a candidate; higher is better.

    Pure and side-effect free. Feasible candidates score exactly 0.0 and
    any violation makes the score strictly negative.
    """
    breakdown = fitness_breakdown(candidate, shape, manifest)
    if breakdown.outside_genes == 0 and breakdown.violating_pairs == 0:
        return 0.0
    return -breakdown.penalty


def normalized_score(candidate: Candidate, shape: Shape, manifest: Optional[Manifest] = None) -> float:
    """Score mapped to (0, 1] as 1 / (1 + penalty), for reporting"""
    return 1.0 / (1.0 + fitness_breakdown(candidate, shape, manifest).penalty)


def evaluate(candidate: Candidate, shape: Shape, manifest: Optional[Manifest] = None) -> Candidate:
    """
    Return a scored copy of a candidate.

    The input candidate is left untouched.
    """
    return Candidate(genes=list(candidate.genes), fitness=score(candidate, shape, manifest))


def is_feasible(candidate: Candidate, shape: Shape) -> bool:
    """
    Check that every gene is inside the shape and no pair violates its clearance.

    Uses the same predicates as score() without computing magnitudes.
    """
    for gene in candidate.genes:
        if not shape.contains(gene.x, gene.y):
            return False

    genes = candidate.genes
    if len(genes) <= HASHING_THRESHOLD:
        if len(genes) < 2:
            return True
        _, _, violating = _pairwise_violations(genes)
        return not bool(np.any(violating))
    return overlap_spatial(genes).violating_pairs == 0
