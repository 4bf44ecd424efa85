"""
Tests for fitness evaluation.
"""

import unittest

import numpy as np

from ga_engine.data_models import Candidate, Gene
from ga_engine.fitness import (
    DOMAIN_PENALTY,
    HASHING_THRESHOLD,
    evaluate,
    fitness_breakdown,
    is_feasible,
    normalized_score,
    overlap_quadratic,
    overlap_spatial,
    score,
)
from ga_engine.sampler import random_candidate
from packing.manifest import Manifest, ManifestEntry
from packing.shapes import Circle, Square


def _gene(x, y, radius=0.5):
    return Gene(x, y, radius, "tomato", 1, "San Marzano")


class TestScore(unittest.TestCase):
    """Test score values and their ordering."""

    def setUp(self):
        self.shape = Square(10)

    def test_feasible_scores_zero(self):
        candidate = Candidate(genes=[_gene(-2, 0), _gene(2, 0), _gene(0, 3)])
        self.assertEqual(score(candidate, self.shape), 0.0)
        self.assertTrue(is_feasible(candidate, self.shape))
        self.assertEqual(normalized_score(candidate, self.shape), 1.0)

    def test_touching_items_are_feasible(self):
        candidate = Candidate(genes=[_gene(0, 0), _gene(1, 0)])
        self.assertTrue(is_feasible(candidate, self.shape))
        self.assertEqual(score(candidate, self.shape), 0.0)

    def test_any_violation_scores_below_feasible(self):
        feasible = Candidate(genes=[_gene(-2, 0), _gene(2, 0)])
        # an overlap of 1e-9 still makes the candidate strictly worse
        barely = Candidate(genes=[_gene(0, 0), _gene(1.0 - 1e-9, 0)])
        outside = Candidate(genes=[_gene(-2, 0), _gene(6, 0)])
        for candidate in (barely, outside):
            self.assertFalse(is_feasible(candidate, self.shape))
            self.assertLess(score(candidate, self.shape), score(feasible, self.shape))

    def test_more_overlap_scores_lower(self):
        light = Candidate(genes=[_gene(0, 0), _gene(0.9, 0)])
        heavy = Candidate(genes=[_gene(0, 0), _gene(0.2, 0)])
        self.assertLess(score(heavy, self.shape), score(light, self.shape))

    def test_containment_penalty(self):
        candidate = Candidate(genes=[_gene(-4, 0), _gene(7, 0), _gene(0, 8)])
        breakdown = fitness_breakdown(candidate, self.shape)
        self.assertEqual(breakdown.outside_genes, 2)
        self.assertEqual(breakdown.violating_pairs, 0)
        self.assertEqual(score(candidate, self.shape), -2 * DOMAIN_PENALTY)

    def test_score_is_idempotent(self):
        candidate = Candidate(genes=[_gene(0, 0), _gene(0.3, 0.1), _gene(6, 6)])
        first = evaluate(candidate, self.shape)
        second = evaluate(first, self.shape)
        self.assertEqual(first.fitness, second.fitness)
        self.assertIsNone(candidate.fitness)
        self.assertIsNot(first, candidate)


class TestOverlapStrategies(unittest.TestCase):
    """Test that quadratic and spatial-hash overlap agree."""

    def setUp(self):
        self.rng = np.random.default_rng(42)
        self.shape = Circle(6)
        self.manifest = Manifest([
            ManifestEntry("tomato", 1, "San Marzano", 0.6, 60),
            ManifestEntry("basil", 7, "Genovese", 0.3, 60),
        ])

    def test_strategies_agree(self):
        for _ in range(5):
            candidate = random_candidate(self.shape, self.manifest, self.rng)
            quadratic = overlap_quadratic(candidate.genes)
            spatial = overlap_spatial(candidate.genes, self.manifest.max_radius)
            self.assertEqual(quadratic.violating_pairs, spatial.violating_pairs)
            self.assertAlmostEqual(quadratic.overlap_sq_sum, spatial.overlap_sq_sum, places=9)

    def test_large_candidate_uses_hashing(self):
        candidate = random_candidate(self.shape, self.manifest, self.rng)
        self.assertGreater(len(candidate), HASHING_THRESHOLD)
        expected = overlap_quadratic(candidate.genes)
        breakdown = fitness_breakdown(candidate, self.shape, self.manifest)
        self.assertEqual(breakdown.violating_pairs, expected.violating_pairs)
        self.assertEqual(is_feasible(candidate, self.shape), expected.violating_pairs == 0)

    def test_feasibility_matches_quadratic_overlap(self):
        shape = Square(20)
        manifest = Manifest([ManifestEntry("tomato", 1, "San Marzano", 0.5, 12)])
        for _ in range(20):
            candidate = random_candidate(shape, manifest, self.rng)
            expected = overlap_quadratic(candidate.genes).violating_pairs == 0
            self.assertEqual(is_feasible(candidate, shape), expected)

    def test_negative_coordinates(self):
        genes = [_gene(-0.1, -0.1), _gene(0.1, 0.1), _gene(-3.0, 2.9), _gene(-3.2, 3.1)]
        self.assertEqual(overlap_spatial(genes).violating_pairs, 2)
        self.assertEqual(overlap_quadratic(genes).violating_pairs, 2)


if __name__ == '__main__':
    unittest.main()
