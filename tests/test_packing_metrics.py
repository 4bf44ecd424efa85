"""
Tests for packing quality metrics and the text report.
"""

import math
import unittest

from ga_engine.data_models import Candidate, Gene
from packing.manifest import Manifest, ManifestEntry
from packing.packing_metrics import PackingMetrics, print_packing_report
from packing.shapes import Square


class TestPackingMetrics(unittest.TestCase):
    """Test analysis of placed candidates."""

    def setUp(self):
        self.shape = Square(10)
        self.manifest = Manifest([
            ManifestEntry("tomato", 1, "San Marzano", 0.5, 2),
            ManifestEntry("basil", 7, "Genovese", 0.25, 1),
        ])
        self.analyzer = PackingMetrics(self.shape, self.manifest)

    def _candidate(self, positions):
        varieties = [("tomato", 1, "San Marzano", 0.5), ("tomato", 1, "San Marzano", 0.5),
                     ("basil", 7, "Genovese", 0.25)]
        genes = [
            Gene(x, y, radius, category, variety_id, name)
            for (x, y), (category, variety_id, name, radius) in zip(positions, varieties)
        ]
        return Candidate(genes=genes)

    def test_feasible_packing(self):
        metrics = self.analyzer.analyze_packing(self._candidate([(-2, 0), (2, 0), (0, 4)]))

        self.assertTrue(metrics['is_feasible'])
        self.assertEqual(metrics['total_genes'], 3)
        self.assertEqual(metrics['containment']['outside_count'], 0)
        self.assertEqual(metrics['separation']['violating_pairs'], 0)
        self.assertAlmostEqual(metrics['separation']['min_distance'], 4.0)
        self.assertEqual(metrics['inventory']['total_deviation'], 0)
        self.assertEqual(metrics['inventory']['categories'], {"tomato": 2, "basil": 1})
        self.assertEqual(metrics['fitness']['normalized_score'], 1.0)
        self.assertEqual(metrics['overall_quality_score'], 1.0)

        expected_area = 2 * math.pi * 0.25 + math.pi * 0.0625
        self.assertAlmostEqual(metrics['coverage']['item_area'], expected_area)
        self.assertAlmostEqual(metrics['coverage']['density'], expected_area / 100.0)

    def test_infeasible_packing(self):
        metrics = self.analyzer.analyze_packing(self._candidate([(0, 0), (0.5, 0), (8, 8)]))

        self.assertFalse(metrics['is_feasible'])
        self.assertEqual(metrics['containment']['outside_indices'], [2])
        self.assertEqual(metrics['separation']['violating_pairs'], 1)
        self.assertAlmostEqual(metrics['separation']['min_clearance_ratio'], 0.5)
        self.assertLess(metrics['fitness']['score'], 0.0)
        self.assertLess(metrics['overall_quality_score'], 1.0)

    def test_report(self):
        metrics = self.analyzer.analyze_packing(self._candidate([(0, 0), (0.5, 0), (8, 8)]))
        report = print_packing_report(metrics)
        self.assertIn("PACKING QUALITY REPORT", report)
        self.assertIn("tomato/San Marzano: 2/2", report)
        self.assertIn("Outside: [2]", report)


if __name__ == '__main__':
    unittest.main()
