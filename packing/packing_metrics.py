"""
Packing Metrics and Reporting System

Analyses the quality of a finished placement: containment, clearance
between items, inventory against the manifest and coverage of the domain.
"""

import math
import statistics
from collections import Counter
from typing import Any, Dict

import numpy as np

from ga_engine.data_models import Candidate
from ga_engine.fitness import fitness_breakdown, normalized_score, score

from .manifest import Manifest
from .shapes import Shape


class PackingMetrics:
    """Metrics calculator for placement quality assessment"""

    def __init__(self, shape: Shape, manifest: Manifest):
        self.shape = shape
        self.manifest = manifest

    def analyze_packing(self, candidate: Candidate) -> Dict[str, Any]:
        """
        Analysis of a placed candidate

        Returns:
            Dictionary containing all metrics and analysis results
        """
        metrics = {
            'total_genes': len(candidate),
            'containment': self._analyze_containment(candidate),
            'separation': self._analyze_separation(candidate),
            'inventory': self._analyze_inventory(candidate),
            'coverage': self._analyze_coverage(candidate),
            'fitness': self._fitness_summary(candidate),
            'overall_quality_score': 0.0  # Will be calculated at the end
        }

        metrics['is_feasible'] = (
            metrics['containment']['outside_count'] == 0
            and metrics['separation']['violating_pairs'] == 0
        )
        metrics['overall_quality_score'] = self._calculate_quality_score(metrics)

        return metrics

    def _analyze_containment(self, candidate: Candidate) -> Dict[str, Any]:
        outside = [
            idx for idx, gene in enumerate(candidate.genes)
            if not self.shape.contains(gene.x, gene.y)
        ]
        total = len(candidate)
        return {
            'outside_count': len(outside),
            'outside_indices': outside,
            'containment_rate': 1.0 - len(outside) / total if total else 1.0
        }

    def _analyze_separation(self, candidate: Candidate) -> Dict[str, Any]:
        """Pairwise distances against the combined clearance radii"""
        n = len(candidate)
        if n < 2:
            return {
                'total_pairs': 0,
                'violating_pairs': 0,
                'violation_rate': 0.0,
                'min_distance': float('inf'),
                'mean_distance': float('inf'),
                'min_clearance_ratio': float('inf')
            }

        xs = np.array([gene.x for gene in candidate.genes])
        ys = np.array([gene.y for gene in candidate.genes])
        radii = np.array([gene.radius for gene in candidate.genes])
        i, j = np.triu_indices(n, k=1)
        distances = np.hypot(xs[i] - xs[j], ys[i] - ys[j])
        required = radii[i] + radii[j]
        violating = int(np.count_nonzero(distances < required))

        return {
            'total_pairs': len(distances),
            'violating_pairs': violating,
            'violation_rate': violating / len(distances),
            'min_distance': float(distances.min()),
            'mean_distance': float(distances.mean()),
            'min_clearance_ratio': float((distances / required).min())
        }

    def _analyze_inventory(self, candidate: Candidate) -> Dict[str, Any]:
        """Compare placed items per variety and category with the manifest"""
        actual = self.manifest.counts_by_variety(candidate)

        varieties = {}
        total_deviation = 0
        for entry in self.manifest:
            placed = actual.get((entry.category, entry.variety_id), 0)
            diff = placed - entry.quantity
            total_deviation += abs(diff)
            varieties[f'{entry.category}/{entry.variety_name}'] = {
                'expected': entry.quantity,
                'actual': placed,
                'difference': diff
            }

        categories = Counter(gene.category for gene in candidate.genes)
        expected_total = self.manifest.total_quantity
        return {
            'varieties': varieties,
            'categories': dict(categories),
            'total_deviation': total_deviation,
            'inventory_satisfaction_rate': max(0.0, 1.0 - total_deviation / expected_total)
        }

    def _analyze_coverage(self, candidate: Candidate) -> Dict[str, Any]:
        item_area = sum(math.pi * gene.radius ** 2 for gene in candidate.genes)
        domain_area = self.shape.area()
        return {
            'item_area': item_area,
            'domain_area': domain_area,
            'density': item_area / domain_area
        }

    def _fitness_summary(self, candidate: Candidate) -> Dict[str, Any]:
        breakdown = fitness_breakdown(candidate, self.shape, self.manifest)
        return {
            'score': score(candidate, self.shape, self.manifest),
            'normalized_score': normalized_score(candidate, self.shape, self.manifest),
            'penalty': breakdown.penalty,
            'overlap_sq_sum': breakdown.overlap_sq_sum
        }

    def _calculate_quality_score(self, metrics: Dict[str, Any]) -> float:
        """Calculate overall quality score (0-1, higher is better)"""
        score_components = [
            metrics['containment']['containment_rate'],
            1.0 - metrics['separation']['violation_rate'],
            metrics['inventory']['inventory_satisfaction_rate'],
        ]

        # Clearance ratio below 1 means at least one pair is too close
        ratio = metrics['separation']['min_clearance_ratio']
        score_components.append(min(1.0, ratio) if math.isfinite(ratio) else 1.0)

        return statistics.mean(score_components)


def print_packing_report(metrics: Dict[str, Any], detailed: bool = True) -> str:
    """Generate a human-readable packing quality report"""
    lines = []
    lines.append("=" * 60)
    lines.append("PACKING QUALITY REPORT")
    lines.append("=" * 60)
    lines.append(f"Overall Quality Score: {metrics['overall_quality_score']:.3f}")
    lines.append(f"Feasible: {'yes' if metrics['is_feasible'] else 'no'}")
    lines.append(f"Normalized Score: {metrics['fitness']['normalized_score']:.6f}")
    lines.append("")

    # Containment
    containment = metrics['containment']
    lines.append("CONTAINMENT:")
    lines.append(f"  {metrics['total_genes'] - containment['outside_count']}/{metrics['total_genes']} items inside the domain")
    if containment['outside_indices'] and detailed:
        lines.append(f"  Outside: {containment['outside_indices']}")
    lines.append("")

    # Separation
    separation = metrics['separation']
    lines.append("SEPARATION:")
    lines.append(f"  {separation['violating_pairs']} of {separation['total_pairs']} pairs violate clearance")
    if separation['total_pairs']:
        lines.append(f"  min_dist={separation['min_distance']:.3f}, "
                     f"min_clearance_ratio={separation['min_clearance_ratio']:.3f}")
    lines.append("")

    # Inventory
    inventory = metrics['inventory']
    lines.append("INVENTORY:")
    if detailed:
        for name, data in inventory['varieties'].items():
            lines.append(f"  {name}: {data['actual']}/{data['expected']}")
    lines.append(f"  Total deviation: {inventory['total_deviation']}")
    lines.append("")

    # Coverage
    coverage = metrics['coverage']
    lines.append("COVERAGE:")
    lines.append(f"  Item area {coverage['item_area']:.2f} of {coverage['domain_area']:.2f} "
                 f"(density {coverage['density']:.3f})")

    lines.append("=" * 60)

    return "\n".join(lines)
