"""
Rejection sampling of item positions inside a domain shape.
"""

from typing import Tuple

import numpy as np

from packing.exceptions import SamplingExhaustionError
from packing.manifest import Manifest
from packing.shapes import Shape

from .data_models import Candidate, Gene, MAX_SAMPLING_ATTEMPTS


def sample_point(
    shape: Shape,
    radius: float,
    rng: np.random.Generator,
    max_attempts: int = MAX_SAMPLING_ATTEMPTS
) -> Tuple[float, float]:
    """
    Draw a uniformly distributed point inside a shape.

    Points are drawn uniformly from the shape's bounding box and rejected
    until one satisfies shape.contains. Inter-item clearance is not checked.

    Args:
        shape: Domain shape
        radius: Clearance radius of the item being placed
        rng: Random number generator
        max_attempts: Draws before giving up

    Returns:
        (x, y) position inside the shape

    Raises:
        SamplingExhaustionError: If no draw landed inside the shape
    """
    box = shape.bounding_box()
    for _ in range(max_attempts):
        x = box.min_x + rng.random() * box.width
        y = box.min_y + rng.random() * box.height
        if shape.contains(x, y):
            return float(x), float(y)
    raise SamplingExhaustionError(shape, radius, max_attempts)


def random_candidate(
    shape: Shape,
    manifest: Manifest,
    rng: np.random.Generator,
    max_attempts: int = MAX_SAMPLING_ATTEMPTS
) -> Candidate:
    """
    Build an unscored candidate with one sampled gene per requested item.

    Args:
        shape: Domain shape
        manifest: Requested items
        rng: Random number generator
        max_attempts: Rejection sampling limit per gene

    Returns:
        Candidate with manifest.total_quantity genes and no fitness
    """
    genes = []
    for entry in manifest.expanded():
        x, y = sample_point(shape, entry.radius, rng, max_attempts)
        genes.append(Gene(
            x=x,
            y=y,
            radius=entry.radius,
            category=entry.category,
            variety_id=entry.variety_id,
            variety_name=entry.variety_name,
        ))
    return Candidate(genes=genes)
