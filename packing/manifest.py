"""
Item manifest.

The manifest lists the requested item kinds, each with its clearance radius
and quantity. The engine only reads it to know how many genes of which
radius and category to generate.
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .exceptions import ConstraintError


@dataclass(frozen=True)
class ManifestEntry:
    """
    One requested item kind.

    Attributes:
        category: Item category (e.g. "tomato")
        variety_id: Identifier of the variety in the external catalog
        variety_name: Display name of the variety
        radius: Minimum clearance radius of each item
        quantity: Number of items of this variety to place
    """
    category: str
    variety_id: int
    variety_name: str
    radius: float
    quantity: int

    def __post_init__(self):
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity <= 0:
            raise ConstraintError("quantity", f"must be a positive integer, got {self.quantity!r}.")
        if not isinstance(self.radius, (int, float)) or not math.isfinite(self.radius) or self.radius <= 0:
            raise ConstraintError("radius", f"must be strictly positive, got {self.radius!r}.")
        if not self.category:
            raise ConstraintError("category", "must not be empty.")


class Manifest:
    """Immutable ordered collection of manifest entries"""

    def __init__(self, entries: Iterable[ManifestEntry]):
        self._entries: Tuple[ManifestEntry, ...] = tuple(entries)
        if not self._entries:
            raise ConstraintError("manifest", "must contain at least one entry.")

    @property
    def entries(self) -> Tuple[ManifestEntry, ...]:
        return self._entries

    @property
    def total_quantity(self) -> int:
        """Number of genes in every candidate"""
        return sum(entry.quantity for entry in self._entries)

    @property
    def max_radius(self) -> float:
        return max(entry.radius for entry in self._entries)

    def expanded(self) -> List[ManifestEntry]:
        """One entry per requested item, in manifest order"""
        items = []
        for entry in self._entries:
            items.extend([entry] * entry.quantity)
        return items

    def counts_by_variety(self, candidate: Any) -> Dict[Tuple[str, int], int]:
        """
        Count the genes of a candidate per (category, variety_id).

        Only varieties listed in the manifest are reported; unknown genes
        are ignored.
        """
        counts = Counter((gene.category, gene.variety_id) for gene in candidate.genes)
        return {
            (entry.category, entry.variety_id): counts.get((entry.category, entry.variety_id), 0)
            for entry in self._entries
        }

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Manifest({len(self._entries)} entries, {self.total_quantity} items)"
