"""
sparse.py
---------

A minimal sparse vector keyed by term.

Weights are stored in insertion order, which is the order terms were
first seen in the token stream, so iteration (and therefore the order in
which floating point sums are accumulated) is reproducible between
builds.  Two vectors are equal when they hold the same terms with the
same weights, regardless of order.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

NORM_EPSILON = 1e-9


class SparseVector:
    """Mapping from term to weight with dot product and L2 norm."""

    __slots__ = ("_weights",)

    def __init__(self, weights: Optional[Mapping[str, float]] = None) -> None:
        self._weights: Dict[str, float] = dict(weights or {})

    @classmethod
    def from_tokens(
        cls,
        tokens: Iterable[str],
        idf: Mapping[str, float],
        *,
        drop_unknown: bool = False,
    ) -> "SparseVector":
        """Build a length-normalised TF-IDF vector from a token stream.

        Term frequency is ``count / len(tokens)``.  Terms missing from
        ``idf`` get weight 0; with ``drop_unknown`` they are left out of
        the vector entirely.
        """
        counts = Counter(tokens)
        total = sum(counts.values())
        weights: Dict[str, float] = {}
        for term, count in counts.items():
            weight = (count / total) * idf.get(term, 0.0)
            if drop_unknown and weight <= 0:
                continue
            weights[term] = weight
        return cls(weights)

    def __getitem__(self, term: str) -> float:
        return self._weights[term]

    def get(self, term: str, default: float = 0.0) -> float:
        return self._weights.get(term, default)

    def __contains__(self, term: object) -> bool:
        return term in self._weights

    def __iter__(self) -> Iterator[str]:
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def items(self) -> Iterator[Tuple[str, float]]:
        return iter(self._weights.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self._weights == other._weights

    def __repr__(self) -> str:
        return f"SparseVector({self._weights!r})"

    def dot(self, other: "SparseVector") -> float:
        """Sum of products over the terms both vectors share."""
        total = 0.0
        for term, weight in self._weights.items():
            other_weight = other._weights.get(term)
            if other_weight:
                total += weight * other_weight
        return total

    def norm(self, floor: float = NORM_EPSILON) -> float:
        """L2 norm, never smaller than ``floor``."""
        return max(math.sqrt(sum(w * w for w in self._weights.values())), floor)
