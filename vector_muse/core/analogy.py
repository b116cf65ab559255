"""
Analogy resolution by vector arithmetic, plus cosine nearest-neighbour ranking.
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from vector_muse.core.errors import DimensionMismatch, EmptyPositiveSet
from vector_muse.core.vector_math import ArrayLike, as_vector, cosine_similarity

# Similarities equal to this many decimals rank as ties
SIMILARITY_DECIMALS = 12


@dataclass(frozen=True)
class AnalogyQuery:
    """Caller-owned query: sum of positives minus sum of negatives."""
    positives: tuple[str, ...]
    negatives: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, positives: Iterable[str], negatives: Iterable[str] = ()) -> "AnalogyQuery":
        return cls(positives=tuple(positives), negatives=tuple(negatives))

    @property
    def words(self) -> tuple[str, ...]:
        return self.positives + self.negatives

    @property
    def labels(self) -> list[str]:
        """Display labels: '+king', '+woman', '-man'."""
        return [f"+{w}" for w in self.positives] + [f"-{w}" for w in self.negatives]

    def equation(self) -> str:
        """Render as 'king + woman - man = ?'."""
        text = " + ".join(self.positives)
        if self.negatives:
            text += " - " + " - ".join(self.negatives)
        return f"{text} = ?"


def resolve(positives: Sequence[ArrayLike], negatives: Sequence[ArrayLike] = ()) -> np.ndarray:
    """
    Sum all positive vectors and subtract all negative vectors.

    The result is not normalized.

    Raises:
        EmptyPositiveSet: If positives is empty
        DimensionMismatch: If the vectors differ in length
    """
    if len(positives) == 0:
        raise EmptyPositiveSet("Analogy needs at least one positive word")

    pos = [as_vector(v) for v in positives]
    neg = [as_vector(v) for v in negatives]

    dim = len(pos[0])
    for vector in pos + neg:
        if len(vector) != dim:
            raise DimensionMismatch(dim, len(vector))

    result = pos[0].copy()
    for vector in pos[1:]:
        result += vector
    for vector in neg:
        result -= vector

    return result


def rank_similar(
    target: ArrayLike,
    candidates: Sequence[tuple[str, ArrayLike]]
) -> list[tuple[str, float]]:
    """
    Rank candidates by descending cosine similarity to target.

    Ties keep the candidates' input order. Filtering the query's own words is
    left to the caller (see filter_candidates).

    Returns:
        List of (label, similarity)
    """
    scored = [(label, cosine_similarity(target, vector)) for label, vector in candidates]
    # Parallel vectors can differ in the last few bits; rounding makes them tie,
    # and sorted() is stable, so ties keep input order
    return sorted(scored, key=lambda item: -round(item[1], SIMILARITY_DECIMALS))


def filter_candidates(words: Iterable[str], query: AnalogyQuery) -> list[str]:
    """Drop words that already appear in the query, keeping order and uniqueness."""
    excluded = set(query.words)
    seen = set()
    kept = []
    for word in words:
        if word in excluded or word in seen:
            continue
        seen.add(word)
        kept.append(word)
    return kept
