"""
EmbeddingBatch: ordered (label, vector) pairs sharing one dimension.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from vector_muse.core.errors import DimensionMismatch, EmptyInput
from vector_muse.core.vector_math import as_vector


@dataclass(frozen=True)
class EmbeddingBatch:
    """
    Named, ordered collection of embeddings.

    Order equals input order and determines node layout and edge enumeration.
    The vector matrix is read-only once the batch is built.
    """
    labels: tuple[str, ...]
    vectors: np.ndarray

    def __post_init__(self):
        vectors = np.array(self.vectors, dtype=np.float64)
        if vectors.ndim != 2:
            raise ValueError(f"Expected an (n, D) matrix, got shape {vectors.shape}")
        if len(self.labels) != vectors.shape[0]:
            raise ValueError(
                f"{len(self.labels)} labels for {vectors.shape[0]} vectors"
            )
        vectors.setflags(write=False)
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(self, "vectors", vectors)

    @classmethod
    def from_pairs(cls, pairs: Sequence[tuple[str, Sequence[float]]]) -> "EmbeddingBatch":
        """
        Build a batch from (label, vector) pairs.

        Raises:
            EmptyInput: If no pairs are given
            DimensionMismatch: If vectors differ in length
        """
        if not pairs:
            raise EmptyInput("Cannot build an empty batch")

        labels = []
        rows = []
        for label, vector in pairs:
            row = as_vector(vector)
            if rows and len(row) != len(rows[0]):
                raise DimensionMismatch(len(rows[0]), len(row))
            labels.append(str(label))
            rows.append(row)

        return cls(labels=tuple(labels), vectors=np.vstack(rows))

    @property
    def dimension(self) -> int:
        return self.vectors.shape[1]

    def __len__(self) -> int:
        return len(self.labels)

    def __iter__(self) -> Iterator[tuple[str, np.ndarray]]:
        return iter(zip(self.labels, self.vectors))

    def vector(self, label: str) -> np.ndarray:
        """Get the vector for a label (first match)."""
        try:
            return self.vectors[self.labels.index(label)]
        except ValueError:
            raise KeyError(f"Label not found: {label}") from None

    def items(self) -> list[tuple[str, np.ndarray]]:
        return list(self)
