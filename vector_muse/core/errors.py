"""
Error taxonomy for Vector-Muse.

Math-layer errors are input-contract violations and subclass ValueError so they
fail fast. Provider and audio errors describe collaborator failures.
"""

from typing import Optional


class VectorMuseError(Exception):
    """Base class for all Vector-Muse errors."""


class DimensionMismatch(VectorMuseError, ValueError):
    """Operands (or batch members) have different vector lengths."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Dimension mismatch: expected {expected}, got {actual}")


class EmptyInput(VectorMuseError, ValueError):
    """An operation that needs at least one vector received none."""


class InsufficientSamples(VectorMuseError, ValueError):
    """Covariance needs at least two samples."""

    def __init__(self, n_samples: int, required: int = 2):
        self.n_samples = n_samples
        self.required = required
        super().__init__(
            f"Need at least {required} samples, got {n_samples}"
        )


class EmptyPositiveSet(VectorMuseError, ValueError):
    """Analogy arithmetic needs at least one positive anchor."""


class ProviderError(VectorMuseError):
    """
    The embedding provider failed (missing credential, rate limit, network).

    Attributes:
        status: HTTP status code when one is known, else None
        message: Human-readable description
    """

    def __init__(self, status: Optional[int], message: str):
        self.status = status
        self.message = message
        prefix = f"[{status}] " if status is not None else ""
        super().__init__(f"{prefix}{message}")


class FetchSuperseded(VectorMuseError):
    """A newer batch fetch replaced this one before it completed."""


class AudioUnavailable(VectorMuseError):
    """The audio device could not start or update a tone."""


class RankDeficientProjection(UserWarning):
    """Fewer usable principal components than requested; missing axes are 0."""
