"""
Candidate pattern produced by the generator.
"""

from dataclasses import dataclass
from typing import FrozenSet


@dataclass(frozen=True)
class Candidate:
    """
    Scored candidate pattern.

    Attributes
    ----------
    pattern : frozenset of int
        Item ids of the pattern
    support : int
        Number of transactions containing the pattern
    score : float
        Priority assigned by the generator's score function
    """
    pattern: FrozenSet[int]
    support: int
    score: float = 0.0

    def frequency(self, data_size: int) -> float:
        """Empirical frequency ``support / data_size``."""
        return self.support / data_size if data_size else 0.0

    def __repr__(self) -> str:
        return (
            f"Candidate(pattern={sorted(self.pattern)}, "
            f"support={self.support}, score={self.score:.4f})"
        )
