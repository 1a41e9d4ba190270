"""
Pattern set summary.

The summary is the ordered list of accepted ``(frequency, pattern)`` pairs,
the explicit factors of the model. It only grows during a run.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class SummaryEntry:
    """Accepted pattern and its empirical frequency."""
    frequency: float
    pattern: FrozenSet[int]


class Summary:
    """
    Ordered collection of accepted patterns.

    Examples
    --------
    >>> s = Summary()
    >>> s.insert(0.5, {0, 1})
    >>> len(s), s.contains({1, 0})
    (1, True)
    """

    def __init__(self, entries: Optional[Iterable[Tuple[float, Iterable[int]]]] = None):
        self._entries: List[SummaryEntry] = []
        for frequency, pattern in entries or ():
            self.insert(frequency, pattern)

    def insert(self, frequency: float, pattern: Iterable[int]) -> None:
        """Append an accepted pattern."""
        self._entries.append(SummaryEntry(float(frequency), frozenset(int(i) for i in pattern)))

    def __iter__(self) -> Iterator[SummaryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> SummaryEntry:
        return self._entries[index]

    @property
    def patterns(self) -> List[FrozenSet[int]]:
        return [e.pattern for e in self._entries]

    @property
    def frequencies(self) -> List[float]:
        return [e.frequency for e in self._entries]

    def contains(self, pattern: Iterable[int]) -> bool:
        """Whether ``pattern`` is already in the summary."""
        key = frozenset(pattern)
        return any(e.pattern == key for e in self._entries)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the summary to a DataFrame (pattern, size, frequency)."""
        return pd.DataFrame(
            [
                {
                    "pattern": sorted(e.pattern),
                    "size": len(e.pattern),
                    "frequency": e.frequency,
                }
                for e in self._entries
            ],
            columns=["pattern", "size", "frequency"],
        )

    def __repr__(self) -> str:
        return f"Summary(n_patterns={len(self._entries)})"
