"""
Shared fixtures for disc_lib tests.
"""

from typing import Callable, List, Optional

import numpy as np
import pytest

from disc_lib.models.candidate import Candidate
from disc_lib.models.dataset import Dataset


def make_pair_data(n_pairs: int = 10, n_rows: int = 2000) -> Dataset:
    """
    Disjoint item pairs (2i, 2i+1); row r holds pair r % n_pairs.

    One visit in ten keeps only the first item and one only the second, so
    no pair is perfectly deterministic.
    """
    rows = []
    for r in range(n_rows):
        i, visit = r % n_pairs, (r // n_pairs) % 10
        if visit == 3:
            rows.append([2 * i])
        elif visit == 7:
            rows.append([2 * i + 1])
        else:
            rows.append([2 * i, 2 * i + 1])
    return Dataset.from_transactions(rows)


def make_correlated_data(n_rows: int = 600) -> Dataset:
    """
    Items 0-2 occur together in every third row and 3-4 in every fifth, with
    sparse solo occurrences; 5 and 6 follow unrelated cycles.
    """
    rows = []
    for r in range(n_rows):
        items = set()
        if r % 3 == 0:
            items.update([0, 1, 2])
        for item, period in ((0, 11), (1, 13), (2, 17), (3, 19), (4, 23)):
            if r % period == 0:
                items.add(item)
        if r % 5 == 0:
            items.update([3, 4])
        if r % 2 == 0:
            items.add(5)
        if r % 7 == 0:
            items.add(6)
        rows.append(sorted(items))
    return Dataset.from_transactions(rows)


def make_independent_data(n_rows: int = 400) -> Dataset:
    """Two items whose pair frequency equals the product of their marginals."""
    rows = np.arange(n_rows)
    a = rows % 2 == 1
    b = (rows // 2) % 2 == 1
    return Dataset.from_matrix(np.column_stack([a, b]))


class StubGenerator:
    """Generator replaying a fixed candidate sequence."""

    def __init__(self, candidates: List[Optional[Candidate]], repeat: bool = False):
        self._candidates = list(candidates)
        self._repeat = repeat
        self._position = 0
        self.accepted: List[Candidate] = []
        self.pruned = 0

    def has_next(self) -> bool:
        return self._repeat or self._position < len(self._candidates)

    def next(self) -> Optional[Candidate]:
        c = self._candidates[self._position % len(self._candidates)]
        self._position += 1
        return c

    def add_next(self, accepted: Candidate, score_fn: Callable[[Candidate], float]) -> None:
        self.accepted.append(accepted)

    def prune(self, predicate: Callable[[Candidate], bool]) -> None:
        self.pruned += 1


def stub_factory(generator: StubGenerator):
    """Generator factory ignoring its arguments and returning ``generator``."""
    def factory(data, min_support, max_pattern_size, score_fn):
        return generator
    return factory


class FixedModel:
    """Model stub predicting the same frequency for every pattern."""

    def __init__(self, mu: float):
        self.mu = mu

    def expected_frequency(self, pattern) -> float:
        return self.mu


@pytest.fixture
def pair_data() -> Dataset:
    return make_pair_data()


@pytest.fixture
def correlated_data() -> Dataset:
    return make_correlated_data()


@pytest.fixture
def independent_data() -> Dataset:
    return make_independent_data()


@pytest.fixture
def small_data() -> Dataset:
    """Three frequent items; pair {0, 1} dominant."""
    return Dataset.from_transactions([[0, 1, 2]] * 5 + [[0, 1]] * 3 + [[3]] * 2)
