"""
Slim-style candidate generator.

Keeps a priority pool of candidate patterns. The pool is seeded with every
frequent item pair; each accepted pattern is joined with the frequent
singletons and previously accepted patterns to grow the frontier. Scores are
refreshed whenever the pool is pruned, since they depend on the model.
"""

import heapq
import itertools
from dataclasses import replace
from typing import Callable, FrozenSet, List, Optional, Set, Tuple

import numpy as np

from disc_lib.interfaces.protocols import ScoreFunction
from disc_lib.logging_config import get_logger
from disc_lib.models.candidate import Candidate
from disc_lib.models.dataset import Dataset

logger = get_logger(__name__)

# (-score, insertion order, candidate); insertion order breaks ties
_PoolEntry = Tuple[float, int, Candidate]


class SlimGenerator:
    """
    Lazy, prunable stream of scored candidate patterns.

    Parameters
    ----------
    data : Dataset
        Transactions to mine
    min_support : int
        Minimum support of any proposed candidate
    max_pattern_size : int
        Maximum number of items in a candidate
    score_fn : callable
        Maps a Candidate to its priority

    Examples
    --------
    >>> gen = SlimGenerator(data, min_support=2, max_pattern_size=5, score_fn=score)
    >>> while gen.has_next():
    ...     c = gen.next()
    """

    def __init__(
        self,
        data: Dataset,
        min_support: int,
        max_pattern_size: int,
        score_fn: ScoreFunction,
    ):
        self.data = data
        self.min_support = min_support
        self.max_pattern_size = max_pattern_size
        self._score_fn = score_fn

        self._matrix = data.to_matrix()
        self._pool: List[_PoolEntry] = []
        self._counter = itertools.count()
        self._seen: Set[FrozenSet[int]] = set()
        self._base: List[FrozenSet[int]] = []

        self._seed()

    def _seed(self) -> None:
        """Pool every item pair with support >= min_support."""
        supports = self.data.item_supports()
        frequent = np.flatnonzero(supports >= self.min_support)
        self._base = [frozenset([int(i)]) for i in frequent]
        self._seen.update(self._base)

        if self.max_pattern_size < 2 or len(frequent) < 2:
            return

        columns = self._matrix[:, frequent].astype(np.int64)
        co_occurrence = columns.T @ columns
        rows, cols = np.triu_indices(len(frequent), k=1)
        for r, c in zip(rows, cols):
            support = int(co_occurrence[r, c])
            if support >= self.min_support:
                self._push(frozenset([int(frequent[r]), int(frequent[c])]), support)

        logger.debug("candidate_pool_seeded", n_singletons=len(frequent), n_candidates=len(self._pool))

    def _push(self, pattern: FrozenSet[int], support: int) -> None:
        self._seen.add(pattern)
        candidate = Candidate(pattern=pattern, support=support)
        candidate = replace(candidate, score=float(self._score_fn(candidate)))
        heapq.heappush(self._pool, (-candidate.score, next(self._counter), candidate))

    # ------------------------------------------------------------------
    # Generator capability
    # ------------------------------------------------------------------

    def has_next(self) -> bool:
        """Whether any candidate is left in the pool."""
        return bool(self._pool)

    def next(self) -> Optional[Candidate]:
        """
        Pop the best candidate.

        Returns None when the best remaining score is not positive (nothing
        viable this round); the entry is still consumed.
        """
        if not self._pool:
            return None
        _, _, candidate = heapq.heappop(self._pool)
        if candidate.score <= 0:
            return None
        return candidate

    def add_next(self, accepted: Candidate, score_fn: ScoreFunction) -> None:
        """
        Expand the frontier from an accepted candidate.

        Joins ``accepted.pattern`` with every frequent singleton and every
        previously accepted pattern; joins that were proposed before, are too
        large, or are infrequent are skipped.
        """
        self._score_fn = score_fn
        accepted_cover = self.data.cover(accepted.pattern)

        n_added = 0
        for base in self._base:
            joined = accepted.pattern | base
            if joined == accepted.pattern or joined in self._seen:
                continue
            if len(joined) > self.max_pattern_size:
                continue
            support = int((accepted_cover & self.data.cover(base)).sum())
            if support >= self.min_support:
                self._push(joined, support)
                n_added += 1

        self._seen.add(accepted.pattern)
        self._base.append(accepted.pattern)
        logger.debug("frontier_expanded", pattern=sorted(accepted.pattern), n_added=n_added)

    def prune(self, predicate: Callable[[Candidate], bool]) -> None:
        """
        Re-score the pool with the current score function, then drop every
        candidate for which ``predicate`` is true.
        """
        kept: List[_PoolEntry] = []
        for _, order, candidate in self._pool:
            rescored = replace(candidate, score=float(self._score_fn(candidate)))
            if not predicate(rescored):
                kept.append((-rescored.score, order, rescored))

        heapq.heapify(kept)
        self._pool = kept

    def count_current_candidates(self) -> int:
        return len(self._pool)

    def __repr__(self) -> str:
        return f"SlimGenerator(pool={len(self._pool)}, base={len(self._base)})"
