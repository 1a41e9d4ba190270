"""
Factorized maximum entropy distribution over itemsets.

Items are grouped into independent factors. Within a factor the model is the
exponential family

    p(x) ∝ exp( Σ_i θ_i · [pattern_i ⊆ x] )

over all 2^width presence/absence states of the factor's items. Items that
belong to no factor are uniform (p = 0.5), the unconstrained maximum entropy
choice. Inserting a pattern that spans several factors merges them; because
factors are independent, the merged factor starts from the exact product of
its parts and only the new constraint has to be fitted.

Fitting is coordinate-wise iterative scaling: each update sets one θ_i so that
its constraint holds exactly, sweeping until every constraint is met within
tolerance.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from disc_lib.constants import (
    FIT_TOLERANCE,
    MAX_FIT_SWEEPS,
    MIN_TARGET_EPS,
    MAX_FACTOR_WIDTH_LIMIT,
    UNCOVERED_ITEM_PROBABILITY,
)
from disc_lib.logging_config import get_logger

logger = get_logger(__name__)


class Factor:
    """
    Dense maximum entropy model over a small block of items.

    State ``s`` has bit ``k`` set when ``items[k]`` is present.
    """

    def __init__(self, items: Iterable[int], dtype: type = np.float64):
        self.items: Tuple[int, ...] = tuple(sorted(items))
        if len(self.items) > MAX_FACTOR_WIDTH_LIMIT:
            raise ValueError(
                f"Factor width {len(self.items)} exceeds limit {MAX_FACTOR_WIDTH_LIMIT}"
            )
        self.dtype = dtype
        self._position = {item: k for k, item in enumerate(self.items)}
        self._states = np.arange(1 << len(self.items), dtype=np.int64)

        self.patterns: List[FrozenSet[int]] = []
        self.targets: List[float] = []
        self.theta = np.zeros(0, dtype=dtype)
        self._features = np.zeros((0, len(self._states)), dtype=bool)
        self._allowed = np.ones(len(self._states), dtype=bool)
        self.probs = np.full(len(self._states), 1.0 / len(self._states), dtype=dtype)

    @classmethod
    def merge(cls, factors: Sequence['Factor'], extra_items: Iterable[int], dtype: type) -> 'Factor':
        """Join independent factors (plus fresh uniform items) into one."""
        items = set(extra_items)
        for f in factors:
            items.update(f.items)

        merged = cls(items, dtype)
        for f in factors:
            for frequency, pattern in zip(f.targets, f.patterns):
                merged._append(frequency, pattern)
        if factors:
            merged.theta = np.concatenate([f.theta for f in factors]).astype(dtype)
        merged._refresh()
        return merged

    @property
    def width(self) -> int:
        return len(self.items)

    @property
    def n_composite(self) -> int:
        """Number of constraints on more than one item."""
        return sum(1 for p in self.patterns if len(p) > 1)

    def _mask(self, pattern: Iterable[int]) -> int:
        m = 0
        for item in pattern:
            m |= 1 << self._position[item]
        return m

    def _contains(self, pattern: Iterable[int]) -> np.ndarray:
        mask = self._mask(pattern)
        return (self._states & mask) == mask

    def _append(self, frequency: float, pattern: FrozenSet[int]) -> None:
        self._features = np.vstack([self._features, self._contains(pattern)[None, :]])
        self.patterns.append(pattern)
        self.targets.append(float(frequency))
        self.theta = np.append(self.theta, self.dtype(0)).astype(self.dtype)

    def add(self, frequency: float, pattern: FrozenSet[int]) -> None:
        """Add a constraint with a neutral parameter (does not re-fit)."""
        self._append(frequency, pattern)
        self._refresh()

    def _refresh(self) -> None:
        """Recompute state probabilities from θ."""
        if len(self.theta) == 0:
            self.probs = np.full(len(self._states), 1.0 / len(self._states), dtype=self.dtype)
            return
        logits = self.theta @ self._features.astype(self.dtype)
        logits = np.where(self._allowed, logits, -np.inf)
        logits = logits - logits.max()
        probs = np.exp(logits)
        self.probs = probs / probs.sum()

    def expectations(self) -> np.ndarray:
        """Model expectation of every constraint."""
        return self._features.astype(self.dtype) @ self.probs

    def _support_mask(self) -> np.ndarray:
        """
        States that can carry probability mass.

        When ``p ⊂ q`` and both have the same target frequency, no transaction
        holds ``p`` without ``q``, so those states get probability zero.
        """
        allowed = np.ones(len(self._states), dtype=bool)
        for i, p in enumerate(self.patterns):
            for j, q in enumerate(self.patterns):
                if p < q and self.targets[j] >= self.targets[i]:
                    allowed &= ~(self._features[i] & ~self._features[j])
        return allowed

    def fit(self, tolerance: float, max_sweeps: int, eps: float) -> int:
        """
        Fit θ by coordinate-wise iterative scaling.

        Returns
        -------
        int
            Number of sweeps performed
        """
        if not self.patterns:
            return 0

        self._allowed = self._support_mask()
        self._refresh()

        targets = np.clip(np.asarray(self.targets, dtype=self.dtype), eps, 1 - eps)
        tiny = np.finfo(self.dtype).tiny

        for sweep in range(1, max_sweeps + 1):
            for i in range(len(self.patterns)):
                row = self._features[i]
                q = self.probs[row].sum()
                q = min(max(q, tiny), 1 - eps)
                delta = np.log(targets[i] * (1 - q) / (q * (1 - targets[i])))
                self.theta[i] += delta

                probs = self.probs.copy()
                probs[row] *= np.exp(delta)
                self.probs = probs / probs.sum()

            # Renormalise from θ once per sweep so rounding cannot drift
            self._refresh()
            if np.max(np.abs(self.expectations() - targets)) < tolerance:
                return sweep

        logger.warning(
            "factor_fit_not_converged",
            width=self.width,
            n_constraints=len(self.patterns),
            max_violation=float(np.max(np.abs(self.expectations() - targets))),
        )
        return max_sweeps

    def marginal(self, pattern: Iterable[int]) -> float:
        """Probability that every item of ``pattern`` is present."""
        return float(self.probs[self._contains(pattern)].sum())

    def log_probability(self, matrix: np.ndarray) -> np.ndarray:
        """Natural-log probability of each row's restriction to this factor."""
        weights = np.left_shift(1, np.arange(self.width, dtype=np.int64))
        index = matrix[:, list(self.items)].astype(np.int64) @ weights
        tiny = np.finfo(self.dtype).tiny
        return np.log(np.maximum(self.probs[index], tiny)).astype(np.float64)

    def __repr__(self) -> str:
        return f"Factor(items={list(self.items)}, constraints={len(self.patterns)})"


class MaxEntDistribution:
    """
    Factorized maximum entropy model over ``dim`` binary items.

    Parameters
    ----------
    dim : int
        Size of the item universe (must be positive)
    max_factor_size : int
        Maximum composite (|pattern| > 1) constraints per factor
    max_factor_width : int
        Maximum items per factor
    dtype : type
        Numpy float type for parameters and probabilities
    tolerance : float, optional
        Largest tolerated constraint violation (default depends on dtype)
    max_sweeps : int
        Iterative scaling sweeps per fit

    Examples
    --------
    >>> model = MaxEntDistribution(dim=3)
    >>> model.insert(0.5, {0}, estimate=False)
    >>> model.insert(0.4, {1}, estimate=False)
    >>> model.estimate_model()
    >>> round(model.expected_frequency({0, 1}), 6)
    0.2
    """

    def __init__(
        self,
        dim: int,
        max_factor_size: int = 8,
        max_factor_width: int = 10,
        dtype: type = np.float64,
        tolerance: Optional[float] = None,
        max_sweeps: int = MAX_FIT_SWEEPS,
    ):
        assert dim > 0, "distribution requires a non-empty item universe"
        self.dim = dim
        self.max_factor_size = max_factor_size
        self.max_factor_width = min(max_factor_width, MAX_FACTOR_WIDTH_LIMIT)
        self.dtype = dtype
        resolution = float(np.finfo(dtype).eps)
        self.tolerance = tolerance if tolerance is not None else max(FIT_TOLERANCE, resolution * 100)
        self.target_eps = max(MIN_TARGET_EPS, resolution * 10)
        self.max_sweeps = max_sweeps

        self._factors: List[Factor] = []
        self._factor_of: Dict[int, Factor] = {}

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def factors(self) -> Tuple[Factor, ...]:
        return tuple(self._factors)

    @property
    def n_constraints(self) -> int:
        return sum(len(f.patterns) for f in self._factors)

    def _validate(self, pattern: Iterable[int]) -> FrozenSet[int]:
        items = frozenset(int(i) for i in pattern)
        if not items:
            raise ValueError("Pattern must contain at least one item")
        if min(items) < 0 or max(items) >= self.dim:
            raise ValueError(f"Pattern {sorted(items)} outside item universe of size {self.dim}")
        return items

    def _touching(self, items: Iterable[int]) -> List[Factor]:
        touching: List[Factor] = []
        for item in sorted(items):
            factor = self._factor_of.get(item)
            if factor is not None and all(factor is not f for f in touching):
                touching.append(factor)
        return touching

    def is_item_allowed(self, pattern: Iterable[int]) -> bool:
        """
        Whether ``pattern`` can still become a constraint.

        False when it is already a constraint, or when merging the factors
        it touches would exceed the width or size capacity.
        """
        items = frozenset(pattern)
        if not items or min(items) < 0 or max(items) >= self.dim:
            return False

        touching = self._touching(items)
        if any(items in f.patterns for f in touching):
            return False

        width = len(items.union(*(f.items for f in touching)))
        composite = sum(f.n_composite for f in touching) + (1 if len(items) > 1 else 0)
        return width <= self.max_factor_width and composite <= self.max_factor_size

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, frequency: float, pattern: Iterable[int], estimate: bool = True) -> None:
        """
        Add ``pattern`` with empirical ``frequency`` as a constraint.

        Raises
        ------
        ValueError
            If the pattern is invalid, duplicated, or exceeds factor capacity
        """
        items = self._validate(pattern)
        if not self.is_item_allowed(items):
            raise ValueError(
                f"Pattern {sorted(items)} is a duplicate or exceeds factor capacity "
                f"(width <= {self.max_factor_width}, size <= {self.max_factor_size})"
            )

        touching = self._touching(items)
        if len(touching) == 1 and items <= set(touching[0].items):
            factor = touching[0]
        else:
            factor = Factor.merge(touching, items, self.dtype)
            self._factors = [f for f in self._factors if all(f is not t for t in touching)]
            self._factors.append(factor)
            for item in factor.items:
                self._factor_of[item] = factor

        factor.add(frequency, items)
        if estimate:
            factor.fit(self.tolerance, self.max_sweeps, self.target_eps)

    def estimate_model(self) -> None:
        """Fit every factor (batched estimate after deferred inserts)."""
        for factor in self._factors:
            factor.fit(self.tolerance, self.max_sweeps, self.target_eps)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def expected_frequency(self, pattern: Iterable[int]) -> float:
        """Probability that a transaction contains every item of ``pattern``."""
        items = frozenset(pattern)
        probability = 1.0
        grouped: Dict[int, Tuple[Factor, List[int]]] = {}

        for item in items:
            factor = self._factor_of.get(item)
            if factor is None:
                probability *= UNCOVERED_ITEM_PROBABILITY
            else:
                grouped.setdefault(id(factor), (factor, []))[1].append(item)

        for factor, sub in grouped.values():
            probability *= factor.marginal(sub)
        return float(probability)

    def log_probability(self, matrix: np.ndarray) -> np.ndarray:
        """
        Natural-log probability of each transaction.

        Parameters
        ----------
        matrix : np.ndarray
            Boolean incidence matrix of shape (n_transactions, dim)
        """
        n_rows = matrix.shape[0]
        covered = len(self._factor_of)
        out = np.full(n_rows, (self.dim - covered) * np.log(UNCOVERED_ITEM_PROBABILITY))
        for factor in self._factors:
            out += factor.log_probability(matrix)
        return out

    def __repr__(self) -> str:
        return (
            f"MaxEntDistribution(dim={self.dim}, factors={len(self._factors)}, "
            f"constraints={self.n_constraints})"
        )
