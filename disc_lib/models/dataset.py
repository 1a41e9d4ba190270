"""
Transactional dataset.

A dataset is an ordered collection of transactions. Each transaction holds an
itemset ("point") over the universe ``{0, ..., dim - 1}`` and an optional
label. The boolean incidence matrix is built lazily and cached; it is what
the generator, the encoding and the model consume.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Transaction:
    """Single transaction: an itemset plus an optional partition label."""
    point: FrozenSet[int]
    label: Optional[int] = None


class Dataset:
    """
    Ordered collection of transactions.

    Parameters
    ----------
    transactions : iterable of Transaction, optional
        Initial transactions
    dim : int, optional
        Size of the item universe. Defaults to ``1 + max item id``; when
        given it must cover every item in the data.

    Examples
    --------
    >>> data = Dataset.from_transactions([[0, 1], [1, 2], [0, 1, 2]])
    >>> data.size(), data.dim
    (3, 3)
    >>> data.support({0, 1})
    2
    """

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None, dim: Optional[int] = None):
        self._transactions: List[Transaction] = []
        self._declared_dim = dim
        self._max_item = -1
        self._matrix: Optional[np.ndarray] = None
        self._item_supports: Optional[np.ndarray] = None

        for t in transactions or ():
            self.insert(t.point, t.label)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_transactions(
        cls,
        transactions: Iterable[Iterable[int]],
        labels: Optional[Sequence[int]] = None,
        dim: Optional[int] = None,
    ) -> 'Dataset':
        """Build from a list of item id collections (and optional labels)."""
        transactions = list(transactions)
        if labels is not None and len(labels) != len(transactions):
            raise ValueError(
                f"Labels and transactions must have same length: {len(labels)} vs {len(transactions)}"
            )

        out = cls(dim=dim)
        for i, items in enumerate(transactions):
            out.insert(items, None if labels is None else int(labels[i]))
        return out

    @classmethod
    def from_matrix(cls, matrix: np.ndarray, labels: Optional[Sequence[int]] = None) -> 'Dataset':
        """Build from a 0/1 (or boolean) matrix of shape (n_transactions, dim)."""
        matrix = np.asarray(matrix)
        if matrix.ndim != 2:
            raise ValueError("data is not a matrix")

        rows = [np.flatnonzero(row) for row in matrix]
        return cls.from_transactions(rows, labels=labels, dim=matrix.shape[1])

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, labels: Optional[Sequence[int]] = None) -> 'Dataset':
        """
        Build from a one-hot DataFrame (one column per item).

        Column order defines item ids: column ``j`` becomes item ``j``.
        """
        return cls.from_matrix(df.to_numpy(dtype=bool), labels=labels)

    @classmethod
    def from_object(cls, x: Any, labels: Optional[Sequence[int]] = None) -> 'Dataset':
        """
        Dispatch on the input type: Dataset, DataFrame, ndarray or list.

        A Dataset is returned as is unless ``labels`` are given, in which case
        a relabelled copy is built.
        """
        if isinstance(x, Dataset):
            if labels is None:
                return x
            return cls.from_transactions([t.point for t in x], labels=labels, dim=x.dim)
        if isinstance(x, pd.DataFrame):
            return cls.from_dataframe(x, labels=labels)
        if isinstance(x, np.ndarray):
            return cls.from_matrix(x, labels=labels)
        if isinstance(x, (list, tuple)):
            return cls.from_transactions(x, labels=labels)
        raise TypeError("cannot represent the given python object as data")

    def insert(self, point: Iterable[int], label: Optional[int] = None) -> None:
        """Append a transaction."""
        items = frozenset(int(i) for i in point)
        if items and min(items) < 0:
            raise ValueError(f"Item ids must be non-negative, got {sorted(items)}")

        if items:
            self._max_item = max(self._max_item, max(items))
        if self._declared_dim is not None and self._max_item >= self._declared_dim:
            raise ValueError(f"Item {self._max_item} outside declared dimension {self._declared_dim}")

        self._transactions.append(Transaction(items, label))
        self._matrix = None
        self._item_supports = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def dim(self) -> int:
        """Size of the item universe."""
        if self._declared_dim is not None:
            return self._declared_dim
        return self._max_item + 1

    def size(self) -> int:
        """Number of transactions."""
        return len(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __getitem__(self, index: int) -> Transaction:
        return self._transactions[index]

    @property
    def labels(self) -> List[Optional[int]]:
        """Transaction labels in order (None where unlabelled)."""
        return [t.label for t in self._transactions]

    def to_matrix(self) -> np.ndarray:
        """Boolean incidence matrix of shape (size, dim), cached."""
        if self._matrix is None:
            matrix = np.zeros((len(self._transactions), self.dim), dtype=bool)
            for row, t in enumerate(self._transactions):
                if t.point:
                    matrix[row, list(t.point)] = True
            matrix.setflags(write=False)
            self._matrix = matrix
        return self._matrix

    def cover(self, pattern: Iterable[int]) -> np.ndarray:
        """Boolean mask of the transactions containing every item of ``pattern``."""
        items = sorted(pattern)
        matrix = self.to_matrix()
        if not items:
            return np.ones(len(self._transactions), dtype=bool)
        if items[-1] >= self.dim:
            return np.zeros(len(self._transactions), dtype=bool)
        return matrix[:, items].all(axis=1)

    def support(self, pattern: Iterable[int]) -> int:
        """Number of transactions containing ``pattern``."""
        return int(self.cover(pattern).sum())

    def item_supports(self) -> np.ndarray:
        """Support of every singleton, indexed by item id (cached)."""
        if self._item_supports is None:
            self._item_supports = self.to_matrix().sum(axis=0).astype(np.int64)
        return self._item_supports

    def __repr__(self) -> str:
        return f"Dataset(size={self.size()}, dim={self.dim})"
