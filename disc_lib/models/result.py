"""
Discovery result containers.

``PatternsetResult`` is the state a discovery run owns and returns: the data,
the growing summary, the model (absent until initialized) and the encoding
snapshots. ``Composition`` is the partitioned variant whose extra metadata is
carried through a run untouched.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, List, Optional, Set, Tuple

import numpy as np

from disc_lib.models.dataset import Dataset
from disc_lib.models.encoding import Encoding
from disc_lib.models.summary import Summary

if TYPE_CHECKING:
    from disc_lib.distribution.maxent import MaxEntDistribution


class StopReason(Enum):
    """
    Why a discovery run stopped.

    None of these is an error; each is a normal end of the search.

    Tags:
    - EXHAUSTED: generator has no more candidates
    - PATIENCE_EXPIRED: too many consecutive non-significant candidates
    - TIME_BUDGET_EXCEEDED: wall-clock budget spent
    - PATTERNSET_SIZE_CAP_REACHED: accepted-pattern count exceeded the cap
    - ITERATION_CAP_REACHED: configured number of iterations executed
    """
    EXHAUSTED = "exhausted"
    PATIENCE_EXPIRED = "patience_expired"
    TIME_BUDGET_EXCEEDED = "time_budget_exceeded"
    PATTERNSET_SIZE_CAP_REACHED = "patternset_size_cap_reached"
    ITERATION_CAP_REACHED = "iteration_cap_reached"


@dataclass
class PatternsetResult:
    """
    Mutable state of a single-component discovery run.

    Attributes
    ----------
    data : Dataset
        Transactions being summarized
    summary : Summary
        Accepted (frequency, pattern) pairs; may be pre-seeded
    model : MaxEntDistribution, optional
        None until the model is initialized
    initial_encoding : Encoding, optional
        Description length right after model initialization
    encoding : Encoding, optional
        Description length at the end of the run
    items_used : int
        Patterns accepted by the last run
    iterations : int
        Loop iterations executed by the last run
    stop_reason : StopReason, optional
        Which budget ended the last run
    """
    data: Dataset = field(default_factory=Dataset)
    summary: Summary = field(default_factory=Summary)
    model: Optional['MaxEntDistribution'] = None
    initial_encoding: Optional[Encoding] = None
    encoding: Optional[Encoding] = None

    items_used: int = 0
    iterations: int = 0
    stop_reason: Optional[StopReason] = None

    @property
    def has_model(self) -> bool:
        return self.model is not None

    def require_model(self) -> 'MaxEntDistribution':
        """Return the model, failing fast when it has not been initialized."""
        if self.model is None:
            raise RuntimeError("Model has not been initialized")
        return self.model

    def __repr__(self) -> str:
        objective = f"{self.encoding.objective:.4f}" if self.encoding else "n/a"
        reason = self.stop_reason.value if self.stop_reason else "not run"
        return (
            f"PatternsetResult(data={self.data!r}, patterns={len(self.summary)}, "
            f"objective={objective}, stop={reason})"
        )


@dataclass(frozen=True)
class ProgressSnapshot:
    """
    Read-only view of a run handed to the progress observer.

    ``encoding`` and ``stop_reason`` are only set on the final call.
    """
    patterns: Tuple[FrozenSet[int], ...]
    frequencies: Tuple[float, ...]
    items_used: int
    iterations: int
    initial_encoding: Optional[Encoding]
    encoding: Optional[Encoding] = None
    stop_reason: Optional[StopReason] = None

    @classmethod
    def of(cls, result: PatternsetResult, final: bool = False) -> 'ProgressSnapshot':
        return cls(
            patterns=tuple(result.summary.patterns),
            frequencies=tuple(result.summary.frequencies),
            items_used=result.items_used,
            iterations=result.iterations,
            initial_encoding=result.initial_encoding,
            encoding=result.encoding if final else None,
            stop_reason=result.stop_reason if final else None,
        )


@dataclass
class Composition:
    """
    Partitioned discovery state.

    ``data`` carries per-transaction partition labels. ``frequency``
    (partitions x patterns) and ``assignment`` (pattern indices per partition)
    are partition metadata maintained by partition-aware strategies; single
    component discovery leaves them as they are.
    """
    data: Dataset = field(default_factory=Dataset)
    summary: Summary = field(default_factory=Summary)
    model: Optional['MaxEntDistribution'] = None
    initial_encoding: Optional[Encoding] = None
    encoding: Optional[Encoding] = None

    frequency: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    assignment: List[Set[int]] = field(default_factory=list)

    stop_reason: Optional[StopReason] = None
