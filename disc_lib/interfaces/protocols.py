"""
Collaborator Protocols.

Minimal interfaces the discovery loop depends on.
The bundled implementations (MaxEntDistribution, SlimGenerator) satisfy
them, but any object with the same shape can be injected.

Design principles:
- The loop only calls what is declared here
- Collaborators own their internal state; the loop never reaches into it
- Failures inside collaborators propagate to the caller
"""

from typing import Any, Callable, Iterable, Optional, Protocol, runtime_checkable

from disc_lib.models.candidate import Candidate


# =============================================================================
# Model Protocols
# =============================================================================

@runtime_checkable
class DistributionProtocol(Protocol):
    """
    Incremental probabilistic model over itemsets.

    Used by: initialize_model, discover_patternset, encoding_length_sdm
    """

    def insert(self, frequency: float, pattern: Iterable[int], estimate: bool = True) -> None:
        """Add a constraint; re-fit immediately when ``estimate`` is true."""
        ...

    def estimate_model(self) -> None:
        """Batched parameter fit."""
        ...

    def expected_frequency(self, pattern: Iterable[int]) -> float:
        """Probability that a transaction contains ``pattern``."""
        ...

    def is_item_allowed(self, pattern: Iterable[int]) -> bool:
        """Whether ``pattern`` may still be added to the model."""
        ...


# =============================================================================
# Candidate Generation Protocols
# =============================================================================

ScoreFunction = Callable[[Candidate], float]


@runtime_checkable
class CandidateGeneratorProtocol(Protocol):
    """
    Lazy, prunable stream of scored candidates.

    Constructed from ``(data, min_support, max_pattern_size, score_fn)``.
    """

    def has_next(self) -> bool:
        ...

    def next(self) -> Optional[Candidate]:
        """Best remaining candidate, or None if nothing is viable this round."""
        ...

    def add_next(self, accepted: Candidate, score_fn: ScoreFunction) -> None:
        """Expand the search frontier from an accepted candidate."""
        ...

    def prune(self, predicate: Callable[[Candidate], bool]) -> None:
        """Drop every pooled candidate for which ``predicate`` is true."""
        ...


# =============================================================================
# Callables
# =============================================================================

# (result, candidate, bic_cost) -> priority
ExpectedGainFunction = Callable[[Any, Candidate, float], float]

# Called with a ProgressSnapshot after every acceptance and once at loop exit.
ProgressObserver = Callable[[Any], None]


def empty_callback(_result: Any) -> None:
    """Default progress observer: does nothing."""
    return None

