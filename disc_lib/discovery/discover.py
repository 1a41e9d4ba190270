"""
Greedy pattern set discovery.

Orchestrates: Summary → Model → Candidate Generator → Significance Test

Design principles:
- Collaborator-agnostic: the model and generator are used only through
  DistributionProtocol and CandidateGeneratorProtocol
- Every stop is a normal outcome recorded as a StopReason, never an exception
- Collaborator failures propagate to the caller uncaught
- Loop state lives in an explicit DiscoveryState threaded through the steps
"""

import time
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from disc_lib.candidates.slim_generator import SlimGenerator
from disc_lib.config_schemas import DEFAULT_SETTINGS, MiningSettings
from disc_lib.discovery.singletons import insert_missing_singletons
from disc_lib.distribution.factory import make_distribution
from disc_lib.interfaces.protocols import (
    CandidateGeneratorProtocol,
    DistributionProtocol,
    ExpectedGainFunction,
    ProgressObserver,
    empty_callback,
)
from disc_lib.logging_config import InstrumentedLogger, get_logger
from disc_lib.models.candidate import Candidate
from disc_lib.models.result import Composition, PatternsetResult, ProgressSnapshot, StopReason
from disc_lib.scorers.encoding import additional_cost_bic, encoding_length_sdm
from disc_lib.scorers.significance import heuristic_expected_gain, is_candidate_significant

logger = get_logger(__name__)
instrumented = InstrumentedLogger(__name__)

GeneratorFactory = Callable[..., CandidateGeneratorProtocol]


# =============================================================================
# Loop state
# =============================================================================


@dataclass
class DiscoveryState:
    """
    Mutable search state of one discovery run.

    Owned by discover_patternset and passed to each step helper; nothing
    outside the run holds a reference to it.
    """
    result: PatternsetResult
    model: DistributionProtocol
    generator: CandidateGeneratorProtocol
    cfg: MiningSettings
    bic_cost: float
    patience: int
    start_time: float
    items_used: int = 0
    iterations: int = 0
    stop_reason: Optional[StopReason] = None

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time


# =============================================================================
# Model initialization
# =============================================================================


def initialize_model(result: PatternsetResult, cfg: MiningSettings) -> DistributionProtocol:
    """
    Build and fit the model for ``result`` and record the baseline encoding.

    Every summary entry is inserted without re-fitting; the model is then
    fitted once. ``result.initial_encoding`` is set from the fitted model.

    Parameters
    ----------
    result : PatternsetResult
        Run state with data and a (possibly empty) summary
    cfg : MiningSettings
        Run settings

    Returns
    -------
    DistributionProtocol
        The fitted model, also stored on ``result.model``
    """
    if cfg.with_singletons:
        insert_missing_singletons(result.data, result.summary)

    model = make_distribution(result, cfg)
    for entry in result.summary:
        model.insert(entry.frequency, entry.pattern, estimate=False)
    model.estimate_model()

    result.model = model
    result.initial_encoding = encoding_length_sdm(model, result.data, result.summary, cfg.use_bic)
    return model


# =============================================================================
# Loop steps
# =============================================================================


def _accept(
    state: DiscoveryState,
    candidate: Candidate,
    score_fn: Callable[[Candidate], float],
    callback: ProgressObserver,
) -> None:
    result = state.result
    frequency = candidate.frequency(result.data.size())

    state.model.insert(frequency, candidate.pattern)
    result.summary.insert(frequency, candidate.pattern)
    state.items_used += 1
    state.patience = max(2 * state.patience, state.cfg.max_patience)

    model = state.model
    state.generator.add_next(candidate, score_fn)
    state.generator.prune(lambda c: c.score <= 0 or not model.is_item_allowed(c.pattern))

    logger.debug(
        "candidate_accepted",
        pattern=sorted(candidate.pattern),
        support=candidate.support,
        frequency=frequency,
        items_used=state.items_used,
    )

    result.items_used = state.items_used
    result.iterations = state.iterations
    callback(ProgressSnapshot.of(result))


def _reject(state: DiscoveryState) -> bool:
    """Consume one unit of patience; True when patience is spent."""
    state.patience = max(state.patience - 1, 0)
    return state.patience == 0


def _budget_exhausted(state: DiscoveryState) -> Optional[StopReason]:
    cfg = state.cfg
    if cfg.max_time is not None and state.elapsed > cfg.max_time.total_seconds():
        return StopReason.TIME_BUDGET_EXCEEDED
    if cfg.max_patternset_size is not None and state.items_used > cfg.max_patternset_size:
        return StopReason.PATTERNSET_SIZE_CAP_REACHED
    return None


def _finish(state: DiscoveryState, callback: ProgressObserver) -> PatternsetResult:
    result = state.result
    result.encoding = encoding_length_sdm(state.model, result.data, result.summary, state.cfg.use_bic)
    result.items_used = state.items_used
    result.iterations = state.iterations
    result.stop_reason = state.stop_reason
    callback(ProgressSnapshot.of(result, final=True))

    instrumented.log_run_summary(
        "discovery_stopped",
        {
            "stop_reason": state.stop_reason.value,
            "items_used": state.items_used,
            "iterations": state.iterations,
            "initial_objective": result.initial_encoding.objective,
            "objective": result.encoding.objective,
            "runtime_seconds": round(state.elapsed, 3),
        },
    )
    return result


# =============================================================================
# Discovery
# =============================================================================


def discover_patternset(
    result: PatternsetResult,
    cfg: MiningSettings = DEFAULT_SETTINGS,
    expected_gain: Optional[ExpectedGainFunction] = None,
    callback: Optional[ProgressObserver] = None,
    generator_factory: GeneratorFactory = SlimGenerator,
) -> PatternsetResult:
    """
    Greedily grow ``result.summary`` with significant patterns.

    The result is mutated in place and returned; the caller must not use the
    data, summary or model elsewhere while the run is in progress.

    Parameters
    ----------
    result : PatternsetResult
        Data and optional pre-seeded summary
    cfg : MiningSettings
        Budgets, thresholds and cost mode
    expected_gain : callable, optional
        ``(result, candidate, bic_cost) -> float`` used to rank candidates;
        defaults to heuristic_expected_gain
    callback : callable, optional
        Progress observer, called with a ProgressSnapshot after every
        acceptance and once at exit
    generator_factory : callable
        Builds the candidate generator from
        ``(data, min_support, max_pattern_size, score_fn)``

    Returns
    -------
    PatternsetResult
        The same object with summary, model, encodings and stop reason set
    """
    assert result.data.dim != 0, "cannot discover patterns in zero-dimensional data"

    callback = callback or empty_callback
    if expected_gain is None:
        expected_gain = partial(heuristic_expected_gain, use_bic=cfg.use_bic)

    model = initialize_model(result, cfg)
    bic_cost = additional_cost_bic(result)

    def score_fn(candidate: Candidate) -> float:
        return expected_gain(result, candidate, bic_cost)

    generator = generator_factory(result.data, cfg.min_support, cfg.max_pattern_size, score_fn)
    state = DiscoveryState(
        result=result,
        model=model,
        generator=generator,
        cfg=cfg,
        bic_cost=bic_cost,
        patience=cfg.max_patience,
        start_time=time.monotonic(),
    )

    instrumented.log_data_snapshot(
        "discovery_started",
        result.data.to_matrix(),
        metadata={
            "n_transactions": result.data.size(),
            "dim": result.data.dim,
            "n_initial_patterns": len(result.summary),
            "use_bic": cfg.use_bic,
            "alpha": cfg.alpha,
            "initial_objective": result.initial_encoding.objective,
        },
    )

    for _ in range(cfg.max_iteration):
        state.iterations += 1

        if not generator.has_next():
            state.stop_reason = StopReason.EXHAUSTED
            break

        candidate = generator.next()
        if (
            candidate is not None
            and model.is_item_allowed(candidate.pattern)
            and is_candidate_significant(result, candidate, model, cfg, bic_cost)
        ):
            _accept(state, candidate, score_fn, callback)
        elif _reject(state):
            state.stop_reason = StopReason.PATIENCE_EXPIRED
            break

        reason = _budget_exhausted(state)
        if reason is not None:
            state.stop_reason = reason
            break
    else:
        state.stop_reason = StopReason.ITERATION_CAP_REACHED

    return _finish(state, callback)


def discover_composition(
    composition: Composition,
    cfg: MiningSettings = DEFAULT_SETTINGS,
    callback: Optional[ProgressObserver] = None,
) -> Composition:
    """
    Run single-component discovery on a composition's data and summary.

    Partition metadata (``frequency``, ``assignment``) is left untouched.
    """
    result = PatternsetResult(
        data=composition.data,
        summary=composition.summary,
        model=composition.model,
        initial_encoding=composition.initial_encoding,
        encoding=composition.encoding,
    )
    result = discover_patternset(result, cfg, callback=callback)

    composition.data = result.data
    composition.summary = result.summary
    composition.model = result.model
    composition.initial_encoding = result.initial_encoding
    composition.encoding = result.encoding
    composition.stop_reason = result.stop_reason
    return composition
