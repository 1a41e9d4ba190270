"""
Candidate significance test and default ranking heuristic.

Two different gains are used and must stay separate:
- the priority score (per transaction, with deadband) ranks candidates
- the acceptance gain (divergence times support) decides acceptance
"""

from typing import Union

from disc_lib.config_schemas import MiningSettings
from disc_lib.interfaces.protocols import DistributionProtocol
from disc_lib.models.candidate import Candidate
from disc_lib.models.result import Composition, PatternsetResult
from disc_lib.scorers.divergence import (
    acceptance_gain,
    nhc_pvalue,
    single_component_expected_gain,
)
from disc_lib.scorers.encoding import additional_cost_mdl


def structural_cost(
    result: Union[PatternsetResult, Composition],
    candidate: Candidate,
    use_bic: bool,
    bic_cost: float
) -> float:
    """Cost of adding ``candidate``: the run constant under BIC, else its MDL cost."""
    if use_bic:
        return bic_cost
    return additional_cost_mdl(result, candidate.pattern, candidate.support)


def is_candidate_significant(
    result: Union[PatternsetResult, Composition],
    candidate: Candidate,
    model: DistributionProtocol,
    config: MiningSettings,
    bic_cost: float
) -> bool:
    """
    Decide whether ``candidate`` should become a model factor.

    Computes the aggregate gain ``g = D(fr, mu) · support`` and the
    structural cost ``r`` and accepts iff ``nhc_pvalue(r, g) > 1 - alpha``.

    Args:
        result: Current run state (data size, summary size)
        candidate: Candidate to test
        model: Current model
        config: Settings (alpha, use_bic)
        bic_cost: Run-constant BIC penalty

    Returns:
        True if the candidate is significant
    """
    g = acceptance_gain(result.data.size(), candidate, model)
    r = structural_cost(result, candidate, config.use_bic, bic_cost)
    return nhc_pvalue(r, g) > 1.0 - config.alpha


def heuristic_expected_gain(
    result: Union[PatternsetResult, Composition],
    candidate: Candidate,
    bic_cost: float,
    use_bic: bool
) -> float:
    """
    Default generator ranking: ``N · priority_score - structural_cost``.

    Candidates whose estimated gain does not pay for their cost score <= 0
    and are pruned from the pool.
    """
    n = result.data.size()
    gain = single_component_expected_gain(n, candidate, result.require_model())
    return gain * n - structural_cost(result, candidate, use_bic, bic_cost)
