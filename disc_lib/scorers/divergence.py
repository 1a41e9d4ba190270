"""
Information divergence and gain scoring.

Pure functions - no I/O operations.
All quantities are in nats.

Functions:
- kl1: Two-point (Bernoulli) Kullback-Leibler divergence
- priority_score: Per-transaction gain estimate with noise deadband
- single_component_expected_gain: Priority score of a candidate under a model
- acceptance_gain: Aggregate gain used by the significance test
- nhc_pvalue: No-hypercompression confidence for a (cost, gain) pair
"""

import numpy as np
from scipy.special import xlogy

from disc_lib.constants import GAIN_DEADBAND, MAX_DIVERGENCE, PROBABILITY_CLAMP
from disc_lib.interfaces.protocols import DistributionProtocol
from disc_lib.models.candidate import Candidate


def kl1(p: float, q: float) -> float:
    """
    Kullback-Leibler divergence between Bernoulli(p) and Bernoulli(q).

    D(p, q) = p·ln(p/q) + (1-p)·ln((1-p)/(1-q))

    Total over [0, 1] x [0, 1]: ``0·ln 0`` is taken as 0, ``q`` is clamped
    away from 0 and 1, and the result is clamped into [0, MAX_DIVERGENCE].

    Args:
        p: Empirical probability
        q: Model probability

    Returns:
        Divergence in nats (finite, non-negative)
    """
    p = min(max(float(p), 0.0), 1.0)
    q = min(max(float(q), PROBABILITY_CLAMP), 1.0 - PROBABILITY_CLAMP)

    d = xlogy(p, p / q) + xlogy(1.0 - p, (1.0 - p) / (1.0 - q))

    if not np.isfinite(d):
        return MAX_DIVERGENCE
    return float(min(max(d, 0.0), MAX_DIVERGENCE))


def priority_score(fr: float, mu: float) -> float:
    """
    Per-transaction information gain estimate.

    Zero inside the deadband ``|fr - mu| < GAIN_DEADBAND``, otherwise
    ``fr · D(fr, mu)``.

    Args:
        fr: Empirical frequency of the pattern
        mu: Frequency the model expects

    Returns:
        Non-negative score
    """
    if abs(fr - mu) < GAIN_DEADBAND:
        return 0.0
    return fr * kl1(fr, mu)


def single_component_expected_gain(
    data_size: int,
    candidate: Candidate,
    model: DistributionProtocol
) -> float:
    """
    Priority score of ``candidate`` under ``model``.

    Args:
        data_size: Number of transactions
        candidate: Candidate with support
        model: Model answering expected_frequency

    Returns:
        Per-transaction gain estimate
    """
    fr = candidate.support / data_size
    mu = model.expected_frequency(candidate.pattern)
    return priority_score(fr, mu)


def acceptance_gain(
    data_size: int,
    candidate: Candidate,
    model: DistributionProtocol
) -> float:
    """
    Aggregate information gain of ``candidate``: ``D(fr, mu) · support``.

    Comparable directly with a structural cost in nats.
    """
    fr = candidate.support / data_size
    mu = model.expected_frequency(candidate.pattern)
    return kl1(fr, mu) * candidate.support


def nhc_pvalue(cost: float, gain: float) -> float:
    """
    Confidence that ``gain`` is not explained by ``cost`` alone.

    By the no-hypercompression inequality, a code shorter by ``k`` nats than
    the null code arises by chance with probability at most ``exp(-k)``.
    Returns ``1 - exp(-(gain - cost))`` clipped into [0, 1]; 0 when the gain
    does not exceed the cost.

    Args:
        cost: Structural cost of the hypothesis (nats)
        gain: Code length saved by the hypothesis (nats)

    Returns:
        Value in [0, 1]; accept when greater than ``1 - alpha``
    """
    excess = float(gain) - float(cost)
    if not excess > 0:
        return 0.0
    return float(min(-np.expm1(-excess), 1.0))
