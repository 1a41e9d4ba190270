"""
Description length (encoding) functions.

Pure functions - no I/O operations.
All code lengths are in nats; lower total description length is better.

Functions:
- universal_integer_length: Rissanen's universal code for positive integers
- item_code_lengths: Code length of every item from its singleton frequency
- pattern_cost: Code length of one pattern (size, items, support)
- model_cost: Structural cost of a whole summary (BIC or MDL)
- additional_cost_bic: Penalty of one extra free parameter
- additional_cost_mdl: Extra model cost of accepting one pattern
- data_cost: Negative log-likelihood of the data under the model
- encoding_length_sdm: Two-part description length of model plus data
"""

import math
from typing import Iterable, Optional, Union

import numpy as np

from disc_lib.constants import LOG_UNIVERSAL_CODE_CONSTANT
from disc_lib.distribution.maxent import MaxEntDistribution
from disc_lib.models.dataset import Dataset
from disc_lib.models.encoding import Encoding
from disc_lib.models.result import Composition, PatternsetResult
from disc_lib.models.summary import Summary

_LN2 = math.log(2.0)


def universal_integer_length(n: int) -> float:
    """
    Rissanen's universal code length ``L_N(n)`` for ``n >= 1``.

    L_N(n) = log2(c0) + log2(n) + log2(log2(n)) + ... (positive terms only),
    converted to nats.

    Raises:
        ValueError: If n < 1
    """
    if n < 1:
        raise ValueError(f"Universal code is defined for n >= 1, got {n}")

    bits = LOG_UNIVERSAL_CODE_CONSTANT / _LN2
    term = math.log2(n)
    while term > 0:
        bits += term
        term = math.log2(term)
    return bits * _LN2


def item_code_lengths(data: Dataset) -> np.ndarray:
    """
    Code length of every item, ``-ln(fr(i))`` with Laplace smoothing.

    Returns:
        Array of shape (dim,)
    """
    supports = data.item_supports()
    frequencies = (supports + 1.0) / (data.size() + 2.0)
    return -np.log(frequencies)


def pattern_cost(
    data: Dataset,
    pattern: Iterable[int],
    support: int,
    codes: Optional[np.ndarray] = None
) -> float:
    """
    Code length of a single pattern.

    Encodes the pattern size, each of its items, and its support:
    ``L_N(|x|) + Σ code(i) + L_N(support + 1)``.
    """
    items = sorted(pattern)
    if codes is None:
        codes = item_code_lengths(data)
    return (
        universal_integer_length(max(len(items), 1))
        + float(codes[items].sum())
        + universal_integer_length(int(support) + 1)
    )


def model_cost(data: Dataset, summary: Summary, use_bic: bool) -> float:
    """
    Structural cost of ``summary``.

    BIC: ``0.5 · |S| · ln N``.
    MDL: ``L_N(|S| + 1) + Σ pattern_cost``.
    """
    n = data.size()
    if use_bic:
        return 0.5 * len(summary) * math.log(n) if n > 1 else 0.0

    codes = item_code_lengths(data)
    total = universal_integer_length(len(summary) + 1)
    for entry in summary:
        support = int(round(entry.frequency * n))
        total += pattern_cost(data, entry.pattern, support, codes)
    return total


def additional_cost_bic(result: Union[PatternsetResult, Composition]) -> float:
    """
    BIC penalty of one free parameter, ``0.5 · ln N``.

    Constant for a run: independent of which pattern is proposed.
    """
    n = result.data.size()
    return 0.5 * math.log(n) if n > 1 else 0.0


def additional_cost_mdl(
    result: Union[PatternsetResult, Composition],
    pattern: Iterable[int],
    support: int
) -> float:
    """
    Increase of the MDL model cost when ``pattern`` joins the summary.

    Depends on the pattern (size, items, support) and on the current
    summary size, so it grows as the explicit model grows.
    """
    k = len(result.summary)
    return (
        pattern_cost(result.data, pattern, support)
        + universal_integer_length(k + 2)
        - universal_integer_length(k + 1)
    )


def data_cost(model: MaxEntDistribution, data: Dataset) -> float:
    """Negative log-likelihood of ``data`` under ``model``, in nats."""
    if data.size() == 0:
        return 0.0
    return float(-model.log_probability(data.to_matrix()).sum())


def encoding_length_sdm(
    model: MaxEntDistribution,
    data: Dataset,
    summary: Summary,
    use_bic: bool
) -> Encoding:
    """
    Two-part description length of ``model`` and ``data``.

    Pure function of ``(model, data, summary)``.

    Args:
        model: Fitted model
        data: Transactions
        summary: Patterns constraining the model
        use_bic: BIC (True) or MDL (False) structural accounting

    Returns:
        Encoding with data and model parts
    """
    return Encoding(
        of_data=data_cost(model, data),
        of_model=model_cost(data, summary, use_bic),
    )
