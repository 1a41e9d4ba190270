"""
Tests for description length functions.
"""

import math

import numpy as np
import pytest
from hypothesis import given, strategies as st, settings

from disc_lib.constants import LOG_UNIVERSAL_CODE_CONSTANT
from disc_lib.distribution.maxent import MaxEntDistribution
from disc_lib.models.dataset import Dataset
from disc_lib.models.result import PatternsetResult
from disc_lib.models.summary import Summary
from disc_lib.scorers.encoding import (
    additional_cost_bic,
    additional_cost_mdl,
    data_cost,
    encoding_length_sdm,
    item_code_lengths,
    model_cost,
    universal_integer_length,
)


def singleton_summary(data: Dataset) -> Summary:
    n = data.size()
    supports = data.item_supports()
    return Summary((supports[i] / n, [i]) for i in range(data.dim))


class TestUniversalCode:
    """Rissanen's universal integer code."""

    def test_one_costs_the_normalising_constant(self):
        assert universal_integer_length(1) == pytest.approx(LOG_UNIVERSAL_CODE_CONSTANT)

    def test_two(self):
        assert universal_integer_length(2) == pytest.approx(LOG_UNIVERSAL_CODE_CONSTANT + math.log(2))

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            universal_integer_length(0)

    @given(n=st.integers(min_value=1, max_value=10**6))
    @settings(max_examples=100, deadline=None)
    def test_non_decreasing(self, n):
        assert universal_integer_length(n + 1) >= universal_integer_length(n)


class TestCosts:
    """Structural costs under BIC and MDL."""

    def test_item_codes_are_positive(self, small_data):
        codes = item_code_lengths(small_data)
        assert codes.shape == (small_data.dim,)
        assert np.all(codes > 0)

    def test_bic_model_cost(self, pair_data):
        summary = singleton_summary(pair_data)
        expected = 0.5 * len(summary) * math.log(pair_data.size())
        assert model_cost(pair_data, summary, use_bic=True) == pytest.approx(expected)

    def test_bic_additional_cost_is_one_parameter(self, pair_data):
        result = PatternsetResult(data=pair_data)
        assert additional_cost_bic(result) == pytest.approx(0.5 * math.log(pair_data.size()))

    def test_mdl_additional_cost_matches_model_cost_increase(self, pair_data):
        summary = singleton_summary(pair_data)
        result = PatternsetResult(data=pair_data, summary=summary)
        support = pair_data.support({0, 1})

        before = model_cost(pair_data, summary, use_bic=False)
        extra = additional_cost_mdl(result, {0, 1}, support)
        summary.insert(support / pair_data.size(), [0, 1])
        after = model_cost(pair_data, summary, use_bic=False)

        assert after - before == pytest.approx(extra)

    def test_mdl_cost_depends_on_summary_size(self, pair_data):
        summary = singleton_summary(pair_data)
        result = PatternsetResult(data=pair_data, summary=summary)
        first = additional_cost_mdl(result, {0, 1}, 160)
        for _ in range(50):
            summary.insert(0.08, [2, 3])
        assert additional_cost_mdl(result, {0, 1}, 160) != pytest.approx(first)
        assert model_cost(pair_data, summary, use_bic=False) > model_cost(
            pair_data, singleton_summary(pair_data), use_bic=False
        )


class TestEncodingLength:
    """Two-part description length."""

    def test_uniform_model_data_cost(self):
        data = Dataset.from_transactions([[0], [1, 2], [], [0, 1, 2]])
        model = MaxEntDistribution(dim=3)
        assert data_cost(model, data) == pytest.approx(4 * 3 * math.log(2))

    def test_is_pure(self, correlated_data):
        summary = singleton_summary(correlated_data)
        model = MaxEntDistribution(dim=correlated_data.dim)
        for e in summary:
            model.insert(e.frequency, e.pattern, estimate=False)
        model.estimate_model()

        first = encoding_length_sdm(model, correlated_data, summary, use_bic=True)
        second = encoding_length_sdm(model, correlated_data, summary, use_bic=True)
        assert first == second
        assert first.objective == pytest.approx(first.of_data + first.of_model)
