"""
Tests for the factorized maximum entropy model.
"""

import math

import numpy as np
import pytest
from hypothesis import given, strategies as st, settings

from disc_lib.config_schemas import MiningSettings
from disc_lib.distribution import MaxEntDistribution, make_distribution
from disc_lib.models.dataset import Dataset
from disc_lib.models.result import PatternsetResult


class TestMaxEntDistribution:
    """Constraint insertion, fitting and queries."""

    @pytest.fixture
    def model(self):
        return MaxEntDistribution(dim=4)

    def test_uncovered_items_are_uniform(self, model):
        assert model.expected_frequency({0}) == pytest.approx(0.5)
        assert model.expected_frequency({0, 3}) == pytest.approx(0.25)

    def test_singletons_are_independent(self, model):
        model.insert(0.5, {0}, estimate=False)
        model.insert(0.4, {1}, estimate=False)
        model.estimate_model()
        assert model.expected_frequency({0}) == pytest.approx(0.5, abs=1e-6)
        assert model.expected_frequency({0, 1}) == pytest.approx(0.2, abs=1e-6)

    def test_pair_constraint_is_met(self, model):
        model.insert(0.5, {0})
        model.insert(0.5, {1})
        model.insert(0.4, {0, 1})
        assert len(model.factors) == 1
        assert model.expected_frequency({0, 1}) == pytest.approx(0.4, abs=1e-6)
        assert model.expected_frequency({0}) == pytest.approx(0.5, abs=1e-6)
        assert model.expected_frequency({1}) == pytest.approx(0.5, abs=1e-6)

    def test_deferred_insert_then_estimate(self, model):
        model.insert(0.5, {0}, estimate=False)
        model.insert(0.5, {1}, estimate=False)
        model.insert(0.4, {0, 1}, estimate=False)
        model.estimate_model()
        assert model.expected_frequency({0, 1}) == pytest.approx(0.4, abs=1e-6)

    def test_duplicate_not_allowed(self, model):
        model.insert(0.3, {2})
        assert not model.is_item_allowed({2})
        with pytest.raises(ValueError):
            model.insert(0.3, {2})

    def test_width_capacity(self):
        model = MaxEntDistribution(dim=4, max_factor_width=2)
        model.insert(0.4, {0, 1})
        assert not model.is_item_allowed({1, 2})
        assert model.is_item_allowed({2, 3})

    def test_size_capacity_counts_composite_patterns_only(self):
        model = MaxEntDistribution(dim=4, max_factor_size=1)
        model.insert(0.5, {0})
        model.insert(0.5, {2})
        model.insert(0.3, {0, 1})
        assert model.is_item_allowed({1})
        assert not model.is_item_allowed({1, 2})

    def test_out_of_universe_pattern(self, model):
        assert not model.is_item_allowed({7})
        with pytest.raises(ValueError):
            model.insert(0.1, {7})

    def test_log_probability_uniform(self, model):
        matrix = np.array([[1, 0, 1, 0], [0, 0, 0, 0]], dtype=bool)
        np.testing.assert_allclose(model.log_probability(matrix), [4 * math.log(0.5)] * 2)

    def test_rejects_empty_universe(self):
        with pytest.raises(AssertionError):
            MaxEntDistribution(dim=0)

    def test_float32_precision(self):
        model = MaxEntDistribution(dim=2, dtype=np.float32)
        model.insert(0.5, {0})
        model.insert(0.5, {1})
        model.insert(0.35, {0, 1})
        assert model.expected_frequency({0, 1}) == pytest.approx(0.35, abs=1e-4)

    def test_always_together_pair_fits_exactly(self):
        model = MaxEntDistribution(dim=3)
        model.insert(2 / 3, {0}, estimate=False)
        model.insert(2 / 3, {1}, estimate=False)
        model.insert(1 / 3, {2}, estimate=False)
        model.insert(2 / 3, {0, 1}, estimate=False)
        model.estimate_model()

        factor = next(f for f in model.factors if 0 in f.items)
        assert factor.fit(model.tolerance, model.max_sweeps, model.target_eps) < model.max_sweeps
        assert abs(model.expected_frequency({0}) - 2 / 3) < model.tolerance
        assert abs(model.expected_frequency({1}) - 2 / 3) < model.tolerance
        assert model.expected_frequency({0, 1}) == pytest.approx(2 / 3, abs=1e-9)

        rows = np.array([[1, 1, 0], [0, 0, 1]], dtype=bool)
        np.testing.assert_allclose(model.log_probability(rows), [math.log(4 / 9), math.log(1 / 9)])

    @given(
        fa=st.floats(min_value=0.05, max_value=0.95),
        fb=st.floats(min_value=0.05, max_value=0.95),
    )
    @settings(max_examples=50, deadline=5000)
    def test_marginals_match_singleton_constraints(self, fa, fb):
        model = MaxEntDistribution(dim=2)
        model.insert(fa, {0})
        model.insert(fb, {1})
        assert model.expected_frequency({0}) == pytest.approx(fa, abs=1e-6)
        assert model.expected_frequency({1}) == pytest.approx(fb, abs=1e-6)
        assert model.expected_frequency({0, 1}) == pytest.approx(fa * fb, abs=1e-6)


class TestMakeDistribution:
    """Factory wiring from settings."""

    def test_uses_settings(self, small_data):
        cfg = MiningSettings(max_factor_size=3, max_factor_width=5, precision='float32')
        model = make_distribution(PatternsetResult(data=small_data), cfg)
        assert model.dim == small_data.dim
        assert model.max_factor_size == 3
        assert model.max_factor_width == 5
        assert model.dtype is np.float32

    def test_zero_dimensional_data(self):
        with pytest.raises(AssertionError):
            make_distribution(PatternsetResult(data=Dataset()), MiningSettings())
