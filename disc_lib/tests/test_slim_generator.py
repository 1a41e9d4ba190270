"""
Tests for the candidate generator.
"""

import pytest

from disc_lib.candidates import SlimGenerator
from disc_lib.interfaces.protocols import CandidateGeneratorProtocol
from disc_lib.models.candidate import Candidate


def by_support(c: Candidate) -> float:
    return float(c.support)


class TestSlimGenerator:
    """Pool seeding, ordering, expansion and pruning."""

    @pytest.fixture
    def generator(self, small_data):
        return SlimGenerator(small_data, min_support=2, max_pattern_size=5, score_fn=by_support)

    def test_satisfies_protocol(self, generator):
        assert isinstance(generator, CandidateGeneratorProtocol)

    def test_seeds_frequent_pairs(self, generator):
        assert generator.count_current_candidates() == 3

    def test_pops_best_first(self, generator):
        first = generator.next()
        assert first.pattern == frozenset({0, 1})
        assert first.support == 8
        assert first.score == 8.0
        # ties keep insertion order
        assert generator.next().pattern == frozenset({0, 2})
        assert generator.next().pattern == frozenset({1, 2})
        assert not generator.has_next()

    def test_min_support_filters_items_and_pairs(self, small_data):
        gen = SlimGenerator(small_data, min_support=6, max_pattern_size=5, score_fn=by_support)
        assert gen.count_current_candidates() == 1
        assert gen.next().pattern == frozenset({0, 1})

    def test_non_positive_score_is_consumed(self, small_data):
        gen = SlimGenerator(small_data, min_support=2, max_pattern_size=5, score_fn=lambda c: -1.0)
        for _ in range(3):
            assert gen.has_next()
            assert gen.next() is None
        assert not gen.has_next()

    def test_add_next_grows_frontier(self, generator):
        accepted = generator.next()
        generator.add_next(accepted, by_support)
        patterns = []
        while generator.has_next():
            patterns.append(generator.next().pattern)
        assert frozenset({0, 1, 2}) in patterns
        # {0, 1, 3} never occurs
        assert frozenset({0, 1, 3}) not in patterns

    def test_add_next_respects_max_pattern_size(self, small_data):
        gen = SlimGenerator(small_data, min_support=2, max_pattern_size=2, score_fn=by_support)
        accepted = gen.next()
        gen.add_next(accepted, by_support)
        assert gen.count_current_candidates() == 2

    def test_add_next_does_not_repeat(self, generator):
        accepted = generator.next()
        generator.add_next(accepted, by_support)
        before = generator.count_current_candidates()
        generator.add_next(accepted, by_support)
        assert generator.count_current_candidates() == before

    def test_prune_drops_matching(self, generator):
        generator.prune(lambda c: 2 in c.pattern)
        assert generator.count_current_candidates() == 1
        assert generator.next().pattern == frozenset({0, 1})

    def test_prune_rescores(self, generator):
        accepted = generator.next()
        generator.add_next(accepted, lambda c: -float(c.support))
        generator.prune(lambda c: c.score <= 0)
        assert not generator.has_next()

    def test_no_pairs_when_max_size_is_one(self, small_data):
        gen = SlimGenerator(small_data, min_support=2, max_pattern_size=1, score_fn=by_support)
        assert not gen.has_next()
