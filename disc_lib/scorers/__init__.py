"""
Pattern scoring module.

Pure functions for divergence, description length and significance.
No I/O operations - all data passed as parameters.
"""

from disc_lib.scorers.divergence import (
    kl1,
    priority_score,
    single_component_expected_gain,
    acceptance_gain,
    nhc_pvalue,
)

from disc_lib.scorers.encoding import (
    universal_integer_length,
    item_code_lengths,
    pattern_cost,
    model_cost,
    additional_cost_bic,
    additional_cost_mdl,
    data_cost,
    encoding_length_sdm,
)

from disc_lib.scorers.significance import (
    structural_cost,
    is_candidate_significant,
    heuristic_expected_gain,
)

__all__ = [
    # Divergence
    'kl1',
    'priority_score',
    'single_component_expected_gain',
    'acceptance_gain',
    'nhc_pvalue',
    # Encoding
    'universal_integer_length',
    'item_code_lengths',
    'pattern_cost',
    'model_cost',
    'additional_cost_bic',
    'additional_cost_mdl',
    'data_cost',
    'encoding_length_sdm',
    # Significance
    'structural_cost',
    'is_candidate_significant',
    'heuristic_expected_gain',
]
