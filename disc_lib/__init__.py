"""
disc_lib - Significant pattern set discovery

Summarizes transaction data with a small set of itemsets chosen greedily
under the MDL / BIC principle, backed by a factorized maximum entropy model.

Package Structure:
- models/: Dataset, Summary, Candidate, results and stop reasons
- distribution/: Maximum entropy model and its factory
- scorers/: Divergence, significance and description length functions
- candidates/: Candidate generator
- discovery/: Model initialization and the discovery loop
- api.py / cli.py: Convenience entry points
"""

__version__ = '0.1.0'

from disc_lib.config_schemas import MiningSettings, DEFAULT_SETTINGS, BIC_SETTINGS, load_settings
from disc_lib.models import Dataset, Summary, Candidate, PatternsetResult, Composition, StopReason
from disc_lib.discovery import discover_patternset, discover_composition, initialize_model
from disc_lib.api import discover_patterns, translate_to_dict

__all__ = [
    'MiningSettings',
    'DEFAULT_SETTINGS',
    'BIC_SETTINGS',
    'load_settings',
    'Dataset',
    'Summary',
    'Candidate',
    'PatternsetResult',
    'Composition',
    'StopReason',
    'discover_patternset',
    'discover_composition',
    'initialize_model',
    'discover_patterns',
    'translate_to_dict',
]
