"""
Pattern set discovery loop.
"""

from disc_lib.discovery.singletons import insert_missing_singletons
from disc_lib.discovery.discover import (
    DiscoveryState,
    initialize_model,
    discover_patternset,
    discover_composition,
)
from disc_lib.scorers.significance import is_candidate_significant

__all__ = [
    'insert_missing_singletons',
    'DiscoveryState',
    'initialize_model',
    'is_candidate_significant',
    'discover_patternset',
    'discover_composition',
]
