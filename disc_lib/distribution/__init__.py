"""
Probabilistic models over itemsets.
"""

from disc_lib.distribution.maxent import Factor, MaxEntDistribution
from disc_lib.distribution.factory import make_distribution

__all__ = [
    'Factor',
    'MaxEntDistribution',
    'make_distribution',
]
