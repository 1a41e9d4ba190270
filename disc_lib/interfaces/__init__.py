"""
Core interfaces for pattern set discovery.

These protocols define the contracts the discovery loop relies on, so that
models and candidate generators can be swapped without touching the loop.
"""

from .protocols import (
    DistributionProtocol,
    CandidateGeneratorProtocol,
    ScoreFunction,
    ExpectedGainFunction,
    ProgressObserver,
    empty_callback,
)

__all__ = [
    'DistributionProtocol',
    'CandidateGeneratorProtocol',
    'ScoreFunction',
    'ExpectedGainFunction',
    'ProgressObserver',
    'empty_callback',
]
