"""
Pattern set discovery data models.
"""

from disc_lib.models.dataset import Dataset, Transaction
from disc_lib.models.summary import Summary, SummaryEntry
from disc_lib.models.candidate import Candidate
from disc_lib.models.encoding import Encoding
from disc_lib.models.result import (
    PatternsetResult,
    ProgressSnapshot,
    Composition,
    StopReason,
)

__all__ = [
    'Dataset',
    'Transaction',
    'Summary',
    'SummaryEntry',
    'Candidate',
    'Encoding',
    'PatternsetResult',
    'ProgressSnapshot',
    'Composition',
    'StopReason',
]
