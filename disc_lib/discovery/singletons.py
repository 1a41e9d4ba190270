"""
Baseline item coverage for a summary.
"""

from disc_lib.models.dataset import Dataset
from disc_lib.models.summary import Summary


def insert_missing_singletons(data: Dataset, summary: Summary) -> int:
    """
    Add a singleton entry for every item not yet represented by one.

    Each new entry carries the item's empirical frequency ``support / N``.
    Items already present as a singleton pattern are skipped, so calling this
    twice leaves the summary unchanged.

    Returns:
        Number of entries added
    """
    covered = {next(iter(p)) for p in summary.patterns if len(p) == 1}
    n = data.size()
    supports = data.item_supports()

    added = 0
    for item in range(data.dim):
        if item in covered:
            continue
        frequency = float(supports[item]) / n if n else 0.0
        summary.insert(frequency, [item])
        added += 1
    return added
