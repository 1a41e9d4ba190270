"""
Convenience entry points returning plain Python structures.

Accepts transactions in any form Dataset.from_object understands (list of
item lists, 0/1 numpy matrix, one-hot DataFrame) and returns dictionaries
that serialize directly to JSON.
"""

from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from disc_lib.config_schemas import BIC_SETTINGS, validate_settings
from disc_lib.discovery.discover import discover_composition, discover_patternset
from disc_lib.logging_config import get_logger
from disc_lib.models.dataset import Dataset
from disc_lib.models.result import Composition, PatternsetResult

logger = get_logger(__name__)


def _partition_metadata(composition: Composition) -> None:
    """Per-partition pattern frequencies; every partition uses every pattern."""
    data = composition.data
    labels = np.asarray([t.label for t in data], dtype=np.int64)
    partitions = np.unique(labels)
    patterns = composition.summary.patterns

    frequency = np.zeros((len(partitions), len(patterns)))
    for j, pattern in enumerate(patterns):
        cover = data.cover(pattern)
        for i, label in enumerate(partitions):
            rows = labels == label
            frequency[i, j] = cover[rows].mean() if rows.any() else 0.0

    composition.frequency = frequency
    composition.assignment = [set(range(len(patterns))) for _ in partitions]


def translate_to_dict(result: Union[PatternsetResult, Composition]) -> Dict[str, Any]:
    """
    Flatten a discovery result into a JSON-friendly dict.

    Keys: ``pattern_set``, ``frequencies``, ``initial_objective``,
    ``objective``, ``stop_reason``; compositions add ``assignment_matrix``
    and ``labels`` and report ``frequencies`` per partition.
    """
    out: Dict[str, Any] = {
        "pattern_set": [sorted(p) for p in result.summary.patterns],
        "frequencies": [float(f) for f in result.summary.frequencies],
        "initial_objective": result.initial_encoding.objective if result.initial_encoding else None,
        "objective": result.encoding.objective if result.encoding else None,
        "stop_reason": result.stop_reason.value if result.stop_reason else None,
    }

    if isinstance(result, Composition):
        out["frequencies"] = result.frequency.tolist()
        out["assignment_matrix"] = [sorted(a) for a in result.assignment]
        out["labels"] = list(result.data.labels)

    return out


def discover_patterns(
    dataset: Any,
    min_support: int = 2,
    alpha: float = 0.01,
    use_bic: bool = True,
    labels: Optional[Sequence[int]] = None,
    precision: str = "float64",
    **overrides: Any,
) -> Dict[str, Any]:
    """
    Summarize ``dataset`` with a significant pattern set.

    Parameters
    ----------
    dataset : list, np.ndarray, pd.DataFrame or Dataset
        Transactions
    min_support : int
        Minimum candidate support
    alpha : float
        Significance level
    use_bic : bool
        BIC (default) or MDL structural cost
    labels : sequence of int, optional
        Partition label per transaction; runs through the composition adapter
    precision : str
        Model float precision ('float32', 'float64' or 'longdouble')
    **overrides
        Any other MiningSettings field

    Returns
    -------
    dict
        See translate_to_dict

    Examples
    --------
    >>> out = discover_patterns([[0, 1], [0, 1], [2]] * 50)
    >>> out["pattern_set"][-1]
    [0, 1]
    """
    cfg = validate_settings({
        **BIC_SETTINGS.model_dump(),
        "min_support": min_support,
        "alpha": alpha,
        "use_bic": use_bic,
        "precision": precision,
        **overrides,
    })

    if labels is not None:
        data = Dataset.from_object(dataset, labels=labels)
        composition = discover_composition(Composition(data=data), cfg)
        _partition_metadata(composition)
        return translate_to_dict(composition)

    result = discover_patternset(PatternsetResult(data=Dataset.from_object(dataset)), cfg)
    logger.info(
        "patterns_discovered",
        n_patterns=len(result.summary),
        objective=result.encoding.objective,
    )
    return translate_to_dict(result)
