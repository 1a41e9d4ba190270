"""
Distribution Factory - Builds the model for a discovery run.

Resolves the run settings and the data's dimensionality into a configured
MaxEntDistribution.
"""

from typing import Union

from disc_lib.config_schemas import MiningSettings
from disc_lib.distribution.maxent import MaxEntDistribution
from disc_lib.models.result import Composition, PatternsetResult


def make_distribution(
    result: Union[PatternsetResult, Composition],
    config: MiningSettings,
) -> MaxEntDistribution:
    """
    Create an empty model sized for ``result.data``.

    Parameters
    ----------
    result : PatternsetResult or Composition
        Run state; only its data's dimensionality is used
    config : MiningSettings
        Supplies factor capacity and float precision

    Returns
    -------
    MaxEntDistribution
        Model with no constraints (every item uniform)
    """
    dim = result.data.dim
    assert dim != 0, "cannot build a model over zero-dimensional data"

    return MaxEntDistribution(
        dim=dim,
        max_factor_size=config.max_factor_size,
        max_factor_width=config.max_factor_width,
        dtype=config.float_type,
    )
