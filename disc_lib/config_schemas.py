"""
Configuration schema validation using Pydantic.

Provides the validated, read-only settings object for pattern set discovery.
Catches configuration errors at load time instead of mid-search.

Created: 2026-10-19
"""

from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import numpy as np
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from disc_lib.constants import FLOAT_PRECISIONS, MAX_FACTOR_WIDTH_LIMIT


class MiningSettings(BaseModel):
    """
    Run parameters for pattern set discovery.

    Budgets (iteration, patience, time, pattern set size), the significance
    level, the cost-mode selector and the model capacity knobs. Frozen: a
    settings object never changes while a run is using it.

    Examples
    --------
    >>> cfg = MiningSettings(min_support=5, alpha=0.05, use_bic=True)
    >>> cfg.float_type
    <class 'numpy.float64'>
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    # Candidate generation
    min_support: int = Field(2, ge=1, description="Minimum transaction count of a candidate")
    max_pattern_size: int = Field(10, ge=1, description="Maximum items in a candidate pattern")

    # Budgets
    max_iteration: int = Field(1_000_000, ge=0, description="Maximum loop iterations")
    max_patience: int = Field(100, ge=0, description="Consecutive rejections tolerated")
    max_time: Optional[timedelta] = Field(None, description="Wall-clock budget (seconds or timedelta)")
    max_patternset_size: Optional[int] = Field(None, ge=0, description="Cap on accepted patterns")

    # Acceptance
    alpha: float = Field(0.01, gt=0, lt=1, description="Significance level")
    use_bic: bool = Field(False, description="BIC (True) or MDL (False) structural cost")
    with_singletons: bool = Field(True, description="Cover every item with a singleton factor")

    # Model capacity (consumed by the distribution factory only)
    max_factor_size: int = Field(8, ge=1, description="Composite patterns per model factor")
    max_factor_width: int = Field(10, ge=1, le=MAX_FACTOR_WIDTH_LIMIT, description="Items per model factor")

    precision: Literal['float32', 'float64', 'longdouble'] = Field('float64', description="Model float precision")

    @field_validator('max_time')
    @classmethod
    def validate_max_time(cls, v):
        """Ensure the time budget is positive."""
        if v is not None and v.total_seconds() <= 0:
            raise ValueError(f"max_time must be positive, got {v}")
        return v

    @property
    def float_type(self) -> type:
        """Numpy scalar type selected by ``precision``."""
        return np.dtype(FLOAT_PRECISIONS[self.precision]).type


DEFAULT_SETTINGS = MiningSettings()

# BIC accounting, as used by the convenience API
BIC_SETTINGS = MiningSettings(use_bic=True)


def validate_settings(config_dict: Dict[str, Any]) -> MiningSettings:
    """
    Validate a settings dictionary.

    A nested ``mining`` section is flattened, so both ``{"alpha": 0.05}`` and
    ``{"mining": {"alpha": 0.05}}`` are accepted.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        Validated settings

    Raises:
        ValidationError: If configuration is invalid
    """
    if 'mining' in config_dict:
        config_dict = config_dict['mining'] or {}
    return MiningSettings(**config_dict)


def load_settings(path: Union[str, Path]) -> MiningSettings:
    """
    Load and validate settings from a YAML file.

    Args:
        path: Path to a YAML mapping

    Returns:
        Validated settings

    Raises:
        ValueError: If the file does not contain a mapping
        ValidationError: If configuration is invalid
    """
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Settings file {path} must contain a mapping, got {type(raw).__name__}")

    return validate_settings(raw)
