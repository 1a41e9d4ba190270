"""
Central constants for pattern set discovery.

This module provides single source of truth for the numeric constants used
by the scorers, the maximum entropy model and the encoding.

Created: 2026-10-19
"""

import math

# Priority score deadband: candidates whose empirical frequency is this close
# to the model's prediction score exactly zero
GAIN_DEADBAND = 0.04

# Divergence guards (kl1 never returns inf/nan)
PROBABILITY_CLAMP = 1e-12       # q is clamped into [CLAMP, 1 - CLAMP]
MAX_DIVERGENCE = 1e6            # Upper bound on a single two-point divergence

# Maximum entropy fitting
FIT_TOLERANCE = 1e-9            # Largest tolerated |E[f_i] - fr_i| per factor
MAX_FIT_SWEEPS = 500            # Coordinate sweeps per factor estimate
MIN_TARGET_EPS = 1e-9           # Target frequencies clamped into [eps, 1 - eps]
MAX_FACTOR_WIDTH_LIMIT = 20     # 2^20 states is the largest dense factor we build

# Uncovered items follow the unconstrained maximum entropy distribution
UNCOVERED_ITEM_PROBABILITY = 0.5

# Rissanen's normalising constant for the universal code of integers
UNIVERSAL_CODE_CONSTANT = 2.865064
LOG_UNIVERSAL_CODE_CONSTANT = math.log(UNIVERSAL_CODE_CONSTANT)

# Supported floating point precisions (name -> numpy dtype name)
FLOAT_PRECISIONS = {
    "float32": "float32",
    "float64": "float64",
    "longdouble": "longdouble",
}
