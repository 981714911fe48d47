# Copyright (c) 2025 markovlab Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
markovlab: discrete-time, finite-state Markov chains

Sampling of state trajectories, stationary distributions, deterministic
propagation of distributions and empirical estimation of transition tables
(including the lag-2 history check of the Markov property).
"""

import logging

from .chain import (
    TransitionMatrix,
    convergence_trace,
    estimate_conditioned_counts,
    estimate_conditioned_probabilities,
    estimate_transition_counts,
    estimate_transition_probabilities,
    propagate,
    propagate_final,
    sample,
    sample_many,
    stationary,
)
from .utils.errors import (
    InvalidArgumentError,
    InvalidMatrixError,
    MarkovChainError,
    NonConvergentChainError,
)
from .utils.thermodynamics import free_energy_from_distribution
from .validation import check_markov_property

logger = logging.getLogger("markovlab")
logger.addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "TransitionMatrix",
    "sample",
    "sample_many",
    "stationary",
    "propagate",
    "propagate_final",
    "convergence_trace",
    "estimate_transition_counts",
    "estimate_transition_probabilities",
    "estimate_conditioned_counts",
    "estimate_conditioned_probabilities",
    "check_markov_property",
    "free_energy_from_distribution",
    "MarkovChainError",
    "InvalidMatrixError",
    "InvalidArgumentError",
    "NonConvergentChainError",
]
