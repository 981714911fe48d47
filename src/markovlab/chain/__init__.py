"""Discrete-time, finite-state Markov chain core.

Exposes the validated :class:`TransitionMatrix` together with sampling,
stationary analysis, distribution propagation and empirical estimation.
"""

from .estimation import (
    encode_trajectory,
    estimate_conditioned_counts,
    estimate_conditioned_probabilities,
    estimate_transition_counts,
    estimate_transition_probabilities,
    normalize_counts,
)
from .propagation import (
    convergence_trace,
    initial_distribution,
    propagate,
    propagate_final,
)
from .sampler import sample, sample_labels, sample_many
from .stationary import eigenvalue_one_multiplicity, is_stationary, stationary
from .transition_matrix import TransitionMatrix

__all__ = [
    "TransitionMatrix",
    "sample",
    "sample_labels",
    "sample_many",
    "stationary",
    "eigenvalue_one_multiplicity",
    "is_stationary",
    "propagate",
    "propagate_final",
    "convergence_trace",
    "initial_distribution",
    "encode_trajectory",
    "normalize_counts",
    "estimate_transition_counts",
    "estimate_transition_probabilities",
    "estimate_conditioned_counts",
    "estimate_conditioned_probabilities",
]
