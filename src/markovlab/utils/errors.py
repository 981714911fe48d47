"""Project-specific exception hierarchy for Markov chain construction and analysis."""

from __future__ import annotations


class MarkovChainError(Exception):
    """Base class for markovlab errors."""


class InvalidMatrixError(MarkovChainError, ValueError):
    """Transition matrix is not square, has negative entries, or rows do not sum to 1."""


class InvalidArgumentError(MarkovChainError, ValueError):
    """Caller-supplied step count, state, or distribution is out of range."""


class NonConvergentChainError(MarkovChainError, RuntimeError):
    """Eigen-solve failed to produce a stationary vector for eigenvalue 1."""
