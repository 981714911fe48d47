"""Stationary distribution of a transition matrix via eigen-decomposition."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import linalg

from markovlab import constants as const
from markovlab.config import WARN_ON_DEGENERATE_STATIONARY
from markovlab.utils.errors import NonConvergentChainError

from .transition_matrix import TransitionMatrix

logger = logging.getLogger("markovlab")

__all__ = ["stationary", "eigenvalue_one_multiplicity", "is_stationary"]


def _unit_candidates(
    matrix: TransitionMatrix, tol: float
) -> tuple[NDArray[np.complex128], NDArray[np.complex128], NDArray[np.intp]]:
    """Eigen-decompose ``P^T`` and return indices of eigenvalues near 1.

    Candidates are ordered by distance to 1; the sort is stable so ties keep
    the solver's output order.
    """
    evals, evecs = linalg.eig(matrix.values.T)
    dist = np.abs(evals - 1.0)
    order = np.argsort(dist, kind="stable")
    candidates = order[dist[order] <= tol]
    return evals, evecs, candidates


def eigenvalue_one_multiplicity(
    matrix: TransitionMatrix, *, tol: float = const.EIGENVALUE_TOLERANCE
) -> int:
    """Number of eigenvalues within ``tol`` of 1 (> 1 for reducible chains)."""
    _, _, candidates = _unit_candidates(matrix, tol)
    return int(candidates.size)


def stationary(
    matrix: TransitionMatrix,
    *,
    tol: float = const.EIGENVALUE_TOLERANCE,
    imag_tol: float = const.IMAGINARY_TOLERANCE,
    clamp_tol: float = const.NEGATIVE_CLAMP_TOLERANCE,
) -> NDArray[np.float64]:
    """Return ``pi`` with ``pi @ P == pi`` and ``sum(pi) == 1``.

    The left eigenvector for eigenvalue 1 is the right eigenvector of the
    transpose. When eigenvalue 1 is degenerate (reducible chains) the
    candidate closest to 1 is used, ties resolved by solver output order, and
    a warning is logged.

    Raises
    ------
    NonConvergentChainError
        No eigenvalue within ``tol`` of 1, the eigenvector is not real up to
        ``imag_tol``, or it mixes signs beyond ``clamp_tol``.
    """
    evals, evecs, candidates = _unit_candidates(matrix, tol)
    if candidates.size == 0:
        closest = evals[np.argmin(np.abs(evals - 1.0))]
        raise NonConvergentChainError(
            f"no eigenvalue within {tol:g} of 1 (closest: {closest:.6g})"
        )
    if candidates.size > 1 and WARN_ON_DEGENERATE_STATIONARY.get():
        logger.warning(
            "Eigenvalue 1 has multiplicity %d; the chain is reducible and the "
            "stationary distribution is not unique. Using eigenvector %d.",
            candidates.size,
            int(candidates[0]),
        )

    vec = np.asarray(evecs[:, int(candidates[0])], dtype=np.complex128)
    # Eigenvectors are defined up to a complex phase; rotate so the largest
    # component is real before judging the imaginary residue.
    pivot = vec[int(np.argmax(np.abs(vec)))]
    vec = vec * (np.abs(pivot) / pivot)
    scale = float(np.max(np.abs(vec)))
    if float(np.max(np.abs(vec.imag))) > imag_tol * max(scale, 1.0):
        raise NonConvergentChainError(
            "stationary eigenvector has a non-negligible imaginary component"
        )

    pi = vec.real.astype(np.float64)
    total = float(pi.sum())
    if total == 0.0 or not np.isfinite(total):
        raise NonConvergentChainError("stationary eigenvector cannot be normalised")
    pi = pi / total
    if np.any(pi < -clamp_tol):
        raise NonConvergentChainError(
            f"stationary eigenvector has negative entries (min {pi.min():.3g})"
        )
    pi[pi < 0.0] = 0.0
    pi /= pi.sum()
    logger.debug("Stationary distribution for %d states computed", matrix.n_states)
    return pi


def is_stationary(
    matrix: TransitionMatrix,
    distribution: ArrayLike,
    *,
    atol: float = 1e-9,
) -> bool:
    """Check the fixed-point property ``pi @ P == pi`` and normalisation."""
    pi = np.asarray(distribution, dtype=np.float64)
    if pi.shape != (matrix.n_states,):
        return False
    if abs(float(pi.sum()) - 1.0) > atol:
        return False
    return bool(np.max(np.abs(pi @ matrix.values - pi)) <= atol)
