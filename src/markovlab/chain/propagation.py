"""Deterministic forward propagation of probability distributions."""

from __future__ import annotations

import logging
import numbers
from typing import Any, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from markovlab import constants as const
from markovlab.config import RENORMALIZE_DRIFT
from markovlab.utils.validation import require_distribution, require_positive_int

from .stationary import stationary
from .transition_matrix import TransitionMatrix

logger = logging.getLogger("markovlab")

__all__ = ["propagate", "propagate_final", "convergence_trace", "initial_distribution"]


def initial_distribution(matrix: TransitionMatrix, initial: Any = None) -> NDArray[np.float64]:
    """Resolve ``initial`` to a probability vector.

    ``None`` means a point mass on state 0; a state index or label gives a
    point mass on that state; anything else must be a length-``n``
    distribution.
    """
    n = matrix.n_states
    if initial is None:
        state = 0
    elif isinstance(initial, numbers.Integral) and not isinstance(initial, bool):
        state = matrix.resolve_state(initial)
    elif matrix.labels is not None and not isinstance(initial, (list, tuple, np.ndarray)):
        state = matrix.index_of(initial)
    else:
        return require_distribution(
            initial, n, atol=const.ROW_SUM_TOLERANCE, name="initial distribution"
        )
    d = np.zeros(n, dtype=np.float64)
    d[state] = 1.0
    return d


def propagate(
    matrix: TransitionMatrix,
    steps: int,
    initial: Any = None,
    *,
    include_initial: bool = False,
) -> NDArray[np.float64]:
    """Advance a row vector through the chain, ``d_{t+1} = d_t @ P``.

    Returns
    -------
    numpy.ndarray
        Shape ``(steps, n)`` where row ``t`` is the distribution after
        ``t + 1`` steps; with ``include_initial`` the starting vector is
        prepended, giving shape ``(steps + 1, n)``.
    """
    n_steps = require_positive_int(steps, "steps")
    d = initial_distribution(matrix, initial)
    P = matrix.values
    renormalize = RENORMALIZE_DRIFT.get()

    out = np.empty((n_steps + 1, matrix.n_states), dtype=np.float64)
    out[0] = d
    renormalized = 0
    for t in range(1, n_steps + 1):
        d = d @ P
        drift = abs(float(d.sum()) - 1.0)
        if drift > const.DRIFT_TOLERANCE and renormalize:
            d = d / d.sum()
            renormalized += 1
        out[t] = d
    if renormalized:
        logger.debug("Renormalised %d of %d propagated distributions", renormalized, n_steps)
    return out if include_initial else out[1:]


def propagate_final(
    matrix: TransitionMatrix, steps: int, initial: Any = None
) -> NDArray[np.float64]:
    """Return only the distribution after ``steps`` steps."""
    return propagate(matrix, steps, initial)[-1]


def convergence_trace(
    matrix: TransitionMatrix,
    steps: int,
    initial: Any = None,
    reference: Optional[ArrayLike] = None,
) -> NDArray[np.float64]:
    """Total-variation distance of each propagated step to ``reference``.

    ``reference`` defaults to the stationary distribution of ``matrix``.
    """
    if reference is None:
        target = stationary(matrix)
    else:
        target = require_distribution(
            reference, matrix.n_states, atol=const.ROW_SUM_TOLERANCE, name="reference"
        )
    series = propagate(matrix, steps, initial)
    return 0.5 * np.abs(series - target[None, :]).sum(axis=1)
