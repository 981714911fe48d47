"""Draw state trajectories from a :class:`TransitionMatrix`."""

from __future__ import annotations

import logging
import numbers
from typing import Any, Hashable, List

import numpy as np
from numpy.typing import NDArray

from markovlab import constants as const
from markovlab.utils.errors import InvalidArgumentError
from markovlab.utils.seed import RandomSource, resolve_rng, spawn_generators
from markovlab.utils.validation import require_distribution, require_positive_int

from .transition_matrix import TransitionMatrix

logger = logging.getLogger("markovlab")

__all__ = ["sample", "sample_labels", "sample_many"]


def sample(
    matrix: TransitionMatrix,
    steps: int,
    start: Any = None,
    rng: RandomSource = None,
) -> NDArray[np.int64]:
    """Sample a trajectory of exactly ``steps`` states.

    Parameters
    ----------
    matrix
        Transition matrix driving the chain.
    steps
        Length of the returned trajectory; the initial state is element 0.
    start
        ``None`` for state 0, a state index or label, or a length-``n``
        distribution from which the initial state is drawn.
    rng
        Generator or integer seed. Equal seeds give identical trajectories.

    Returns
    -------
    numpy.ndarray
        Integer array of shape ``(steps,)`` with values in ``[0, n)``.
    """
    n_steps = require_positive_int(steps, "steps")
    gen = resolve_rng(rng)
    cdf = _cumulative(matrix.values)

    trajectory = np.empty(n_steps, dtype=np.int64)
    current = _initial_state(matrix, start, gen)
    trajectory[0] = current
    if n_steps > 1:
        uniforms = gen.random(n_steps - 1)
        for t, u in enumerate(uniforms, start=1):
            current = int(np.searchsorted(cdf[current], u, side="right"))
            trajectory[t] = current
    logger.debug(
        "Sampled %d steps over %d states starting from %d",
        n_steps,
        matrix.n_states,
        int(trajectory[0]),
    )
    return trajectory


def sample_labels(
    matrix: TransitionMatrix,
    steps: int,
    start: Any = None,
    rng: RandomSource = None,
) -> List[Hashable]:
    """Like :func:`sample` but return state labels instead of indices."""
    if matrix.labels is None:
        raise InvalidArgumentError("sample_labels requires a labelled transition matrix")
    labels = matrix.labels
    return [labels[i] for i in sample(matrix, steps, start=start, rng=rng)]


def sample_many(
    matrix: TransitionMatrix,
    steps: int,
    n_chains: int,
    start: Any = None,
    rng: RandomSource = None,
) -> NDArray[np.int64]:
    """Sample ``n_chains`` independent trajectories, shape ``(n_chains, steps)``.

    Each chain draws from its own child generator spawned from ``rng``, so the
    rows can equally be produced in parallel by separate workers.
    """
    n_steps = require_positive_int(steps, "steps")
    n = require_positive_int(n_chains, "n_chains")
    out = np.empty((n, n_steps), dtype=np.int64)
    for k, child in enumerate(spawn_generators(rng, n)):
        out[k] = sample(matrix, n_steps, start=start, rng=child)
    return out


def _initial_state(
    matrix: TransitionMatrix, start: Any, gen: np.random.Generator
) -> int:
    if start is None:
        return 0
    if isinstance(start, numbers.Integral) or (
        matrix.labels is not None and _is_label(matrix, start)
    ):
        return matrix.resolve_state(start)
    p = require_distribution(
        start, matrix.n_states, atol=const.ROW_SUM_TOLERANCE, name="start distribution"
    )
    cdf = _cumulative(p)
    return int(np.searchsorted(cdf, gen.random(), side="right"))


def _is_label(matrix: TransitionMatrix, value: Any) -> bool:
    try:
        matrix.index_of(value)
    except (InvalidArgumentError, TypeError):
        return False
    return True


def _cumulative(probabilities: NDArray[np.float64]) -> NDArray[np.float64]:
    """Inverse-CDF lookup table along the last axis.

    Cumulative sums are divided by their final entry, which is then exactly 1.
    A row that validated a little short of 1 would otherwise leave a gap below
    1 that maps onto the trailing states whatever their probability.
    """
    cdf = np.cumsum(probabilities, axis=-1)
    cdf /= cdf[..., -1:]
    return cdf
