"""Empirical transition counts and probabilities from an observed trajectory.

First-order tables count consecutive pairs ``(x[t], x[t+1])``. The
history-conditioned tables split those pairs by the state two steps back,
``(x[t-2]=K, x[t-1]=I, x[t]=J)``, so that ``P(J | I, K)`` can be compared
across ``K``; for a first-order Markov source every ``K`` converges to the
same row-normalised matrix.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from markovlab.utils.errors import InvalidArgumentError
from markovlab.utils.validation import require

logger = logging.getLogger("markovlab")

__all__ = [
    "encode_trajectory",
    "normalize_counts",
    "estimate_transition_counts",
    "estimate_transition_probabilities",
    "estimate_conditioned_counts",
    "estimate_conditioned_probabilities",
]


def encode_trajectory(
    trajectory: Sequence[Any] | NDArray[Any],
    n_states: Optional[int] = None,
    *,
    states: Optional[Sequence[Hashable]] = None,
) -> tuple[NDArray[np.int64], int]:
    """Map a trajectory to integer indices and resolve the number of states.

    With ``states`` each element is looked up by label; otherwise elements
    must be integers in ``[0, n_states)``. When ``n_states`` is omitted it is
    ``len(states)`` or ``max(trajectory) + 1`` (0 for an empty trajectory).
    """
    if states is not None:
        index = {label: i for i, label in enumerate(states)}
        require(len(index) == len(states), "state labels must be unique")
        try:
            codes = np.fromiter(
                (index[s] for s in trajectory), dtype=np.int64
            )
        except KeyError as exc:
            raise InvalidArgumentError(f"unknown state label {exc.args[0]!r}") from None
        n = len(states) if n_states is None else int(n_states)
        require(n >= len(states), "n_states is smaller than the number of labels")
        return codes, n

    arr = np.asarray(trajectory)
    if arr.size == 0:
        return np.zeros(0, dtype=np.int64), int(n_states or 0)
    require(arr.ndim == 1, f"trajectory must be one-dimensional, got shape {arr.shape}")
    require(
        np.issubdtype(arr.dtype, np.integer),
        "trajectory must contain integer state indices; pass states= for labels",
    )
    codes = arr.astype(np.int64, copy=False)
    require(codes.min() >= 0, "state indices must be non-negative")
    n = int(codes.max()) + 1 if n_states is None else int(n_states)
    require(
        codes.max() < n, f"state index {int(codes.max())} out of range for {n} states"
    )
    return codes, n


def normalize_counts(counts: NDArray[np.float64]) -> NDArray[np.float64]:
    """Row-normalise a count table; rows with no observations become NaN."""
    C = np.asarray(counts, dtype=np.float64)
    totals = C.sum(axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        T = C / totals
    T[np.broadcast_to(totals == 0, T.shape)] = np.nan
    return T


def estimate_transition_counts(
    trajectory: Sequence[Any] | NDArray[Any],
    n_states: Optional[int] = None,
    *,
    states: Optional[Sequence[Hashable]] = None,
) -> NDArray[np.float64]:
    """Count ``C[i, j]`` = number of times state ``i`` is followed by ``j``.

    The final element contributes no outgoing transition. Trajectories shorter
    than two states give an all-zero table (``(0, 0)`` when the state count
    cannot be inferred).
    """
    codes, n = encode_trajectory(trajectory, n_states, states=states)
    C = np.zeros((n, n), dtype=np.float64)
    if codes.size < 2:
        return C
    np.add.at(C, (codes[:-1], codes[1:]), 1.0)
    logger.debug("Counted %d transitions over %d states", codes.size - 1, n)
    return C


def estimate_transition_probabilities(
    trajectory: Sequence[Any] | NDArray[Any],
    n_states: Optional[int] = None,
    *,
    states: Optional[Sequence[Hashable]] = None,
) -> NDArray[np.float64]:
    """Maximum-likelihood (non-reversible) transition matrix estimate.

    Rows for states never left are NaN; callers decide how to treat them.
    """
    return normalize_counts(
        estimate_transition_counts(trajectory, n_states, states=states)
    )


def estimate_conditioned_counts(
    trajectory: Sequence[Any] | NDArray[Any],
    n_states: Optional[int] = None,
    *,
    states: Optional[Sequence[Hashable]] = None,
) -> Dict[int, NDArray[np.float64]]:
    """Count ``(I, J)`` transitions separately for each lag-2 history ``K``.

    Returns a mapping from every observed history state ``K`` (ascending) to
    an ``n x n`` count table. Trajectories shorter than three states give an
    empty mapping.
    """
    codes, n = encode_trajectory(trajectory, n_states, states=states)
    if codes.size < 3:
        return {}
    K, I, J = codes[:-2], codes[1:-1], codes[2:]
    tables: Dict[int, NDArray[np.float64]] = {}
    for k in np.unique(K):
        mask = K == k
        C = np.zeros((n, n), dtype=np.float64)
        np.add.at(C, (I[mask], J[mask]), 1.0)
        tables[int(k)] = C
    logger.debug(
        "Counted %d lag-2 triples across %d histories", codes.size - 2, len(tables)
    )
    return tables


def estimate_conditioned_probabilities(
    trajectory: Sequence[Any] | NDArray[Any],
    n_states: Optional[int] = None,
    *,
    states: Optional[Sequence[Hashable]] = None,
) -> Dict[int, NDArray[np.float64]]:
    """Row-normalised :func:`estimate_conditioned_counts`, NaN for empty rows."""
    return {
        k: normalize_counts(C)
        for k, C in estimate_conditioned_counts(
            trajectory, n_states, states=states
        ).items()
    }
