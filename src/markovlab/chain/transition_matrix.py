# Copyright (c) 2025 markovlab Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""Immutable, validated row-stochastic transition matrix."""

from __future__ import annotations

import logging
import numbers
from typing import Any, Hashable, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from markovlab import constants as const
from markovlab.utils.errors import InvalidArgumentError, InvalidMatrixError
from markovlab.utils.validation import all_finite, require

logger = logging.getLogger("markovlab")

__all__ = ["TransitionMatrix"]


class TransitionMatrix:
    """Square row-stochastic matrix with ``P[i, j] = P(next=j | current=i)``.

    The entries are copied on construction and the stored array is marked
    read-only, so instances behave as values: nothing handed out by the
    accessors can change the matrix after validation.

    Parameters
    ----------
    rows
        Row-major ``n x n`` array-like of probabilities.
    labels
        Optional sequence of ``n`` unique, hashable state labels.
    atol
        Maximum tolerated deviation of each row sum from 1.
    """

    __slots__ = ("_P", "_labels", "_index")

    def __init__(
        self,
        rows: ArrayLike,
        labels: Optional[Sequence[Hashable]] = None,
        *,
        atol: float = const.ROW_SUM_TOLERANCE,
    ) -> None:
        P = _validated_array(rows, atol=atol)
        P.setflags(write=False)
        self._P: NDArray[np.float64] = P
        self._labels: Optional[tuple[Hashable, ...]] = None
        self._index: dict[Hashable, int] = {}
        if labels is not None:
            self._labels = tuple(labels)
            if len(self._labels) != P.shape[0]:
                raise InvalidMatrixError(
                    f"expected {P.shape[0]} state labels, got {len(self._labels)}"
                )
            self._index = {label: i for i, label in enumerate(self._labels)}
            if len(self._index) != len(self._labels):
                raise InvalidMatrixError("state labels must be unique")
        logger.debug("Constructed %dx%d transition matrix", P.shape[0], P.shape[1])

    @classmethod
    def from_rows(
        cls,
        rows: ArrayLike,
        labels: Optional[Sequence[Hashable]] = None,
        *,
        atol: float = const.ROW_SUM_TOLERANCE,
    ) -> "TransitionMatrix":
        """Validate ``rows`` and wrap them; see the class docstring."""
        return cls(rows, labels, atol=atol)

    @property
    def n_states(self) -> int:
        return int(self._P.shape[0])

    @property
    def labels(self) -> Optional[tuple[Hashable, ...]]:
        return self._labels

    @property
    def values(self) -> NDArray[np.float64]:
        """Read-only view of the underlying array."""
        return self._P

    def probability(self, i: int, j: int) -> float:
        """Return ``P(next=j | current=i)``."""
        return float(self._P[self._check_index(i), self._check_index(j)])

    def row(self, i: int) -> NDArray[np.float64]:
        """Return the outgoing distribution of state ``i`` (read-only view)."""
        return self._P[self._check_index(i)]

    def as_array(self) -> NDArray[np.float64]:
        """Return a writable copy of the matrix."""
        return self._P.copy()

    def index_of(self, label: Hashable) -> int:
        if self._labels is None:
            raise InvalidArgumentError("transition matrix has no state labels")
        try:
            return self._index[label]
        except KeyError:
            raise InvalidArgumentError(f"unknown state label {label!r}") from None

    def label_of(self, i: int) -> Hashable:
        idx = self._check_index(i)
        if self._labels is None:
            return idx
        return self._labels[idx]

    def resolve_state(self, state: Any) -> int:
        """Map an integer index or (for labelled matrices) a label to an index."""
        if (
            isinstance(state, numbers.Integral)
            and not isinstance(state, bool)
            and (self._labels is None or state not in self._index)
        ):
            return self._check_index(state)
        if self._labels is not None:
            return self.index_of(state)
        raise InvalidArgumentError(f"state must be an integer index, got {state!r}")

    def _check_index(self, i: Any) -> int:
        if isinstance(i, bool) or not isinstance(i, numbers.Integral):
            raise InvalidArgumentError(f"state index must be an integer, got {i!r}")
        idx = int(i)
        if not 0 <= idx < self.n_states:
            raise InvalidArgumentError(
                f"state index {idx} out of range for {self.n_states} states"
            )
        return idx

    def __len__(self) -> int:
        return self.n_states

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransitionMatrix):
            return NotImplemented
        return self._labels == other._labels and np.array_equal(self._P, other._P)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows = np.array2string(self._P, precision=4, separator=", ")
        if self._labels is None:
            return f"TransitionMatrix({rows})"
        return f"TransitionMatrix({rows}, labels={list(self._labels)!r})"


def _validated_array(rows: ArrayLike, *, atol: float) -> NDArray[np.float64]:
    try:
        P = np.array(rows, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidMatrixError(f"transition matrix must be numeric: {exc}") from exc
    require(
        P.ndim == 2 and P.shape[0] == P.shape[1],
        f"transition matrix must be square, got shape {P.shape}",
        InvalidMatrixError,
    )
    require(P.shape[0] > 0, "transition matrix must have at least one state", InvalidMatrixError)
    require(all_finite(P), "transition matrix contains non-finite entries", InvalidMatrixError)
    if np.any(P < 0.0):
        i, j = np.argwhere(P < 0.0)[0]
        raise InvalidMatrixError(f"negative transition probability at ({i}, {j})")
    require(
        not np.any(P > 1.0 + atol),
        "transition probabilities must not exceed 1",
        InvalidMatrixError,
    )
    deviation = np.abs(P.sum(axis=1) - 1.0)
    bad = np.flatnonzero(deviation > atol)
    if bad.size:
        i = int(bad[0])
        raise InvalidMatrixError(
            f"row {i} sums to {P[i].sum():.12g}; rows must sum to 1 within {atol:g}"
        )
    return P
