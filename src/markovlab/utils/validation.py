"""Common validation helpers shared across markovlab modules."""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np

from .errors import InvalidArgumentError

__all__ = ["require", "all_finite", "require_positive_int", "require_distribution"]


def require(
    condition: bool, message: str, error: type[Exception] = InvalidArgumentError
) -> None:
    """Raise ``error`` (``InvalidArgumentError`` by default) when ``condition`` fails."""
    if not condition:
        raise error(message)


def _to_ndarray(values: Any) -> np.ndarray:
    """Convert *values* to a :class:`~numpy.ndarray` without copying when possible."""

    if isinstance(values, np.ndarray):
        return values
    return np.asarray(values)


def all_finite(values: Any) -> bool:
    """Return ``True`` when all numeric entries are finite.

    Empty arrays are treated as finite to keep downstream shape handling simple.
    """

    arr = _to_ndarray(values)
    if arr.size == 0:
        return True
    return bool(np.isfinite(arr).all())


def require_positive_int(value: Any, name: str) -> int:
    """Return ``value`` as ``int`` if it is an integer >= 1.

    Booleans and floats are rejected even when they compare equal to an
    integer.
    """

    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if int(value) < 1:
        raise InvalidArgumentError(f"{name} must be >= 1, got {int(value)}")
    return int(value)


def require_distribution(
    values: Any, n_states: int, *, atol: float, name: str = "distribution"
) -> np.ndarray:
    """Validate a probability vector of length ``n_states`` and return a float copy."""

    try:
        arr = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"{name} must be numeric") from exc
    if arr.ndim != 1 or arr.shape[0] != n_states:
        raise InvalidArgumentError(
            f"{name} must have length {n_states}, got shape {arr.shape}"
        )
    if not all_finite(arr):
        raise InvalidArgumentError(f"{name} contains non-finite entries")
    if np.any(arr < 0.0):
        raise InvalidArgumentError(f"{name} contains negative entries")
    total = float(arr.sum())
    if abs(total - 1.0) > atol:
        raise InvalidArgumentError(f"{name} must sum to 1, got {total:.12g}")
    return arr
