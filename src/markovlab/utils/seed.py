from __future__ import annotations

"""
Random-source helpers.

Every stochastic routine in markovlab takes an explicit ``rng`` argument; this
module turns the accepted forms (``None``, an integer seed, a ``SeedSequence``
or a ready ``Generator``) into a :class:`numpy.random.Generator` and derives
independent child streams for parallel chains.
"""

import logging
import numbers
from typing import Union

import numpy as np

from .errors import InvalidArgumentError

logger = logging.getLogger("markovlab")

RandomSource = Union[None, int, np.random.SeedSequence, np.random.Generator]


def _check_seed(rng: object) -> None:
    if isinstance(rng, bool) or not isinstance(rng, numbers.Integral):
        raise InvalidArgumentError(
            "rng must be None, an integer seed, a SeedSequence or a Generator, "
            f"got {type(rng).__name__}"
        )
    if int(rng) < 0:
        raise InvalidArgumentError("rng seed must be non-negative")


def resolve_rng(rng: RandomSource = None) -> np.random.Generator:
    """Return a :class:`numpy.random.Generator` for ``rng``.

    Generators are passed through untouched so that callers sharing one stream
    observe the entropy it consumes.
    """
    if isinstance(rng, np.random.Generator):
        return rng
    if rng is None or isinstance(rng, np.random.SeedSequence):
        return np.random.default_rng(rng)
    _check_seed(rng)
    return np.random.default_rng(int(rng))


def spawn_generators(rng: RandomSource, n: int) -> list[np.random.Generator]:
    """Derive ``n`` statistically independent generators from one source."""
    if n < 0:
        raise InvalidArgumentError("number of generators must be non-negative")
    if isinstance(rng, np.random.Generator):
        children = list(rng.spawn(n))
    else:
        if isinstance(rng, np.random.SeedSequence):
            seq = rng
        elif rng is None:
            seq = np.random.SeedSequence()
        else:
            _check_seed(rng)
            seq = np.random.SeedSequence(int(rng))
        children = [np.random.default_rng(child) for child in seq.spawn(n)]
    logger.debug("Spawned %d independent generators", n)
    return children
