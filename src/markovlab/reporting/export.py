from __future__ import annotations

from pathlib import Path
from typing import Any, Hashable, Optional, Sequence

import numpy as np
import pandas as pd

from markovlab.utils.json_io import dump_json_file


def _state_index(n: int, labels: Optional[Sequence[Hashable]]) -> list[Hashable]:
    if labels is None:
        return list(range(n))
    if len(labels) != n:
        raise ValueError(f"expected {n} labels, got {len(labels)}")
    return list(labels)


def count_table_frame(
    counts: np.ndarray,
    labels: Optional[Sequence[Hashable]] = None,
    *,
    margins: bool = True,
    margins_name: str = "Total",
) -> pd.DataFrame:
    """Return a transition table with origins as rows and destinations as columns.

    With ``margins`` a ``margins_name`` row and column hold the totals, in the
    style of :func:`pandas.crosstab`.
    """
    C = np.asarray(counts)
    if C.ndim != 2 or C.shape[0] != C.shape[1]:
        raise ValueError("count table must be square")
    index = _state_index(C.shape[0], labels)
    df = pd.DataFrame(C, index=pd.Index(index, name="from"), columns=pd.Index(index, name="to"))
    if margins:
        df[margins_name] = df.sum(axis=1)
        df.loc[margins_name] = df.sum(axis=0)
    return df


def distribution_frame(
    distribution: np.ndarray,
    labels: Optional[Sequence[Hashable]] = None,
    *,
    name: str = "probability",
) -> pd.DataFrame:
    """One row per state with its probability."""
    p = np.asarray(distribution, dtype=float)
    index = _state_index(p.shape[0], labels)
    return pd.DataFrame({name: p}, index=pd.Index(index, name="state"))


def propagation_frame(
    series: np.ndarray,
    labels: Optional[Sequence[Hashable]] = None,
    *,
    include_initial: bool = False,
) -> pd.DataFrame:
    """Time series of distributions indexed by step, one column per state.

    ``include_initial`` states that ``series`` starts at step 0 (the initial
    distribution) rather than step 1.
    """
    arr = np.asarray(series, dtype=float)
    if arr.ndim != 2:
        raise ValueError("propagation series must be two-dimensional")
    first = 0 if include_initial else 1
    steps = pd.RangeIndex(first, first + arr.shape[0], name="step")
    return pd.DataFrame(arr, index=steps, columns=_state_index(arr.shape[1], labels))


def write_report_json(path: str | Path, payload: dict[str, Any]) -> Path:
    """Write a report payload (NumPy values allowed) as JSON."""
    return dump_json_file(path, payload)
