"""Markov-property check: does the state two steps back change ``P(J | I)``?

For every lag-2 history ``K`` the conditioned estimate ``P(J | I, K)`` is
compared to the first-order estimate ``P(J | I)`` on rows with enough
observations. The RMS deviation is judged against the multinomial sampling
noise of the conditioned rows (``"ess_adjusted"``) or a fixed bound
(``"absolute"``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Sequence

import numpy as np

from markovlab.chain.estimation import (
    encode_trajectory,
    estimate_conditioned_counts,
    estimate_transition_counts,
    normalize_counts,
)
from markovlab.config import MarkovCheckConfig

logger = logging.getLogger("markovlab")


@dataclass(frozen=True)
class MarkovPropertyResult:
    """Outcome of :func:`check_markov_property`.

    ``per_history`` maps each evaluated history state to its ``error``,
    ``max_abs``, ``threshold``, ``noise_rms``, ``rows`` and ``pass`` entries.
    """

    per_history: Dict[int, Dict[str, float]] = field(default_factory=dict)
    passed: bool = False
    reason: str = ""
    mode: str = "ess_adjusted"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "per_history": {
                int(k): {name: float(v) for name, v in stats.items()}
                for k, stats in self.per_history.items()
            },
            "passed": bool(self.passed),
            "reason": self.reason,
            "mode": self.mode,
        }


def history_error(P_first: np.ndarray, P_cond: np.ndarray, rows: np.ndarray) -> float:
    """RMS difference between two transition estimates restricted to ``rows``."""
    if P_first.shape != P_cond.shape or P_first.shape[0] != P_first.shape[1]:
        raise ValueError("estimates must be square matrices of identical shape.")
    if rows.size == 0:
        return float("nan")
    diff = P_cond[rows] - P_first[rows]
    return float(np.sqrt(np.mean(diff * diff)))


def _multinomial_rms_se(P: np.ndarray, row_counts: np.ndarray) -> float:
    """Approximate RMS sampling error using per-row multinomial standard errors."""
    n = P.shape[1]
    sesq_rows = [np.sum(p * (1.0 - p) / N) / n for p, N in zip(P, row_counts)]
    return float(np.sqrt(np.mean(sesq_rows)))


def check_markov_property(
    trajectory: Sequence[Any] | np.ndarray,
    n_states: Optional[int] = None,
    *,
    states: Optional[Sequence[Hashable]] = None,
    config: MarkovCheckConfig = MarkovCheckConfig(),
) -> MarkovPropertyResult:
    """Compare history-conditioned transition estimates to the first-order one."""
    codes, n = encode_trajectory(trajectory, n_states, states=states)
    P_first = normalize_counts(estimate_transition_counts(codes, n))
    conditioned = estimate_conditioned_counts(codes, n)

    per_history: Dict[int, Dict[str, float]] = {}
    for k, C in conditioned.items():
        row_counts = C.sum(axis=1)
        rows = np.flatnonzero(row_counts >= config.min_row_count)
        if rows.size == 0:
            continue
        P_cond = normalize_counts(C)
        err = history_error(P_first, P_cond, rows)
        max_abs = float(np.max(np.abs(P_cond[rows] - P_first[rows])))

        if config.mode == "absolute":
            thr = config.absolute
            noise = float("nan")
        elif config.mode == "ess_adjusted":
            noise = _multinomial_rms_se(P_cond[rows], row_counts[rows])
            thr = float(min(config.cap, config.sigma_mult * noise))
        else:  # pragma: no cover - guarded by type hints
            raise ValueError(f"Unknown Markov check mode: {config.mode}")

        per_history[k] = {
            "error": err,
            "max_abs": max_abs,
            "threshold": thr,
            "noise_rms": noise,
            "rows": float(rows.size),
            "pass": float(err <= thr),
        }

    if not per_history:
        reason = (
            "Markov check SKIPPED: no history has a row with at least "
            f"{config.min_row_count} observed transitions."
        )
        logger.info(reason)
        return MarkovPropertyResult({}, False, reason, config.mode)

    passes = sum(1 for stats in per_history.values() if stats["pass"])
    passed = passes == len(per_history)
    reason = (
        f"Markov check {'PASSED' if passed else 'FAILED'}: "
        f"{passes}/{len(per_history)} histories within threshold (mode={config.mode})."
    )
    logger.info(reason)
    return MarkovPropertyResult(per_history, passed, reason, config.mode)
