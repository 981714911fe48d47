from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Literal

# Feature toggles using ContextVar for per-context overrides
RENORMALIZE_DRIFT: ContextVar[bool] = ContextVar("RENORMALIZE_DRIFT", default=True)
WARN_ON_DEGENERATE_STATIONARY: ContextVar[bool] = ContextVar(
    "WARN_ON_DEGENERATE_STATIONARY", default=True
)


@contextmanager
def override(var: ContextVar, value):
    """Temporarily override a ContextVar within a scope."""
    token = var.set(value)
    try:
        yield
    finally:
        var.reset(token)


Mode = Literal["absolute", "ess_adjusted"]


@dataclass(frozen=True)
class MarkovCheckConfig:
    """Thresholds for comparing history-conditioned and first-order estimates."""

    mode: Mode = "ess_adjusted"
    absolute: float = 0.05
    cap: float = 0.25
    sigma_mult: float = 4.0
    min_row_count: int = 30
