"""Numeric tolerances and physical constants shared across markovlab."""

from __future__ import annotations

# Maximum allowed deviation of a transition-matrix row sum from 1.
ROW_SUM_TOLERANCE: float = 1e-9

# Distance from 1 within which an eigenvalue counts as the stationary one.
EIGENVALUE_TOLERANCE: float = 1e-8

# Largest imaginary component accepted on the stationary eigenvector.
IMAGINARY_TOLERANCE: float = 1e-8

# Negative residues above -NEGATIVE_CLAMP_TOLERANCE are clamped to zero.
NEGATIVE_CLAMP_TOLERANCE: float = 1e-12

# Probability-mass drift tolerated before a propagated vector is renormalised.
DRIFT_TOLERANCE: float = 1e-12

__all__ = [
    "ROW_SUM_TOLERANCE",
    "EIGENVALUE_TOLERANCE",
    "IMAGINARY_TOLERANCE",
    "NEGATIVE_CLAMP_TOLERANCE",
    "DRIFT_TOLERANCE",
]
