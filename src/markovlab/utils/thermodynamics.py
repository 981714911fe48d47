"""Thermodynamic helpers for turning state populations into free energies."""

from __future__ import annotations

from typing import Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import constants as _scipy_constants


def kT_kJ_per_mol(temperature_kelvin: float) -> float:
    """Return the thermal energy ``kT`` in kJ/mol at the given temperature.

    Parameters
    ----------
    temperature_kelvin:
        Absolute temperature in Kelvin.
    """
    temperature = float(temperature_kelvin)
    return float(
        _scipy_constants.k * temperature * _scipy_constants.Avogadro / 1000.0
    )


def free_energy_from_distribution(
    distribution: ArrayLike,
    temperature: float,
    *,
    reference: Literal["min", "none"] = "min",
) -> NDArray[np.float64]:
    """Convert state probabilities into free energies ``-kT ln p_i`` in kJ/mol.

    Parameters
    ----------
    distribution
        Non-negative state probabilities, e.g. a stationary distribution or an
        empirical visit histogram. The array is not modified in-place.
    temperature
        Temperature in Kelvin used to compute :math:`kT`.
    reference
        ``"min"`` shifts the lowest finite free energy to zero; ``"none"``
        returns absolute values.

    States with zero probability are reported as ``+inf``.
    """

    if temperature <= 0:
        raise ValueError("temperature must be positive when computing free energy")
    if reference not in ("min", "none"):
        raise ValueError(f"Unknown free-energy reference: {reference!r}")

    p = np.array(distribution, dtype=np.float64)
    if np.any(p < 0):
        raise ValueError("probabilities must be non-negative")
    kT = kT_kJ_per_mol(float(temperature))

    with np.errstate(divide="ignore"):
        F = -kT * np.log(p)
    F[p == 0.0] = np.inf

    if reference == "min":
        finite = np.isfinite(F)
        if np.any(finite):
            F[finite] -= float(np.min(F[finite]))
    return F


__all__ = ["kT_kJ_per_mol", "free_energy_from_distribution"]
