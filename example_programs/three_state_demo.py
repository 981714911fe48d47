#!/usr/bin/env python3
"""
markovlab three-state walkthrough

Builds the three-state chain used throughout the documentation and runs every
core routine on it:
- stationary distribution and relative free energies
- propagation of a point mass towards equilibrium
- a long sampled trajectory, its empirical transition matrix and the
  lag-2 Markov-property check
"""

import logging
import sys
from pathlib import Path

# Add the src directory to Python path for development
BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))

from markovlab import (  # noqa: E402
    TransitionMatrix,
    check_markov_property,
    convergence_trace,
    estimate_transition_counts,
    free_energy_from_distribution,
    propagate,
    sample,
    stationary,
)
from markovlab.chain import normalize_counts  # noqa: E402
from markovlab.reporting import (  # noqa: E402
    count_table_frame,
    distribution_frame,
    propagation_frame,
)
from markovlab.utils.logging_utils import StageTimer, configure_logging  # noqa: E402

logger = logging.getLogger("markovlab")

ROWS = [[0.6, 0.3, 0.1], [0.2, 0.3, 0.5], [0.4, 0.1, 0.5]]
LABELS = ["S1", "S2", "S3"]
TEMPERATURE_K = 300.0


def main(n_steps: int = 100_000, seed: int = 2024) -> None:
    configure_logging(logging.INFO)
    P = TransitionMatrix(ROWS, labels=LABELS)

    with StageTimer("stationary analysis", logger):
        pi = stationary(P)
        table = distribution_frame(pi, LABELS)
        table["free_energy_kJ_mol"] = free_energy_from_distribution(pi, TEMPERATURE_K)
    print("Stationary distribution:")
    print(table.to_string())

    series = propagate(P, 15, "S1", include_initial=True)
    print("\nPropagation from S1:")
    print(propagation_frame(series, LABELS, include_initial=True).round(4).to_string())
    print(f"Distance to equilibrium after 15 steps: {convergence_trace(P, 15, 'S1')[-1]:.2e}")

    with StageTimer("sampling", logger):
        traj = sample(P, n_steps, start="S1", rng=seed)
    counts = estimate_transition_counts(traj, P.n_states)
    print(f"\nTransition counts over {n_steps} steps:")
    print(count_table_frame(counts, LABELS).to_string())
    print("\nEmpirical transition matrix:")
    print(count_table_frame(normalize_counts(counts), LABELS, margins=False).round(3).to_string())

    result = check_markov_property(traj, P.n_states)
    print(f"\n{result.reason}")


if __name__ == "__main__":
    main()
