"""
markovlab command-line interface.

Reads a transition matrix (JSON or delimited text) or an observed trajectory
and prints stationary distributions, sampled trajectories, propagated
distributions or empirical transition tables as JSON or CSV.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import numpy as np
import pandas as pd

from .chain import (
    TransitionMatrix,
    estimate_conditioned_counts,
    estimate_transition_counts,
    normalize_counts,
    propagate,
    sample,
    sample_many,
    stationary,
)
from .reporting.export import count_table_frame, distribution_frame, propagation_frame
from .utils.errors import InvalidArgumentError, InvalidMatrixError, NonConvergentChainError
from .utils.json_io import load_json_file, to_jsonable
from .utils.logging_utils import StageTimer, configure_logging
from .utils.thermodynamics import free_energy_from_distribution
from .utils.validation import require_positive_int
from .validation import check_markov_property

logger = logging.getLogger("markovlab")

EXIT_INVALID_INPUT = 2
EXIT_NON_CONVERGENT = 3


def load_matrix(path: str | Path) -> TransitionMatrix:
    """Load a transition matrix from JSON or whitespace/comma separated text.

    JSON files hold either a list of rows or an object with ``matrix`` and
    optional ``labels`` keys. Unreadable or unparsable files raise
    :class:`InvalidMatrixError`.
    """
    p = Path(path)
    try:
        if p.suffix.lower() == ".json":
            payload = load_json_file(p)
        else:
            delimiter = "," if p.suffix.lower() == ".csv" else None
            payload = np.loadtxt(p, delimiter=delimiter, dtype=float, ndmin=2)
    except (OSError, ValueError) as exc:
        raise InvalidMatrixError(f"cannot read transition matrix from {p}: {exc}") from exc

    labels = None
    if isinstance(payload, dict):
        if "matrix" not in payload:
            raise InvalidMatrixError(f"{p}: JSON object must contain a 'matrix' key")
        labels = payload.get("labels")
        payload = payload["matrix"]
    return TransitionMatrix.from_rows(payload, labels)


def load_trajectory(path: str | Path) -> list[Any] | np.ndarray:
    """Load a trajectory from a JSON list or a one-column text file."""
    p = Path(path)
    try:
        if p.suffix.lower() != ".json":
            return np.loadtxt(p, dtype=np.int64, ndmin=1)
        payload = load_json_file(p)
    except (OSError, ValueError) as exc:
        raise InvalidArgumentError(f"cannot read trajectory from {p}: {exc}") from exc
    if not isinstance(payload, list):
        raise InvalidArgumentError(f"{p}: expected a JSON list of states")
    return payload


def _parse_start(raw: Optional[str], matrix: TransitionMatrix) -> Any:
    if raw is None:
        return None
    if "," in raw:
        try:
            return [float(x) for x in raw.split(",")]
        except ValueError as exc:
            raise InvalidArgumentError(f"invalid distribution {raw!r}: {exc}") from exc
    if matrix.labels is not None and raw in matrix.labels:
        return raw
    try:
        return int(raw)
    except ValueError:
        return raw


def _emit(payload: Any, frame: Optional[pd.DataFrame], fmt: str) -> None:
    if fmt == "csv" and frame is not None:
        frame.to_csv(sys.stdout)
    else:
        json.dump(to_jsonable(payload), sys.stdout, indent=2)
        sys.stdout.write("\n")


def _cmd_stationary(args: argparse.Namespace) -> None:
    matrix = load_matrix(args.matrix)
    pi = stationary(matrix)
    frame = distribution_frame(pi, matrix.labels)
    payload: dict[str, Any] = {"stationary": pi}
    if args.temperature is not None:
        dG = free_energy_from_distribution(pi, args.temperature)
        frame["free_energy_kJ_mol"] = dG
        payload["free_energy_kJ_mol"] = dG
    _emit(payload, frame, args.format)


def _cmd_sample(args: argparse.Namespace) -> None:
    matrix = load_matrix(args.matrix)
    start = _parse_start(args.start, matrix)
    if args.chains != 1:
        trajs = sample_many(matrix, args.steps, args.chains, start=start, rng=args.seed)
        chains = [[matrix.label_of(int(i)) for i in row] for row in trajs]
        _emit({"trajectories": chains}, pd.DataFrame(chains).T, args.format)
        return
    traj = sample(matrix, args.steps, start=start, rng=args.seed)
    states = [matrix.label_of(int(i)) for i in traj]
    _emit({"trajectory": states}, pd.DataFrame({"state": states}), args.format)


def _cmd_propagate(args: argparse.Namespace) -> None:
    matrix = load_matrix(args.matrix)
    initial = _parse_start(args.initial, matrix)
    series = propagate(matrix, args.steps, initial, include_initial=args.include_initial)
    frame = propagation_frame(series, matrix.labels, include_initial=args.include_initial)
    _emit({"distributions": series}, frame, args.format)


def _cmd_estimate(args: argparse.Namespace) -> None:
    traj = load_trajectory(args.trajectory)
    if args.n_states is not None:
        require_positive_int(args.n_states, "--n-states")
    states = args.states.split(",") if args.states else None
    if states is not None and args.n_states is not None and args.n_states != len(states):
        raise InvalidArgumentError(
            f"--n-states {args.n_states} does not match the {len(states)} labels in --states"
        )
    counts = estimate_transition_counts(traj, args.n_states, states=states)
    payload: dict[str, Any] = {
        "counts": counts,
        "probabilities": normalize_counts(counts),
    }
    if args.conditioned:
        payload["conditioned_counts"] = estimate_conditioned_counts(
            traj, args.n_states, states=states
        )
    if args.check:
        payload["markov_check"] = check_markov_property(
            traj, args.n_states, states=states
        ).to_dict()
    _emit(payload, count_table_frame(counts, states), args.format)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markovlab",
        description="markovlab: discrete-time finite-state Markov chain toolkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  markovlab stationary P.json --temperature 300
  markovlab sample P.json --steps 1000 --seed 42
  markovlab propagate P.csv --steps 200 --initial 0
  markovlab estimate traj.txt --conditioned --check
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity on stderr (default: WARNING)",
    )
    parser.add_argument(
        "--format",
        choices=["json", "csv"],
        default="json",
        help="Output format on stdout (default: json)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_stat = sub.add_parser("stationary", help="Stationary distribution of a matrix")
    p_stat.add_argument("matrix", help="Transition matrix file (.json, .csv or text)")
    p_stat.add_argument(
        "--temperature",
        type=float,
        help="Also report free energies -kT ln(pi) in kJ/mol at this temperature (K)",
    )
    p_stat.set_defaults(func=_cmd_stationary)

    p_samp = sub.add_parser("sample", help="Sample a state trajectory")
    p_samp.add_argument("matrix")
    p_samp.add_argument("--steps", type=int, required=True, help="Trajectory length")
    p_samp.add_argument(
        "--start",
        help="Initial state index/label or comma-separated distribution (default: state 0)",
    )
    p_samp.add_argument("--seed", type=int, help="Random seed for reproducible sampling")
    p_samp.add_argument(
        "--chains", type=int, default=1, help="Number of independent chains (default: 1)"
    )
    p_samp.set_defaults(func=_cmd_sample)

    p_prop = sub.add_parser("propagate", help="Propagate a distribution forward")
    p_prop.add_argument("matrix")
    p_prop.add_argument("--steps", type=int, required=True)
    p_prop.add_argument(
        "--initial",
        help="Initial state index/label or comma-separated distribution (default: state 0)",
    )
    p_prop.add_argument(
        "--include-initial",
        action="store_true",
        help="Prepend the initial distribution to the output",
    )
    p_prop.set_defaults(func=_cmd_propagate)

    p_est = sub.add_parser("estimate", help="Estimate transition tables from a trajectory")
    p_est.add_argument("trajectory", help="Trajectory file (.json list or one state per line)")
    p_est.add_argument("--n-states", type=int, help="Number of states (default: inferred)")
    p_est.add_argument("--states", help="Comma-separated state labels for labelled trajectories")
    p_est.add_argument(
        "--conditioned",
        action="store_true",
        help="Also report counts conditioned on the state two steps back",
    )
    p_est.add_argument(
        "--check", action="store_true", help="Run the Markov-property check"
    )
    p_est.set_defaults(func=_cmd_estimate)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with command-line argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        with StageTimer(args.command, logger):
            args.func(args)
    except (InvalidMatrixError, InvalidArgumentError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except NonConvergentChainError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_NON_CONVERGENT
    return 0


if __name__ == "__main__":
    sys.exit(main())
