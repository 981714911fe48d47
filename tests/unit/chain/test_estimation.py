import numpy as np
import pytest

from markovlab.chain import (
    TransitionMatrix,
    estimate_conditioned_counts,
    estimate_conditioned_probabilities,
    estimate_transition_counts,
    estimate_transition_probabilities,
    normalize_counts,
    sample,
)
from markovlab.utils.errors import InvalidArgumentError


def test_counts_consecutive_pairs_without_wraparound() -> None:
    C = estimate_transition_counts([0, 1, 1, 2, 0])
    expected = np.zeros((3, 3))
    expected[0, 1] = 1
    expected[1, 1] = 1
    expected[1, 2] = 1
    expected[2, 0] = 1
    np.testing.assert_array_equal(C, expected)
    assert C.sum() == 4


def test_counts_with_explicit_state_count() -> None:
    C = estimate_transition_counts(np.array([0, 1, 0]), n_states=4)
    assert C.shape == (4, 4)
    assert C[0, 1] == 1 and C[1, 0] == 1


def test_probabilities_leave_unvisited_rows_nan() -> None:
    T = estimate_transition_probabilities([0, 1, 0, 1, 1], n_states=3)
    np.testing.assert_allclose(T[0], [0.0, 1.0, 0.0])
    np.testing.assert_allclose(T[1], [0.5, 0.5, 0.0])
    assert np.all(np.isnan(T[2]))


@pytest.mark.parametrize("trajectory", [[], [2]])
def test_short_trajectory_gives_empty_first_order_table(trajectory) -> None:
    C = estimate_transition_counts(trajectory)
    assert C.sum() == 0
    assert estimate_transition_counts(trajectory, n_states=3).shape == (3, 3)


def test_empty_trajectory_without_state_count() -> None:
    assert estimate_transition_counts([]).shape == (0, 0)


@pytest.mark.parametrize("trajectory", [[], [0], [0, 1]])
def test_short_trajectory_gives_empty_conditioned_tables(trajectory) -> None:
    assert estimate_conditioned_counts(trajectory) == {}
    assert estimate_conditioned_probabilities(trajectory) == {}


def test_conditioned_counts_by_history() -> None:
    # triples: (0,1,2) (1,2,0) (2,0,1) (0,1,1)
    tables = estimate_conditioned_counts([0, 1, 2, 0, 1, 1])
    assert sorted(tables) == [0, 1, 2]
    assert tables[0][1, 2] == 1 and tables[0][1, 1] == 1
    assert tables[0].sum() == 2
    assert tables[1][2, 0] == 1 and tables[1].sum() == 1
    assert tables[2][0, 1] == 1 and tables[2].sum() == 1


def test_conditioned_tables_sum_to_first_order_minus_first_pair() -> None:
    traj = sample(TransitionMatrix([[0.2, 0.8], [0.6, 0.4]]), 500, rng=4)
    total = sum(estimate_conditioned_counts(traj).values())
    first = estimate_transition_counts(traj)
    first[traj[0], traj[1]] -= 1
    np.testing.assert_array_equal(total, first)


def test_labelled_trajectory() -> None:
    C = estimate_transition_counts(["a", "b", "b", "c"], states=["a", "b", "c"])
    assert C[0, 1] == 1 and C[1, 1] == 1 and C[1, 2] == 1
    tables = estimate_conditioned_counts(["a", "b", "b", "c"], states=("a", "b", "c"))
    assert sorted(tables) == [0, 1]


def test_unknown_label_raises() -> None:
    with pytest.raises(InvalidArgumentError):
        estimate_transition_counts(["a", "z"], states=["a", "b"])


def test_label_guards() -> None:
    with pytest.raises(InvalidArgumentError, match="unique"):
        estimate_transition_counts(["a", "a"], states=["a", "a"])
    with pytest.raises(InvalidArgumentError, match="smaller"):
        estimate_transition_counts(["a", "b"], 1, states=["a", "b"])


@pytest.mark.parametrize(
    "trajectory, n_states",
    [([0, -1, 1], None), ([0, 3], 3), ([0.5, 1.0], None), ([[0, 1], [1, 0]], None)],
)
def test_invalid_trajectories(trajectory, n_states) -> None:
    with pytest.raises(InvalidArgumentError):
        estimate_transition_counts(trajectory, n_states)


def test_normalize_counts_does_not_mutate() -> None:
    C = np.array([[2.0, 2.0], [0.0, 0.0]])
    T = normalize_counts(C)
    np.testing.assert_array_equal(C, [[2.0, 2.0], [0.0, 0.0]])
    np.testing.assert_allclose(T[0], [0.5, 0.5])
    assert np.all(np.isnan(T[1]))


def test_round_trip_recovers_matrix(reference_matrix: TransitionMatrix) -> None:
    traj = sample(reference_matrix, 100_000, rng=12345)
    T = estimate_transition_probabilities(traj, n_states=3)
    np.testing.assert_allclose(T, reference_matrix.values, atol=0.02)
