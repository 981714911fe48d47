import json
import logging
from pathlib import Path

import numpy as np
import pytest

from markovlab.main import EXIT_INVALID_INPUT, EXIT_NON_CONVERGENT, load_matrix, main
from markovlab.utils.errors import InvalidMatrixError


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    yield
    logger = logging.getLogger("markovlab")
    for handler in list(logger.handlers):
        if getattr(handler, "_markovlab_console", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def matrix_json(tmp_path: Path, reference_rows) -> Path:
    path = tmp_path / "P.json"
    path.write_text(json.dumps({"matrix": reference_rows, "labels": ["A", "B", "C"]}))
    return path


@pytest.fixture
def matrix_csv(tmp_path: Path, reference_rows) -> Path:
    path = tmp_path / "P.csv"
    path.write_text("\n".join(",".join(str(v) for v in row) for row in reference_rows))
    return path


def _run(capsys: pytest.CaptureFixture[str], argv: list[str]) -> tuple[int, str, str]:
    code = main(argv)
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_load_matrix_formats(matrix_json: Path, matrix_csv: Path, tmp_path: Path) -> None:
    labelled = load_matrix(matrix_json)
    assert labelled.labels == ("A", "B", "C")
    plain = load_matrix(matrix_csv)
    np.testing.assert_allclose(plain.values, labelled.values)
    txt = tmp_path / "P.txt"
    txt.write_text("0.5 0.5\n0.1 0.9\n")
    assert load_matrix(txt).n_states == 2


def test_stationary_command(capsys, matrix_csv: Path) -> None:
    code, out, _ = _run(capsys, ["stationary", str(matrix_csv), "--temperature", "300"])
    assert code == 0
    data = json.loads(out)
    assert sum(data["stationary"]) == pytest.approx(1.0)
    assert min(data["free_energy_kJ_mol"]) == pytest.approx(0.0)


def test_stationary_csv_output(capsys, matrix_json: Path) -> None:
    code, out, _ = _run(capsys, ["--format", "csv", "stationary", str(matrix_json)])
    assert code == 0
    lines = out.strip().splitlines()
    assert lines[0] == "state,probability"
    assert [line.split(",")[0] for line in lines[1:]] == ["A", "B", "C"]


def test_sample_command_reproducible(capsys, matrix_json: Path) -> None:
    argv = ["sample", str(matrix_json), "--steps", "5", "--seed", "7", "--start", "B"]
    _, first, _ = _run(capsys, argv)
    _, second, _ = _run(capsys, argv)
    assert first == second
    traj = json.loads(first)["trajectory"]
    assert len(traj) == 5 and traj[0] == "B"


def test_sample_many_chains(capsys, matrix_csv: Path) -> None:
    code, out, _ = _run(
        capsys, ["sample", str(matrix_csv), "--steps", "4", "--chains", "3", "--seed", "1"]
    )
    assert code == 0
    assert np.array(json.loads(out)["trajectories"]).shape == (3, 4)


def test_propagate_command(capsys, matrix_csv: Path) -> None:
    code, out, _ = _run(
        capsys, ["propagate", str(matrix_csv), "--steps", "1", "--initial", "1,0,0"]
    )
    assert code == 0
    np.testing.assert_allclose(json.loads(out)["distributions"], [[0.6, 0.3, 0.1]])


def test_estimate_command(capsys, tmp_path: Path) -> None:
    traj = tmp_path / "traj.txt"
    traj.write_text("\n".join(str(s) for s in [0, 1, 1, 2, 0, 1]))
    code, out, _ = _run(capsys, ["estimate", str(traj), "--conditioned", "--check"])
    assert code == 0
    data = json.loads(out)
    assert data["counts"][0][1] == 2
    assert set(data["conditioned_counts"]) == {"0", "1", "2"}
    assert data["markov_check"]["passed"] is False


def test_estimate_labelled_json(capsys, tmp_path: Path) -> None:
    traj = tmp_path / "traj.json"
    traj.write_text(json.dumps(["x", "y", "y", "x"]))
    code, out, _ = _run(
        capsys, ["--format", "csv", "estimate", str(traj), "--states", "x,y"]
    )
    assert code == 0
    assert out.splitlines()[0] == "from,x,y,Total"


def test_invalid_matrix_exit_code(capsys, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps([[0.5, 0.4], [0.5, 0.5]]))
    code, _, err = _run(capsys, ["stationary", str(bad)])
    assert code == EXIT_INVALID_INPUT
    assert "row 0" in err


def test_invalid_steps_exit_code(capsys, matrix_csv: Path) -> None:
    code, _, err = _run(capsys, ["sample", str(matrix_csv), "--steps", "0"])
    assert code == EXIT_INVALID_INPUT
    assert "steps" in err


def test_non_convergent_exit_code(capsys, tmp_path: Path, monkeypatch) -> None:
    from markovlab.utils.errors import NonConvergentChainError

    def _fail(_matrix):
        raise NonConvergentChainError("no eigenvalue near 1")

    monkeypatch.setattr("markovlab.main.stationary", _fail)
    path = tmp_path / "P.txt"
    path.write_text("1.0\n")
    code, _, err = _run(capsys, ["stationary", str(path)])
    assert code == EXIT_NON_CONVERGENT
    assert "eigenvalue" in err


@pytest.mark.parametrize(
    "name, content",
    [
        ("m.csv", "a,b\nc,d\n"),
        ("m.json", "[[0.5, 0.5], [0.5"),
        ("m.txt", "0.5 0.5\n0.5\n"),
    ],
)
def test_malformed_matrix_file_exit_code(capsys, tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content)
    code, out, err = _run(capsys, ["stationary", str(path)])
    assert code == EXIT_INVALID_INPUT
    assert out == ""
    assert "cannot read transition matrix" in err


def test_missing_matrix_file_exit_code(capsys, tmp_path: Path) -> None:
    code, _, err = _run(capsys, ["stationary", str(tmp_path / "nope.json")])
    assert code == EXIT_INVALID_INPUT
    assert "nope.json" in err


def test_load_matrix_keeps_parse_error_cause(tmp_path: Path) -> None:
    path = tmp_path / "m.csv"
    path.write_text("a,b\nc,d\n")
    with pytest.raises(InvalidMatrixError) as info:
        load_matrix(path)
    assert isinstance(info.value.__cause__, ValueError)


@pytest.mark.parametrize(
    "name, content",
    [("traj.txt", "0\n1\nx\n"), ("traj.json", "[0, 1"), ("traj.json", '{"a": 1}')],
)
def test_malformed_trajectory_exit_code(capsys, tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content)
    code, _, _ = _run(capsys, ["estimate", str(path)])
    assert code == EXIT_INVALID_INPUT


def test_missing_trajectory_exit_code(capsys, tmp_path: Path) -> None:
    code, _, _ = _run(capsys, ["estimate", str(tmp_path / "missing.txt")])
    assert code == EXIT_INVALID_INPUT


@pytest.mark.parametrize("n_states", ["3", "0"])
def test_estimate_state_count_mismatch_exit_code(capsys, tmp_path: Path, n_states: str) -> None:
    traj = tmp_path / "traj.json"
    traj.write_text(json.dumps(["x", "y", "y", "x"]))
    code, _, err = _run(
        capsys, ["estimate", str(traj), "--states", "x,y", "--n-states", n_states]
    )
    assert code == EXIT_INVALID_INPUT
    assert "n-states" in err


def test_malformed_start_distribution_exit_code(capsys, matrix_csv: Path) -> None:
    code, _, _ = _run(
        capsys, ["sample", str(matrix_csv), "--steps", "3", "--start", "a,b,c"]
    )
    assert code == EXIT_INVALID_INPUT


@pytest.mark.parametrize("chains", ["0", "-2"])
def test_invalid_chain_count_exit_code(capsys, matrix_csv: Path, chains: str) -> None:
    code, out, err = _run(
        capsys, ["sample", str(matrix_csv), "--steps", "3", "--chains", chains]
    )
    assert code == EXIT_INVALID_INPUT
    assert out == ""
    assert "n_chains" in err


def test_sample_many_chains_use_labels(capsys, matrix_json: Path) -> None:
    code, out, _ = _run(
        capsys,
        ["sample", str(matrix_json), "--steps", "4", "--chains", "2", "--seed", "3", "--start", "C"],
    )
    assert code == 0
    chains = json.loads(out)["trajectories"]
    assert len(chains) == 2
    assert all(len(chain) == 4 and chain[0] == "C" for chain in chains)
    assert {s for chain in chains for s in chain} <= {"A", "B", "C"}
