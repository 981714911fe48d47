# Copyright (c) 2025 markovlab Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest configuration and fixtures for markovlab tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

TESTS_ROOT = Path(__file__).resolve().parent
SRC_ROOT = TESTS_ROOT.parent / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from markovlab.chain import TransitionMatrix  # noqa: E402

# Folder -> default markers that should apply to every test collected under it.
FOLDER_MARKERS = {
    "tests/unit/chain/": ["unit", "chain"],
    "tests/unit/reporting/": ["unit", "reporting"],
    "tests/unit/utils/": ["unit", "utils"],
    "tests/validation/": ["validation", "statistical"],
    "tests/integration/": ["integration"],
}

REFERENCE_ROWS = [[0.6, 0.3, 0.1], [0.2, 0.3, 0.5], [0.4, 0.1, 0.5]]


def _normalize_path(path: Path) -> str:
    """Return a forward-slash path for prefix matching."""
    return str(path).replace("\\", "/")


def _apply_folder_markers(item: pytest.Item) -> None:
    """Attach default markers based on the test file location."""
    normalized = _normalize_path(Path(str(item.fspath)))
    applied: set[str] = set()
    for folder, markers in FOLDER_MARKERS.items():
        if folder in normalized:
            for marker in markers:
                if marker not in applied:
                    item.add_marker(getattr(pytest.mark, marker))
                    applied.add(marker)


def _parse_focus_option(raw: str) -> set[str]:
    return {chunk.strip() for chunk in raw.split(",") if chunk.strip()}


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--focus",
        action="store",
        default="",
        help="Comma-separated domain markers (e.g. chain,utils). Only matching tests run.",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    focus = _parse_focus_option(config.getoption("--focus"))
    deselected: list[pytest.Item] = []
    selected: list[pytest.Item] = []

    for item in items:
        _apply_folder_markers(item)
        if not focus:
            continue
        tags = {mark.name for mark in item.iter_markers()}
        if focus.intersection(tags) or "all" in focus:
            selected.append(item)
        else:
            deselected.append(item)

    if focus and deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = selected


def pytest_configure(config: pytest.Config) -> None:
    """Register the folder markers so ``--strict-markers`` runs stay clean."""
    for name in ("unit", "chain", "reporting", "utils", "validation", "statistical", "integration"):
        config.addinivalue_line("markers", f"{name}: markovlab {name} tests")


@pytest.fixture
def reference_rows() -> list[list[float]]:
    """Three-state matrix used throughout the documentation."""
    return [list(row) for row in REFERENCE_ROWS]


@pytest.fixture
def reference_matrix() -> TransitionMatrix:
    return TransitionMatrix(REFERENCE_ROWS)


@pytest.fixture
def labelled_matrix() -> TransitionMatrix:
    return TransitionMatrix(REFERENCE_ROWS, labels=["A", "B", "C"])


@pytest.fixture
def random_matrix() -> TransitionMatrix:
    rng = np.random.default_rng(7)
    return TransitionMatrix(rng.dirichlet(np.ones(5), size=5))
