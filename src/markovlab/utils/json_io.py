from __future__ import annotations

"""Shared helpers for reading and writing JSON payloads on disk."""

import json
from pathlib import Path
from typing import Any

import numpy as np

__all__ = ["load_json_file", "dump_json_file", "to_jsonable"]


def load_json_file(path: Path | str, *, encoding: str = "utf-8") -> Any:
    """Read and decode JSON from ``path`` with a helpful error message."""

    json_path = Path(path)
    text = json_path.read_text(encoding=encoding)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise json.JSONDecodeError(
            f"{exc.msg} (file: {json_path})", exc.doc, exc.pos
        ) from exc


def to_jsonable(value: Any) -> Any:
    """Recursively convert NumPy scalars/arrays and mappings to JSON types.

    Non-finite floats become ``None`` so that the output is strict JSON.
    """
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, np.ndarray):
        return to_jsonable(value.tolist())
    if isinstance(value, np.generic):
        return to_jsonable(value.item())
    if isinstance(value, float) and not np.isfinite(value):
        return None
    return value


def dump_json_file(
    path: Path | str, payload: Any, *, indent: int = 2, encoding: str = "utf-8"
) -> Path:
    """Write ``payload`` as JSON to ``path``, creating parent directories."""

    json_path = Path(path)
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_path, "w", encoding=encoding) as f:
        json.dump(to_jsonable(payload), f, indent=indent)
    return json_path
