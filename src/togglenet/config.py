from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

DEFAULT_SOLVER_PARAMS: dict[str, Any] = {
    "strategy": "auto",
    "bfs_max_positions": 20,
    "bfs_hard_limit": 26,
    "count_solver": "parity",
    "max_seed_enum": 20,
}


def parse_solver_params(section: dict | None) -> dict[str, Any]:
    """Merge a ``solver:`` config section over the defaults."""
    params = dict(DEFAULT_SOLVER_PARAMS)
    if not section:
        return params
    unknown = set(section) - set(DEFAULT_SOLVER_PARAMS)
    if unknown:
        raise ValueError(f"Unknown solver settings: {sorted(unknown)}")
    params.update(section)
    if params["strategy"] not in ("auto", "bfs", "coset"):
        raise ValueError(f"Unknown strategy: {params['strategy']}")
    for key in ("bfs_max_positions", "bfs_hard_limit", "max_seed_enum"):
        params[key] = int(params[key])
    return params


def load_config(path: str | Path) -> tuple[dict[str, Any], dict[str, Any]]:
    """Read a YAML config; return (solver params, run section)."""
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    return parse_solver_params(cfg.get("solver")), dict(cfg.get("run") or {})


RUN_PATH_KEYS = ("input", "output_dir")


def resolve_run_paths(run: dict[str, Any], base_dir: str | Path) -> dict[str, Any]:
    """Anchor relative ``run:`` paths at ``base_dir``; absolute ones are kept."""
    resolved = dict(run)
    for key in RUN_PATH_KEYS:
        value = resolved.get(key)
        if value and not Path(value).is_absolute():
            resolved[key] = str(Path(base_dir) / value)
    return resolved
