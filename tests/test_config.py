from __future__ import annotations

from pathlib import Path

import pytest
from togglenet.config import (
    DEFAULT_SOLVER_PARAMS,
    load_config,
    parse_solver_params,
    resolve_run_paths,
)

ROOT = Path(__file__).resolve().parents[1]


def test_defaults() -> None:
    assert parse_solver_params(None) == DEFAULT_SOLVER_PARAMS
    assert parse_solver_params({}) is not DEFAULT_SOLVER_PARAMS


def test_override() -> None:
    params = parse_solver_params({"strategy": "coset", "max_seed_enum": "12"})
    assert params["strategy"] == "coset"
    assert params["max_seed_enum"] == 12
    assert params["bfs_max_positions"] == 20


def test_unknown_key() -> None:
    with pytest.raises(ValueError, match=r"Unknown solver settings: \['hoge'\]"):
        parse_solver_params({"hoge": 1})


def test_unknown_strategy() -> None:
    with pytest.raises(ValueError, match=r"Unknown strategy: fast"):
        parse_solver_params({"strategy": "fast"})


def test_load_config(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "solver:\n  bfs_max_positions: 12\nrun:\n  input: puzzles.txt\n  batch_size: 8\n",
        encoding="utf-8",
    )
    params, run = load_config(path)
    assert params["bfs_max_positions"] == 12
    assert run == {"input": "puzzles.txt", "batch_size": 8}


def test_load_empty_config(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    params, run = load_config(path)
    assert params == DEFAULT_SOLVER_PARAMS
    assert run == {}


def test_shipped_config() -> None:
    params, run = load_config(ROOT / "configs" / "solve.yaml")
    assert params == DEFAULT_SOLVER_PARAMS
    assert run["batch_size"] == 64


def test_resolve_run_paths(tmp_path: Path) -> None:
    absolute = str(tmp_path / "puzzles.txt")
    run = {"input": "inputs/puzzles.txt", "output_dir": "results", "batch_size": 8}
    resolved = resolve_run_paths(run, ROOT)
    assert resolved["input"] == str(ROOT / "inputs" / "puzzles.txt")
    assert resolved["output_dir"] == str(ROOT / "results")
    assert resolved["batch_size"] == 8
    assert run["input"] == "inputs/puzzles.txt"
    assert resolve_run_paths({"input": absolute}, ROOT) == {"input": absolute}
    assert resolve_run_paths({}, ROOT) == {}


def test_shipped_config_paths_exist() -> None:
    _, run = load_config(ROOT / "configs" / "solve.yaml")
    run = resolve_run_paths(run, ROOT)
    assert Path(run["input"]).is_file()
