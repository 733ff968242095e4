from __future__ import annotations

import dataclasses
import enum
import logging
import math
from typing import Optional

from ..algebra import GF2Solver
from ..problem import Problem
from .base import Solution
from .bidirectional_bfs import BidirectionalBFS
from .coset_minweight import CosetMinWeight

logger = logging.getLogger(__name__)


class StrategyKind(str, enum.Enum):
    BIDIRECTIONAL_BFS = "bfs"
    COSET_MIN_WEIGHT = "coset"


def select_strategy(
    n_positions: int,
    n_steps: int,
    kernel_dim: Optional[int] = None,
    bfs_max_positions: int = 20,
    bfs_hard_limit: int = 26,
) -> StrategyKind:
    """Pick the cheaper search for the distinct-steps question.

    The state search costs about 2^n * m, the coset search 2^k with k the
    kernel dimension. When k is not known, ``m - min(n, m)`` (its lower
    bound) stands in for it. Both strategies return the same minimum.
    """
    if n_positions <= bfs_max_positions:
        return StrategyKind.BIDIRECTIONAL_BFS
    if n_positions > bfs_hard_limit:
        return StrategyKind.COSET_MIN_WEIGHT
    if kernel_dim is None:
        kernel_dim = n_steps - min(n_positions, n_steps)
    bfs_log_cost = n_positions + math.log2(max(n_steps, 1))
    if kernel_dim < bfs_log_cost:
        return StrategyKind.COSET_MIN_WEIGHT
    return StrategyKind.BIDIRECTIONAL_BFS


def make_strategy(name: str):
    name = str(name).lower()
    if name in ("bfs", "bidirectional_bfs"):
        return BidirectionalBFS()
    if name in ("coset", "coset_minweight", "linear_algebra"):
        return CosetMinWeight()
    raise ValueError(f"Unknown strategy: {name}")


def choose_strategy(
    problem: Problem, params: dict | None = None
) -> tuple[StrategyKind, Optional[GF2Solver]]:
    """Resolve the configured strategy for one problem.

    With ``strategy: auto`` and more positions than the state search
    handles, the step set is reduced first so the real kernel dimension
    drives the choice; the reduction is returned for reuse.
    """
    params = params or {}
    choice = str(params.get("strategy", "auto")).lower()
    if choice != "auto":
        return StrategyKind(choice), None

    bfs_max_positions = int(params.get("bfs_max_positions", 20))
    solver = None
    kernel_dim = None
    if problem.n_positions > bfs_max_positions:
        solver = GF2Solver(problem.n_positions, problem.step_masks)
        kernel_dim = solver.kernel_dim
    kind = select_strategy(
        problem.n_positions,
        problem.n_steps,
        kernel_dim,
        bfs_max_positions=bfs_max_positions,
        bfs_hard_limit=int(params.get("bfs_hard_limit", 26)),
    )
    logger.debug("%r: selected %s strategy", problem, kind.value)
    return kind, solver


def solve_min_presses(problem: Problem, params: dict | None = None) -> Solution:
    """Minimum number of distinct steps whose combined toggles give ``problem.target``.

    Raises:
        UnreachableError: no subset of the steps reaches the target.
    """
    if problem.target == 0:
        return Solution(presses=0, witness=0)

    kind, solver = choose_strategy(problem, params)
    strategy = make_strategy(kind.value)
    strategy.reset(problem, params={"gf2_solver": solver})
    return dataclasses.replace(strategy.solve(), strategy=kind.value)
