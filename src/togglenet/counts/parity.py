from __future__ import annotations

import logging
from typing import Optional

from ..algebra import GF2Solver
from ..problem import Problem
from ..strategies.base import UnreachableError
from .base import (
    CountSolution,
    distinct_steps,
    expand_multiplicities,
    require_counts,
    uncovered_positions,
)
from .best_first import BestFirstSearch

logger = logging.getLogger(__name__)

Memo = dict[tuple[int, ...], Optional[tuple[int, tuple[int, ...]]]]


class ParityDecomposition:
    """
    Minimum total step applications hitting exact per-position counts.

    Any solution's multiplicities taken mod 2 form a step subset matching
    the parity of the counts. For each such subset (the GF(2) coset),
    subtract it once, halve the now even residual and recurse:
    cost = |subset| + 2 * cost(residual / 2).
    """

    def __init__(self, max_seed_enum: int = 20):
        self.max_seed_enum = max_seed_enum
        self.problem: Optional[Problem] = None

    def reset(self, problem: Problem, params: dict | None = None) -> None:
        self.problem = problem
        if params is not None and "max_seed_enum" in params:
            self.max_seed_enum = int(params["max_seed_enum"])

    def solve(self) -> CountSolution:
        assert self.problem is not None, "Strategy not initialized properly."
        problem = self.problem
        counts = require_counts(problem)
        if not any(counts):
            return CountSolution(0, (0,) * problem.n_steps)

        missing = uncovered_positions(problem)
        if missing:
            raise UnreachableError(
                f"No step touches position(s) {missing}.", problem
            )

        masks, origin = distinct_steps(problem.step_masks)
        solver = GF2Solver(problem.n_positions, masks)
        if solver.kernel_dim > self.max_seed_enum:
            logger.info(
                "%r: kernel dimension %d exceeds %d, using best-first search",
                problem,
                solver.kernel_dim,
                self.max_seed_enum,
            )
            fallback = BestFirstSearch()
            fallback.reset(problem)
            return fallback.solve()

        self._solver = solver
        self._step_idx = [
            [i for i in range(problem.n_positions) if (mask >> i) & 1] for mask in masks
        ]
        self._candidates: dict[int, list[int]] = {}
        memo: Memo = {}
        result = self._recurse(tuple(counts), memo)
        logger.debug("%r: memo holds %d residuals", problem, len(memo))

        if result is None:
            raise UnreachableError("Target counts are unreachable.", problem)
        presses, reduced = result
        return CountSolution(
            presses, expand_multiplicities(reduced, origin, problem.n_steps)
        )

    def _odd_subsets(self, pattern: int) -> list[int]:
        cands = self._candidates.get(pattern)
        if cands is None:
            cands = sorted(self._solver.solutions(pattern), key=int.bit_count)
            self._candidates[pattern] = cands
        return cands

    def _recurse(
        self, target: tuple[int, ...], memo: Memo
    ) -> Optional[tuple[int, tuple[int, ...]]]:
        m = len(self._step_idx)
        if not any(target):
            return 0, (0,) * m
        if target in memo:
            return memo[target]

        pattern = 0
        for i, c in enumerate(target):
            if c & 1:
                pattern |= 1 << i

        best: Optional[tuple[int, tuple[int, ...]]] = None
        for subset in self._odd_subsets(pattern):
            used = subset.bit_count()
            if best is not None and used >= best[0]:
                break
            residual = list(target)
            feasible = True
            for j in range(m):
                if not (subset >> j) & 1:
                    continue
                for pos in self._step_idx[j]:
                    residual[pos] -= 1
                    if residual[pos] < 0:
                        feasible = False
                        break
                if not feasible:
                    break
            if not feasible:
                continue

            sub = self._recurse(tuple(r // 2 for r in residual), memo)
            if sub is None:
                continue
            total = used + 2 * sub[0]
            if best is None or total < best[0]:
                best = (
                    total,
                    tuple(2 * x + ((subset >> j) & 1) for j, x in enumerate(sub[1])),
                )

        memo[target] = best
        return best


def make_count_solver(name: str, max_seed_enum: int = 20):
    name = str(name).lower()
    if name in ("parity", "parity_decomposition"):
        return ParityDecomposition(max_seed_enum=max_seed_enum)
    if name in ("best_first", "astar"):
        return BestFirstSearch()
    raise ValueError(f"Unknown count solver: {name}")


def solve_min_applications(
    problem: Problem, params: dict | None = None
) -> CountSolution:
    """Minimum total number of step applications reaching ``problem.target_counts``.

    Raises:
        UnreachableError: no non-negative multiplicities hit the counts.
        ValueError: the problem carries no target counts.
    """
    params = params or {}
    solver = make_count_solver(
        params.get("count_solver", "parity"),
        max_seed_enum=int(params.get("max_seed_enum", 20)),
    )
    solver.reset(problem, params=params)
    return solver.solve()
