from __future__ import annotations

import heapq
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

logger = logging.getLogger(__name__)


def _lower_bound(state: tuple[int, ...], max_step_size: int) -> int:
    # one application lowers any single count by at most 1 and the total
    # by at most max_step_size
    total = sum(state)
    return max(max(state), -(-total // max_step_size))


class BestFirstSearch:
    """A* over residual count vectors, one step application per edge.

    Exponential in the counts rather than in the kernel dimension; used
    when the parity decomposition would have to enumerate too many
    candidates per level.
    """

    def __init__(self):
        self.problem: Optional[Problem] = None

    def reset(self, problem: Problem, params: dict | None = None) -> None:
        self.problem = problem

    def solve(self) -> CountSolution:
        assert self.problem is not None, "Strategy not initialized properly."
        problem = self.problem
        counts = require_counts(problem)
        if not any(counts):
            return CountSolution(0, (0,) * problem.n_steps)
        if uncovered_positions(problem):
            raise UnreachableError("Some target counts are touched by no step.", problem)

        masks, origin = distinct_steps(problem.step_masks)
        parity = problem.parity_pattern()
        if not GF2Solver(problem.n_positions, masks).is_consistent(parity):
            raise UnreachableError("Target parity is unreachable.", problem)

        step_idx = [
            [i for i in range(problem.n_positions) if (mask >> i) & 1] for mask in masks
        ]
        # wider steps first so ties favour fewer applications
        order = sorted(range(len(masks)), key=lambda j: -len(step_idx[j]))
        max_step_size = max(len(idx) for idx in step_idx)

        start = tuple(counts)
        best_g: dict[tuple[int, ...], int] = {start: 0}
        parent: dict[tuple[int, ...], tuple[tuple[int, ...], int]] = {}
        heap = [(_lower_bound(start, max_step_size), 0, start)]

        while heap:
            _, g, state = heapq.heappop(heap)
            if g != best_g[state]:
                continue
            if not any(state):
                logger.debug("best-first search settled %d states", len(best_g))
                return self._rebuild(state, g, parent, origin, problem.n_steps, len(masks))
            for j in order:
                idx = step_idx[j]
                if any(state[p] == 0 for p in idx):
                    continue
                nxt = list(state)
                for p in idx:
                    nxt[p] -= 1
                nxt = tuple(nxt)
                ng = g + 1
                if ng < best_g.get(nxt, ng + 1):
                    best_g[nxt] = ng
                    parent[nxt] = (state, j)
                    heapq.heappush(heap, (ng + _lower_bound(nxt, max_step_size), ng, nxt))

        raise UnreachableError("Target counts are unreachable.", problem)

    @staticmethod
    def _rebuild(state, presses, parent, origin, n_steps, n_distinct) -> CountSolution:
        reduced = [0] * n_distinct
        while state in parent:
            state, j = parent[state]
            reduced[j] += 1
        return CountSolution(presses, expand_multiplicities(reduced, origin, n_steps))
