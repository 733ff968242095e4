from __future__ import annotations

import logging
from typing import Optional

from ..algebra import GF2Solver, min_weight_in_coset
from ..problem import Problem
from .base import Solution, Strategy, UnreachableError

logger = logging.getLogger(__name__)


class CosetMinWeight(Strategy):
    """Reduce the step set over GF(2), then search the solution coset for its lightest element."""

    def __init__(self):
        self.problem: Optional[Problem] = None
        self.solver: Optional[GF2Solver] = None

    def reset(self, problem: Problem, params: dict | None = None) -> None:
        self.problem = problem
        self.solver = None
        if params is not None:
            solver = params.get("gf2_solver", None)
            if isinstance(solver, GF2Solver):
                self.solver = solver

    def solve(self) -> Solution:
        assert self.problem is not None, "Strategy not initialized properly."
        problem = self.problem
        if self.solver is None:
            self.solver = GF2Solver(problem.n_positions, problem.step_masks)

        x0 = self.solver.particular(problem.target)
        if x0 is None:
            raise UnreachableError(
                "Target pattern is not in the span of the steps.", problem
            )
        best, weight = min_weight_in_coset(x0, self.solver.kernel_basis)
        logger.debug(
            "coset search over 2^%d candidates -> %d presses",
            self.solver.kernel_dim,
            weight,
        )
        return Solution(presses=weight, witness=best)
