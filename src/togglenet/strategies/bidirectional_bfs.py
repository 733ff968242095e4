from __future__ import annotations

from collections import deque
from typing import Optional

from ..problem import Problem
from .base import Solution, Strategy, UnreachableError


def _expand_layer(
    queue: deque,
    seen: dict[int, int],
    other: dict[int, int],
    step_masks: tuple[int, ...],
) -> Optional[int]:
    """Expand one full BFS layer; return the combined subset on first contact.

    ``seen`` maps each state to the XOR of the steps used to reach it. A
    shortest path never repeats a step, so the popcount of that subset is
    the state's distance.
    """
    for _ in range(len(queue)):
        state = queue.popleft()
        used = seen[state]
        for j, mask in enumerate(step_masks):
            nxt = state ^ mask
            if nxt in seen:
                continue
            nxt_used = used ^ (1 << j)
            if nxt in other:
                return nxt_used ^ other[nxt]
            seen[nxt] = nxt_used
            queue.append(nxt)
    return None


class BidirectionalBFS(Strategy):
    """
    Breadth-first search over the 2^n on/off states, grown from the all-off
    state and from the target at once. Always expands the smaller frontier.
    """

    def __init__(self):
        self.problem: Optional[Problem] = None

    def reset(self, problem: Problem, params: dict | None = None) -> None:
        self.problem = problem

    def solve(self) -> Solution:
        assert self.problem is not None, "Strategy not initialized properly."
        problem = self.problem
        goal = problem.target
        if goal == 0:
            return Solution(presses=0, witness=0)

        forward: dict[int, int] = {0: 0}
        backward: dict[int, int] = {goal: 0}
        queue_f = deque([0])
        queue_b = deque([goal])

        while queue_f and queue_b:
            if len(queue_f) <= len(queue_b):
                found = _expand_layer(queue_f, forward, backward, problem.step_masks)
            else:
                found = _expand_layer(queue_b, backward, forward, problem.step_masks)
            if found is not None:
                return Solution(presses=found.bit_count(), witness=found)

        raise UnreachableError(
            "Target pattern is unreachable from the all-off state.", problem
        )
