from __future__ import annotations

from typing import Iterable, Sequence

from ..algebra import apply_steps
from ..problem import Problem

U64_MAX = (1 << 64) - 1


def apply_subset(problem: Problem, subset: int) -> int:
    # on/off state after pressing each selected step once
    return apply_steps(problem.step_masks, subset)


def apply_multiplicities(
    problem: Problem, multiplicities: Sequence[int]
) -> tuple[int, ...]:
    counts = [0] * problem.n_positions
    for times, idx in zip(multiplicities, problem.step_indices()):
        for pos in idx:
            counts[pos] += times
    return tuple(counts)


def checked_total(values: Iterable[int], limit: int = U64_MAX) -> int:
    """Sum per-problem answers, failing loudly past ``limit``."""
    total = 0
    for v in values:
        total += int(v)
        if total > limit:
            raise OverflowError(f"total exceeds {limit}")
    return total
