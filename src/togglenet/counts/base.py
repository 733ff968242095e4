from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..problem import Problem


@dataclass(frozen=True)
class CountSolution:
    """Answer to the exact-counts question: how often to apply each step."""

    presses: int
    multiplicities: tuple[int, ...]


def distinct_steps(step_masks: Sequence[int]) -> tuple[list[int], list[int]]:
    """Drop empty and repeated masks.

    Returns the kept masks and, for each, the index of its first
    occurrence in ``step_masks``. Applying a twin instead of its original
    changes nothing, so the minimum is unaffected.
    """
    masks: list[int] = []
    origin: list[int] = []
    seen: set[int] = set()
    for j, mask in enumerate(step_masks):
        if mask == 0 or mask in seen:
            continue
        seen.add(mask)
        masks.append(mask)
        origin.append(j)
    return masks, origin


def uncovered_positions(problem: Problem) -> list[int]:
    """Positions with a positive count that no step touches."""
    assert problem.target_counts is not None
    covered = 0
    for mask in problem.step_masks:
        covered |= mask
    return [
        i
        for i, c in enumerate(problem.target_counts)
        if c > 0 and not (covered >> i) & 1
    ]


def expand_multiplicities(
    reduced: Sequence[int], origin: Sequence[int], n_steps: int
) -> tuple[int, ...]:
    full = [0] * n_steps
    for x, j in zip(reduced, origin):
        full[j] = int(x)
    return tuple(full)


def require_counts(problem: Problem) -> tuple[int, ...]:
    if problem.target_counts is None:
        raise ValueError("Problem has no target counts.")
    return problem.target_counts
