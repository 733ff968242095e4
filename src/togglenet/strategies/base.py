from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..problem import Problem


class UnreachableError(Exception):
    """Raised by a solver when no combination of steps reaches the target."""

    def __init__(self, message: str, problem: Optional[Problem] = None):
        super().__init__(message)
        self.problem = problem


@dataclass(frozen=True)
class Solution:
    """Answer to the distinct-steps question.

    ``witness`` is a bit pattern over steps; its popcount equals ``presses``.
    ``strategy`` names the search that produced it, ``None`` for the
    all-off shortcut.
    """

    presses: int
    witness: int
    strategy: Optional[str] = None

    def steps(self) -> list[int]:
        return [j for j in range(self.witness.bit_length()) if (self.witness >> j) & 1]


class Strategy(Protocol):
    def reset(self, problem: Problem, params: dict | None = None): ...
    def solve(self) -> Solution: ...
