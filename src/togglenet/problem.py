from __future__ import annotations

from typing import Iterable, Optional, Sequence

MAX_POSITIONS = 32
MAX_STEPS = 64


class Problem:
    """One toggle-network instance: positions, step masks and targets.

    Bit ``i`` of a step mask is set iff the step toggles position ``i``.
    ``target`` is the on/off pattern for the distinct-steps question and
    ``target_counts`` the exact per-position counts for the
    multiplicities question (``None`` when only the former is asked).
    """

    def __init__(
        self,
        n_positions: int,
        step_masks: Iterable[int],
        target: int = 0,
        target_counts: Optional[Iterable[int]] = None,
    ):
        self.n_positions = int(n_positions)
        if not 1 <= self.n_positions <= MAX_POSITIONS:
            raise ValueError(
                f"Expected 1..{MAX_POSITIONS} positions, got {self.n_positions}"
            )
        full = (1 << self.n_positions) - 1

        self.step_masks = tuple(int(s) for s in step_masks)
        if len(self.step_masks) > MAX_STEPS:
            raise ValueError(
                f"Expected at most {MAX_STEPS} steps, got {len(self.step_masks)}"
            )
        for j, mask in enumerate(self.step_masks):
            if mask < 0 or mask & ~full:
                raise ValueError(
                    f"Step {j} touches positions outside 0..{self.n_positions - 1}"
                )

        self.target = int(target)
        if self.target < 0 or self.target & ~full:
            raise ValueError("Target pattern has bits outside the positions.")

        if target_counts is None:
            self.target_counts = None
        else:
            counts = tuple(int(c) for c in target_counts)
            if len(counts) != self.n_positions:
                raise ValueError(
                    f"Expected {self.n_positions} target counts, got {len(counts)}"
                )
            if any(c < 0 for c in counts):
                raise ValueError("Target counts must be non-negative.")
            self.target_counts = counts

    @property
    def n_steps(self) -> int:
        return len(self.step_masks)

    @staticmethod
    def from_indices(
        n_positions: int,
        steps: Iterable[Iterable[int]],
        target: Sequence[bool] | int = 0,
        target_counts: Optional[Iterable[int]] = None,
    ) -> "Problem":
        """Build a problem from per-step position lists."""
        masks = []
        for positions in steps:
            mask = 0
            for pos in positions:
                mask |= 1 << int(pos)
            masks.append(mask)
        if not isinstance(target, int):
            target = sum(1 << i for i, on in enumerate(target) if on)
        return Problem(n_positions, masks, target, target_counts)

    def parity_pattern(self) -> int:
        """Bit pattern of the positions whose target count is odd."""
        if self.target_counts is None:
            raise ValueError("Problem has no target counts.")
        return sum(1 << i for i, c in enumerate(self.target_counts) if c & 1)

    def step_indices(self) -> list[list[int]]:
        return [
            [i for i in range(self.n_positions) if (mask >> i) & 1]
            for mask in self.step_masks
        ]

    def count_on(self) -> int:
        return self.target.bit_count()

    def __repr__(self):
        return (
            f"Problem(n={self.n_positions}, steps={self.n_steps}, "
            f"on={self.count_on()})"
        )

    def __str__(self) -> str:
        pattern = "".join(
            "#" if (self.target >> i) & 1 else "."
            for i in range(self.n_positions)
        )
        steps = " ".join(
            "(" + ",".join(str(i) for i in idx) + ")"
            for idx in self.step_indices()
        )
        line = f"[{pattern}] {steps}"
        if self.target_counts is not None:
            line += " {" + ",".join(str(c) for c in self.target_counts) + "}"
        return line
