from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def build_step_matrix(n_positions: int, step_masks: Sequence[int]) -> np.ndarray:
    """Return the (n_positions, n_steps) effect matrix over GF(2).
    Column j encodes the positions toggled by step j.
    """
    m = len(step_masks)
    A = np.zeros((n_positions, m), dtype=np.uint8)
    for j, mask in enumerate(step_masks):
        for i in range(n_positions):
            if (mask >> i) & 1:
                A[i, j] = 1
    return A


def pack_bits(v: np.ndarray) -> int:
    """Pack a 0/1 vector into an int, element i -> bit i."""
    return sum(1 << int(i) for i in np.flatnonzero(v))


def apply_steps(step_masks: Sequence[int], subset: int) -> int:
    """XOR together the masks of the steps selected by ``subset``."""
    state = 0
    for j, mask in enumerate(step_masks):
        if (subset >> j) & 1:
            state ^= mask
    return state


def gf2_rref_augmented(
    A: np.ndarray, B: np.ndarray
) -> Tuple[np.ndarray, list[int]]:
    """Return RREF of augmented matrix [A|B] over GF(2) and list of pivot columns.

    Pivots are only taken from the columns of A. B may be a single
    right-hand side (vector) or several stacked as columns.
    """
    A = (A % 2).astype(np.uint8)
    B = (B % 2).astype(np.uint8)
    if B.ndim == 1:
        B = B.reshape(-1, 1)
    rows, cols = A.shape
    M = np.concatenate([A, B], axis=1)

    row = 0
    pivcols: list[int] = []
    if rows == 0:
        return M, pivcols
    for col in range(cols):
        hits = np.flatnonzero(M[row:, col])
        if hits.size == 0:
            continue
        pivot = row + int(hits[0])
        if pivot != row:
            M[[row, pivot]] = M[[pivot, row]]
        # Gauss-Jordan: clear the column everywhere but the pivot row
        others = np.flatnonzero(M[:, col])
        others = others[others != row]
        M[others, :] ^= M[row, :]
        pivcols.append(col)
        row += 1
        if row == rows:
            break
    return M, pivcols


class GF2Solver:
    """Reduced form of one step set, reusable across many targets.

    The elimination runs once on ``[A | I]``; the right block records the
    row operations, so solving for a new target only needs one parity per
    row instead of a fresh elimination.
    """

    def __init__(self, n_positions: int, step_masks: Sequence[int]):
        self.n_positions = int(n_positions)
        self.step_masks = tuple(int(s) for s in step_masks)
        self.n_steps = len(self.step_masks)

        A = build_step_matrix(self.n_positions, self.step_masks)
        M, pivcols = gf2_rref_augmented(
            A, np.eye(self.n_positions, dtype=np.uint8)
        )
        R = M[:, : self.n_steps]
        T = M[:, self.n_steps :]

        self.rank = len(pivcols)
        self.pivots: list[tuple[int, int]] = list(enumerate(pivcols))
        self._transform = [pack_bits(T[r]) for r in range(self.n_positions)]

        pivset = set(pivcols)
        self.free_columns = [j for j in range(self.n_steps) if j not in pivset]
        # x_f = 1, other free vars 0; each pivot var copies its row entry
        self.kernel_basis: list[int] = []
        for f in self.free_columns:
            v = 1 << f
            for r, pc in self.pivots:
                if R[r, f]:
                    v |= 1 << pc
            self.kernel_basis.append(v)

        logger.debug(
            "GF2Solver: n=%d m=%d rank=%d kernel_dim=%d",
            self.n_positions,
            self.n_steps,
            self.rank,
            len(self.kernel_basis),
        )

    @property
    def kernel_dim(self) -> int:
        return len(self.kernel_basis)

    def _reduced_rhs(self, target: int) -> list[int]:
        return [(t & target).bit_count() & 1 for t in self._transform]

    def is_consistent(self, target: int) -> bool:
        rhs = self._reduced_rhs(target)
        return not any(rhs[self.rank :])

    def particular(self, target: int) -> Optional[int]:
        """One solution with every free variable zero, or None if inconsistent."""
        rhs = self._reduced_rhs(target)
        if any(rhs[self.rank :]):
            return None
        x0 = 0
        for r, pc in self.pivots:
            if rhs[r]:
                x0 |= 1 << pc
        return x0

    def solutions(self, target: int) -> list[int]:
        """Every step subset reaching ``target``; empty when inconsistent."""
        x0 = self.particular(target)
        if x0 is None:
            return []
        coset = [x0]
        for v in self.kernel_basis:
            coset.extend([c ^ v for c in coset])
        return coset


def gf2_solve_with_nullspace(
    n_positions: int, step_masks: Sequence[int], target: int
) -> Tuple[Optional[int], List[int], bool]:
    """Solve "XOR of chosen steps == target" over GF(2).

    Returns:
        x0: one particular solution (bit pattern over steps) or None if inconsistent
        basis: nullspace basis vectors v with apply_steps(step_masks, v) == 0
        solvable: bool
    """
    solver = GF2Solver(n_positions, step_masks)
    x0 = solver.particular(target)
    if x0 is None:
        return None, [], False
    return x0, list(solver.kernel_basis), True


def _subset_xors(vectors: Sequence[int]) -> list[int]:
    sums = [0]
    for b in vectors:
        sums.extend([s ^ b for s in sums])
    return sums


def min_weight_in_coset(particular: int, basis: Sequence[int]) -> Tuple[int, int]:
    """Return (mask, weight) of the lightest element of particular + span(basis).

    Meet-in-the-middle: the basis is split in two halves whose subset
    XORs are enumerated separately; each element of the first half is
    scored against the whole second half at once.
    """
    best, best_w = particular, particular.bit_count()
    k = len(basis)
    if k == 0:
        return best, best_w

    k1 = k // 2
    first = _subset_xors(basis[:k1])
    second = _subset_xors(basis[k1:])
    second_arr = np.array(second, dtype=np.uint64)

    for combo in first:
        shifted = np.uint64(particular ^ combo)
        weights = np.bitwise_count(second_arr ^ shifted)
        i = int(np.argmin(weights))
        w = int(weights[i])
        if w < best_w:
            best, best_w = particular ^ combo ^ second[i], w
            if best_w == 0:
                break
    return best, best_w


def gf2_min_weight_solution(
    n_positions: int, step_masks: Sequence[int], target: int
) -> Tuple[Optional[int], bool]:
    """Return the minimum-Hamming-weight step subset reaching target (if solvable)."""
    x0, basis, ok = gf2_solve_with_nullspace(n_positions, step_masks, target)
    if not ok or x0 is None:
        return None, False
    best, _ = min_weight_in_coset(x0, basis)
    return best, True
