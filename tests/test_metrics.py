from __future__ import annotations

import pytest
from togglenet.evaluation.metrics import (
    U64_MAX,
    apply_multiplicities,
    apply_subset,
    checked_total,
)
from togglenet.problem import Problem


def test_apply_subset(fx_example: Problem) -> None:
    # (0,2) and (0,1)
    assert apply_subset(fx_example, 0b110000) == 0b0110
    assert apply_subset(fx_example, 0) == 0


def test_apply_multiplicities(fx_example: Problem) -> None:
    # one known optimum for {3,5,4,7}
    assert apply_multiplicities(fx_example, [1, 3, 0, 3, 1, 2]) == (3, 5, 4, 7)


def test_checked_total() -> None:
    assert checked_total([2, 3, 2]) == 7
    assert checked_total([]) == 0
    assert checked_total([U64_MAX]) == U64_MAX


def test_checked_total_overflow() -> None:
    with pytest.raises(OverflowError):
        checked_total([U64_MAX, 1])
    with pytest.raises(OverflowError, match=r"total exceeds 10"):
        checked_total([6, 5], limit=10)
