from __future__ import annotations

import pytest
from togglenet.parsing import parse_problem
from togglenet.problem import Problem


def test_from_indices() -> None:
    p = Problem.from_indices(4, [[3], [1, 3], [0, 2]], [False, True, True, False], [1, 2, 3, 4])
    assert p.step_masks == (0b1000, 0b1010, 0b0101)
    assert p.target == 0b0110
    assert p.target_counts == (1, 2, 3, 4)
    assert p.n_steps == 3


def test_parity_pattern(fx_example: Problem) -> None:
    # {3,5,4,7}
    assert fx_example.parity_pattern() == 0b1011


def test_parity_pattern_without_counts() -> None:
    with pytest.raises(ValueError, match=r"no target counts"):
        Problem(2, [1]).parity_pattern()


def test_str_round_trip(fx_example: Problem) -> None:
    text = str(fx_example)
    assert text == "[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}"
    again = parse_problem(text)
    assert again.step_masks == fx_example.step_masks
    assert again.target == fx_example.target
    assert again.target_counts == fx_example.target_counts


def test_repr(fx_example: Problem) -> None:
    assert repr(fx_example) == "Problem(n=4, steps=6, on=2)"


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"n_positions": 0, "step_masks": [1]}, r"positions"),
        ({"n_positions": 33, "step_masks": [1]}, r"positions"),
        ({"n_positions": 2, "step_masks": [4]}, r"outside"),
        ({"n_positions": 2, "step_masks": [1] * 65}, r"at most 64 steps"),
        ({"n_positions": 2, "step_masks": [1], "target": 4}, r"Target pattern"),
        ({"n_positions": 2, "step_masks": [1], "target_counts": [1]}, r"Expected 2 target counts"),
        ({"n_positions": 2, "step_masks": [1], "target_counts": [1, -1]}, r"non-negative"),
    ],
)
def test_validation(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        Problem(**kwargs)
