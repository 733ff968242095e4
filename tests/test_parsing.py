from __future__ import annotations

import pytest
from togglenet.parsing import ParseError, parse_problem


def test_parse_full_line() -> None:
    p = parse_problem("[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}")
    assert p.n_positions == 4
    assert p.target == 0b0110
    assert p.step_masks == (0b1000, 0b1010, 0b0100, 0b1100, 0b0101, 0b0011)
    assert p.target_counts == (3, 5, 4, 7)


def test_parse_without_counts() -> None:
    p = parse_problem("[#.] (0) (0, 1)")
    assert p.target_counts is None
    assert p.step_masks == (0b01, 0b11)


def test_parse_empty_step() -> None:
    p = parse_problem("[#] () (0) {1}")
    assert p.step_masks == (0, 1)


def test_parse_at_size_limit() -> None:
    p = parse_problem("[" + "." * 31 + "#] (31)")
    assert p.n_positions == 32
    assert p.target == 1 << 31


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("", r"missing '\[\.\.\.\]'"),
        (".# (0) {1,1}", r"missing '\[\.\.\.\]'"),
        ("[] (0) {1}", r"target pattern is empty"),
        ("[.x] (0)", r"invalid pattern character 'x'"),
        ("[" + "#" * 33 + "] (0)", r"too many positions: 33"),
        ("[#] {1}", r"no steps provided"),
        ("[.#] (5) {1,1}", r"index 5 out of range"),
        ("[.#] (a,b) {1,1}", r"invalid index 'a'"),
        ("[.#] (1,1) {1,1}", r"duplicate index 1"),
        ("[#] " + "(0) " * 65, r"too many steps: 65"),
        ("[##] (0) {1,2", r"missing '\}'"),
        ("[##] (0) {}", r"empty target count list"),
        ("[##] (0) {1,x}", r"invalid target count 'x'"),
        ("[.#] (\u00b2)", r"invalid index"),
        ("[.#] (1) {0,\u00b9}", r"invalid target count"),
        ("[....] (0) (1) (2) (3) {1,2,3}", r"target length 3 does not match positions 4"),
    ],
)
def test_parse_errors(line: str, message: str) -> None:
    with pytest.raises(ParseError, match=message):
        parse_problem(line)


def test_parse_error_is_value_error() -> None:
    assert issubclass(ParseError, ValueError)
