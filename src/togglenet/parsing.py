from __future__ import annotations

import re

from .problem import MAX_POSITIONS, MAX_STEPS, Problem

_PATTERN = re.compile(r"\[([^\]]*)\]")
_STEP = re.compile(r"\(([^)]*)\)")
_COUNTS = re.compile(r"\{([^}]*)\}")


class ParseError(ValueError):
    """Raised for a puzzle line that does not follow ``[pattern] (steps...) {counts}``."""


def _parse_int(token: str, what: str) -> int:
    token = token.strip()
    if not (token.isascii() and token.isdigit()):
        raise ParseError(f"invalid {what} '{token}'")
    return int(token)


def parse_problem(line: str) -> Problem:
    """Parse one puzzle line, e.g. ``[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}``.

    The count braces are optional; without them the problem only poses
    the distinct-steps question.
    """
    head = _PATTERN.search(line)
    if head is None:
        raise ParseError("missing '[...]' target pattern")
    pattern = head.group(1)
    if not pattern:
        raise ParseError("target pattern is empty")
    if len(pattern) > MAX_POSITIONS:
        raise ParseError(f"too many positions: {len(pattern)} (max {MAX_POSITIONS})")
    target = 0
    for i, ch in enumerate(pattern):
        if ch == "#":
            target |= 1 << i
        elif ch != ".":
            raise ParseError(f"invalid pattern character '{ch}'")
    n = len(pattern)

    rest = line[head.end() :]
    brace = rest.find("{")
    steps_part = rest if brace < 0 else rest[:brace]

    steps = []
    for body in _STEP.findall(steps_part):
        mask = 0
        if body.strip():
            for token in body.split(","):
                idx = _parse_int(token, "index")
                if idx >= n:
                    raise ParseError(f"index {idx} out of range (max {n - 1})")
                if (mask >> idx) & 1:
                    raise ParseError(f"duplicate index {idx} in step")
                mask |= 1 << idx
        steps.append(mask)
    if not steps:
        raise ParseError("no steps provided")
    if len(steps) > MAX_STEPS:
        raise ParseError(f"too many steps: {len(steps)} (max {MAX_STEPS})")

    counts = None
    if brace >= 0:
        match = _COUNTS.search(rest, brace)
        if match is None:
            raise ParseError("missing '}' after target counts")
        body = match.group(1)
        if not body.strip():
            raise ParseError("empty target count list")
        counts = [_parse_int(token, "target count") for token in body.split(",")]
        if len(counts) != n:
            raise ParseError(
                f"target length {len(counts)} does not match positions {n}"
            )

    return Problem(n, steps, target, counts)
