from togglenet.strategies.base import Solution, Strategy, UnreachableError
from togglenet.strategies.bidirectional_bfs import BidirectionalBFS
from togglenet.strategies.coset_minweight import CosetMinWeight
from togglenet.strategies.selection import (
    StrategyKind,
    choose_strategy,
    make_strategy,
    select_strategy,
    solve_min_presses,
)
