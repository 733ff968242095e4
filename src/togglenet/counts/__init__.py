from togglenet.counts.base import CountSolution
from togglenet.counts.best_first import BestFirstSearch
from togglenet.counts.parity import (
    ParityDecomposition,
    make_count_solver,
    solve_min_applications,
)
