"""
Visit-order heuristics over pairwise cost matrices.

The matrices come from the provider matrix endpoints: ``durations[i][j]`` is
the cost of going from stop ``i`` to stop ``j``. Entries may be asymmetric and
may be None when the provider could not find a route between two stops.
"""

import math
from typing import List, Optional, Sequence

CostMatrix = Sequence[Sequence[Optional[float]]]


def _cost(value: Optional[float]) -> float:
    if value is None:
        return math.inf
    value = float(value)
    if math.isnan(value):
        return math.inf
    return value


def nearest_neighbor_order(durations: CostMatrix, start: int = 0) -> List[int]:
    """
    Greedy nearest-neighbor visiting order.

    From the current stop, the unvisited stop with strictly smaller cost than
    the best found so far is chosen, so on ties the lowest index wins. When
    every remaining stop is unreachable the lowest unvisited index is taken.

    Args:
        durations: N x N cost matrix
        start: Index of the first stop

    Returns:
        Permutation of range(N) starting with ``start``

    Raises:
        ValueError: If the matrix is empty or ``start`` is out of range
    """
    n = len(durations)
    if n == 0:
        raise ValueError("Cost matrix must have at least one row")
    if not 0 <= start < n:
        raise ValueError(f"Start index {start} out of range for {n} stops")

    visited = [False] * n
    visited[start] = True
    order = [start]
    current = start

    for _ in range(1, n):
        best = -1
        best_cost = math.inf
        row = durations[current]
        for j in range(n):
            if visited[j]:
                continue
            cost = _cost(row[j])
            if cost < best_cost:
                best = j
                best_cost = cost

        if best == -1:
            best = visited.index(False)

        visited[best] = True
        order.append(best)
        current = best

    return order


def order_with_fixed_endpoints(durations: CostMatrix) -> List[int]:
    """
    Visiting order with the first stop as origin and the last as destination.

    Intermediate stops are ordered by nearest-neighbor starting from the
    origin; the destination is always appended last.
    """
    n = len(durations)
    if n <= 3:
        return list(range(n))

    inner = [list(row[: n - 1]) for row in durations[: n - 1]]
    return nearest_neighbor_order(inner, 0) + [n - 1]


def tour_cost(durations: CostMatrix, order: Sequence[int]) -> float:
    """Sum of leg costs along an open tour (no return to the start)."""
    return sum(_cost(durations[a][b]) for a, b in zip(order, order[1:]))
