"""Open-tour construction and improvement for a single day's stops."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings

logger = logging.getLogger(__name__)


def tour_duration(tour: Sequence[int], durations: Sequence[Sequence[float]]) -> float:
    """Sum of consecutive hop durations along an open tour."""
    return sum(durations[a][b] for a, b in zip(tour, tour[1:]))


def nearest_neighbor_tour(durations: Sequence[Sequence[float]], start: int = 0) -> list[int]:
    """Greedy open tour from ``start``; ties go to the lowest index."""
    n = len(durations)
    if n == 0:
        return []

    tour = [start]
    visited = {start}
    current = start
    while len(tour) < n:
        nearest = -1
        nearest_duration = float("inf")
        for candidate in range(n):
            if candidate in visited:
                continue
            if durations[current][candidate] < nearest_duration:
                nearest_duration = durations[current][candidate]
                nearest = candidate
        if nearest == -1:
            # Every remaining hop is infinite; keep index order for the rest.
            nearest = min(set(range(n)) - visited)
        tour.append(nearest)
        visited.add(nearest)
        current = nearest
    return tour


def two_opt_swap(tour: Sequence[int], i: int, j: int) -> list[int]:
    """Reverse ``tour[i + 1 : j + 1]``; position ``i`` and everything before it stay put."""
    return [*tour[: i + 1], *reversed(tour[i + 1 : j + 1]), *tour[j + 1 :]]


def two_opt(
    tour: Sequence[int],
    durations: Sequence[Sequence[float]],
    max_improvements: int | None = None,
) -> list[int]:
    """Improve an open tour by segment reversal until no swap shortens it.

    Each candidate is scored by recomputing the whole tour, so the result is
    correct for asymmetric matrices too. After every accepted swap the scan
    restarts from the first edge.
    """
    if max_improvements is None:
        max_improvements = settings.two_opt_max_improvements

    best = list(tour)
    best_duration = tour_duration(best, durations)
    n = len(best)
    improvements = 0

    improved = True
    while improved:
        improved = False
        for i in range(n - 2):
            for j in range(i + 2, n):
                candidate = two_opt_swap(best, i, j)
                candidate_duration = tour_duration(candidate, durations)
                if candidate_duration < best_duration:
                    best = candidate
                    best_duration = candidate_duration
                    improvements += 1
                    improved = True
                    break
            if improved:
                break
        if improved and max_improvements and improvements >= max_improvements:
            logger.warning(f"2-opt stopped after {improvements} improvements on a {n}-stop tour")
            break
    return best


def build_tour(durations: Sequence[Sequence[float]]) -> list[int]:
    """Nearest-neighbour tour from index 0, refined with 2-opt."""
    return two_opt(nearest_neighbor_tour(durations), durations)
